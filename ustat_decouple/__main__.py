import sys

from ustat_decouple.cli import main

sys.exit(main())
