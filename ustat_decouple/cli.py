#!/usr/bin/env python3
"""
CLI for U-Statistic Decoupling

Runs a decoupling analysis on a JSONL dataset or on one of the bundled
example datasets and prints the text summary.

Usage:
    python -m ustat_decouple --input sequences.jsonl --kernel hamming --B 1000
    python -m ustat_decouple --example expression --kernel spearman --parallel

Input format:
    One observation per line, each a JSON array (or string). Empty lines are
    skipped.

Configuration precedence (highest first):
    command-line flags > --config YAML file > USTAT_DECOUPLE_* environment
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from ustat_decouple.case_studies import INTERPRETATIONS
from ustat_decouple.config import DecoupleConfig
from ustat_decouple.datasets import (
    generate_dna_sequences,
    generate_expression_profiles,
    load_example_sequences,
)
from ustat_decouple.decouple import decouple_u_stat
from ustat_decouple.errors import DecouplingError, InputError
from ustat_decouple.kernels import create_kernel, get_kernel

logger = logging.getLogger(__name__)


EXAMPLES = {
    "sequences": load_example_sequences,
    "genomic": generate_dna_sequences,
    "expression": generate_expression_profiles,
}


def load_jsonl(path: Path) -> List[Any]:
    """
    Load one observation per line from a JSONL file.

    Raises:
        InputError: If a line is not valid JSON.
    """
    observations = []
    with open(path, 'r', encoding='utf-8') as f:
        for line_num, line in enumerate(f, 1):
            stripped = line.strip()
            if not stripped:
                continue
            try:
                observations.append(json.loads(stripped))
            except json.JSONDecodeError as e:
                raise InputError(f"invalid JSON at {path}:{line_num}: {e}") from e
    return observations


def build_config(args: argparse.Namespace) -> DecoupleConfig:
    """Merge command-line overrides onto the file or environment configuration."""
    if args.config is not None:
        config = DecoupleConfig.from_file(args.config)
    else:
        config = DecoupleConfig.from_env()

    overrides = {}
    if args.B is not None:
        overrides["B"] = args.B
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.parallel:
        overrides["parallel"] = True
    if args.workers is not None:
        overrides["degree_of_parallelism"] = args.workers
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    return dataclasses.replace(config, **overrides)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ustat_decouple",
        description="Decouple a pairwise U-statistic and test it against its decoupled null.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Hamming distance on a JSONL file of sequences
  python -m ustat_decouple --input seqs.jsonl --kernel hamming --B 1000

  # Bundled co-expression example on 4 threads, JSON summary to a file
  python -m ustat_decouple --example expression --kernel spearman \\
      --parallel --workers 4 --json-out result.json --plot result.png
        """,
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=Path, help="JSONL file, one observation per line")
    source.add_argument("--example", choices=sorted(EXAMPLES), help="Use a bundled example dataset")

    parser.add_argument("--kernel", default="hamming", help="Kernel name: hamming or spearman (default: hamming)")
    parser.add_argument("--asymmetric", action="store_true", help="Evaluate the kernel over ordered pairs")
    parser.add_argument("--B", type=int, default=None, help="Number of decoupling iterations (default: 1000)")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed (default: 123)")
    parser.add_argument("--parallel", action="store_true", help="Run iterations on a thread pool")
    parser.add_argument("--workers", type=int, default=None, help="Thread pool size (default: min(B, 4))")
    parser.add_argument("--timeout", type=float, default=None, help="Time limit in seconds for the iterations")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--json-out", type=Path, default=None, help="Write the JSON summary to this path")
    parser.add_argument("--plot", type=Path, default=None, help="Save a histogram of the null distribution")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns
    -------
    int
        Exit code: 0 for success, 2 for invalid input, 1 for other failures.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = build_config(args)
        if args.input is not None:
            if not args.input.exists():
                raise InputError(f"input file not found: {args.input}")
            data = load_jsonl(args.input)
        else:
            data = EXAMPLES[args.example]()

        kernel = get_kernel(args.kernel)
        if args.asymmetric:
            kernel = create_kernel(kernel.function, kernel.name, symmetric=False)

        result = decouple_u_stat(data, kernel, config=config)
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except DecouplingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.summary())

    interpret = INTERPRETATIONS.get((args.example, kernel.name))
    if interpret is not None:
        print()
        print(interpret(result))

    if args.json_out is not None:
        with open(args.json_out, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2, sort_keys=True)
        logger.info("JSON summary written to %s", args.json_out)

    if args.plot is not None:
        from ustat_decouple.plotting import plot_decouple_result
        plot_decouple_result(result, args.plot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
