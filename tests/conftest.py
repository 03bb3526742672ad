# tests/conftest.py
import pytest

from ustat_decouple.kernels import HAMMING_KERNEL, create_kernel


@pytest.fixture
def scenario_sequences():
    """Three 3-base sequences whose pairwise Hamming distances are 1, 2, 1."""
    return [list("ACG"), list("ACT"), list("AGT")]


@pytest.fixture
def related_sequences():
    """Six 12-base sequences with partial overlap."""
    return [
        list("ACGTACGTACGT"),
        list("ACGTACGAACGT"),
        list("ACGTTCGAACGA"),
        list("TCGTACGTACGG"),
        list("ACCTACGTTCGT"),
        list("GCGTACCTACGT"),
    ]


@pytest.fixture
def hamming_kernel():
    return HAMMING_KERNEL


@pytest.fixture
def constant_kernel():
    return create_kernel(lambda a, b: 5, "Constant")
