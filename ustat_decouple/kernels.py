"""
Kernel Contract and Kernel Library

A kernel is a pure two-argument comparison h(a, b) -> float tagged with a
display name and a symmetry flag. The engine accepts either a UStatKernel or a
bare callable; resolve_kernel() turns both into a UStatKernel once, at the
boundary, so nothing downstream needs to know which one the caller passed.

CONTRACT
========

    kernel.evaluate(a, b) -> float

    - Deterministic: identical inputs give identical outputs.
    - Side-effect free: may be called concurrently from several iterations.
    - Raises ShapeMismatch when a and b are not structurally comparable.

symmetric=True means h(a, b) == h(b, a); the statistic then only visits
unordered pairs i < j. Asymmetric kernels are evaluated over every ordered
pair i != j.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Sequence, Union

import numpy as np
from scipy.stats import spearmanr

from ustat_decouple.errors import InputError, ShapeMismatch


DEFAULT_KERNEL_NAME = "Custom Kernel"

KernelFunction = Callable[[Any, Any], float]


# =============================================================================
# Contract
# =============================================================================

@dataclass(frozen=True)
class UStatKernel:
    """Pairwise kernel with a display name and symmetry flag."""
    function: KernelFunction
    name: str
    symmetric: bool = True

    def evaluate(self, a: Any, b: Any) -> float:
        return float(self.function(a, b))

    def __call__(self, a: Any, b: Any) -> float:
        return self.evaluate(a, b)


KernelLike = Union[UStatKernel, KernelFunction]


def create_kernel(
    function: KernelFunction,
    name: str,
    symmetric: bool = True,
) -> UStatKernel:
    """
    Build a UStatKernel from a comparison function.

    Raises:
        InputError: If function is not callable or name is empty.
    """
    if not callable(function):
        raise InputError(f"kernel function must be callable, got {type(function).__name__}")
    if not isinstance(name, str) or not name:
        raise InputError("kernel name must be a non-empty string")
    return UStatKernel(function=function, name=name, symmetric=bool(symmetric))


def resolve_kernel(kernel: KernelLike) -> UStatKernel:
    """
    Normalize a kernel argument into a UStatKernel.

    A bare callable is assumed symmetric and named "Custom Kernel".
    """
    if isinstance(kernel, UStatKernel):
        return kernel
    if callable(kernel):
        return UStatKernel(function=kernel, name=DEFAULT_KERNEL_NAME, symmetric=True)
    raise InputError("kernel must be either a UStatKernel or a callable")


def check_equal_length(a: Sequence[Any], b: Sequence[Any], what: str = "paired observations") -> int:
    """Return the common length of a and b, or raise ShapeMismatch."""
    if len(a) != len(b):
        raise ShapeMismatch(f"{what} must be of equal length: {len(a)} vs {len(b)}")
    return len(a)


# =============================================================================
# Kernel Library
# =============================================================================

def hamming_distance(seq1: Sequence[Any], seq2: Sequence[Any]) -> float:
    """
    Number of positions at which two sequences differ.

    >>> hamming_distance("ACG", "ACT")
    1.0
    """
    check_equal_length(seq1, seq2, "sequences")
    return float(sum(1 for p, q in zip(seq1, seq2) if p != q))


def spearman_correlation(expr1: Sequence[float], expr2: Sequence[float]) -> float:
    """
    Absolute Spearman rank correlation between two expression profiles.

    A constant profile has no defined rank correlation; it is reported as
    0.0 (no association) instead of NaN.
    """
    check_equal_length(expr1, expr2, "expression profiles")
    a = np.asarray(expr1, dtype=np.float64)
    b = np.asarray(expr2, dtype=np.float64)
    if len(a) < 2 or np.ptp(a) == 0 or np.ptp(b) == 0:
        return 0.0
    rho, _ = spearmanr(a, b)
    return float(abs(rho))


HAMMING_KERNEL = create_kernel(hamming_distance, "Hamming Distance")
SPEARMAN_KERNEL = create_kernel(spearman_correlation, "Absolute Spearman Correlation")

KERNELS: Dict[str, UStatKernel] = {
    "hamming": HAMMING_KERNEL,
    "spearman": SPEARMAN_KERNEL,
}


def get_kernel(name: str) -> UStatKernel:
    """Look up a library kernel by its short name."""
    try:
        return KERNELS[name]
    except KeyError:
        raise InputError(
            f"unknown kernel {name!r}; available: {', '.join(sorted(KERNELS))}"
        ) from None


__all__ = [
    "UStatKernel",
    "KernelLike",
    "create_kernel",
    "resolve_kernel",
    "check_equal_length",
    "hamming_distance",
    "spearman_correlation",
    "HAMMING_KERNEL",
    "SPEARMAN_KERNEL",
    "KERNELS",
    "get_kernel",
]
