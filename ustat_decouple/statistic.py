"""
Pairwise U-statistic evaluation.

    self mode   U(X)    = mean over pairs of h(X[i], X[j])
    cross mode  U(X, Y) = mean over pairs of h(X[i], Y[j])

Pairs are i < j for symmetric kernels (C(n, 2) terms) and every ordered
i != j for asymmetric kernels (n(n-1) terms). Self mode is cross mode with
Y = X, so both share one loop.

This is the O(n^2) hot path. It keeps a running float sum, touches nothing
but its read-only inputs and is safe to call from several threads at once.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

from ustat_decouple.errors import ComputationError, DecouplingError, InsufficientSample
from ustat_decouple.kernels import UStatKernel, check_equal_length


MIN_SAMPLE_SIZE = 2


def pair_count(n: int, symmetric: bool) -> int:
    """Number of kernel evaluations for a sample of size n."""
    if symmetric:
        return n * (n - 1) // 2
    return n * (n - 1)


def compute_pairwise_statistic(
    x: Sequence[Any],
    kernel: UStatKernel,
    y: Optional[Sequence[Any]] = None,
) -> float:
    """
    Mean kernel value over the pairs of x (self mode) or of (x, y) (cross mode).

    Parameters
    ----------
    x : sequence of observations, length n >= 2
    kernel : UStatKernel
        Already resolved kernel; see kernels.resolve_kernel.
    y : sequence of observations, optional
        Independent copy of x, same length n.

    Raises
    ------
    InsufficientSample
        If n < 2.
    ShapeMismatch
        If y does not have the length of x, or the kernel rejects a pair.
    ComputationError
        If the kernel fails with a non-engine error or yields a non-finite value.
    """
    n = len(x)
    if n < MIN_SAMPLE_SIZE:
        raise InsufficientSample(
            f"sample size must be at least {MIN_SAMPLE_SIZE} for U-statistics, got {n}"
        )
    if y is None:
        y = x
    else:
        check_equal_length(x, y, "cross dataset and original dataset")

    evaluate = kernel.evaluate
    total = 0.0
    i = j = -1
    try:
        if kernel.symmetric:
            for i in range(n - 1):
                xi = x[i]
                for j in range(i + 1, n):
                    total += evaluate(xi, y[j])
        else:
            for i in range(n):
                xi = x[i]
                for j in range(n):
                    if i != j:
                        total += evaluate(xi, y[j])
    except DecouplingError:
        raise
    except Exception as exc:
        raise ComputationError(
            f"kernel '{kernel.name}' failed on pair ({i}, {j}): {exc}"
        ) from exc

    if not math.isfinite(total):
        raise ComputationError(f"kernel '{kernel.name}' produced a non-finite value")

    return total / pair_count(n, kernel.symmetric)


__all__ = ["MIN_SAMPLE_SIZE", "pair_count", "compute_pairwise_statistic"]
