"""
Normal-approximation significance test against the decoupled null.

    null_mean = mean(distribution)
    null_sd   = std(distribution, ddof=1)
    z         = (original_stat - null_mean) / null_sd
    p         = 2 * (1 - Phi(|z|)),  clamped to [0, 1]

A null distribution with zero spread has no z-score; that case raises
DegenerateDistribution instead of letting NaN or inf leak downstream. Spread
is zero when every value is identical, or when the SD is within float
rounding of the mean (B copies of 0.1 average to 0.10000000000000002).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy.stats import norm

from ustat_decouple.errors import DegenerateDistribution, InputError


@dataclass(frozen=True)
class SignificanceResult:
    """Outcome of the two-tailed test."""
    p_value: float
    z_score: float
    null_mean: float
    null_sd: float


def null_moments(distribution: Sequence[float]) -> tuple[float, float]:
    """
    Mean and Bessel-corrected standard deviation of the null distribution.

    The SD of a single sample is undefined and reported as NaN.
    """
    values = np.asarray(distribution, dtype=np.float64)
    if values.ndim != 1 or len(values) == 0:
        raise InputError("null distribution must be a non-empty 1D sequence")
    null_mean = float(np.mean(values))
    null_sd = float(np.std(values, ddof=1)) if len(values) > 1 else math.nan
    return null_mean, null_sd


def has_zero_spread(distribution: Sequence[float], null_mean: float, null_sd: float) -> bool:
    """True when the null carries no usable spread for a z-score."""
    if not math.isfinite(null_sd):
        return True
    values = np.asarray(distribution, dtype=np.float64)
    if np.ptp(values) == 0.0:
        return True
    return null_sd <= np.finfo(np.float64).eps * max(1.0, abs(null_mean))


def two_tailed_p_value(z_score: float) -> float:
    p = 2.0 * (1.0 - norm.cdf(abs(z_score)))
    return float(min(1.0, max(0.0, p)))


def evaluate_significance(
    original_stat: float,
    distribution: Sequence[float],
) -> SignificanceResult:
    """
    Compare original_stat with the decoupled null distribution.

    Raises:
        DegenerateDistribution: If the null SD is zero or undefined.
    """
    null_mean, null_sd = null_moments(distribution)
    if has_zero_spread(distribution, null_mean, null_sd):
        raise DegenerateDistribution(
            f"null distribution has zero spread (sd={null_sd}); p-value is undefined",
            null_mean=null_mean,
            null_sd=null_sd,
        )
    z_score = (original_stat - null_mean) / null_sd
    return SignificanceResult(
        p_value=two_tailed_p_value(z_score),
        z_score=float(z_score),
        null_mean=null_mean,
        null_sd=null_sd,
    )


def significance_marker(p_value: Optional[float]) -> str:
    """Conventional star marker for a p-value; empty when undefined."""
    if p_value is None:
        return ""
    if p_value < 0.001:
        return "***"
    if p_value < 0.01:
        return "**"
    if p_value < 0.05:
        return "*"
    return " "


__all__ = [
    "SignificanceResult",
    "null_moments",
    "has_zero_spread",
    "two_tailed_p_value",
    "evaluate_significance",
    "significance_marker",
]
