"""
Result aggregate of a decoupling analysis.

DecoupleResult is created exactly once per analysis call and is read-only
afterwards. Everything a presentation layer needs (text summary, JSON,
histogram) is derived from its fields alone.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ustat_decouple.significance import null_moments, significance_marker


METHOD_NAME = "Friedman-de la Pena Decoupling"


# =============================================================================
# Histogram
# =============================================================================

@dataclass(frozen=True)
class HistogramBin:
    """Single histogram bin."""
    left_edge: float
    right_edge: float
    count: int
    density: float


@dataclass(frozen=True)
class DistributionHistogram:
    """
    Binned decoupled distribution with the original statistic marked.

    Provides the data for a histogram plot without requiring a plotting
    library.
    """
    bins: Tuple[HistogramBin, ...]
    n_total: int
    original_stat: float

    @property
    def marker_bin(self) -> Optional[int]:
        """Index of the bin containing original_stat, or None if it falls outside."""
        for index, b in enumerate(self.bins):
            last = index == len(self.bins) - 1
            if b.left_edge <= self.original_stat < b.right_edge or (
                last and self.original_stat == b.right_edge
            ):
                return index
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "bins": [
                {
                    "left_edge": float(b.left_edge),
                    "right_edge": float(b.right_edge),
                    "count": b.count,
                    "density": float(b.density),
                }
                for b in self.bins
            ],
            "n_total": self.n_total,
            "original_stat": float(self.original_stat),
            "marker_bin": self.marker_bin,
        }


# =============================================================================
# Result
# =============================================================================

@dataclass(frozen=True)
class DecoupleResult:
    """
    Immutable outcome of decouple_u_stat.

    p_value and z_score are None when the null distribution is degenerate
    (zero spread); that is the explicit "undefined" marker.
    """
    original_stat: float
    decoupled_distribution: Tuple[float, ...]
    kernel_name: str
    method: str = METHOD_NAME
    p_value: Optional[float] = None
    z_score: Optional[float] = None
    seed: int = 0
    n_samples: int = 0

    @property
    def n_iterations(self) -> int:
        return len(self.decoupled_distribution)

    @property
    def null_mean(self) -> float:
        return null_moments(self.decoupled_distribution)[0]

    @property
    def null_sd(self) -> float:
        """Bessel-corrected SD of the null distribution (NaN when B == 1)."""
        return null_moments(self.decoupled_distribution)[1]

    @property
    def p_value_defined(self) -> bool:
        return self.p_value is not None

    @property
    def significance(self) -> str:
        return significance_marker(self.p_value)

    def histogram(self, n_bins: int = 30) -> DistributionHistogram:
        """Bin the decoupled distribution into n_bins equal-width bins."""
        if n_bins < 1:
            raise ValueError(f"n_bins must be >= 1, got {n_bins}")
        values = np.asarray(self.decoupled_distribution, dtype=np.float64)
        counts, edges = np.histogram(values, bins=n_bins)
        n_total = len(values)
        bins = []
        for count, left, right in zip(counts, edges[:-1], edges[1:]):
            width = right - left
            density = count / (n_total * width) if width > 0 else 0.0
            bins.append(HistogramBin(
                left_edge=float(left),
                right_edge=float(right),
                count=int(count),
                density=float(density),
            ))
        return DistributionHistogram(
            bins=tuple(bins),
            n_total=n_total,
            original_stat=self.original_stat,
        )

    def summary(self) -> str:
        """Multi-line human-readable report."""
        def fmt(value: Optional[float]) -> str:
            if value is None or not math.isfinite(value):
                return "undefined"
            return f"{value:.4f}"

        lines = [
            "DecoupleResult:",
            f"  Original U-statistic: {fmt(self.original_stat)}",
            f"  Decoupled mean: {fmt(self.null_mean)}",
            f"  Decoupled SD: {fmt(self.null_sd)}",
            f"  Kernel: {self.kernel_name}",
            f"  Method: {self.method}",
            f"  Iterations: {self.n_iterations}",
            f"  P-value: {fmt(self.p_value)}",
            f"  Z-score: {fmt(self.z_score)}",
        ]
        if self.p_value is not None:
            lines.append(f"  Significance: {self.significance} (p = {self.p_value:.4f})")
        else:
            lines.append("  Significance: undefined (degenerate null distribution)")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()

    def to_dict(self, include_distribution: bool = True) -> dict:
        """Convert to dictionary for JSON serialization."""
        null_sd = self.null_sd
        data = {
            "original_stat": float(self.original_stat),
            "null_mean": float(self.null_mean),
            "null_sd": float(null_sd) if math.isfinite(null_sd) else None,
            "z_score": self.z_score,
            "p_value": self.p_value,
            "significance": self.significance,
            "kernel_name": self.kernel_name,
            "method": self.method,
            "n_iterations": self.n_iterations,
            "n_samples": self.n_samples,
            "seed": self.seed,
        }
        if include_distribution:
            data["decoupled_distribution"] = list(self.decoupled_distribution)
        return data


__all__ = [
    "METHOD_NAME",
    "HistogramBin",
    "DistributionHistogram",
    "DecoupleResult",
]
