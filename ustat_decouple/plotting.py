"""
Histogram plot of a decoupling result.

Draws the decoupled null distribution with a dashed marker at the original
U-statistic and the p-value in the corner.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple, Union

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for CI/server environments
import matplotlib.pyplot as plt

from ustat_decouple.result import DecoupleResult

logger = logging.getLogger(__name__)


COLORS = {
    'null': '#ADD8E6',
    'original': '#C73E1D',
}


def plot_decouple_result(
    result: DecoupleResult,
    output_path: Union[str, Path],
    title: str = "Decoupling Analysis",
    n_bins: int = 30,
    figsize: Tuple[int, int] = (8, 5),
) -> Path:
    """
    Save a histogram of result.decoupled_distribution to output_path.

    Args:
        result: Analysis result to plot
        output_path: Image file path; the format follows its suffix
        title: Plot title
        n_bins: Number of histogram bins
        figsize: Figure size (width, height) in inches

    Returns:
        The path the figure was written to.
    """
    output_path = Path(output_path)
    histogram = result.histogram(n_bins=n_bins)
    lefts = [b.left_edge for b in histogram.bins]
    widths = [b.right_edge - b.left_edge for b in histogram.bins]
    counts = [b.count for b in histogram.bins]

    fig, ax = plt.subplots(figsize=figsize)
    try:
        ax.bar(lefts, counts, width=widths, align='edge',
               color=COLORS['null'], edgecolor='white')
        ax.axvline(result.original_stat, color=COLORS['original'], linewidth=2,
                   linestyle='--', label=f"Original: {result.original_stat:.4f}")

        p_text = "p = undefined" if result.p_value is None else f"p = {result.p_value:.4f}"
        ax.text(0.95, 0.95, p_text, transform=ax.transAxes,
                ha='right', va='top', fontsize=9)

        ax.set_title(title)
        ax.set_xlabel('Decoupled Statistic Value')
        ax.set_ylabel('Frequency')
        ax.legend(loc='upper left', frameon=False)

        fig.tight_layout()
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
    finally:
        plt.close(fig)

    logger.info("Decoupling histogram saved to %s", output_path)
    return output_path


__all__ = ["plot_decouple_result"]
