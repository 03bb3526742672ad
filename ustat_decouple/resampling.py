"""
Independent-copy generation by bootstrap resampling.

Y[k] = X[indices[k]] with indices drawn uniformly with replacement from
[0, n). Y is an empirical stand-in for an independent copy of X's underlying
distribution.
"""

from __future__ import annotations

from typing import Any, Sequence, Tuple

import numpy as np
from numpy.random import Generator


def draw_indices(n: int, rng: Generator) -> np.ndarray:
    """n bootstrap indices in [0, n)."""
    return rng.integers(0, n, size=n)


def generate_independent_copy(x: Sequence[Any], rng: Generator) -> Tuple[Any, ...]:
    """
    Resample x with replacement using rng.

    Observations are referenced, not copied; x itself is left untouched.
    """
    indices = draw_indices(len(x), rng)
    return tuple(x[k] for k in indices.tolist())


__all__ = ["draw_indices", "generate_independent_copy"]
