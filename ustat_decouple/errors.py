"""
Exception hierarchy for the decoupling engine.

Every error raised by the engine derives from DecouplingError so callers can
catch the whole family at once. Input problems additionally derive from
ValueError and kernel failures from RuntimeError, matching what callers of a
numeric library usually expect.
"""

from __future__ import annotations

from typing import Optional


class DecouplingError(Exception):
    """Base class for all decoupling failures."""


class InputError(DecouplingError, ValueError):
    """Invalid dataset, kernel or configuration."""


class InsufficientSample(InputError):
    """Dataset has fewer than two observations."""


class ShapeMismatch(InputError):
    """Two observations are not structurally comparable."""


class DegenerateDistribution(DecouplingError):
    """
    Null distribution has zero spread, so no z-score or p-value exists.

    Carries the summary of the null distribution so the caller can still
    report it.
    """

    def __init__(self, message: str, *, null_mean: float, null_sd: float):
        super().__init__(message)
        self.null_mean = null_mean
        self.null_sd = null_sd


class ComputationError(DecouplingError, RuntimeError):
    """A kernel evaluation failed or produced a non-finite value."""

    def __init__(self, message: str, *, iteration: Optional[int] = None):
        super().__init__(message)
        self.iteration = iteration


class DecouplingCancelled(DecouplingError):
    """The iteration phase was cancelled or ran past its timeout."""


__all__ = [
    "DecouplingError",
    "InputError",
    "InsufficientSample",
    "ShapeMismatch",
    "DegenerateDistribution",
    "ComputationError",
    "DecouplingCancelled",
]
