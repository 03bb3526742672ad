"""
Deterministic per-iteration random streams.

Each decoupling iteration b draws from its own generator derived purely from
(base_seed, b). No process-wide seed is ever set or mutated, so:

- identical seeds reproduce identical null distributions, and
- the distribution does not depend on which worker ran which iteration or
  in what order iterations finished.

Streams are numpy PCG64 generators keyed by a SeedSequence whose spawn key is
the iteration index. Spawn keys give statistically independent children, the
same mechanism numpy uses for SeedSequence.spawn().
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.random import PCG64, Generator, SeedSequence

from ustat_decouple.errors import InputError


def validate_seed(seed: int) -> int:
    """Return seed if it is a non-negative integer, else raise InputError."""
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise InputError(f"seed must be an integer, got {type(seed).__name__}")
    if seed < 0:
        raise InputError(f"seed must be non-negative, got {seed}")
    return seed


def iteration_rng(base_seed: int, iteration: int) -> Generator:
    """Generator for iteration `iteration` of a run seeded with `base_seed`."""
    if iteration < 0:
        raise InputError(f"iteration index must be non-negative, got {iteration}")
    return Generator(PCG64(SeedSequence(base_seed, spawn_key=(iteration,))))


@dataclass(frozen=True)
class IterationStreams:
    """
    Hierarchical stream factory for one analysis call.

    The base seed travels as plain data; each iteration asks for its own
    child stream.
    """
    seed: int

    def __post_init__(self) -> None:
        validate_seed(self.seed)

    def for_iteration(self, iteration: int) -> Generator:
        return iteration_rng(self.seed, iteration)


__all__ = ["validate_seed", "iteration_rng", "IterationStreams"]
