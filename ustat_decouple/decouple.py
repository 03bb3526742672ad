"""
Decoupling Orchestrator

Straight-line pipeline, every failure terminal:

    Validate -> ComputeOriginal -> GenerateNullDistribution -> TestSignificance -> Done

1. Validate the dataset (n >= 2), resolve the kernel and probe it once on the
   first pair so shape problems surface before any full pass.
2. original_stat = U(X), the self-mode pairwise statistic.
3. For b = 0 .. B-1: draw Y_b, a bootstrap copy of X from the stream derived
   from (seed, b), and record U(X, Y_b). Iterations run sequentially or on a
   bounded thread pool; the result is identical either way.
4. Two-tailed normal-approximation test of original_stat against the null.

There is no retry: given (dataset, kernel, seed) the computation is
deterministic, so repeating it cannot change the outcome.
"""

from __future__ import annotations

import logging
import numbers
from typing import Any, Optional, Sequence, Tuple

from ustat_decouple.config import DEFAULT_B, DEFAULT_SEED, DecoupleConfig
from ustat_decouple.errors import (
    ComputationError,
    DecouplingError,
    DegenerateDistribution,
    InputError,
    InsufficientSample,
)
from ustat_decouple.executor import CancellationToken, resolve_workers, run_iterations
from ustat_decouple.kernels import KernelLike, UStatKernel, resolve_kernel
from ustat_decouple.prng import IterationStreams
from ustat_decouple.resampling import generate_independent_copy
from ustat_decouple.result import METHOD_NAME, DecoupleResult
from ustat_decouple.significance import evaluate_significance
from ustat_decouple.statistic import MIN_SAMPLE_SIZE, compute_pairwise_statistic

logger = logging.getLogger(__name__)


def validate_input_data(x: Sequence[Any], kernel: KernelLike) -> UStatKernel:
    """
    Check the dataset and kernel before any pairwise work.

    Returns the resolved kernel.

    Raises:
        InsufficientSample: If fewer than two observations are given.
        InputError: If the kernel is unusable or does not return a number.
        ShapeMismatch: If the first two observations are not comparable.
    """
    if len(x) < MIN_SAMPLE_SIZE:
        raise InsufficientSample(
            f"sample size must be at least {MIN_SAMPLE_SIZE} for U-statistics, got {len(x)}"
        )
    resolved = resolve_kernel(kernel)

    element_types = {type(obs).__name__ for obs in x}
    if len(element_types) > 1:
        logger.warning("Input observations have mixed types: %s", ", ".join(sorted(element_types)))

    try:
        probe = resolved.function(x[0], x[1])
    except DecouplingError:
        raise
    except Exception as exc:
        raise InputError(f"kernel validation failed: {exc}") from exc
    if isinstance(probe, bool) or not isinstance(probe, numbers.Real):
        raise InputError(
            f"kernel '{resolved.name}' must return a single real number, "
            f"got {type(probe).__name__}"
        )
    return resolved


def decouple_u_stat(
    x: Sequence[Any],
    kernel: KernelLike,
    B: int = DEFAULT_B,
    parallel: bool = False,
    seed: int = DEFAULT_SEED,
    *,
    degree_of_parallelism: Optional[int] = None,
    timeout: Optional[float] = None,
    cancel_token: Optional[CancellationToken] = None,
    config: Optional[DecoupleConfig] = None,
) -> DecoupleResult:
    """
    Decouple a pairwise U-statistic and test it against the decoupled null.

    Parameters
    ----------
    x : sequence of observations
        The dataset, n >= 2. It is snapshotted and never modified.
    kernel : UStatKernel or callable
        A bare callable is treated as a symmetric kernel named "Custom Kernel".
    B : int, default=1000
        Number of decoupling iterations.
    parallel : bool, default=False
        Run iterations on a bounded thread pool.
    seed : int, default=123
        Base seed; iteration b uses a stream derived from (seed, b).
    degree_of_parallelism : int, optional
        Pool size when parallel; defaults to min(B, 4), capped by cpu count.
    timeout : float, optional
        Wall-clock limit in seconds for the iteration phase.
    cancel_token : CancellationToken, optional
        Cooperative cancellation of the iteration phase.
    config : DecoupleConfig, optional
        When given, its values take precedence over B, parallel, seed,
        degree_of_parallelism and timeout.

    Returns
    -------
    DecoupleResult
        p_value and z_score are None if the null distribution is degenerate.

    Raises
    ------
    InputError
        Invalid dataset, kernel or configuration (including ShapeMismatch and
        InsufficientSample).
    ComputationError
        A kernel evaluation failed during an iteration.
    DecouplingCancelled
        The run was cancelled or timed out.

    Examples
    --------
    >>> from ustat_decouple.kernels import HAMMING_KERNEL
    >>> seqs = [list("ACG"), list("ACT"), list("AGT")]
    >>> result = decouple_u_stat(seqs, HAMMING_KERNEL, B=1)
    >>> round(result.original_stat, 4)
    1.3333
    """
    if config is None:
        config = DecoupleConfig(
            B=B,
            parallel=parallel,
            degree_of_parallelism=degree_of_parallelism,
            seed=seed,
            timeout=timeout,
        )
    config.validate()

    data: Tuple[Any, ...] = tuple(x)
    resolved = validate_input_data(data, kernel)
    streams = IterationStreams(config.seed)
    workers = resolve_workers(config.parallel, config.B, config.degree_of_parallelism)

    logger.info(
        "Decoupling '%s' kernel: n=%d, B=%d, workers=%d, seed=%d",
        resolved.name, len(data), config.B, workers, config.seed,
    )

    original_stat = compute_pairwise_statistic(data, resolved)
    logger.info("Original U-statistic: %.6f", original_stat)

    def decouple_iteration(b: int) -> float:
        y = generate_independent_copy(data, streams.for_iteration(b))
        try:
            return compute_pairwise_statistic(data, resolved, y)
        except ComputationError as exc:
            raise ComputationError(f"iteration {b}: {exc}", iteration=b) from exc

    distribution = run_iterations(
        config.B,
        decouple_iteration,
        max_workers=workers,
        cancel_token=cancel_token,
        timeout=config.timeout,
    )

    try:
        test = evaluate_significance(original_stat, distribution)
        p_value: Optional[float] = test.p_value
        z_score: Optional[float] = test.z_score
        logger.info(
            "Null mean=%.6f sd=%.6f z=%.4f p=%.4g",
            test.null_mean, test.null_sd, test.z_score, test.p_value,
        )
    except DegenerateDistribution as exc:
        logger.warning("P-value undefined: %s", exc)
        p_value = None
        z_score = None

    return DecoupleResult(
        original_stat=float(original_stat),
        decoupled_distribution=tuple(distribution),
        kernel_name=resolved.name,
        method=METHOD_NAME,
        p_value=p_value,
        z_score=z_score,
        seed=config.seed,
        n_samples=len(data),
    )


__all__ = ["validate_input_data", "decouple_u_stat"]
