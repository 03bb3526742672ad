"""
Iteration Executor

Runs B independent decoupling iterations either sequentially or on a bounded
thread pool and returns their results indexed by iteration number.

GUARANTEES
==========

- Ordering: result[b] is the output of task(b), whatever the completion order.
- No shared mutable state: task b writes only to slot b of a preallocated
  list, so no locks are taken.
- Fail fast: the first exception raised by any task (in completion order)
  aborts the run. Pending tasks are cancelled, running tasks see the
  cancellation token before their next iteration, and no partial result is
  returned.
- Bounded pool: never more threads than iterations or available cores.

CANCELLATION
============

Cancellation is cooperative. A CancellationToken is checked before every
iteration; an optional timeout bounds the whole iteration phase. Either one
surfaces as DecouplingCancelled.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeout
from typing import Callable, List, Optional

from ustat_decouple.errors import DecouplingCancelled, InputError

logger = logging.getLogger(__name__)


DEFAULT_MAX_WORKERS = 4


class CancellationToken:
    """Thread-safe, one-way cancellation flag shared by all iterations of a run."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise DecouplingCancelled("decoupling run was cancelled")


def available_cores() -> int:
    return os.cpu_count() or 1


def resolve_workers(parallel: bool, n_iterations: int, degree: Optional[int] = None) -> int:
    """
    Worker count for a run.

    Sequential runs use one worker. Parallel runs use `degree` when given,
    otherwise min(n_iterations, 4); the result never exceeds the core count.
    """
    if not parallel:
        return 1
    if degree is None:
        degree = min(n_iterations, DEFAULT_MAX_WORKERS)
    if degree < 1:
        raise InputError(f"degree of parallelism must be >= 1, got {degree}")
    return max(1, min(degree, n_iterations, available_cores()))


def run_iterations(
    n_iterations: int,
    task: Callable[[int], float],
    *,
    max_workers: int = 1,
    cancel_token: Optional[CancellationToken] = None,
    timeout: Optional[float] = None,
) -> List[float]:
    """
    Evaluate task(0) ... task(n_iterations - 1) and return results in index order.

    Parameters
    ----------
    n_iterations : int
        Number of iterations B, must be >= 1.
    task : callable
        task(b) -> float. Must not mutate shared state.
    max_workers : int
        1 runs sequentially; larger values use a thread pool of at most
        min(max_workers, n_iterations, cpu_count) threads.
    cancel_token : CancellationToken, optional
        Checked before every iteration. Never cancelled by this function;
        failures and timeouts stop in-flight workers through a run-local
        token, so the caller's token stays reusable.
    timeout : float, optional
        Wall-clock limit in seconds for the whole run.

    Raises
    ------
    DecouplingCancelled
        If the token is cancelled or the timeout expires.
    Exception
        The first exception raised by a task, unchanged.
    """
    if isinstance(n_iterations, bool) or not isinstance(n_iterations, int) or n_iterations < 1:
        raise InputError(f"number of iterations must be a positive integer, got {n_iterations!r}")
    if max_workers < 1:
        raise InputError(f"max_workers must be >= 1, got {max_workers}")
    if timeout is not None and timeout <= 0:
        raise InputError(f"timeout must be positive, got {timeout}")

    run_token = CancellationToken()

    def check_cancelled() -> None:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        run_token.raise_if_cancelled()

    deadline = time.monotonic() + timeout if timeout is not None else None
    results: List[float] = [0.0] * n_iterations

    workers = min(max_workers, n_iterations, available_cores())
    if workers == 1:
        for b in range(n_iterations):
            check_cancelled()
            if deadline is not None and time.monotonic() > deadline:
                raise DecouplingCancelled(
                    f"decoupling exceeded timeout of {timeout}s after {b} iterations"
                )
            results[b] = float(task(b))
        return results

    def run_one(b: int) -> None:
        check_cancelled()
        results[b] = float(task(b))

    logger.debug("Running %d iterations on %d worker threads", n_iterations, workers)
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="decouple")
    try:
        futures = [executor.submit(run_one, b) for b in range(n_iterations)]
        remaining = deadline - time.monotonic() if deadline is not None else None
        for future in as_completed(futures, timeout=remaining):
            future.result()
    except FuturesTimeout:
        run_token.cancel()
        logger.warning("Decoupling timed out after %ss; cancelling remaining iterations", timeout)
        raise DecouplingCancelled(f"decoupling exceeded timeout of {timeout}s") from None
    except BaseException as exc:
        run_token.cancel()
        if not isinstance(exc, DecouplingCancelled):
            logger.error("Decoupling iteration failed: %s", exc)
        raise
    finally:
        executor.shutdown(wait=True, cancel_futures=True)

    return results


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "CancellationToken",
    "available_cores",
    "resolve_workers",
    "run_iterations",
]
