"""
Progress reporting for long sampler runs.

A progress callback receives a :class:`ProgressInfo` after every iteration.
Three ready-made callbacks are provided: :class:`ProgressTracker` records the
history, :func:`create_simple_callback` prints a line every few iterations and
:func:`create_tqdm_callback` drives a ``tqdm`` progress bar.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

__all__ = [
    "ProgressCallback",
    "ProgressInfo",
    "ProgressTracker",
    "create_simple_callback",
    "create_tqdm_callback",
]


@dataclass(frozen=True)
class ProgressInfo:
    """State of a run after one iteration.

    Attributes
    ----------
    iteration : int
        Zero-based index of the iteration just completed
    n_iterations : int
        Total iterations of the run
    acceptance_rate : float
        Running acceptance rate
    log_prob : float
        Log-posterior of the current state
    """

    iteration: int
    n_iterations: int
    acceptance_rate: float
    log_prob: float


ProgressCallback = Callable[[ProgressInfo], None]


def _format(info: ProgressInfo) -> str:
    return (
        f"Iteration {info.iteration + 1}/{info.n_iterations} | "
        f"Acceptance rate: {info.acceptance_rate:.3f} | "
        f"Log prob: {info.log_prob:.3f}"
    )


class ProgressTracker:
    """
    Record progress of a run.

    Parameters
    ----------
    print_every
        Also print a progress line every ``print_every`` iterations.
    """

    def __init__(self, print_every: int | None = None) -> None:
        self.print_every = print_every
        self.iterations: list[int] = []
        self.acceptance_rates: list[float] = []
        self.log_probs: list[float] = []

    def __call__(self, info: ProgressInfo) -> None:
        self.iterations.append(info.iteration)
        self.acceptance_rates.append(info.acceptance_rate)
        self.log_probs.append(info.log_prob)
        if self.print_every and (info.iteration + 1) % self.print_every == 0:
            print(_format(info))

    def clear(self) -> None:
        """Forget all recorded progress."""
        self.iterations.clear()
        self.acceptance_rates.clear()
        self.log_probs.clear()


def create_simple_callback(print_every: int = 1000) -> ProgressCallback:
    """Print a progress line every ``print_every`` iterations and at the end."""

    def callback(info: ProgressInfo) -> None:
        done = info.iteration + 1
        if done % print_every == 0 or done == info.n_iterations:
            print(_format(info))

    return callback


def create_tqdm_callback(total: int, desc: str = "Sampling") -> Any:
    """
    Create a callback that advances a ``tqdm`` progress bar.

    The returned callable exposes the bar as ``pbar`` and a ``close()`` method.

    Raises
    ------
    ImportError
        If ``tqdm`` is not installed.
    """
    try:
        from tqdm.auto import tqdm  # noqa: PLC0415
    except ImportError as err:
        msg = "tqdm is required for progress bars: pip install 'ramcal[progress]'"
        raise ImportError(msg) from err

    class _TqdmCallback:
        def __init__(self) -> None:
            self.pbar = tqdm(total=total, desc=desc)

        def __call__(self, info: ProgressInfo) -> None:
            self.pbar.update(1)
            self.pbar.set_postfix(acceptance=f"{info.acceptance_rate:.3f}")

        def close(self) -> None:
            self.pbar.close()

    return _TqdmCallback()
