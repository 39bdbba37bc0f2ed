"""
Log-posterior contract.

The sampler only ever sees the posterior through a callable that maps a parameter
vector to a scalar log-density. Returning ``-inf`` marks a vector outside the
prior support and is a normal rejection, not a failure.
"""

from __future__ import annotations

import math
from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from .exceptions import ModelEvaluationError

__all__ = ["LogPosterior", "LogPosteriorFactory", "evaluate_log_posterior"]


class LogPosterior(Protocol):
    """Callable returning the log-posterior density of a parameter vector."""

    def __call__(self, theta: NDArray[np.float64]) -> float: ...


class LogPosteriorFactory(Protocol):
    """Build a log-posterior for a calibration period ending in ``end_year``."""

    def __call__(self, end_year: int) -> LogPosterior: ...


def evaluate_log_posterior(
    log_posterior: LogPosterior, theta: NDArray[np.float64]
) -> float:
    """
    Evaluate the log-posterior and check the result.

    Parameters
    ----------
    log_posterior
        Callable returning a finite float or ``-inf``.
    theta
        Parameter vector. The callable receives a copy so it cannot modify
        sampler state.

    Returns
    -------
    float
        The log-posterior value, either finite or ``-inf``.

    Raises
    ------
    ModelEvaluationError
        If the callable raises, or returns NaN, ``+inf`` or a non-scalar.
    """
    try:
        raw = log_posterior(theta.copy())
    except Exception as err:
        raise ModelEvaluationError(theta, f"{type(err).__name__}: {err}") from err

    try:
        value = float(raw)
    except (TypeError, ValueError) as err:
        reason = f"expected a scalar log-density, got {raw!r}"
        raise ModelEvaluationError(theta, reason) from err

    if math.isnan(value) or value == math.inf:
        raise ModelEvaluationError(theta, f"log-density evaluated to {value}")
    return value
