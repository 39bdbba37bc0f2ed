"""
Custom exceptions for ramcal.

This module defines the exception hierarchy for calibration failures:
- CalibrationError: Base exception for all ramcal errors
- ConfigurationError: Run or post-processing settings inconsistent with the chain
- ValidationError: Invalid configuration values (types, ranges, missing fields)
- IncompatibleSchemaError: Configuration schema version mismatch
- InvalidCovarianceError: Initial proposal covariance is not positive-definite
- AdaptationInstabilityError: Adapted proposal covariance could not be factorised
- ModelEvaluationError: Log-posterior evaluation failed for a parameter vector

None of these are recoverable at the point they are raised. A log-posterior of
``-inf`` is not an error; it rejects the proposal.
"""

from __future__ import annotations

from typing import Any

import numpy as np

__all__ = [
    "AdaptationInstabilityError",
    "CalibrationError",
    "ConfigurationError",
    "IncompatibleSchemaError",
    "InvalidCovarianceError",
    "ModelEvaluationError",
    "ValidationError",
]


class CalibrationError(Exception):
    """Base exception for all calibration errors."""

    pass


class ConfigurationError(CalibrationError):
    """
    Raised when run settings are inconsistent.

    Typical causes are a burn-in length that is not shorter than the chain, or a
    thinning size larger than the post-burn-in chain. Values are never clamped.
    """

    pass


class ValidationError(ConfigurationError):
    """
    Raised for configuration validation failures.

    This includes type mismatches, missing required fields, and out-of-range values.
    """

    pass


class IncompatibleSchemaError(ConfigurationError):
    """
    Raised when configuration schema version is incompatible with the loader.

    Parameters
    ----------
    config_version
        The version string from the configuration file.
    loader_version
        The version string supported by this loader.
    """

    def __init__(self, config_version: str, loader_version: str) -> None:
        message = (
            f"Incompatible schema version: config has version {config_version}, "
            f"but loader supports version {loader_version}"
        )
        super().__init__(message)
        self.config_version = config_version
        self.loader_version = loader_version


class InvalidCovarianceError(CalibrationError):
    """Raised when the initial proposal covariance cannot be Cholesky-factorised."""

    pass


class AdaptationInstabilityError(CalibrationError):
    """
    Raised when an adapted proposal covariance is no longer positive-definite.

    This usually points at a poorly chosen target acceptance rate or a
    pathological posterior geometry.

    Parameters
    ----------
    iteration
        Iteration (1-based) at which the adaptation failed.
    reason
        Short description of the failure.
    """

    def __init__(self, iteration: int, reason: str) -> None:
        message = f"Covariance adaptation failed at iteration {iteration}: {reason}"
        super().__init__(message)
        self.iteration = iteration
        self.reason = reason


class ModelEvaluationError(CalibrationError):
    """
    Raised when the log-posterior fails for a parameter vector.

    Parameters
    ----------
    parameters
        The parameter vector that was being evaluated. A copy is kept.
    reason
        Description of the failure.
    """

    def __init__(self, parameters: Any, reason: str) -> None:
        self.parameters = np.array(parameters, dtype=float, copy=True)
        formatted = np.array2string(self.parameters, precision=6, separator=", ")
        message = f"Log-posterior evaluation failed at {formatted}: {reason}"
        super().__init__(message)
        self.reason = reason
