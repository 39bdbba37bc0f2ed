"""
Bayesian calibration of climate model parameters with Robust Adaptive Metropolis.

The package samples a posterior given only its log-density, then reduces the
chain to the artifacts used downstream: acceptance rate, proposal covariance,
posterior mean, correlation matrix and thinned parameter sets.

Example:
    >>> import numpy as np
    >>> from ramcal import ParameterSchema, ram_sample, summarize
    >>> schema = ParameterSchema(["S", "kappa"])
    >>> result = ram_sample(
    ...     lambda theta: -0.5 * float(theta @ theta),
    ...     [1.0, 2.0],
    ...     np.eye(2),
    ...     1_000,
    ...     seed=42,
    ...     schema=schema,
    ... )
    >>> summary = summarize(result, burn_in_length=100, thin_sizes=[100])
    >>> len(summary.thinned[100])
    100
"""

from __future__ import annotations

from .artifacts import load_covariance, load_initial_values, write_artifacts
from .chain import Chain
from .config import CalibrationConfig, SamplerConfig, load_calibration_config
from .covariance import AdaptationSettings, CovarianceAdapter, symmetrize
from .exceptions import (
    AdaptationInstabilityError,
    CalibrationError,
    ConfigurationError,
    IncompatibleSchemaError,
    InvalidCovarianceError,
    ModelEvaluationError,
    ValidationError,
)
from .oracle import LogPosterior, LogPosteriorFactory
from .pipeline import CalibrationResult, run_calibration
from .postprocess import (
    SummaryArtifacts,
    compute_correlation_matrix,
    compute_mean,
    drop_burn_in,
    summarize,
    thin,
    thin_indices,
)
from .sampler import (
    AcceptanceRecord,
    RAMSampler,
    SamplerResult,
    SamplerState,
    ram_sample,
)
from .schema import ParameterSchema

__all__ = [
    "AcceptanceRecord",
    "AdaptationInstabilityError",
    "AdaptationSettings",
    "CalibrationConfig",
    "CalibrationError",
    "CalibrationResult",
    "Chain",
    "ConfigurationError",
    "CovarianceAdapter",
    "IncompatibleSchemaError",
    "InvalidCovarianceError",
    "LogPosterior",
    "LogPosteriorFactory",
    "ModelEvaluationError",
    "ParameterSchema",
    "RAMSampler",
    "SamplerConfig",
    "SamplerResult",
    "SamplerState",
    "SummaryArtifacts",
    "ValidationError",
    "compute_correlation_matrix",
    "compute_mean",
    "drop_burn_in",
    "load_calibration_config",
    "load_covariance",
    "load_initial_values",
    "ram_sample",
    "run_calibration",
    "summarize",
    "symmetrize",
    "thin",
    "thin_indices",
    "write_artifacts",
]
