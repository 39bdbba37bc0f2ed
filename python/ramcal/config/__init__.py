"""
Calibration configuration layer.

This module provides file-based configuration for calibration runs, supporting:
- TOML-based config files describing the sampler, thinning, inputs and outputs
- Layered configuration (defaults -> experiment overrides)
- Setting metadata with range validation

Example:
    >>> from ramcal.config import load_calibration_config
    >>> config = load_calibration_config("configs/sneasy-brick.toml")
    >>> config.sampler.total_iterations
    101000
"""

from __future__ import annotations

from .base import (
    DEFAULT_ADAPTATION_EXPONENT,
    DEFAULT_TARGET_ACCEPTANCE,
    DEFAULT_THIN_SIZES,
    CalibrationConfig,
    SamplerConfig,
)
from .builder import SCHEMA_VERSION, build_config, load_calibration_config
from .loader import deep_merge, load_config, load_config_layers
from .parameters import (
    ParameterMetadata,
    get_parameter_metadata,
    parameter,
    validate_parameters,
)
from .validation import check_schema_version

__all__ = [
    "DEFAULT_ADAPTATION_EXPONENT",
    "DEFAULT_TARGET_ACCEPTANCE",
    "DEFAULT_THIN_SIZES",
    "SCHEMA_VERSION",
    "CalibrationConfig",
    "ParameterMetadata",
    "SamplerConfig",
    "build_config",
    "check_schema_version",
    "deep_merge",
    "get_parameter_metadata",
    "load_calibration_config",
    "load_config",
    "load_config_layers",
    "parameter",
    "validate_parameters",
]
