"""Build a :class:`CalibrationConfig` from a raw TOML dictionary."""

from __future__ import annotations

import logging
from typing import Any

from ..exceptions import ValidationError
from .base import DEFAULT_THIN_SIZES, CalibrationConfig, SamplerConfig
from .loader import load_config_layers
from .validation import check_schema_version, find_unknown_keys, require_table

logger = logging.getLogger(__name__)

__all__ = ["SCHEMA_VERSION", "build_config", "load_calibration_config"]

SCHEMA_VERSION = "1.0.0"

_SAMPLER_KEYS = {
    "final_chain_length",
    "burn_in_length",
    "target_acceptance",
    "adaptation_exponent",
    "seed",
}


def _warn_unknown(section: str, table: dict[str, Any], known: set[str]) -> None:
    unknown = find_unknown_keys(table, known)
    if unknown:
        logger.warning(
            f"Unknown keys in [{section}]: {', '.join(unknown)}. These will be ignored."
        )


def _as_int(table: dict[str, Any], section: str, key: str, default: int) -> int:
    value = table.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError) as err:
        msg = f"{section}.{key} must be an integer, got {value!r}"
        raise ValidationError(msg) from err


def build_config(raw: dict[str, Any]) -> CalibrationConfig:
    """Build a calibration configuration.

    Parameters
    ----------
    raw
        Dictionary as returned by :func:`~ramcal.config.load_config`.

    Returns
    -------
    CalibrationConfig
        Validated configuration

    Raises
    ------
    IncompatibleSchemaError
        If the file was written for another major schema version
    ValidationError
        If a section has the wrong type or a value is out of range
    ConfigurationError
        If thinning sizes exceed the final chain length
    """
    config_schema = str(raw.get("schema", SCHEMA_VERSION))
    check_schema_version(config_schema, SCHEMA_VERSION)

    calibration = require_table(raw, "calibration")
    sampler = require_table(raw, "sampler")
    thinning = require_table(raw, "thinning")
    inputs = require_table(raw, "inputs")
    outputs = require_table(raw, "outputs")

    _warn_unknown("calibration", calibration, {"name", "end_year"})
    _warn_unknown("sampler", sampler, _SAMPLER_KEYS)
    _warn_unknown("thinning", thinning, {"sizes"})
    _warn_unknown(
        "inputs",
        inputs,
        {"initial_values", "initial_values_skiprows", "initial_covariance"},
    )
    _warn_unknown("outputs", outputs, {"directory"})

    try:
        sampler_config = SamplerConfig(
            **{key: sampler[key] for key in _SAMPLER_KEYS if key in sampler}
        )
    except TypeError as err:
        msg = f"Invalid [sampler] section: {err}"
        raise ValidationError(msg) from err

    end_year = _as_int(calibration, "calibration", "end_year", 2017)
    skiprows = _as_int(inputs, "inputs", "initial_values_skiprows", 0)

    sizes = thinning.get("sizes", list(DEFAULT_THIN_SIZES))
    if not isinstance(sizes, list | tuple):
        msg = f"thinning.sizes must be an array of integers, got {sizes!r}"
        raise ValidationError(msg)

    return CalibrationConfig(
        name=str(calibration.get("name", "calibration")),
        calibration_end_year=end_year,
        sampler=sampler_config,
        thin_sizes=tuple(sizes),
        initial_values=inputs.get("initial_values"),
        initial_values_skiprows=skiprows,
        initial_covariance=inputs.get("initial_covariance"),
        output_dir=outputs.get("directory"),
        config_schema=config_schema,
    )


def load_calibration_config(*paths: str) -> CalibrationConfig:
    """Load, merge and build configuration from one or more TOML files.

    Examples
    --------
    >>> config = load_calibration_config("defaults.toml", "experiment.toml")
    """
    return build_config(load_config_layers(*paths))
