"""
Validation helpers for calibration configuration files.

This module provides:
- Schema version checking with semver compatibility
- Unknown key detection
"""

from __future__ import annotations

import logging
from typing import Any

from ..exceptions import IncompatibleSchemaError, ValidationError

logger = logging.getLogger(__name__)

__all__ = [
    "check_schema_version",
    "find_unknown_keys",
    "parse_semver",
    "require_table",
]

_SEMVER_PARTS = 3


def parse_semver(version: str) -> tuple[int, int, int]:
    """
    Parse a ``MAJOR.MINOR.PATCH`` version string.

    Raises
    ------
    ValidationError
        If the string is not three dot-separated integers.

    Examples
    --------
    >>> parse_semver("1.2.3")
    (1, 2, 3)
    """
    parts = str(version).split(".")
    if len(parts) != _SEMVER_PARTS:
        msg = f"Invalid schema version '{version}' (expected 'MAJOR.MINOR.PATCH')"
        raise ValidationError(msg)

    try:
        major, minor, patch = (int(part) for part in parts)
    except ValueError as err:
        msg = f"Invalid schema version '{version}' (non-integer component)"
        raise ValidationError(msg) from err

    return major, minor, patch


def check_schema_version(config_version: str, loader_version: str) -> None:
    """
    Check that a configuration file can be read by this loader.

    A different major version is incompatible. A newer minor version in the
    file is accepted with a warning.

    Raises
    ------
    IncompatibleSchemaError
        If the major versions differ.
    """
    config_major, config_minor, _ = parse_semver(config_version)
    loader_major, loader_minor, _ = parse_semver(loader_version)

    if config_major != loader_major:
        raise IncompatibleSchemaError(config_version, loader_version)

    if config_minor > loader_minor:
        logger.warning(
            f"Configuration schema version {config_version} is newer than "
            f"loader version {loader_version}. Some settings may be ignored."
        )


def find_unknown_keys(data: dict[str, Any], known_keys: set[str]) -> list[str]:
    """
    List the keys of ``data`` missing from ``known_keys``, sorted.

    Examples
    --------
    >>> find_unknown_keys({"sampler": {}, "plots": {}}, {"sampler"})
    ['plots']
    """
    return sorted(set(data) - known_keys)


def require_table(raw: dict[str, Any], key: str) -> dict[str, Any]:
    """
    Return the TOML table stored under ``key`` (empty if absent).

    Raises
    ------
    ValidationError
        If the value exists but is not a table.
    """
    table = raw.get(key, {})
    if not isinstance(table, dict):
        msg = f"Configuration section '{key}' must be a table, got {type(table).__name__}"
        raise ValidationError(msg)
    return table
