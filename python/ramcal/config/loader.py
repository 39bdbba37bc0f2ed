"""
Configuration loading and merging for calibration runs.

This module provides:
- load_config: Load a single TOML configuration file
- load_config_layers: Merge several files (defaults -> experiment overrides)
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from .validation import find_unknown_keys

logger = logging.getLogger(__name__)

__all__ = [
    "KNOWN_SECTIONS",
    "deep_merge",
    "load_config",
    "load_config_layers",
]

KNOWN_SECTIONS = {"schema", "calibration", "sampler", "thinning", "inputs", "outputs"}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Merge ``override`` into a copy of ``base``.

    Tables are merged recursively; any other value (including arrays such as
    ``thinning.sizes``) is replaced.

    Examples
    --------
    >>> base = {"sampler": {"burn_in_length": 1000, "seed": 1}}
    >>> deep_merge(base, {"sampler": {"seed": 2}})
    {'sampler': {'burn_in_length': 1000, 'seed': 2}}
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str | Path) -> dict[str, Any]:
    """
    Load a TOML configuration file.

    Relative input paths and the output directory are resolved against the
    directory holding the file.

    Parameters
    ----------
    path
        Path to the TOML file.

    Returns
    -------
    dict[str, Any]
        Raw configuration dictionary.
    """
    path = Path(path)
    with path.open("rb") as f:
        config = tomllib.load(f)

    unknown = find_unknown_keys(config, KNOWN_SECTIONS)
    if unknown:
        logger.warning(
            f"Unknown configuration keys in {path}: {', '.join(unknown)}. "
            "These will be ignored."
        )

    base_dir = path.resolve().parent
    for section, key in (
        ("inputs", "initial_values"),
        ("inputs", "initial_covariance"),
        ("outputs", "directory"),
    ):
        table = config.get(section)
        if isinstance(table, dict) and isinstance(table.get(key), str):
            table[key] = str(base_dir / table[key])

    return config


def load_config_layers(*paths: str | Path) -> dict[str, Any]:
    """
    Load and merge several TOML files; later files take precedence.

    Examples
    --------
    >>> config = load_config_layers("defaults.toml", "quick-test.toml")
    """
    if not paths:
        return {}

    result = load_config(paths[0])
    for path in paths[1:]:
        result = deep_merge(result, load_config(path))
        logger.debug(f"Applied configuration layer {path}")

    return result
