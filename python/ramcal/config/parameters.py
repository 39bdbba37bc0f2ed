"""
Field metadata for calibration settings.

Configuration dataclasses declare their fields through :func:`parameter`, which
attaches a unit, a description and a hard validation range. The metadata is used
to validate instances and to describe settings in error messages.

Example:
    >>> from dataclasses import dataclass
    >>> from ramcal.config.parameters import parameter, validate_parameters
    >>>
    >>> @dataclass
    ... class Settings:
    ...     burn_in_length: int = parameter(default=1000, range=(0, 10_000))
    >>>
    >>> validate_parameters(Settings(burn_in_length=-1))
    ["Parameter 'burn_in_length' value -1 is outside valid range [0, 10000]"]
"""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields
from typing import Any

__all__ = [
    "ParameterMetadata",
    "get_parameter_metadata",
    "parameter",
    "validate_parameters",
]


@dataclass
class ParameterMetadata:
    """Metadata for a single setting in a configuration dataclass.

    Attributes
    ----------
    name : str
        Field name
    unit : str | None
        Unit of the value (e.g., "samples", "year")
    description : str | None
        Human-readable description
    range : tuple[float, float] | None
        Hard validation range (min, max), inclusive. Values outside are errors.
    source : str | None
        Citation or reference for the default value
    """

    name: str
    unit: str | None = None
    description: str | None = None
    range: tuple[float, float] | None = None
    source: str | None = None


def parameter(
    default: Any = MISSING,
    unit: str | None = None,
    description: str | None = None,
    range: tuple[float, float] | None = None,
    source: str | None = None,
) -> Any:
    """Create a dataclass field with setting metadata.

    Parameters
    ----------
    default : Any
        Default value. If not provided, the field is required.
    unit : str | None
        Unit of the value
    description : str | None
        Human-readable description
    range : tuple[float, float] | None
        Hard validation range (min, max)
    source : str | None
        Citation or reference

    Returns
    -------
    Any
        A dataclass field with metadata attached
    """
    metadata = {
        "param": ParameterMetadata(
            name="",  # Filled in by get_parameter_metadata
            unit=unit,
            description=description,
            range=range,
            source=source,
        )
    }

    if default is MISSING:
        return field(metadata=metadata)
    return field(default=default, metadata=metadata)


def get_parameter_metadata(cls: type) -> dict[str, ParameterMetadata]:
    """Extract setting metadata from a dataclass.

    Parameters
    ----------
    cls : type
        A dataclass type with fields defined via parameter()

    Returns
    -------
    dict[str, ParameterMetadata]
        Mapping from field name to metadata
    """
    result = {}
    for f in fields(cls):
        if "param" in f.metadata:
            meta = f.metadata["param"]
            meta.name = f.name
            result[f.name] = meta
    return result


def validate_parameters(instance: Any) -> list[str]:
    """Check field values against their declared ranges.

    ``None`` values are skipped so optional settings can stay unset.

    Parameters
    ----------
    instance : Any
        An instance of a dataclass with setting metadata

    Returns
    -------
    list[str]
        Validation error messages (empty if valid)
    """
    errors = []
    for name, meta in get_parameter_metadata(type(instance)).items():
        value = getattr(instance, name)
        if value is None or meta.range is None:
            continue

        min_val, max_val = meta.range
        if value < min_val or value > max_val:
            errors.append(
                f"Parameter '{name}' value {value} is outside valid range "
                f"[{min_val}, {max_val}]"
            )

    return errors
