"""
Configuration dataclasses for a calibration run.

This module defines:
- SamplerConfig: Chain lengths and adaptation settings for the RAM sampler
- CalibrationConfig: Complete run configuration (sampler, thinning, inputs, outputs)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..exceptions import ConfigurationError, ValidationError
from .parameters import parameter, validate_parameters

__all__ = [
    "DEFAULT_ADAPTATION_EXPONENT",
    "DEFAULT_TARGET_ACCEPTANCE",
    "DEFAULT_THIN_SIZES",
    "CalibrationConfig",
    "SamplerConfig",
]

DEFAULT_TARGET_ACCEPTANCE = 0.234
DEFAULT_ADAPTATION_EXPONENT = 2 / 3
DEFAULT_THIN_SIZES = (10_000, 100_000)


@dataclass
class SamplerConfig:
    """Settings for the Robust Adaptive Metropolis sampler.

    Attributes
    ----------
    final_chain_length : int
        Number of samples kept after discarding the burn-in period
    burn_in_length : int
        Number of initial samples to discard
    target_acceptance : float
        Acceptance rate the proposal adaptation steers towards
    adaptation_exponent : float
        Decay exponent of the adaptation step size
    seed : int | None
        Seed of the random stream. ``None`` draws fresh entropy.
    """

    final_chain_length: int = parameter(
        default=100_000,
        unit="samples",
        description="Samples kept after the burn-in period",
        range=(1, float("inf")),
    )

    burn_in_length: int = parameter(
        default=1_000,
        unit="samples",
        description="Initial samples discarded as burn-in",
        range=(0, float("inf")),
    )

    target_acceptance: float = parameter(
        default=DEFAULT_TARGET_ACCEPTANCE,
        unit="dimensionless",
        description="Target acceptance rate of the adaptive proposal",
        range=(0.0, 1.0),
        source="Roberts, Gelman & Gilks (1997)",
    )

    adaptation_exponent: float = parameter(
        default=DEFAULT_ADAPTATION_EXPONENT,
        unit="dimensionless",
        description="Decay exponent of the adaptation step size",
        range=(0.0, 1.0),
        source="Vihola (2012)",
    )

    seed: int | None = parameter(
        default=None,
        description="Seed of the sampler's random stream",
        range=(0, float("inf")),
    )

    def __post_init__(self) -> None:
        """Validate settings after initialisation."""
        errors = validate_parameters(self)
        if not 0.0 < self.target_acceptance < 1.0:
            errors.append("target_acceptance must lie strictly between 0 and 1")
        if self.adaptation_exponent <= 0.0:
            errors.append("adaptation_exponent must be greater than 0")
        if errors:
            msg = f"Invalid sampler settings: {errors}"
            raise ValidationError(msg)

    @property
    def total_iterations(self) -> int:
        """Iterations to run, burn-in included."""
        return self.burn_in_length + self.final_chain_length


@dataclass
class CalibrationConfig:
    """Complete configuration for a calibration run.

    Attributes
    ----------
    name : str
        Run name, used to label artifacts
    calibration_end_year : int
        Final year of the calibration period. Passed unchanged to the
        log-posterior factory.
    sampler : SamplerConfig
        Chain lengths and adaptation settings
    thin_sizes : tuple[int, ...]
        Target sizes of the thinned chains
    initial_values : str | None
        CSV file with ``parameter`` and ``starting_point`` columns
    initial_values_skiprows : int
        Unmarked header lines to skip at the top of the initial values file
    initial_covariance : str | None
        CSV file holding the initial proposal covariance matrix
    output_dir : str | None
        Directory receiving the artifacts. Nothing is written when unset.
    config_schema : str
        Configuration schema version

    Example
    -------
        >>> config = CalibrationConfig(
        ...     name="sneasy-brick",
        ...     sampler=SamplerConfig(final_chain_length=100_000, burn_in_length=1_000),
        ... )
        >>> config.sampler.total_iterations
        101000
    """

    name: str = "calibration"
    calibration_end_year: int = 2017
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    thin_sizes: tuple[int, ...] = DEFAULT_THIN_SIZES
    initial_values: str | None = None
    initial_values_skiprows: int = 0
    initial_covariance: str | None = None
    output_dir: str | None = None
    config_schema: str = "1.0.0"

    def __post_init__(self) -> None:
        """Check thinning sizes and input settings."""
        try:
            self.thin_sizes = tuple(int(size) for size in self.thin_sizes)
        except (TypeError, ValueError) as err:
            msg = f"Thinning sizes must be integers, got {self.thin_sizes!r}"
            raise ValidationError(msg) from err
        if self.initial_values_skiprows < 0:
            msg = (
                "initial_values_skiprows must be >= 0, "
                f"got {self.initial_values_skiprows}"
            )
            raise ValidationError(msg)
        invalid = [size for size in self.thin_sizes if size < 1]
        if invalid:
            msg = f"Thinning sizes must be positive, got {invalid}"
            raise ValidationError(msg)

        too_large = [
            size for size in self.thin_sizes if size > self.sampler.final_chain_length
        ]
        if too_large:
            msg = (
                f"Thinning sizes {too_large} exceed the final chain length "
                f"({self.sampler.final_chain_length})"
            )
            raise ConfigurationError(msg)
