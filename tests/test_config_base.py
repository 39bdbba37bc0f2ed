"""
Unit tests for ramcal.config.base module.

Tests SamplerConfig and CalibrationConfig dataclasses.
"""

from __future__ import annotations

import pytest

from ramcal.config import CalibrationConfig, SamplerConfig
from ramcal.exceptions import ConfigurationError, ValidationError


class TestSamplerConfig:
    """Tests for SamplerConfig dataclass."""

    def test_defaults(self):
        """SamplerConfig defaults follow the reference calibration."""
        config = SamplerConfig()
        assert config.final_chain_length == 100_000
        assert config.burn_in_length == 1_000
        assert config.target_acceptance == 0.234
        assert config.adaptation_exponent == pytest.approx(2 / 3)
        assert config.seed is None

    def test_total_iterations(self):
        """total_iterations is burn-in plus final length."""
        config = SamplerConfig(final_chain_length=900, burn_in_length=100)
        assert config.total_iterations == 1_000

    def test_zero_burn_in_allowed(self):
        """A run without burn-in is valid."""
        assert SamplerConfig(burn_in_length=0).total_iterations == 100_000

    def test_final_length_must_be_positive(self):
        """SamplerConfig rejects an empty final chain."""
        with pytest.raises(ValidationError, match="final_chain_length"):
            SamplerConfig(final_chain_length=0)

    def test_negative_burn_in(self):
        """SamplerConfig rejects negative burn-in."""
        with pytest.raises(ValidationError, match="burn_in_length"):
            SamplerConfig(burn_in_length=-1)

    @pytest.mark.parametrize("rate", [0.0, 1.0, 1.2])
    def test_target_acceptance_range(self, rate):
        """target_acceptance must lie strictly between 0 and 1."""
        with pytest.raises(ValidationError, match="target_acceptance"):
            SamplerConfig(target_acceptance=rate)

    def test_adaptation_exponent_range(self):
        """adaptation_exponent must be positive."""
        with pytest.raises(ValidationError, match="adaptation_exponent"):
            SamplerConfig(adaptation_exponent=0.0)

    def test_negative_seed(self):
        """Seeds must be non-negative."""
        with pytest.raises(ValidationError, match="seed"):
            SamplerConfig(seed=-3)


class TestCalibrationConfig:
    """Tests for CalibrationConfig dataclass."""

    def test_defaults(self):
        """CalibrationConfig has the reference defaults."""
        config = CalibrationConfig()
        assert config.calibration_end_year == 2017
        assert config.thin_sizes == (10_000, 100_000)
        assert config.output_dir is None
        assert config.config_schema == "1.0.0"

    def test_thin_sizes_coerced_to_tuple(self):
        """thin_sizes becomes a tuple of ints."""
        config = CalibrationConfig(
            sampler=SamplerConfig(final_chain_length=500), thin_sizes=[100, 250]
        )
        assert config.thin_sizes == (100, 250)

    def test_thin_size_larger_than_chain(self):
        """Thinning beyond the final chain length is a configuration error."""
        with pytest.raises(ConfigurationError, match="exceed the final chain length"):
            CalibrationConfig(
                sampler=SamplerConfig(final_chain_length=500), thin_sizes=(100, 1_000)
            )

    def test_thin_size_must_be_positive(self):
        """Zero-size thinning is rejected."""
        with pytest.raises(ValidationError, match="positive"):
            CalibrationConfig(thin_sizes=(0,))

    def test_thin_sizes_must_be_integers(self):
        """Non-numeric thinning sizes are rejected."""
        with pytest.raises(ValidationError, match="integers"):
            CalibrationConfig(thin_sizes=("10k",))

    def test_negative_skiprows(self):
        """The preamble length cannot be negative."""
        with pytest.raises(ValidationError, match="initial_values_skiprows"):
            CalibrationConfig(initial_values_skiprows=-1)
