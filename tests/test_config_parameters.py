"""
Unit tests for ramcal.config.parameters module.

Tests setting metadata attached through parameter() and range validation.
"""

from __future__ import annotations

from dataclasses import dataclass

from ramcal.config import SamplerConfig
from ramcal.config.parameters import (
    ParameterMetadata,
    get_parameter_metadata,
    parameter,
    validate_parameters,
)


@dataclass
class ExampleSettings:
    """Settings used in the tests below."""

    burn_in_length: int = parameter(
        default=1000, unit="samples", description="Burn-in", range=(0, 5000)
    )
    seed: int | None = parameter(default=None, range=(0, 100))
    label: str = "run"


class TestParameterMetadata:
    """Tests for get_parameter_metadata."""

    def test_metadata_extracted(self):
        """Fields declared with parameter() carry metadata."""
        metadata = get_parameter_metadata(ExampleSettings)
        assert set(metadata) == {"burn_in_length", "seed"}
        meta = metadata["burn_in_length"]
        assert isinstance(meta, ParameterMetadata)
        assert meta.name == "burn_in_length"
        assert meta.unit == "samples"
        assert meta.range == (0, 5000)

    def test_sampler_config_metadata(self):
        """SamplerConfig documents its settings."""
        metadata = get_parameter_metadata(SamplerConfig)
        assert metadata["target_acceptance"].source is not None
        assert metadata["final_chain_length"].unit == "samples"


class TestValidateParameters:
    """Tests for validate_parameters."""

    def test_valid_instance(self):
        """In-range values produce no errors."""
        assert validate_parameters(ExampleSettings()) == []

    def test_out_of_range(self):
        """Out-of-range values are reported."""
        errors = validate_parameters(ExampleSettings(burn_in_length=6000))
        assert errors == [
            "Parameter 'burn_in_length' value 6000 is outside valid range [0, 5000]"
        ]

    def test_none_skipped(self):
        """Unset optional values are not range-checked."""
        assert validate_parameters(ExampleSettings(seed=None)) == []

    def test_optional_value_checked_when_set(self):
        """Optional values are checked once set."""
        assert len(validate_parameters(ExampleSettings(seed=500))) == 1
