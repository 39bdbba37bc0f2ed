"""
Unit tests for ramcal.config.validation module.

Tests semver parsing, schema version checking and unknown key detection.
"""

from __future__ import annotations

import logging

import pytest

from ramcal.config.validation import (
    check_schema_version,
    find_unknown_keys,
    parse_semver,
    require_table,
)
from ramcal.exceptions import IncompatibleSchemaError, ValidationError


class TestParseSemver:
    """Tests for parse_semver function."""

    def test_parse_valid_semver(self):
        """parse_semver parses valid version strings."""
        assert parse_semver("1.2.3") == (1, 2, 3)
        assert parse_semver("10.20.30") == (10, 20, 30)

    @pytest.mark.parametrize("version", ["1.2", "1.2.3.4"])
    def test_wrong_number_of_parts(self, version):
        """parse_semver requires three components."""
        with pytest.raises(ValidationError, match="expected 'MAJOR.MINOR.PATCH'"):
            parse_semver(version)

    def test_non_integer_component(self):
        """parse_semver requires integer components."""
        with pytest.raises(ValidationError, match="non-integer component"):
            parse_semver("1.x.0")


class TestCheckSchemaVersion:
    """Tests for check_schema_version function."""

    def test_identical_versions(self, caplog):
        """Identical versions are silently accepted."""
        with caplog.at_level(logging.WARNING):
            check_schema_version("1.0.0", "1.0.0")
        assert caplog.text == ""

    def test_older_minor_accepted(self, caplog):
        """An older minor version is compatible."""
        with caplog.at_level(logging.WARNING):
            check_schema_version("1.0.0", "1.2.0")
        assert caplog.text == ""

    def test_major_mismatch(self):
        """Different major versions are incompatible."""
        with pytest.raises(IncompatibleSchemaError) as exc_info:
            check_schema_version("2.0.0", "1.0.0")
        assert exc_info.value.config_version == "2.0.0"
        assert exc_info.value.loader_version == "1.0.0"


class TestFindUnknownKeys:
    """Tests for find_unknown_keys function."""

    def test_sorted_unknown_keys(self):
        """Unknown keys are returned sorted."""
        data = {"sampler": 1, "zeta": 2, "alpha": 3}
        assert find_unknown_keys(data, {"sampler"}) == ["alpha", "zeta"]

    def test_no_unknown_keys(self):
        """Known keys produce an empty list."""
        assert find_unknown_keys({"sampler": 1}, {"sampler", "thinning"}) == []


class TestRequireTable:
    """Tests for require_table function."""

    def test_missing_table(self):
        """A missing section is an empty table."""
        assert require_table({}, "inputs") == {}

    def test_present_table(self):
        """A present section is returned unchanged."""
        assert require_table({"inputs": {"a": 1}}, "inputs") == {"a": 1}

    def test_wrong_type(self):
        """A scalar where a table is expected is rejected."""
        with pytest.raises(ValidationError, match="must be a table"):
            require_table({"inputs": [1, 2]}, "inputs")
