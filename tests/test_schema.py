"""
Unit tests for ramcal.schema.

Tests ParameterSchema construction, lookup and vector validation.
"""

from __future__ import annotations

import numpy as np
import pytest

from ramcal import ParameterSchema, ValidationError


class TestParameterSchema:
    """Tests for ParameterSchema."""

    def test_preserves_order(self):
        """Names keep their insertion order."""
        schema = ParameterSchema(["z", "a", "m"])
        assert schema.names == ["z", "a", "m"]
        assert list(schema.items()) == [("z", 0), ("a", 1), ("m", 2)]

    def test_index_lookup(self):
        """index() returns the column of a name."""
        schema = ParameterSchema(["S", "kappa", "alpha"])
        assert schema.index("alpha") == 2

    def test_unknown_name(self):
        """index() raises KeyError for unknown names."""
        schema = ParameterSchema(["S"])
        with pytest.raises(KeyError, match="Unknown parameter 'kappa'"):
            schema.index("kappa")

    def test_empty_schema_rejected(self):
        """A schema needs at least one name."""
        with pytest.raises(ValidationError, match="at least one"):
            ParameterSchema([])

    def test_duplicate_names_rejected(self):
        """Repeated names are reported."""
        with pytest.raises(ValidationError, match="Duplicate parameter names: a"):
            ParameterSchema(["a", "b", "a"])

    def test_blank_names_rejected(self):
        """Blank names are reported with their position."""
        with pytest.raises(ValidationError, match=r"positions \[1\]"):
            ParameterSchema(["a", "  "])

    def test_validate_vector(self):
        """validate_vector() returns a float copy of matching length."""
        schema = ParameterSchema(["a", "b"])
        source = np.array([1, 2])
        vector = schema.validate_vector(source)
        assert vector.dtype == float
        vector[0] = 99.0
        assert source[0] == 1

    def test_validate_vector_wrong_length(self):
        """validate_vector() rejects vectors of the wrong length."""
        schema = ParameterSchema(["a", "b"])
        with pytest.raises(ValidationError, match="Expected a vector of 2"):
            schema.validate_vector([1.0, 2.0, 3.0])

    def test_validate_columns(self):
        """validate_columns() rejects mismatched column counts."""
        schema = ParameterSchema(["a", "b"])
        schema.validate_columns(2)
        with pytest.raises(ValidationError, match="Cannot label 3 columns"):
            schema.validate_columns(3)

    def test_default_names(self):
        """default() builds placeholder names."""
        assert ParameterSchema.default(3).names == ["theta_0", "theta_1", "theta_2"]

    def test_equality(self):
        """Schemas with the same names compare equal."""
        assert ParameterSchema(["a", "b"]) == ParameterSchema(["a", "b"])
        assert ParameterSchema(["a", "b"]) != ParameterSchema(["b", "a"])
