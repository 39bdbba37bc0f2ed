"""
Unit tests for ramcal.artifacts.

Tests reading initial values and covariances, and writing summary tables.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from ramcal import (
    InvalidCovarianceError,
    ParameterSchema,
    ValidationError,
    load_covariance,
    load_initial_values,
    ram_sample,
    summarize,
    write_artifacts,
)
from ramcal.artifacts import (
    ACCEPTANCE_FILE,
    CORRELATION_FILE,
    COVARIANCE_FILE,
    MEAN_FILE,
    summary_tables,
    thinned_filename,
)


@pytest.fixture
def summary():
    schema = ParameterSchema(["S", "kappa"])
    result = ram_sample(
        lambda theta: -0.5 * float(theta @ theta),
        [0.5, -0.5],
        np.eye(2),
        600,
        seed=11,
        schema=schema,
    )
    return summarize(result, burn_in_length=100, thin_sizes=[50, 500])


class TestThinnedFilename:
    """Tests for thinned_filename()."""

    @pytest.mark.parametrize(
        "size, expected",
        [
            (10_000, "parameters_10k.csv"),
            (100_000, "parameters_100k.csv"),
            (2_500, "parameters_2500.csv"),
            (50, "parameters_50.csv"),
        ],
    )
    def test_names(self, size, expected):
        """Multiples of a thousand use a k suffix."""
        assert thinned_filename(size) == expected


class TestLoadInitialValues:
    """Tests for load_initial_values()."""

    def test_reads_names_and_values(self, tmp_path):
        """The parameter column becomes the schema."""
        path = tmp_path / "initial_values.csv"
        path.write_text(
            "# starting point of the chain\n"
            "parameter,starting_point\n"
            "S,3.1\n"
            "kappa,1.1\n"
            "sigma_temp,0.1\n"
        )

        schema, values = load_initial_values(path)
        assert schema.names == ["S", "kappa", "sigma_temp"]
        assert np.array_equal(values, [3.1, 1.1, 0.1])

    def test_unmarked_preamble(self, tmp_path):
        """A fixed block of description lines is skipped with skiprows."""
        path = tmp_path / "initial_values.csv"
        path.write_text(
            "Initial values for the SNEASY-BRICK calibration\n"
            "Units follow the model documentation\n"
            "S, kappa and sigma_temp are listed below\n"
            "parameter,starting_point\n"
            "S,3.1\n"
            "kappa,1.1\n"
        )

        schema, values = load_initial_values(path, skiprows=3)
        assert schema.names == ["S", "kappa"]
        assert np.array_equal(values, [3.1, 1.1])

    def test_missing_column(self, tmp_path):
        """Both columns are required."""
        path = tmp_path / "initial_values.csv"
        path.write_text("name,value\nS,3.1\n")

        with pytest.raises(ValidationError, match="missing columns"):
            load_initial_values(path)

    def test_duplicate_names(self, tmp_path):
        """Duplicate parameter names are rejected."""
        path = tmp_path / "initial_values.csv"
        path.write_text("parameter,starting_point\nS,3.1\nS,1.0\n")

        with pytest.raises(ValidationError, match="Duplicate"):
            load_initial_values(path)


class TestLoadCovariance:
    """Tests for load_covariance()."""

    def test_symmetrised(self, tmp_path):
        """Rounding asymmetry is averaged out."""
        path = tmp_path / "covariance.csv"
        path.write_text("S,kappa\n1.0,0.3\n0.30000001,2.0\n")

        matrix = load_covariance(path)
        assert matrix.shape == (2, 2)
        assert np.array_equal(matrix, matrix.T)
        assert matrix[0, 1] == pytest.approx(0.300000005)

    def test_not_square(self, tmp_path):
        """A non-square table is rejected."""
        path = tmp_path / "covariance.csv"
        path.write_text("a,b\n1.0,0.0\n")

        with pytest.raises(InvalidCovarianceError, match="square"):
            load_covariance(path)

    def test_non_numeric(self, tmp_path):
        """Text entries are rejected."""
        path = tmp_path / "covariance.csv"
        path.write_text("a,b\n1.0,x\n0.0,1.0\n")

        with pytest.raises(InvalidCovarianceError, match="non-numeric"):
            load_covariance(path)


class TestSummaryTables:
    """Tests for summary_tables()."""

    def test_table_names(self, summary):
        """Every artifact is present."""
        tables = summary_tables(summary)
        assert set(tables) == {
            ACCEPTANCE_FILE,
            COVARIANCE_FILE,
            MEAN_FILE,
            CORRELATION_FILE,
            "parameters_50.csv",
            "parameters_500.csv",
        }

    def test_labels(self, summary):
        """Every table is labelled with the same names."""
        tables = summary_tables(summary)
        assert list(tables[COVARIANCE_FILE].columns) == ["S", "kappa"]
        assert list(tables[MEAN_FILE]["parameter"]) == ["S", "kappa"]
        assert list(tables[CORRELATION_FILE].index) == ["S", "kappa"]
        assert list(tables["parameters_50.csv"].columns) == ["S", "kappa"]
        assert len(tables["parameters_50.csv"]) == 50

    def test_acceptance_rate(self, summary):
        """The acceptance table has a single row."""
        table = summary_tables(summary)[ACCEPTANCE_FILE]
        assert table.shape == (1, 1)
        assert table["acceptance_rate"].iloc[0] == summary.acceptance_rate


class TestWriteArtifacts:
    """Tests for write_artifacts()."""

    def test_writes_all_files(self, summary, tmp_path):
        """Each table is written to the output directory."""
        output_dir = tmp_path / "results" / "run"
        written = write_artifacts(summary, output_dir)

        assert set(written) == set(summary_tables(summary))
        for path in written.values():
            assert path.exists()
            assert path.parent == output_dir

    def test_values_round_trip(self, summary, tmp_path):
        """Written tables read back to the summary values."""
        write_artifacts(summary, tmp_path)

        mean = pd.read_csv(tmp_path / MEAN_FILE)
        assert np.allclose(mean["mean"].to_numpy(), summary.mean)

        corr = pd.read_csv(tmp_path / CORRELATION_FILE, index_col=0)
        assert np.allclose(corr.to_numpy(), summary.correlation)

        covariance = load_covariance(tmp_path / COVARIANCE_FILE)
        assert np.allclose(covariance, summary.covariance)

        thinned = pd.read_csv(tmp_path / "parameters_500.csv")
        assert np.allclose(thinned.to_numpy(), summary.thinned[500].samples)
