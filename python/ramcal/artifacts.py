"""
Reading calibration inputs and writing summary artifacts as CSV tables.

Inputs:
- load_initial_values: starting point and parameter names
- load_covariance: initial proposal covariance, symmetrised

Outputs (``write_artifacts``), all labelled with the same schema:
- ``mcmc_acceptance_rate.csv``: single-row acceptance rate
- ``proposal_covariance_matrix.csv``: final adapted proposal covariance
- ``mean_parameters.csv``: parameter name / posterior mean pairs
- ``parameters_<size>.csv``: one file per thinned chain (e.g. ``parameters_10k.csv``)
- ``posterior_correlations.csv``: named correlation matrix
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from .covariance import symmetrize
from .exceptions import InvalidCovarianceError, ValidationError
from .postprocess import SummaryArtifacts
from .schema import ParameterSchema

logger = logging.getLogger(__name__)

__all__ = [
    "ACCEPTANCE_FILE",
    "CORRELATION_FILE",
    "COVARIANCE_FILE",
    "MEAN_FILE",
    "load_covariance",
    "load_initial_values",
    "summary_tables",
    "thinned_filename",
    "write_artifacts",
]

ACCEPTANCE_FILE = "mcmc_acceptance_rate.csv"
COVARIANCE_FILE = "proposal_covariance_matrix.csv"
MEAN_FILE = "mean_parameters.csv"
CORRELATION_FILE = "posterior_correlations.csv"


def thinned_filename(size: int) -> str:
    """
    File name of a thinned chain.

    Examples
    --------
    >>> thinned_filename(10_000)
    'parameters_10k.csv'
    >>> thinned_filename(2_500)
    'parameters_2500.csv'
    """
    label = f"{size // 1000}k" if size % 1000 == 0 else str(size)
    return f"parameters_{label}.csv"


def load_initial_values(
    path: str | Path,
    skiprows: int = 0,
) -> tuple[ParameterSchema, NDArray[np.float64]]:
    """
    Read starting values from a CSV with ``parameter`` and ``starting_point`` columns.

    Lines starting with ``#`` are treated as comments. Files with an unmarked
    preamble (a fixed block of description lines above the header) need
    ``skiprows`` set to the length of that block.

    Returns
    -------
    tuple[ParameterSchema, NDArray[np.float64]]
        Schema built from the ``parameter`` column and the starting vector.
    """
    frame = pd.read_csv(path, skiprows=skiprows, comment="#", skipinitialspace=True)
    missing = {"parameter", "starting_point"} - set(frame.columns)
    if missing:
        msg = f"{path} is missing columns: {', '.join(sorted(missing))}"
        raise ValidationError(msg)

    schema = ParameterSchema(frame["parameter"].astype(str))
    values = schema.validate_vector(frame["starting_point"].to_numpy(dtype=float))
    logger.info(f"Loaded {len(schema)} initial parameter values from {path}")
    return schema, values


def load_covariance(path: str | Path) -> NDArray[np.float64]:
    """
    Read a square covariance matrix and remove rounding asymmetry.

    The first row is taken as a header (as written by :func:`write_artifacts`).

    Raises
    ------
    InvalidCovarianceError
        If the table is not square or holds non-numeric values.
    """
    frame = pd.read_csv(path, comment="#")
    try:
        matrix = frame.to_numpy(dtype=float)
    except ValueError as err:
        msg = f"{path} contains non-numeric covariance entries"
        raise InvalidCovarianceError(msg) from err
    return symmetrize(matrix)


def summary_tables(summary: SummaryArtifacts) -> dict[str, pd.DataFrame]:
    """Build every artifact table, keyed by file name."""
    names = summary.schema.names
    tables = {
        ACCEPTANCE_FILE: pd.DataFrame({"acceptance_rate": [summary.acceptance_rate]}),
        COVARIANCE_FILE: pd.DataFrame(summary.covariance, columns=names),
        MEAN_FILE: pd.DataFrame({"parameter": names, "mean": summary.mean}),
        CORRELATION_FILE: pd.DataFrame(
            summary.correlation, index=names, columns=names
        ),
    }
    for size, chain in sorted(summary.thinned.items()):
        tables[thinned_filename(size)] = chain.with_schema(summary.schema).to_dataframe()
    return tables


def write_artifacts(summary: SummaryArtifacts, output_dir: str | Path) -> dict[str, Path]:
    """
    Write every artifact table to ``output_dir``.

    Returns
    -------
    dict[str, Path]
        Written paths keyed by file name.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = {}
    for filename, table in summary_tables(summary).items():
        path = output_dir / filename
        table.to_csv(path, index=filename == CORRELATION_FILE)
        written[filename] = path

    logger.info(f"Wrote {len(written)} calibration artifacts to {output_dir}")
    return written
