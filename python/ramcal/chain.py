"""
Immutable container for MCMC samples.

A :class:`Chain` holds one row per sampler iteration together with the
log-posterior of each row. The sample buffer is read-only so a completed chain
can be shared between post-processing steps without copies.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .exceptions import ValidationError
from .schema import ParameterSchema

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)

__all__ = ["Chain"]


def _frozen(values: ArrayLike) -> NDArray[np.float64]:
    array = np.array(values, dtype=float, copy=True)
    array.flags.writeable = False
    return array


class Chain:
    """
    Samples from a single Markov chain.

    Parameters
    ----------
    samples
        Array of shape ``(n_samples, n_params)``.
    log_probs
        Log-posterior of every sample, shape ``(n_samples,)``. Defaults to NaN
        when unknown (for example after loading a plain table).
    schema
        Parameter names for the columns. Defaults to ``theta_0 ... theta_{d-1}``.

    Example:
        >>> chain = Chain(np.zeros((3, 2)), schema=ParameterSchema(["a", "b"]))
        >>> len(chain), chain.n_params
        (3, 2)
    """

    def __init__(
        self,
        samples: ArrayLike,
        log_probs: ArrayLike | None = None,
        schema: ParameterSchema | None = None,
    ) -> None:
        samples = _frozen(samples)
        if samples.ndim != 2:
            msg = f"Chain samples must be 2-D (n_samples, n_params), got shape {samples.shape}"
            raise ValidationError(msg)

        if log_probs is None:
            log_probs = np.full(samples.shape[0], np.nan)
        log_probs = _frozen(log_probs)
        if log_probs.shape != (samples.shape[0],):
            msg = (
                f"Expected {samples.shape[0]} log-probabilities, "
                f"got an array of shape {log_probs.shape}"
            )
            raise ValidationError(msg)

        if schema is None:
            schema = ParameterSchema.default(samples.shape[1])
        schema.validate_columns(samples.shape[1])

        self._samples = samples
        self._log_probs = log_probs
        self._schema = schema

    @property
    def samples(self) -> NDArray[np.float64]:
        """Read-only ``(n_samples, n_params)`` sample array."""
        return self._samples

    @property
    def log_probs(self) -> NDArray[np.float64]:
        """Read-only log-posterior of each sample."""
        return self._log_probs

    @property
    def schema(self) -> ParameterSchema:
        """Column names."""
        return self._schema

    @property
    def param_names(self) -> list[str]:
        """Column names as a list."""
        return self._schema.names

    @property
    def n_params(self) -> int:
        """Number of parameters (columns)."""
        return self._samples.shape[1]

    def __len__(self) -> int:
        return self._samples.shape[0]

    def __repr__(self) -> str:
        return f"Chain(n_samples={len(self)}, param_names={self.param_names!r})"

    def select(self, indices: ArrayLike) -> Chain:
        """Build a new chain from the rows at ``indices``."""
        idx = np.asarray(indices, dtype=int)
        return Chain(self._samples[idx], self._log_probs[idx], self._schema)

    def with_schema(self, schema: ParameterSchema) -> Chain:
        """Return the same samples labelled with ``schema``."""
        return Chain(self._samples, self._log_probs, schema)

    def to_param_dict(self) -> dict[str, NDArray[np.float64]]:
        """Map each parameter name to its column of samples."""
        return {name: self._samples[:, i] for name, i in self._schema.items()}

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert the samples to a DataFrame with one column per parameter.

        Returns
        -------
        pd.DataFrame
            Rows are samples, columns are named after the schema.
        """
        import pandas as pd  # noqa: PLC0415

        return pd.DataFrame(np.array(self._samples), columns=self.param_names)

    def save(self, path: str | Path) -> Path:
        """
        Save the chain to a compressed ``.npz`` file.

        Returns
        -------
        Path
            The path written, with ``.npz`` appended when missing.
        """
        path = Path(path)
        if path.suffix != ".npz":
            path = path.with_name(f"{path.name}.npz")
        path.parent.mkdir(parents=True, exist_ok=True)
        np.savez_compressed(
            path,
            samples=self._samples,
            log_probs=self._log_probs,
            param_names=np.array(self.param_names, dtype=str),
        )
        logger.info(f"Saved chain of {len(self)} samples to {path}")
        return path

    @classmethod
    def load(cls, path: str | Path) -> Chain:
        """Load a chain written by :meth:`save`."""
        with np.load(Path(path), allow_pickle=False) as data:
            return cls(
                data["samples"],
                data["log_probs"],
                ParameterSchema(data["param_names"].tolist()),
            )

    def equals(self, other: Any) -> bool:
        """Exact (bit-for-bit) equality of samples, log-probabilities and names."""
        if not isinstance(other, Chain):
            return False
        return (
            self._schema == other._schema
            and np.array_equal(self._samples, other._samples)
            and np.array_equal(self._log_probs, other._log_probs, equal_nan=True)
        )
