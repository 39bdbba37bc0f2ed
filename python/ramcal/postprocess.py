"""
Post-processing of a completed chain.

This module provides:
- drop_burn_in: Discard the initial, unconverged part of a chain
- compute_mean: Posterior mean of every parameter
- compute_correlation_matrix: Pearson correlation between parameters
- thin_indices / thin: Equally spaced subsampling
- summarize: All of the above bundled into :class:`SummaryArtifacts`

All functions are read-only over their input chain.

Thinning rule
-------------
``thin_indices(n, k)`` returns ``floor(i * (n - 1) / (k - 1) + 0.5)`` for
``i = 0 .. k - 1``, i.e. each ideal position on the evenly spaced grid from
``0`` to ``n - 1`` is rounded half up to the nearest index. The first and last
samples are always kept when ``k >= 2``; ``k == 1`` keeps only the first sample
and ``k == n`` keeps every sample.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from .chain import Chain
from .config.base import DEFAULT_THIN_SIZES
from .exceptions import ConfigurationError
from .sampler import SamplerResult
from .schema import ParameterSchema

logger = logging.getLogger(__name__)

__all__ = [
    "SummaryArtifacts",
    "compute_correlation_matrix",
    "compute_mean",
    "drop_burn_in",
    "summarize",
    "thin",
    "thin_indices",
]


def drop_burn_in(chain: Chain, burn_in_length: int) -> Chain:
    """
    Remove the first ``burn_in_length`` samples.

    Raises
    ------
    ConfigurationError
        If ``burn_in_length`` is negative or not shorter than the chain.
    """
    if burn_in_length < 0:
        msg = f"burn_in_length must be >= 0, got {burn_in_length}"
        raise ConfigurationError(msg)
    if burn_in_length >= len(chain):
        msg = (
            f"burn_in_length ({burn_in_length}) must be shorter than the chain "
            f"({len(chain)} samples)"
        )
        raise ConfigurationError(msg)
    return chain.select(np.arange(burn_in_length, len(chain)))


def compute_mean(chain: Chain) -> NDArray[np.float64]:
    """Elementwise mean of the samples."""
    if len(chain) == 0:
        msg = "Cannot compute the mean of an empty chain"
        raise ConfigurationError(msg)
    return chain.samples.mean(axis=0)


def compute_correlation_matrix(chain: Chain) -> NDArray[np.float64]:
    """
    Pearson correlation between every pair of parameters.

    The result is symmetric, has an exact unit diagonal and off-diagonal
    entries in [-1, 1]. A parameter that never moves has no defined
    correlation; its off-diagonal entries are NaN.

    Raises
    ------
    ConfigurationError
        If the chain has fewer than two samples.
    """
    if len(chain) < 2:
        msg = f"At least two samples are needed for correlations, got {len(chain)}"
        raise ConfigurationError(msg)

    centred = chain.samples - chain.samples.mean(axis=0)
    cov = centred.T @ centred / (len(chain) - 1)
    std = np.sqrt(np.diag(cov))

    constant = std == 0.0
    if np.any(constant):
        names = [name for name, flag in zip(chain.param_names, constant) if flag]
        logger.warning(
            f"Parameters with zero posterior variance have undefined correlations: "
            f"{', '.join(names)}"
        )

    with np.errstate(divide="ignore", invalid="ignore"):
        corr = cov / np.outer(std, std)
    corr = np.clip((corr + corr.T) / 2.0, -1.0, 1.0)
    corr[constant, :] = np.nan
    corr[:, constant] = np.nan
    np.fill_diagonal(corr, 1.0)
    return corr


def thin_indices(n_samples: int, target_size: int) -> NDArray[np.int64]:
    """
    Equally spaced indices spanning ``[0, n_samples - 1]``.

    See the module docstring for the rounding rule.

    Raises
    ------
    ConfigurationError
        If ``target_size`` is below 1 or above ``n_samples``.

    Examples
    --------
    >>> thin_indices(10, 4).tolist()
    [0, 3, 6, 9]
    >>> thin_indices(10, 1).tolist()
    [0]
    """
    if target_size < 1:
        msg = f"Thinning target size must be >= 1, got {target_size}"
        raise ConfigurationError(msg)
    if target_size > n_samples:
        msg = (
            f"Cannot thin {n_samples} samples down to {target_size}; "
            "the target size exceeds the chain length"
        )
        raise ConfigurationError(msg)
    if target_size == 1:
        return np.zeros(1, dtype=np.int64)

    positions = np.arange(target_size) * (n_samples - 1) / (target_size - 1)
    return np.floor(positions + 0.5).astype(np.int64)


def thin(chain: Chain, target_size: int) -> Chain:
    """Keep ``target_size`` equally spaced samples of ``chain``."""
    return chain.select(thin_indices(len(chain), target_size))


@dataclass(frozen=True)
class SummaryArtifacts:
    """Summaries of a post-burn-in chain, labelled with one schema.

    Attributes
    ----------
    schema : ParameterSchema
        Names used for every table
    acceptance_rate : float
        Acceptance rate of the full run
    covariance : NDArray[np.float64]
        Final adapted proposal covariance
    mean : NDArray[np.float64]
        Posterior mean
    correlation : NDArray[np.float64]
        Posterior correlation matrix
    thinned : dict[int, Chain]
        Thinned chains keyed by target size
    n_samples : int
        Length of the post-burn-in chain
    """

    schema: ParameterSchema
    acceptance_rate: float
    covariance: NDArray[np.float64]
    mean: NDArray[np.float64]
    correlation: NDArray[np.float64]
    thinned: dict[int, Chain] = field(default_factory=dict)
    n_samples: int = 0


def summarize(
    result: SamplerResult,
    burn_in_length: int,
    thin_sizes: Iterable[int] = DEFAULT_THIN_SIZES,
    schema: ParameterSchema | None = None,
) -> SummaryArtifacts:
    """
    Turn a sampler result into summary artifacts.

    Parameters
    ----------
    result
        Completed sampler run.
    burn_in_length
        Samples discarded from the start of the chain.
    thin_sizes
        Target sizes of the thinned chains.
    schema
        Names for the output tables. Defaults to the chain's own schema.

    Raises
    ------
    ConfigurationError
        If the burn-in or a thinning size does not fit the chain.
    """
    chain = result.chain
    if schema is not None:
        chain = chain.with_schema(schema)

    burned = drop_burn_in(chain, burn_in_length)
    thinned = {int(size): thin(burned, int(size)) for size in thin_sizes}
    logger.info(
        f"Summarised {len(burned)} post-burn-in samples "
        f"(thinned sizes: {sorted(thinned)})"
    )

    return SummaryArtifacts(
        schema=chain.schema,
        acceptance_rate=result.acceptance_rate,
        covariance=result.covariance,
        mean=compute_mean(burned),
        correlation=compute_correlation_matrix(burned),
        thinned=thinned,
        n_samples=len(burned),
    )
