"""
Proposal covariance adaptation for the Robust Adaptive Metropolis sampler.

The adapter keeps a lower-triangular factor ``S`` of the proposal covariance
``S @ S.T`` and updates it after every step following Vihola (2012):

    S_n S_n^T = S_{n-1} (I + eta_n (alpha_n - alpha*) u_n u_n^T / |u_n|^2) S_{n-1}^T

where ``u_n`` is the standard-normal draw behind the last proposal, ``alpha_n``
its acceptance probability, ``alpha*`` the target acceptance rate and
``eta_n = min(1, d * n**-gamma)`` a step size that vanishes as ``n`` grows.

Vihola, M. (2012). Robust adaptive Metropolis algorithm with coerced acceptance
rate. Statistics and Computing, 22(5), 997-1008.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config.base import DEFAULT_ADAPTATION_EXPONENT, DEFAULT_TARGET_ACCEPTANCE
from .config.parameters import parameter, validate_parameters
from .exceptions import (
    AdaptationInstabilityError,
    InvalidCovarianceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

__all__ = ["AdaptationSettings", "CovarianceAdapter", "symmetrize"]


def symmetrize(matrix: ArrayLike) -> NDArray[np.float64]:
    """
    Return ``(M + M.T) / 2``.

    Use this on matrices that are symmetric in theory but carry rounding noise,
    for example a covariance read back from a CSV file.
    """
    m = np.asarray(matrix, dtype=float)
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        msg = f"Expected a square matrix, got shape {m.shape}"
        raise InvalidCovarianceError(msg)
    return 0.5 * m + 0.5 * m.T


@dataclass(frozen=True)
class AdaptationSettings:
    """Tuning constants for the covariance adaptation.

    Attributes
    ----------
    target_acceptance : float
        Acceptance probability the adaptation steers towards
    adaptation_exponent : float
        Decay exponent ``gamma`` of the step size ``min(1, d * n**-gamma)``
    """

    target_acceptance: float = parameter(
        default=DEFAULT_TARGET_ACCEPTANCE,
        unit="dimensionless",
        description="Target acceptance probability",
        range=(0.0, 1.0),
        source="Roberts, Gelman & Gilks (1997)",
    )

    adaptation_exponent: float = parameter(
        default=DEFAULT_ADAPTATION_EXPONENT,
        unit="dimensionless",
        description="Step size decay exponent",
        range=(0.0, 1.0),
        source="Vihola (2012)",
    )

    def __post_init__(self) -> None:
        """Validate settings; both bounds of the rate and the exponent's lower bound are open."""
        errors = validate_parameters(self)
        if self.target_acceptance in (0.0, 1.0):
            errors.append(
                f"Parameter 'target_acceptance' must lie strictly between 0 and 1, "
                f"got {self.target_acceptance}"
            )
        if self.adaptation_exponent == 0.0:
            errors.append("Parameter 'adaptation_exponent' must be greater than 0")
        if errors:
            msg = f"Invalid adaptation settings: {errors}"
            raise ValidationError(msg)


class CovarianceAdapter:
    """
    Maintain and adapt the Cholesky factor of the proposal covariance.

    Parameters
    ----------
    settings
        Adaptation constants. Defaults to a target rate of 0.234 and an
        exponent of 2/3.

    Example:
        >>> adapter = CovarianceAdapter()
        >>> adapter.initialize(np.eye(2))
        >>> adapter.factor
        array([[1., 0.],
               [0., 1.]])
    """

    def __init__(self, settings: AdaptationSettings | None = None) -> None:
        self.settings = settings or AdaptationSettings()
        self._factor: NDArray[np.float64] | None = None

    @property
    def factor(self) -> NDArray[np.float64]:
        """Read-only view of the current lower-triangular factor."""
        if self._factor is None:
            msg = "CovarianceAdapter has not been initialised"
            raise RuntimeError(msg)
        view = self._factor.view()
        view.flags.writeable = False
        return view

    @property
    def covariance(self) -> NDArray[np.float64]:
        """Current proposal covariance ``S @ S.T``."""
        factor = self.factor
        return factor @ factor.T

    @property
    def dimension(self) -> int:
        """Side length of the factor."""
        return self.factor.shape[0]

    def initialize(self, initial_covariance: ArrayLike) -> None:
        """
        Factorise the initial proposal covariance.

        Parameters
        ----------
        initial_covariance
            Square, symmetric, positive-definite matrix. Matrices that are only
            symmetric up to rounding should go through :func:`symmetrize` first.

        Raises
        ------
        InvalidCovarianceError
            If the matrix is not square, not finite, not symmetric or not
            positive-definite.
        """
        cov = np.asarray(initial_covariance, dtype=float)
        if cov.ndim != 2 or cov.shape[0] != cov.shape[1] or cov.shape[0] == 0:
            msg = f"Initial covariance must be a non-empty square matrix, got shape {cov.shape}"
            raise InvalidCovarianceError(msg)
        if not np.all(np.isfinite(cov)):
            msg = "Initial covariance contains non-finite values"
            raise InvalidCovarianceError(msg)
        if not np.allclose(cov, cov.T):
            msg = (
                "Initial covariance is not symmetric; "
                "symmetrize it before starting the sampler"
            )
            raise InvalidCovarianceError(msg)

        try:
            self._factor = np.linalg.cholesky(symmetrize(cov))
        except np.linalg.LinAlgError as err:
            msg = f"Initial covariance is not positive-definite: {err}"
            raise InvalidCovarianceError(msg) from err

        logger.debug(f"Initialised proposal factor of dimension {cov.shape[0]}")

    def step_size(self, iteration: int) -> float:
        """Step size ``eta_n = min(1, d * n**-gamma)`` for 1-based ``iteration``."""
        if iteration < 1:
            msg = f"iteration must be >= 1, got {iteration}"
            raise ValueError(msg)
        gamma = self.settings.adaptation_exponent
        return min(1.0, self.dimension * iteration ** (-gamma))

    def update(
        self,
        direction: ArrayLike,
        acceptance_probability: float,
        iteration: int,
    ) -> NDArray[np.float64]:
        """
        Adapt the factor after one sampler step.

        Parameters
        ----------
        direction
            Standard-normal vector used to build the last proposal.
        acceptance_probability
            Acceptance probability of that proposal, in [0, 1].
        iteration
            1-based iteration index.

        Returns
        -------
        NDArray[np.float64]
            The new lower-triangular factor (read-only view).

        Raises
        ------
        AdaptationInstabilityError
            If the adapted covariance cannot be factorised or is not finite.
        """
        factor = self.factor
        u = np.asarray(direction, dtype=float)
        if u.shape != (factor.shape[0],):
            msg = f"Direction must have shape ({factor.shape[0]},), got {u.shape}"
            raise ValueError(msg)
        if not 0.0 <= acceptance_probability <= 1.0:
            msg = f"acceptance_probability must lie in [0, 1], got {acceptance_probability}"
            raise ValueError(msg)

        norm_sq = float(u @ u)
        if norm_sq == 0.0:
            return factor

        scale = self.step_size(iteration) * (
            acceptance_probability - self.settings.target_acceptance
        )
        self._factor = self._adapted_factor(factor, u, norm_sq, scale, iteration)
        return self.factor

    def _adapted_factor(
        self,
        factor: NDArray[np.float64],
        u: NDArray[np.float64],
        norm_sq: float,
        scale: float,
        iteration: int,
    ) -> NDArray[np.float64]:
        su = factor @ u
        cov = factor @ factor.T + (scale / norm_sq) * np.outer(su, su)
        if not np.all(np.isfinite(cov)):
            raise AdaptationInstabilityError(iteration, "covariance is not finite")

        try:
            return np.linalg.cholesky(symmetrize(cov))
        except np.linalg.LinAlgError:
            logger.debug(
                f"Cholesky of the adapted covariance failed at iteration {iteration}, "
                "rebuilding it from the square-root form"
            )

        # B = S (I + k u u^T) and B @ B.T equals the update above. scale > -1
        # because eta <= 1 and the target rate is below 1.
        root = factor + ((np.sqrt(1.0 + scale) - 1.0) / norm_sq) * np.outer(su, u)
        cov = symmetrize(root @ root.T)
        try:
            repaired = np.linalg.cholesky(cov)
        except np.linalg.LinAlgError as err:
            raise AdaptationInstabilityError(
                iteration, f"covariance is not positive-definite ({err})"
            ) from err
        if not np.all(np.isfinite(repaired)):
            raise AdaptationInstabilityError(iteration, "factor is not finite")
        return repaired
