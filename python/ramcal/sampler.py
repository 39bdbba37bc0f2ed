"""
Robust Adaptive Metropolis (RAM) sampler.

Each iteration proposes ``candidate = current + S u`` with ``u ~ N(0, I)`` and
``S`` the adapted proposal factor, accepts it with probability
``min(1, exp(log_p(candidate) - log_p(current)))``, records the resulting state
and adapts ``S`` with the realised acceptance probability.

Example:
    >>> import numpy as np
    >>> from ramcal import RAMSampler
    >>> sampler = RAMSampler(lambda theta: -0.5 * float(theta @ theta), seed=42)
    >>> result = sampler.run(np.array([1.0, 2.0]), np.eye(2), 1_000)
    >>> len(result.chain)
    1000
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .chain import Chain
from .config.base import DEFAULT_ADAPTATION_EXPONENT, DEFAULT_TARGET_ACCEPTANCE
from .covariance import AdaptationSettings, CovarianceAdapter
from .exceptions import ConfigurationError, ValidationError
from .oracle import LogPosterior, evaluate_log_posterior
from .progress import ProgressCallback, ProgressInfo
from .schema import ParameterSchema

logger = logging.getLogger(__name__)

__all__ = [
    "AcceptanceRecord",
    "RAMSampler",
    "SamplerResult",
    "SamplerState",
    "acceptance_probability",
    "ram_sample",
]


class SamplerState(Enum):
    """Lifecycle of a sampler. There is no way back from ``COMPLETED`` or ``ABORTED``."""

    INITIALIZING = auto()
    RUNNING = auto()
    COMPLETED = auto()
    ABORTED = auto()


@dataclass
class AcceptanceRecord:
    """Running count of accepted and proposed moves."""

    accepted: int = 0
    proposed: int = 0

    def record(self, accepted: bool) -> None:
        self.proposed += 1
        if accepted:
            self.accepted += 1

    @property
    def rate(self) -> float:
        """Fraction of proposals accepted (0 before the first proposal)."""
        if self.proposed == 0:
            return 0.0
        return self.accepted / self.proposed


@dataclass(frozen=True)
class SamplerResult:
    """Output of a completed run.

    Attributes
    ----------
    chain : Chain
        Every state visited, one row per iteration
    acceptance_rate : float
        Fraction of accepted proposals
    factor : NDArray[np.float64]
        Final lower-triangular proposal factor
    n_accepted : int
        Number of accepted proposals
    seed : int
        Seed that reproduces the run
    """

    chain: Chain
    acceptance_rate: float
    factor: NDArray[np.float64]
    n_accepted: int
    seed: int

    @property
    def covariance(self) -> NDArray[np.float64]:
        """Final adapted proposal covariance ``S @ S.T``."""
        return self.factor @ self.factor.T


def acceptance_probability(log_p_candidate: float, log_p_current: float) -> float:
    """
    Metropolis acceptance probability ``min(1, exp(candidate - current))``.

    A candidate at ``-inf`` is never accepted. The exponential is only taken of
    non-positive differences so it cannot overflow.

    Examples
    --------
    >>> acceptance_probability(-1.0, -1.0)
    1.0
    >>> acceptance_probability(float("-inf"), -1.0)
    0.0
    """
    if log_p_candidate == -math.inf:
        return 0.0
    diff = log_p_candidate - log_p_current
    if diff >= 0.0:
        return 1.0
    return math.exp(diff)


class RAMSampler:
    """
    Robust Adaptive Metropolis sampler for a single chain.

    A sampler owns its random stream and runs exactly once; build a new one for
    every run.

    Parameters
    ----------
    log_posterior
        Callable returning the log-posterior of a parameter vector, or ``-inf``
        outside the prior support.
    adaptation_exponent
        Decay exponent ``gamma`` of the adaptation step size.
    seed
        Seed of the random stream. ``None`` draws fresh entropy, which is
        reported on the result so the run can be repeated.
    schema
        Parameter names used to label the chain.
    """

    def __init__(
        self,
        log_posterior: LogPosterior,
        *,
        adaptation_exponent: float = DEFAULT_ADAPTATION_EXPONENT,
        seed: int | None = None,
        schema: ParameterSchema | None = None,
    ) -> None:
        self.log_posterior = log_posterior
        self.adaptation_exponent = adaptation_exponent
        self.seed = int(np.random.SeedSequence().entropy if seed is None else seed)
        self.schema = schema
        self.state = SamplerState.INITIALIZING

    def run(
        self,
        initial_state: ArrayLike,
        initial_covariance: ArrayLike,
        n_iterations: int,
        target_acceptance: float = DEFAULT_TARGET_ACCEPTANCE,
        progress_callback: ProgressCallback | None = None,
    ) -> SamplerResult:
        """
        Run the chain.

        Parameters
        ----------
        initial_state
            Starting parameter vector. Its log-posterior must be finite.
        initial_covariance
            Initial proposal covariance (symmetric positive-definite).
        n_iterations
            Number of iterations; the chain has exactly this many rows.
        target_acceptance
            Acceptance rate the proposal adaptation steers towards.
        progress_callback
            Called with a :class:`~ramcal.progress.ProgressInfo` after every
            iteration.

        Returns
        -------
        SamplerResult
            Chain, acceptance rate and final proposal covariance.

        Raises
        ------
        InvalidCovarianceError
            If the initial covariance is not positive-definite.
        AdaptationInstabilityError
            If the adapted covariance stops being positive-definite.
        ModelEvaluationError
            If the log-posterior fails for any visited or proposed vector.
        ConfigurationError
            If the initial state has zero posterior density or the inputs have
            inconsistent shapes.
        """
        if self.state is not SamplerState.INITIALIZING:
            msg = f"RAMSampler has already been run (state {self.state.name}); create a new sampler"
            raise RuntimeError(msg)

        try:
            return self._run(
                initial_state,
                initial_covariance,
                n_iterations,
                target_acceptance,
                progress_callback,
            )
        except BaseException:
            self.state = SamplerState.ABORTED
            logger.error("RAM sampler aborted")
            raise

    def _run(
        self,
        initial_state: ArrayLike,
        initial_covariance: ArrayLike,
        n_iterations: int,
        target_acceptance: float,
        progress_callback: ProgressCallback | None,
    ) -> SamplerResult:
        if int(n_iterations) != n_iterations or n_iterations < 1:
            msg = f"n_iterations must be a positive integer, got {n_iterations}"
            raise ConfigurationError(msg)
        n_iterations = int(n_iterations)

        current = np.array(initial_state, dtype=float, copy=True)
        if current.ndim != 1:
            msg = f"Initial state must be a 1-D vector, got shape {current.shape}"
            raise ConfigurationError(msg)
        schema = self.schema or ParameterSchema.default(current.shape[0])
        try:
            current = schema.validate_vector(current)
        except ValidationError as err:
            raise ConfigurationError(str(err)) from err

        adapter = CovarianceAdapter(
            AdaptationSettings(
                target_acceptance=target_acceptance,
                adaptation_exponent=self.adaptation_exponent,
            )
        )
        adapter.initialize(initial_covariance)
        if adapter.dimension != current.shape[0]:
            msg = (
                f"Initial covariance is {adapter.dimension}x{adapter.dimension} "
                f"but the initial state has {current.shape[0]} parameters"
            )
            raise ConfigurationError(msg)

        current_log_p = evaluate_log_posterior(self.log_posterior, current)
        if not math.isfinite(current_log_p):
            msg = "Initial state has zero posterior density (log-posterior is -inf)"
            raise ConfigurationError(msg)

        rng = np.random.default_rng(self.seed)
        n_params = current.shape[0]
        samples = np.empty((n_iterations, n_params))
        log_probs = np.empty(n_iterations)
        acceptance = AcceptanceRecord()

        logger.info(
            f"Starting RAM sampler: {n_iterations} iterations, {n_params} parameters, "
            f"target acceptance {target_acceptance}, seed {self.seed}"
        )
        self.state = SamplerState.RUNNING

        for i in range(n_iterations):
            u = rng.standard_normal(n_params)
            candidate = current + adapter.factor @ u
            candidate_log_p = evaluate_log_posterior(self.log_posterior, candidate)

            alpha = acceptance_probability(candidate_log_p, current_log_p)
            accepted = rng.random() < alpha
            if accepted:
                current = candidate
                current_log_p = candidate_log_p
            acceptance.record(accepted)

            samples[i] = current
            log_probs[i] = current_log_p

            adapter.update(u, alpha, i + 1)

            if progress_callback is not None:
                progress_callback(
                    ProgressInfo(
                        iteration=i,
                        n_iterations=n_iterations,
                        acceptance_rate=acceptance.rate,
                        log_prob=current_log_p,
                    )
                )

        self.state = SamplerState.COMPLETED
        logger.info(
            f"RAM sampler completed: acceptance rate {acceptance.rate:.4f} "
            f"({acceptance.accepted}/{acceptance.proposed})"
        )

        return SamplerResult(
            chain=Chain(samples, log_probs, schema),
            acceptance_rate=acceptance.rate,
            factor=np.array(adapter.factor),
            n_accepted=acceptance.accepted,
            seed=self.seed,
        )


def ram_sample(
    log_posterior: LogPosterior,
    initial_state: ArrayLike,
    initial_covariance: ArrayLike,
    n_iterations: int,
    *,
    target_acceptance: float = DEFAULT_TARGET_ACCEPTANCE,
    adaptation_exponent: float = DEFAULT_ADAPTATION_EXPONENT,
    seed: int | None = None,
    schema: ParameterSchema | None = None,
    progress_callback: ProgressCallback | None = None,
) -> SamplerResult:
    """
    Run a single RAM chain in one call.

    Returns
    -------
    SamplerResult
        See :meth:`RAMSampler.run`.

    Examples
    --------
    >>> result = ram_sample(lambda t: -0.5 * float(t @ t), [1.0, 2.0], np.eye(2), 500, seed=1)
    >>> result.chain.samples.shape
    (500, 2)
    """
    sampler = RAMSampler(
        log_posterior,
        adaptation_exponent=adaptation_exponent,
        seed=seed,
        schema=schema,
    )
    return sampler.run(
        initial_state,
        initial_covariance,
        n_iterations,
        target_acceptance=target_acceptance,
        progress_callback=progress_callback,
    )
