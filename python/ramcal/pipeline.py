"""End-to-end calibration run: sample, summarise and write artifacts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from numpy.typing import ArrayLike

from .artifacts import load_covariance, load_initial_values, write_artifacts
from .config.base import CalibrationConfig
from .exceptions import ConfigurationError
from .oracle import LogPosteriorFactory
from .postprocess import SummaryArtifacts, summarize
from .progress import ProgressCallback
from .sampler import RAMSampler, SamplerResult
from .schema import ParameterSchema

logger = logging.getLogger(__name__)

__all__ = ["CalibrationResult", "run_calibration"]


@dataclass(frozen=True)
class CalibrationResult:
    """Sampler output, its summaries and the files written."""

    config: CalibrationConfig
    sampler_result: SamplerResult
    summary: SummaryArtifacts
    written: dict[str, Path] = field(default_factory=dict)


def _resolve_inputs(
    config: CalibrationConfig,
    schema: ParameterSchema | None,
    initial_state: ArrayLike | None,
    initial_covariance: ArrayLike | None,
) -> tuple[ParameterSchema, np.ndarray, np.ndarray]:
    if initial_state is None:
        if config.initial_values is None:
            msg = "No initial state given and no initial_values file configured"
            raise ConfigurationError(msg)
        file_schema, initial_state = load_initial_values(
            config.initial_values, skiprows=config.initial_values_skiprows
        )
        if schema is None:
            schema = file_schema
        elif schema != file_schema:
            msg = (
                f"Parameter names {schema.names} do not match the names "
                f"{file_schema.names} in {config.initial_values}"
            )
            raise ConfigurationError(msg)

    if initial_covariance is None:
        if config.initial_covariance is None:
            msg = "No initial covariance given and no initial_covariance file configured"
            raise ConfigurationError(msg)
        initial_covariance = load_covariance(config.initial_covariance)

    state = np.asarray(initial_state, dtype=float)
    schema = schema or ParameterSchema.default(state.shape[0])
    return schema, schema.validate_vector(state), np.asarray(initial_covariance, dtype=float)


def run_calibration(
    config: CalibrationConfig,
    log_posterior_factory: LogPosteriorFactory,
    *,
    schema: ParameterSchema | None = None,
    initial_state: ArrayLike | None = None,
    initial_covariance: ArrayLike | None = None,
    progress_callback: ProgressCallback | None = None,
) -> CalibrationResult:
    """Run a complete calibration.

    Parameters
    ----------
    config
        Run configuration
    log_posterior_factory
        Called once with ``config.calibration_end_year`` to build the
        log-posterior
    schema
        Parameter names. Defaults to the names in the initial values file.
    initial_state
        Starting vector. Read from ``config.initial_values`` when omitted.
    initial_covariance
        Initial proposal covariance. Read from ``config.initial_covariance``
        when omitted.
    progress_callback
        Forwarded to the sampler

    Returns
    -------
    CalibrationResult
        Sampler output, summaries and the paths of any written artifacts
    """
    schema, state, covariance = _resolve_inputs(
        config, schema, initial_state, initial_covariance
    )
    log_posterior = log_posterior_factory(config.calibration_end_year)

    settings = config.sampler
    logger.info(
        f"Calibration '{config.name}': {settings.burn_in_length} burn-in + "
        f"{settings.final_chain_length} samples for {len(schema)} parameters"
    )
    sampler = RAMSampler(
        log_posterior,
        adaptation_exponent=settings.adaptation_exponent,
        seed=settings.seed,
        schema=schema,
    )
    sampler_result = sampler.run(
        state,
        covariance,
        settings.total_iterations,
        target_acceptance=settings.target_acceptance,
        progress_callback=progress_callback,
    )

    summary = summarize(sampler_result, settings.burn_in_length, config.thin_sizes)

    written = {}
    if config.output_dir is not None:
        written = write_artifacts(summary, config.output_dir)

    return CalibrationResult(
        config=config,
        sampler_result=sampler_result,
        summary=summary,
        written=written,
    )
