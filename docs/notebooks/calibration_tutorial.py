# ---
# jupyter:
#   jupytext:
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#       jupytext_version: 1.18.1
#   kernelspec:
#     display_name: Python 3 (ipykernel)
#     language: python
#     name: python3
# ---

# %% [markdown]
# # Calibration Tutorial
#
# This tutorial calibrates the parameters of a toy model with the Robust
# Adaptive Metropolis (RAM) sampler and reduces the chain to the artifacts
# used downstream.
#
# This tutorial covers:
# - **Sampling**: running `RAMSampler` against a log-posterior
# - **Post-processing**: burn-in, posterior mean, correlations and thinning
# - **Configuration**: driving a whole run from a TOML file

# %% [markdown]
# ## Setup

# %%
import tempfile
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from ramcal import (
    ParameterSchema,
    RAMSampler,
    load_calibration_config,
    run_calibration,
    summarize,
)
from ramcal.progress import ProgressTracker

# %% [markdown]
# ## Step 1: A log-posterior
#
# The sampler only needs a function mapping a parameter vector to a
# log-density. Here we fit the slope and intercept of a noisy line with flat
# priors and a known noise level. Returning `-inf` outside the prior support
# rejects the proposal.

# %%
rng = np.random.default_rng(42)
years = np.arange(1950, 2018)
true_slope, true_intercept, noise = 0.015, -0.3, 0.1
observations = (
    true_slope * (years - 1950)
    + true_intercept
    + rng.normal(scale=noise, size=years.size)
)


def make_log_posterior(end_year):
    mask = years <= end_year

    def log_posterior(theta):
        slope, intercept = theta
        if not -1.0 < slope < 1.0:
            return -np.inf
        model = slope * (years[mask] - 1950) + intercept
        return -0.5 * float(np.sum(((observations[mask] - model) / noise) ** 2))

    return log_posterior


# %% [markdown]
# ## Step 2: Sample
#
# The initial covariance only needs to be roughly scaled; the sampler adapts it
# towards the target acceptance rate of 0.234.

# %%
schema = ParameterSchema(["slope", "intercept"])
tracker = ProgressTracker()

sampler = RAMSampler(make_log_posterior(2017), seed=2017, schema=schema)
result = sampler.run(
    np.array([0.0, 0.0]),
    np.diag([1e-4, 1e-2]),
    20_000,
    progress_callback=tracker,
)

print(f"Acceptance rate: {result.acceptance_rate:.3f}")
print(f"Adapted proposal covariance:\n{result.covariance}")

# %%
fig, axes = plt.subplots(1, 2, figsize=(12, 4))
axes[0].plot(tracker.iterations, tracker.acceptance_rates)
axes[0].axhline(0.234, color="k", linestyle="--")
axes[0].set_xlabel("Iteration")
axes[0].set_ylabel("Acceptance rate")
axes[1].plot(result.chain.samples[:, 0])
axes[1].set_xlabel("Iteration")
axes[1].set_ylabel("slope")
plt.tight_layout()
plt.show()

# %% [markdown]
# ## Step 3: Post-process
#
# `summarize` discards the burn-in and computes every summary at once.

# %%
summary = summarize(result, burn_in_length=2_000, thin_sizes=[1_000, 10_000])

print(dict(zip(summary.schema.names, summary.mean)))
print(summary.correlation)

thinned = summary.thinned[1_000].to_dataframe()
thinned.plot.scatter(x="slope", y="intercept", s=2)
plt.show()

# %% [markdown]
# ## Step 4: Configuration-driven runs
#
# A TOML file collects chain lengths, thinning sizes and input and output
# locations. Relative paths are resolved against the file's directory.

# %%
workdir = Path(tempfile.mkdtemp())
(workdir / "initial_values.csv").write_text(
    "parameter,starting_point\nslope,0.0\nintercept,0.0\n"
)
(workdir / "initial_covariance.csv").write_text(
    "slope,intercept\n1e-4,0.0\n0.0,1e-2\n"
)
(workdir / "config.toml").write_text(
    """
schema = "1.0.0"

[calibration]
name = "line"
end_year = 2000

[sampler]
final_chain_length = 20000
burn_in_length = 2000
seed = 7

[thinning]
sizes = [1000, 10000]

[inputs]
initial_values = "initial_values.csv"
initial_covariance = "initial_covariance.csv"

[outputs]
directory = "results"
"""
)

config = load_calibration_config(str(workdir / "config.toml"))
calibration = run_calibration(config, make_log_posterior)
sorted(path.name for path in calibration.written.values())
