"""
Test progress reporting integration for sampler runs.
"""

import numpy as np
import pytest

from ramcal import RAMSampler
from ramcal.progress import (
    ProgressInfo,
    ProgressTracker,
    create_simple_callback,
    create_tqdm_callback,
)


def log_posterior(theta):
    return -0.5 * float(theta @ theta)


def run_with(callback, n_iterations=10):
    sampler = RAMSampler(log_posterior, seed=42)
    return sampler.run(
        np.array([1.0, 2.0]),
        np.eye(2),
        n_iterations,
        progress_callback=callback,
    )


def test_progress_tracker():
    """Test ProgressTracker stores progress metrics correctly."""
    tracker = ProgressTracker()

    n_iterations = 10
    result = run_with(tracker, n_iterations)

    assert len(tracker.iterations) == n_iterations
    assert len(tracker.acceptance_rates) == n_iterations
    assert len(tracker.log_probs) == n_iterations

    assert all(0 <= rate <= 1 for rate in tracker.acceptance_rates)
    assert all(np.isfinite(lp) for lp in tracker.log_probs)
    assert tracker.iterations == list(range(n_iterations))
    assert tracker.acceptance_rates[-1] == result.acceptance_rate
    assert np.array_equal(tracker.log_probs, result.chain.log_probs)

    tracker.clear()
    assert len(tracker.iterations) == 0
    assert len(tracker.acceptance_rates) == 0
    assert len(tracker.log_probs) == 0


def test_simple_callback(capsys):
    """Test simple text callback prints progress."""
    callback = create_simple_callback(print_every=5)

    run_with(callback, 10)

    captured = capsys.readouterr()
    assert "Iteration 5/10" in captured.out
    assert "Iteration 10/10" in captured.out
    assert "Acceptance rate" in captured.out
    assert "Log prob" in captured.out


def test_simple_callback_prints_final_iteration(capsys):
    """The last iteration is reported even off the print interval."""
    callback = create_simple_callback(print_every=4)
    callback(ProgressInfo(iteration=9, n_iterations=10, acceptance_rate=0.2, log_prob=-1.0))
    assert "Iteration 10/10" in capsys.readouterr().out


def test_tqdm_callback():
    """Test tqdm callback integration."""
    pytest.importorskip("tqdm")

    callback = create_tqdm_callback(total=10, desc="Test Sampling")
    run_with(callback, 10)

    assert hasattr(callback, "pbar")
    assert callback.pbar.n == 10
    callback.close()


def test_tracker_with_print(capsys):
    """Test ProgressTracker with printing enabled."""
    tracker = ProgressTracker(print_every=5)

    run_with(tracker, 10)

    assert len(tracker.iterations) == 10
    captured = capsys.readouterr()
    assert captured.out.count("Iteration") == 2
