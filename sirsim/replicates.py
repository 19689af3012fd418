"""
Independent replicate runs of the stochastic SIR chain.

Provides:
- run_replicates(): reproducible batch of runs with independent random streams.
- summarize_replicates(): outbreak statistics with 95% confidence intervals.
- mean_trajectory(): pointwise mean S/I/R across a batch.
"""

import logging
from numbers import Integral
from typing import Any, Dict, List, Optional

import numpy as np

from .config import ConfigurationError, SimulationConfig
from .sir import StochasticSIRSimulator, TimeSeries

logger = logging.getLogger(__name__)


def run_replicates(
    config: SimulationConfig, n_runs: int, seed: Optional[int] = None
) -> List[TimeSeries]:
    """Run n_runs independent stochastic simulations.

    Each run draws from its own Generator spawned from one SeedSequence, so
    streams do not overlap and the whole batch is reproducible from ``seed``.

    Args:
        config: Simulation inputs shared by every run.
        n_runs: Number of replicates (>= 1).
        seed: Root seed. None draws fresh entropy.

    Returns:
        List of TimeSeries, one per replicate.
    """
    if isinstance(n_runs, bool) or not isinstance(n_runs, Integral) or n_runs < 1:
        raise ConfigurationError("n_runs", f"must be a positive integer, got {n_runs!r}")

    children = np.random.SeedSequence(seed).spawn(int(n_runs))
    simulator = StochasticSIRSimulator()

    results = []
    for idx, child in enumerate(children):
        rng = np.random.default_rng(child)
        results.append(simulator.run(config, rng, label=f"Replicate {idx}"))

    logger.info("Finished %d replicate runs", n_runs)
    return results


def _describe(values: np.ndarray) -> Dict[str, float]:
    mean = float(np.mean(values))
    std = float(np.std(values))
    n = len(values)
    ci_margin = 1.96 * std / np.sqrt(n) if n > 1 else 0.0

    return {
        "mean": mean,
        "std": std,
        "ci_low": mean - ci_margin,
        "ci_high": mean + ci_margin,
    }


def summarize_replicates(
    results: List[TimeSeries], outbreak_threshold: Optional[float] = None
) -> Dict[str, Any]:
    """Aggregate outbreak statistics across replicate runs.

    Args:
        results: Replicate trajectories on a common population.
        outbreak_threshold: Final size above which a run counts as an outbreak.
            Defaults to 10% of N.

    Returns:
        Dict with n_runs, peak_infected, peak_time, final_size (each a dict of
        mean, std, ci_low, ci_high), outbreak_threshold and outbreak_probability.
    """
    if not results:
        raise ValueError("summarize_replicates needs at least one run")

    if outbreak_threshold is None:
        outbreak_threshold = 0.1 * results[0].N

    peaks = np.array([r.peak_infected for r in results], dtype=float)
    peak_times = np.array([r.peak_time for r in results], dtype=float)
    final_sizes = np.array([r.final_size for r in results], dtype=float)

    return {
        "n_runs": len(results),
        "peak_infected": _describe(peaks),
        "peak_time": _describe(peak_times),
        "final_size": _describe(final_sizes),
        "outbreak_threshold": float(outbreak_threshold),
        "outbreak_probability": float(np.mean(final_sizes > outbreak_threshold)),
    }


def mean_trajectory(results: List[TimeSeries]) -> Dict[str, np.ndarray]:
    """Pointwise mean of S, I and R across runs sharing a time grid."""
    if not results:
        raise ValueError("mean_trajectory needs at least one run")

    return {
        "t": np.array(results[0].t),
        "S": np.mean([r.S for r in results], axis=0),
        "I": np.mean([r.I for r in results], axis=0),
        "R": np.mean([r.R for r in results], axis=0),
    }
