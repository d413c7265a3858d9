"""
Clustering module for wdbscan.

This module runs the DBSCAN engine on a validated observation set. The main
function `run_dbscan` binds a proximity strategy to the data, computes the
weighted density of every observation, classifies core observations and
propagates cluster labels from them.

Data flows strictly downward:
- Proximity strategy: epsilon-neighborhood queries
- Density: weighted neighborhood densities and core flags
- Propagation: cluster ids for core and border observations, -1 for noise
"""

import logging
from dataclasses import dataclass, field
from time import time as time_now
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from wdbscan.clustering.density import classify_core, compute_densities
from wdbscan.clustering.propagation import NOISE, propagate_clusters
from wdbscan.proximity.base import BaseProximity

logger = logging.getLogger("WDBSCAN")

__all__ = [
    "run_dbscan",
    "EngineState",
    "compute_densities",
    "classify_core",
    "propagate_clusters",
    "NOISE",
]


@dataclass
class EngineState:
    """Internal state of one engine run, consumed by the result assembler."""

    densities: NDArray[np.float64]
    core_flags: NDArray[np.bool_]
    labels: NDArray[np.int32]
    cluster_count: int
    runtimes: dict = field(default_factory=dict)


def run_dbscan(
    data: NDArray[np.float64],
    proximity: BaseProximity,
    min_observations: float,
    weights: Optional[NDArray[np.float64]] = None,
) -> EngineState:
    """Cluster observations by density-reachability.

    Args:
        data: Array (N, D) of float32 or float64 observations, already validated.
        proximity: An unfitted proximity strategy. It is fitted on `data` and
            released again before returning.
        min_observations: Density threshold for core observations.
        weights: Optional array (N,) of non-negative weights.

    Returns:
        EngineState with densities, core flags, labels, cluster count and
        the runtime of each phase in seconds.
    """

    """
    Overview of the engine:
    1. Proximity
        - Fit the proximity strategy on the observations
    2. Density
        - Sum neighbor weights within eps (the observation itself included)
        - Flag observations with density >= min_observations as core
    3. Propagation
        - Scan observations by index, grow a cluster from every unassigned core
        - First cluster to reach an observation owns it
        - Unreached observations are noise
    """
    start_time = time_now()
    logger.debug(f"Fitting {proximity!r} on {data.shape[0]:,} observations")
    proximity.fit(data)
    proximity_time = time_now() - start_time

    try:
        density_start = time_now()
        densities = compute_densities(proximity, weights)
        core_flags = classify_core(densities, min_observations)
        density_time = time_now() - density_start

        propagation_start = time_now()
        labels, cluster_count = propagate_clusters(proximity, core_flags)
        propagation_time = time_now() - propagation_start
    finally:
        proximity.release()

    runtimes = {
        "proximity": float(proximity_time),
        "density": float(density_time),
        "propagation": float(propagation_time),
        "total": float(time_now() - start_time),
    }
    logger.debug(
        "Runtimes: "
        + ", ".join(f"{phase}={seconds:.3f}s" for phase, seconds in runtimes.items())
    )

    if cluster_count == 0:
        logger.warning(
            f"No core observations found with eps={proximity.eps} and "
            f"min_observations={min_observations}; all observations are noise"
        )

    return EngineState(
        densities=densities,
        core_flags=core_flags,
        labels=labels,
        cluster_count=cluster_count,
        runtimes=runtimes,
    )


def _format_cluster_summary(labels: NDArray[np.int32], cluster_count: int) -> str:
    """
    Produce a concise summary:
      - number of identified clusters (excluding -1)
      - number of observations
      - percentage of observations labeled as noise (-1)
    """
    n = int(labels.size)
    noise = int(np.count_nonzero(labels == NOISE))
    pct_noise = 100.0 * noise / n if n else 0.0
    clusters_text = f"{cluster_count} {'cluster' if cluster_count == 1 else 'clusters'}"
    return (
        f"Identified {clusters_text} in {n:,} pts; "
        f"Left behind {pct_noise:.1f}% as noise ({noise:,} pts)."
    )
