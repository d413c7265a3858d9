"""Cluster label propagation over the implicit epsilon-neighbor graph.

Observations are scanned in ascending index order. Each unassigned core
observation seeds a new cluster, which is grown with an explicit worklist:
every unassigned observation within eps of a core member joins the cluster,
and only core observations are pushed to the worklist, so border observations
never extend a cluster. An observation keeps the first cluster id it receives,
which makes the ownership of border observations reachable from several
clusters deterministic. Whatever is never reached stays noise.
"""

import logging
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from wdbscan.proximity.base import BaseProximity

logger = logging.getLogger("WDBSCAN")

NOISE = -1


def propagate_clusters(
    proximity: BaseProximity, core_flags: NDArray[np.bool_]
) -> Tuple[NDArray[np.int32], int]:
    """Assign cluster ids to core and border observations.

    Args:
        proximity: A fitted proximity strategy.
        core_flags: Array (N,) of booleans, True for core observations.

    Returns:
        Tuple containing:
            - Array (N,) of int32 labels, cluster ids from 0 in order of
              discovery, -1 for noise.
            - Number of clusters.
    """
    n = core_flags.shape[0]
    labels = np.full(n, NOISE, dtype=np.int32)
    cluster_id = 0

    for seed in range(n):
        if not core_flags[seed] or labels[seed] != NOISE:
            continue

        labels[seed] = cluster_id
        worklist = [seed]
        while worklist:
            neighbors = proximity.neighbors_of(worklist.pop())
            # labels are final once assigned
            unassigned = neighbors[labels[neighbors] == NOISE]
            labels[unassigned] = cluster_id
            worklist.extend(unassigned[core_flags[unassigned]].tolist())

        cluster_id += 1

    logger.debug(f"Propagation found {cluster_id:,} clusters")
    return labels, cluster_id
