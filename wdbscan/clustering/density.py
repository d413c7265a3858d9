"""Weighted neighborhood density and core classification."""

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from wdbscan.proximity.base import BaseProximity

logger = logging.getLogger("WDBSCAN")


def compute_densities(
    proximity: BaseProximity,
    weights: Optional[NDArray[np.float64]] = None,
) -> NDArray[np.float64]:
    """Compute the weighted neighborhood density of every observation.

    W_i is the sum of weight_j over all j within eps of i, including i itself.

    Args:
        proximity: A fitted proximity strategy.
        weights: Array (N,) of non-negative weights. If None, every weight is 1.0
            and W_i is the neighborhood size (classic DBSCAN with min_samples
            counting the point itself).

    Returns:
        Array (N,) of float64 densities.
    """
    n = proximity.n_observations
    if weights is None:
        weights = np.ones(n, dtype=np.float64)
    return proximity.weighted_density(np.ascontiguousarray(weights, dtype=np.float64))


def classify_core(
    densities: NDArray[np.float64], min_observations: float
) -> NDArray[np.bool_]:
    """Flag observations whose density reaches min_observations.

    A non-positive min_observations makes every observation core.
    """
    core_flags = densities >= min_observations
    logger.debug(
        f"{int(core_flags.sum()):,} of {core_flags.size:,} observations are core "
        f"(min_observations={min_observations})"
    )
    return core_flags
