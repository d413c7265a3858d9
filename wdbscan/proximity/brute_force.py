"""Brute-force proximity strategies.

Both strategies compare every pair of observations. `PrecomputedProximity`
keeps the full adjacency matrix in memory, `OnDemandProximity` recomputes a
row of distances for each query.
"""

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from wdbscan.proximity import _kernels
from wdbscan.proximity.base import BaseProximity

logger = logging.getLogger("WDBSCAN")


class PrecomputedProximity(BaseProximity):
    """Materialize the boolean (N, N) adjacency matrix once, then answer queries by lookup."""

    def __init__(self, eps: float):
        super().__init__(eps)
        self._adjacency: Optional[NDArray[np.bool_]] = None

    def fit(self, data: NDArray[np.float64]) -> "PrecomputedProximity":
        super().fit(data)
        n = data.shape[0]
        logger.debug(
            f"Precomputing {n:,} x {n:,} adjacency matrix ({n * n / 1e6:.1f} MB)"
        )
        self._adjacency = _kernels.adjacency_matrix(data, self.eps_sq)
        return self

    def release(self) -> None:
        super().release()
        self._adjacency = None

    def neighbors_of(self, i: int) -> NDArray[np.int64]:
        self._check_fitted()
        return np.flatnonzero(self._adjacency[i])

    def weighted_density(self, weights: NDArray[np.float64]) -> NDArray[np.float64]:
        self._check_fitted()
        return _kernels.densities_from_adjacency(self._adjacency, weights)


class OnDemandProximity(BaseProximity):
    """Memory-saving mode: recompute distances for every query, O(N) extra space."""

    mem_save_mode = True

    def neighbors_of(self, i: int) -> NDArray[np.int64]:
        data = self._check_fitted()
        return _kernels.row_neighbors(data, i, self.eps_sq)

    def weighted_density(self, weights: NDArray[np.float64]) -> NDArray[np.float64]:
        data = self._check_fitted()
        return _kernels.densities_on_demand(data, weights, self.eps_sq)
