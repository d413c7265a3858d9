"""KD-tree accelerated proximity strategy.

Uses scipy's cKDTree to find candidate neighbors. The search radius is
slightly widened and the candidates are re-checked with the same exact kernel
as the brute-force strategies, so rounding inside the tree can never add or
drop a neighbor at exactly eps.
"""

import logging
from typing import List, Optional

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import cKDTree

from wdbscan.proximity import _kernels
from wdbscan.proximity.base import BaseProximity

logger = logging.getLogger("WDBSCAN")

# relative widening of the tree search radius before exact filtering,
# at least _RADIUS_ULPS rounding steps of the data dtype
_RADIUS_SLACK = 1e-6
_RADIUS_ULPS = 64
_RADIUS_FLOOR = 1e-12


class KDTreeProximity(BaseProximity):
    """
    Neighborhood queries through a KD-tree index.

    Args:
        eps: Neighborhood radius, must be non-negative.
        mem_save_mode: If False, all neighborhoods are queried ahead of time
            (in parallel) and kept in memory. If True, each neighborhood is
            queried when requested.
        leafsize: Leaf size of the cKDTree. Defaults to 16.
    """

    def __init__(self, eps: float, mem_save_mode: bool = False, leafsize: int = 16):
        super().__init__(eps)
        self.mem_save_mode = mem_save_mode
        self.leafsize = leafsize
        self._tree: Optional[cKDTree] = None
        self._neighborhoods: Optional[List[NDArray[np.int64]]] = None

    @property
    def _search_radius(self) -> float:
        slack = max(_RADIUS_SLACK, _RADIUS_ULPS * float(np.finfo(self.dtype).eps))
        return float(self.eps * (1 + slack) + _RADIUS_FLOOR)

    def fit(self, data: NDArray[np.floating]) -> "KDTreeProximity":
        super().fit(data)
        self._tree = cKDTree(data, leafsize=self.leafsize)
        self._neighborhoods = None
        if not self.mem_save_mode:
            candidates = self._tree.query_ball_point(
                data, self._search_radius, workers=-1
            )
            self._neighborhoods = [
                self._exact(i, cand) for i, cand in enumerate(candidates)
            ]
            logger.debug(
                f"Queried {len(self._neighborhoods):,} KD-tree neighborhoods ahead of time"
            )
        return self

    def release(self) -> None:
        super().release()
        self._tree = None
        self._neighborhoods = None

    def _exact(self, i: int, candidates) -> NDArray[np.int64]:
        return _kernels.filter_candidates(
            self._data, i, np.asarray(candidates, dtype=np.int64), self.eps_sq
        )

    def neighbors_of(self, i: int) -> NDArray[np.int64]:
        data = self._check_fitted()
        if self._neighborhoods is not None:
            return self._neighborhoods[i]
        candidates = self._tree.query_ball_point(data[i], self._search_radius)
        return self._exact(i, candidates)

    def __repr__(self) -> str:
        return f"KDTreeProximity(eps={self.eps}, mem_save_mode={self.mem_save_mode})"
