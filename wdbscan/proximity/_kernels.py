"""Numba kernels shared by all proximity strategies.

Every strategy decides "j is a neighbor of i" with `_within_eps` and sums
densities in ascending j order, so that switching strategy never changes a
neighbor set or a density value.
"""

import numpy as np
from numba import njit, prange
from numpy.typing import NDArray


@njit
def _within_eps(
    data: NDArray[np.float64], i: int, j: int, eps_sq: float
) -> bool:
    """True if the squared Euclidean distance between rows i and j is <= eps_sq.

    The distance is accumulated in the dtype of `data`.
    """
    diff = data[i, 0] - data[j, 0]
    d_sq = diff * diff
    for k in range(1, data.shape[1]):
        diff = data[i, k] - data[j, k]
        d_sq += diff * diff
    return d_sq <= eps_sq


@njit(parallel=True)
def adjacency_matrix(data: NDArray[np.float64], eps_sq: float) -> NDArray[np.bool_]:
    """Boolean (n, n) matrix with True where two observations are within eps."""
    n = data.shape[0]
    adjacency = np.zeros((n, n), dtype=np.bool_)
    for i in prange(n):
        adjacency[i, i] = True
        for j in range(i + 1, n):
            if _within_eps(data, i, j, eps_sq):
                adjacency[i, j] = True
                adjacency[j, i] = True
    return adjacency


@njit
def row_neighbors(
    data: NDArray[np.float64], i: int, eps_sq: float
) -> NDArray[np.int64]:
    """Ascending indices of all observations within eps of observation i."""
    n = data.shape[0]
    mask = np.zeros(n, dtype=np.bool_)
    for j in range(n):
        mask[j] = j == i or _within_eps(data, i, j, eps_sq)
    return np.flatnonzero(mask)


@njit
def filter_candidates(
    data: NDArray[np.float64], i: int, candidates: NDArray[np.int64], eps_sq: float
) -> NDArray[np.int64]:
    """Keep the candidates that are within eps of observation i, sorted ascending."""
    candidates = np.sort(candidates)
    keep = np.zeros(candidates.shape[0], dtype=np.bool_)
    for c in range(candidates.shape[0]):
        j = candidates[c]
        keep[c] = j == i or _within_eps(data, i, j, eps_sq)
    return candidates[keep]


@njit(parallel=True)
def densities_from_adjacency(
    adjacency: NDArray[np.bool_], weights: NDArray[np.float64]
) -> NDArray[np.float64]:
    n = adjacency.shape[0]
    densities = np.zeros(n, dtype=np.float64)
    for i in prange(n):
        total = 0.0
        for j in range(n):
            if adjacency[i, j]:
                total += weights[j]
        densities[i] = total
    return densities


@njit(parallel=True)
def densities_on_demand(
    data: NDArray[np.float64], weights: NDArray[np.float64], eps_sq: float
) -> NDArray[np.float64]:
    """Weighted densities without materializing the distance matrix."""
    n = data.shape[0]
    densities = np.zeros(n, dtype=np.float64)
    for i in prange(n):
        total = 0.0
        for j in range(n):
            if j == i or _within_eps(data, i, j, eps_sq):
                total += weights[j]
        densities[i] = total
    return densities


@njit
def ordered_sum(weights: NDArray[np.float64], indices: NDArray[np.int64]) -> float:
    """Sum weights[indices] sequentially, indices assumed ascending."""
    total = 0.0
    for c in range(indices.shape[0]):
        total += weights[indices[c]]
    return total
