"""Cluster statistics computed from DBSCAN labels.

Used to inspect and score clusterings: centers of mass, the Davies-Bouldin
index and a per-cluster summary table.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray
from sklearn.metrics import davies_bouldin_score

from wdbscan.errors import ConfigurationError

logger = logging.getLogger("WDBSCAN")


def _labels_for(data: NDArray[np.float64], labels: ArrayLike) -> NDArray[np.int64]:
    labels = np.asarray(labels).astype(np.int64).ravel()
    if labels.shape[0] != data.shape[0]:
        raise ConfigurationError(
            f"Got {labels.shape[0]} labels for {data.shape[0]} observations"
        )
    return labels


def centers_of_mass(
    data: ArrayLike, labels: ArrayLike, cluster_count: Optional[int] = None
) -> NDArray[np.float64]:
    """Mean of the member observations of every cluster.

    Args:
        data: Array-like (N, D) of observations.
        labels: Array-like (N,) of cluster labels, -1 for noise.
        cluster_count: Number of clusters. If None, inferred as max(label) + 1.

    Returns:
        Array (cluster_count, D). Rows of clusters without members are NaN.
    """
    data = np.asarray(data, dtype=np.float64)
    if data.ndim == 1:
        data = data.reshape(-1, 1)
    labels = _labels_for(data, labels)
    if cluster_count is None:
        cluster_count = int(labels.max()) + 1 if labels.size else 0

    members = labels >= 0
    sums = np.zeros((cluster_count, data.shape[1]), dtype=np.float64)
    np.add.at(sums, labels[members], data[members])
    counts = np.bincount(labels[members], minlength=cluster_count)[:cluster_count]

    with np.errstate(invalid="ignore", divide="ignore"):
        return sums / counts[:, None]


def davies_bouldin_index(data: ArrayLike, labels: ArrayLike) -> float:
    """Davies-Bouldin index of a clustering, noise observations excluded.

    Lower values mean more compact and better separated clusters.

    Args:
        data: Array-like (N, D) of observations.
        labels: Array-like (N,) of cluster labels, -1 for noise.

    Returns:
        The index, or NaN if fewer than two clusters remain after dropping noise.
    """
    data = np.asarray(data, dtype=np.float64)
    if data.ndim == 1:
        data = data.reshape(-1, 1)
    labels = _labels_for(data, labels)
    members = labels >= 0
    n_clusters = np.unique(labels[members]).size
    if n_clusters < 2:
        logger.warning(
            f"Davies-Bouldin index needs at least 2 clusters, got {n_clusters}"
        )
        return float("nan")
    return float(davies_bouldin_score(data[members], labels[members]))


def sorted_cluster_labels(cluster_labels: ArrayLike) -> NDArray[np.int32]:
    """Sort clusters by size (largest cluster -> 0, second largest -> 1, etc., keeping -1 for noise)

    Ties keep the original id order.
    """
    cluster_labels = np.asarray(cluster_labels)
    unique_labels, counts = np.unique(
        cluster_labels[cluster_labels != -1], return_counts=True
    )

    # stable sort by descending count
    sorted_unique_labels = unique_labels[np.argsort(-counts, kind="stable")]

    label_mapping = {old: new for new, old in enumerate(sorted_unique_labels)}
    label_mapping[-1] = -1  # Keep -1 for noise points

    return np.array([label_mapping[label] for label in cluster_labels], dtype=np.int32)


def cluster_summary(
    labels: ArrayLike,
    core_flags: Optional[ArrayLike] = None,
    weights: Optional[ArrayLike] = None,
) -> pd.DataFrame:
    """Build a summary DataFrame with one row per cluster.

    Args:
        labels: Array-like (N,) of cluster labels, -1 for noise.
        core_flags: Optional array-like (N,) of core flags. Adds an `n_core` column.
        weights: Optional array-like (N,) of weights. The `weight` column is the
            summed weight of each cluster; without weights it equals `size`.

    Returns:
        DataFrame indexed by `cluster_id` (ascending, noise row -1 first if
        present) with columns `size`, `weight` and optionally `n_core`.
    """
    labels = np.asarray(labels).astype(np.int64).ravel()
    weights = (
        np.ones(labels.size, dtype=np.float64)
        if weights is None
        else np.asarray(weights, dtype=np.float64).ravel()
    )
    if weights.size != labels.size:
        raise ConfigurationError(
            f"Got {weights.size} weights for {labels.size} labels"
        )

    columns = {"cluster_id": labels, "size": 1, "weight": weights}
    if core_flags is not None:
        columns["n_core"] = np.asarray(core_flags, dtype=bool).ravel().astype(np.int64)

    df = pd.DataFrame(columns).groupby("cluster_id").sum().sort_index()
    df["size"] = df["size"].astype(np.int64)
    return df
