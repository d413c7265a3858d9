from wdbscan.postprocessing.cluster_stats import (
    centers_of_mass,
    cluster_summary,
    davies_bouldin_index,
    sorted_cluster_labels,
)

__all__ = [
    "centers_of_mass",
    "cluster_summary",
    "davies_bouldin_index",
    "sorted_cluster_labels",
]
