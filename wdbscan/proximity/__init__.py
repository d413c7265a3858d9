"""
Proximity strategies available in wdbscan.

Currently implemented methods:
- PrecomputedProximity: brute force, full adjacency matrix in memory
- OnDemandProximity: brute force, distances recomputed per query (memory-saving mode)
- KDTreeProximity: scipy cKDTree index, with or without memory-saving mode
"""

from typing import Literal

from wdbscan.errors import ConfigurationError
from wdbscan.proximity.base import BaseProximity
from wdbscan.proximity.brute_force import OnDemandProximity, PrecomputedProximity
from wdbscan.proximity.kd_tree import KDTreeProximity

METHODS = ("brute_force", "kd_tree")


def get_proximity(
    method: Literal["brute_force", "kd_tree"] | str,
    mem_save_mode: bool,
    eps: float,
) -> BaseProximity:
    """Build the proximity strategy for a method name and memory mode.

    Args:
        method: "brute_force" or "kd_tree".
        mem_save_mode: If True, neighborhoods are computed when queried
            instead of ahead of time.
        eps: Neighborhood radius.

    Returns:
        An unfitted proximity strategy.

    Raises:
        ConfigurationError: If the method is not recognized.
    """
    if method == "brute_force":
        return OnDemandProximity(eps) if mem_save_mode else PrecomputedProximity(eps)
    if method == "kd_tree":
        return KDTreeProximity(eps, mem_save_mode=mem_save_mode)
    raise ConfigurationError(
        f"Proximity method '{method}' not recognized. Choose one of {METHODS}."
    )


__all__ = [
    "BaseProximity",
    "PrecomputedProximity",
    "OnDemandProximity",
    "KDTreeProximity",
    "get_proximity",
    "METHODS",
]
