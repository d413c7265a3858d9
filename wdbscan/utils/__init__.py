"""
Utility functions and constants for wdbscan.

This module provides helper functions and constants used throughout wdbscan, including:
- Attribute names for run metadata
- Validation of observations, weights and parameters
- Logger configuration
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from wdbscan.errors import ConfigurationError

__all__ = [
    "_attrs",
    "check_observations",
    "observation_dtype",
    "check_weights",
    "check_parameters",
    "set_log_level",
    "LOG_LEVELS",
]

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass(frozen=True)
class _Attrs:
    """Constants for the metadata keys stored on every compute result."""

    EPS: str = "eps"
    MIN_OBSERVATIONS: str = "min_observations"
    METHOD_NAME: str = "method_name"
    MEM_SAVE_MODE: str = "mem_save_mode"
    WEIGHTED: str = "weighted"
    N_OBSERVATIONS: str = "n_observations"
    N_FEATURES: str = "n_features"
    CLUSTER_COUNT: str = "cluster_count"
    N_CORE: str = "n_core"
    N_NOISE: str = "n_noise"
    RUNTIME_PROXIMITY: str = "runtime_proximity"
    RUNTIME_DENSITY: str = "runtime_density"
    RUNTIME_PROPAGATION: str = "runtime_propagation"
    RUNTIME_TOTAL: str = "runtime_total"
    WDBSCAN_VERSION: str = "wdbscan_version"


_attrs = _Attrs()


def observation_dtype(data: ArrayLike) -> np.dtype:
    """float32 for float32 input, float64 for everything else."""
    if getattr(data, "dtype", None) == np.float32:
        return np.dtype(np.float32)
    return np.dtype(np.float64)


def check_observations(data: ArrayLike) -> NDArray[np.floating]:
    """Validate the observation set and return a C-contiguous floating point copy.

    float32 observations stay float32 so that distances are evaluated in the
    precision the data was given in; any other input becomes float64.

    Args:
        data: Array-like (N, D) of observations. A 1D array of length N is
            read as N observations with a single feature.

    Returns:
        Array (N, D) of float32 or float64 owned by the caller of this function.

    Raises:
        ConfigurationError: If the set is empty, not numeric, has more than
            two dimensions or contains NaN/inf values.
    """
    try:
        arr = np.array(data, dtype=observation_dtype(data), order="C", copy=True)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Observations must be numeric: {e}") from e

    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise ConfigurationError(
            f"Observations must be a 2-dimensional (N, D) array, got {arr.ndim} dimensions"
        )
    if arr.shape[0] == 0:
        raise ConfigurationError("Observation set is empty")
    if arr.shape[1] == 0:
        raise ConfigurationError("Observations must have at least one feature")
    if not np.isfinite(arr).all():
        raise ConfigurationError("Observations contain NaN or infinite values")
    return arr


def check_weights(
    weights: Optional[ArrayLike], n_observations: int
) -> Optional[NDArray[np.float64]]:
    """Validate the weight vector against the observation count.

    Args:
        weights: Array-like of shape (N,) or (N, 1), or None.
        n_observations: Number of observations N.

    Returns:
        Array (N,) of float64 weights, or None if no weights were given.

    Raises:
        ConfigurationError: On a length mismatch or negative/non-finite weights.
    """
    if weights is None:
        return None
    try:
        w = np.array(weights, dtype=np.float64, copy=True)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Weights must be numeric: {e}") from e

    if w.ndim == 2 and w.shape[1] == 1:
        w = w[:, 0]
    if w.ndim != 1:
        raise ConfigurationError(
            f"Weights must be a vector of shape (N,) or (N, 1), got shape {w.shape}"
        )
    if w.shape[0] != n_observations:
        raise ConfigurationError(
            f"Got {w.shape[0]} weights for {n_observations} observations"
        )
    if not np.isfinite(w).all():
        raise ConfigurationError("Weights contain NaN or infinite values")
    if (w < 0).any():
        raise ConfigurationError(
            f"Weights must be non-negative, got minimum weight {w.min()}"
        )
    return np.ascontiguousarray(w)


def check_parameters(eps: float, min_observations: float) -> None:
    """Validate eps and min_observations.

    Raises:
        ConfigurationError: If eps is negative or not finite, or if
            min_observations is not a finite number.
    """
    try:
        eps = float(eps)
        min_observations = float(min_observations)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"eps and min_observations must be numbers: {e}"
        ) from e
    if not np.isfinite(eps) or eps < 0:
        raise ConfigurationError(f"eps must be a non-negative number, got {eps}")
    if not np.isfinite(min_observations):
        raise ConfigurationError(
            f"min_observations must be a finite number, got {min_observations}"
        )


def set_log_level(level: str) -> logging.Logger:
    """Sets the logging level for the wdbscan logger.

    Sets the logging level and configures handlers for the wdbscan logger.
    Available levels are 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'.

    Examples:
        In sub-modules get logger like this:
            >>> logger = logging.getLogger("WDBSCAN")

    Args:
        level: The logging level to set

    Returns:
        The configured logger.

    Raises:
        ConfigurationError: If level is not one of the valid logging levels
    """
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            "Invalid log level. Choose from 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'"
        )

    logger = logging.getLogger("WDBSCAN")
    logger.propagate = False  # prevents duplicate messages through the root logger
    logger.setLevel(getattr(logging, level))

    # Only add a handler if there are no handlers yet (to avoid duplicate messages)
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        formatter = logging.Formatter("%(levelname)s: %(message)s")
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.debug(f"Logging level set to {level}")
    return logger
