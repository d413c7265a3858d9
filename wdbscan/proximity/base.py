from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from wdbscan.errors import ConfigurationError
from wdbscan.proximity import _kernels


class BaseProximity(ABC):
    """
    Abstract base class for epsilon-neighborhood queries in wdbscan.

    Every proximity strategy must provide:
      - fit(): bind the strategy to an observation set
      - neighbors_of(): indices of all observations within eps of observation i

    Neighborhoods are inclusive (distance <= eps) and always contain i itself.
    Strategies are interchangeable: for the same data and eps, all of them
    return the same neighbor sets and the same weighted densities. Which one
    is used is a memory/compute trade-off only.

    Args:
        eps: Neighborhood radius, must be non-negative.

    Attributes:
        mem_save_mode: True if neighborhoods are computed when queried instead
            of being held in memory.
    """

    mem_save_mode = False

    def __init__(self, eps: float):
        if not np.isfinite(eps) or eps < 0:
            raise ConfigurationError(f"eps must be a non-negative number, got {eps}")
        self.eps = float(eps)
        self._data: Optional[NDArray[np.float64]] = None

    @property
    def dtype(self) -> np.dtype:
        """Floating point type distances are evaluated in, that of the fitted data."""
        return np.dtype(np.float64) if self._data is None else self._data.dtype

    @property
    def eps_sq(self) -> np.floating:
        eps = self.dtype.type(self.eps)
        return eps * eps

    @property
    def n_observations(self) -> int:
        return 0 if self._data is None else self._data.shape[0]

    def fit(self, data: NDArray[np.float64]) -> "BaseProximity":
        """
        Bind the strategy to an observation set.

        Args:
            data: Array (N, D) of float32 or float64 observations,
                C-contiguous.

        Returns:
            The fitted strategy itself.
        """
        self._data = data
        return self

    def release(self) -> None:
        """Drop every reference to the observation set and derived buffers."""
        self._data = None

    def _check_fitted(self) -> NDArray[np.float64]:
        if self._data is None:
            raise RuntimeError(
                f"{self.__class__.__name__} is not fitted, call fit(data) first"
            )
        return self._data

    @abstractmethod
    def neighbors_of(self, i: int) -> NDArray[np.int64]:
        """
        Neighborhood query for one observation.

        Args:
            i: Index of the query observation.

        Returns:
            Array of indices j, ascending, with distance(i, j) <= eps. Contains i.
        """
        pass

    def weighted_density(self, weights: NDArray[np.float64]) -> NDArray[np.float64]:
        """
        Sum of weights over every neighborhood.

        The default implementation loops over `neighbors_of`; subclasses
        override it with a parallel kernel.

        Args:
            weights: Array (N,) of float64 weights.

        Returns:
            Array (N,) of densities W_i.
        """
        n = self._check_fitted().shape[0]
        densities = np.empty(n, dtype=np.float64)
        for i in range(n):
            densities[i] = _kernels.ordered_sum(weights, self.neighbors_of(i))
        return densities

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(eps={self.eps})"
