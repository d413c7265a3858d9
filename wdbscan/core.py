import logging
from typing import Literal, Optional, Union

import numpy as np
from numpy.typing import ArrayLike
from sklearn.base import BaseEstimator, ClusterMixin

from wdbscan._version import __version__
from wdbscan.clustering import _format_cluster_summary, run_dbscan
from wdbscan.proximity import BaseProximity, get_proximity
from wdbscan.result import (
    ComputeResult,
    ResultOptions,
    assemble_result,
    check_result_options,
)
from wdbscan.utils import (
    _attrs,
    check_observations,
    check_parameters,
    check_weights,
)

logger = logging.getLogger("WDBSCAN")


class DBSCAN(ClusterMixin, BaseEstimator):
    """Weighted DBSCAN clustering with selectable outputs.

    An observation is core if the summed weight of all observations within
    `eps` (itself included) is at least `min_observations`. Clusters grow from
    core observations by density-reachability; non-core observations within
    `eps` of a cluster's core become its border members, everything else is
    noise (-1). Cluster ids start at 0 and follow the index order in which
    clusters are first discovered.

    The object can be used in two ways:
        - `compute(data, weights)` returns a `ComputeResult` holding exactly the
          artifacts named in `result_options`.
        - `fit(X, sample_weight=...)` / `fit_predict(X)` follow the
          scikit-learn clustering API and set `labels_`,
          `core_sample_indices_`, `components_` and `n_clusters_`.

    Args:
        eps: Neighborhood radius (Euclidean). Distances equal to eps count as
            neighbors. Must be non-negative. Defaults to 0.5.
        min_observations: Density threshold for core observations. Without
            weights this is the neighborhood size including the observation
            itself (scikit-learn's min_samples). Defaults to 5.
        result_options: Artifacts to produce in `compute`. Defaults to
            ResultOptions.LABELS.
        mem_save_mode: If True, neighborhoods are recomputed on demand instead
            of being materialized up front. Changes memory use and runtime,
            never the result. Defaults to False.
        method: "brute_force", "kd_tree", or a `BaseProximity` instance.
            Defaults to "brute_force".
    """

    def __init__(
        self,
        eps: float = 0.5,
        min_observations: float = 5,
        result_options: Union[ResultOptions, int] = ResultOptions.LABELS,
        mem_save_mode: bool = False,
        method: Union[Literal["brute_force", "kd_tree"], str, BaseProximity] = "brute_force",
    ):
        self.eps = eps
        self.min_observations = min_observations
        self.result_options = result_options
        self.mem_save_mode = mem_save_mode
        self.method = method

    def _build_proximity(self) -> BaseProximity:
        if isinstance(self.method, BaseProximity):
            if self.method.eps != float(self.eps):
                logger.warning(
                    f"Proximity strategy eps={self.method.eps} differs from eps={self.eps}; "
                    f"the strategy's eps is used"
                )
            if self.method.mem_save_mode != bool(self.mem_save_mode):
                logger.warning(
                    f"Proximity strategy mem_save_mode={self.method.mem_save_mode} differs "
                    f"from mem_save_mode={self.mem_save_mode}; the strategy's mode is used"
                )
            return self.method
        return get_proximity(self.method, self.mem_save_mode, self.eps)

    @property
    def _method_name(self) -> str:
        if isinstance(self.method, BaseProximity):
            return self.method.__class__.__name__
        return str(self.method)

    def compute(
        self,
        data: ArrayLike,
        weights: Optional[ArrayLike] = None,
        result_options: Optional[Union[ResultOptions, int]] = None,
    ) -> ComputeResult:
        """Run DBSCAN on an observation set.

        Args:
            data: Array-like (N, D) of observations. A 1D array is read as N
                observations with one feature.
            weights: Optional array-like (N,) or (N, 1) of non-negative
                weights. If None, every observation has weight 1.
            result_options: Overrides the descriptor's result options for this
                call only.

        Returns:
            ComputeResult exposing the requested artifacts, the cluster count
            and run metadata in `attrs`.

        Raises:
            ConfigurationError: If eps is negative, result_options has
                unknown bits, the observation set is empty or malformed, or
                weights do not match the observations.
        """
        # Validation happens before any computation
        options = check_result_options(
            self.result_options if result_options is None else result_options
        )
        check_parameters(self.eps, self.min_observations)
        min_observations = float(self.min_observations)
        observations = check_observations(data)
        sample_weights = check_weights(weights, observations.shape[0])
        proximity = self._build_proximity()

        state = run_dbscan(
            observations,
            proximity,
            min_observations=min_observations,
            weights=sample_weights,
        )

        attrs = {
            _attrs.EPS: proximity.eps,
            _attrs.MIN_OBSERVATIONS: min_observations,
            _attrs.METHOD_NAME: self._method_name,
            _attrs.MEM_SAVE_MODE: bool(proximity.mem_save_mode),
            _attrs.WEIGHTED: sample_weights is not None,
            _attrs.N_OBSERVATIONS: int(observations.shape[0]),
            _attrs.N_FEATURES: int(observations.shape[1]),
            _attrs.CLUSTER_COUNT: state.cluster_count,
            _attrs.N_CORE: int(state.core_flags.sum()),
            _attrs.N_NOISE: int(np.count_nonzero(state.labels == -1)),
            _attrs.RUNTIME_PROXIMITY: state.runtimes["proximity"],
            _attrs.RUNTIME_DENSITY: state.runtimes["density"],
            _attrs.RUNTIME_PROPAGATION: state.runtimes["propagation"],
            _attrs.RUNTIME_TOTAL: state.runtimes["total"],
            _attrs.WDBSCAN_VERSION: __version__,
        }

        logger.info(_format_cluster_summary(state.labels, state.cluster_count))

        return assemble_result(
            options,
            observations,
            state.labels,
            state.core_flags,
            state.cluster_count,
            attrs=attrs,
        )

    def fit(self, X: ArrayLike, y=None, sample_weight: Optional[ArrayLike] = None):
        """Fit the clustering from observations (scikit-learn API).

        Args:
            X: Array-like (N, D) of observations.
            y: Ignored. Present for API consistency.
            sample_weight: Optional array-like (N,) of non-negative weights.

        Returns:
            The fitted estimator.
        """
        result = self.compute(X, weights=sample_weight, result_options=ResultOptions.ALL)
        self.labels_ = result.labels
        self.core_sample_indices_ = result.core_observation_indices
        self.components_ = result.core_observations
        self.n_clusters_ = result.cluster_count
        return self

    def fit_predict(self, X: ArrayLike, y=None, sample_weight: Optional[ArrayLike] = None):
        """Fit the clustering and return the cluster label of every observation.

        Args:
            X: Array-like (N, D) of observations.
            y: Ignored. Present for API consistency.
            sample_weight: Optional array-like (N,) of non-negative weights.

        Returns:
            Array (N,) of cluster labels, -1 for noise.
        """
        return self.fit(X, sample_weight=sample_weight).labels_


def compute(
    data: ArrayLike,
    weights: Optional[ArrayLike] = None,
    *,
    eps: float,
    min_observations: float,
    result_options: Union[ResultOptions, int] = ResultOptions.LABELS,
    mem_save_mode: bool = False,
    method: Union[Literal["brute_force", "kd_tree"], str, BaseProximity] = "brute_force",
) -> ComputeResult:
    """Run DBSCAN once without keeping a descriptor around.

    Shortcut for `DBSCAN(eps, min_observations, ...).compute(data, weights)`;
    see `DBSCAN` for the meaning of every argument.

    Examples:
        >>> result = compute([0, 2, 3, 4, 6, 8, 10], eps=1, min_observations=2)
        >>> result.labels
        array([-1,  0,  0,  0, -1, -1, -1], dtype=int32)
    """
    return DBSCAN(
        eps=eps,
        min_observations=min_observations,
        result_options=result_options,
        mem_save_mode=mem_save_mode,
        method=method,
    ).compute(data, weights)
