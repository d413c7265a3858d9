"""Result selection and assembly.

A compute call only materializes the artifacts named in its `ResultOptions`.
Fields that were not requested hold the `NOT_COMPUTED` sentinel, and reading
them raises `ResultNotRequestedError` for that specific artifact.
"""

import enum
from typing import Any, Dict, Optional

import numpy as np
from numpy.typing import NDArray

from wdbscan.errors import ConfigurationError, ResultNotRequestedError


class ResultOptions(enum.IntFlag):
    """Artifacts a compute call can produce. Combine members with `|`.

    Members:
        LABELS: cluster id per observation, -1 for noise.
        CORE_FLAGS: boolean core flag per observation.
        CORE_OBSERVATIONS: rows of the observations flagged core.
        CORE_OBSERVATION_INDICES: indices of the observations flagged core.
    """

    NONE = 0
    LABELS = 1
    CORE_FLAGS = 2
    CORE_OBSERVATIONS = 4
    CORE_OBSERVATION_INDICES = 8
    ALL = LABELS | CORE_FLAGS | CORE_OBSERVATIONS | CORE_OBSERVATION_INDICES


def check_result_options(value: Any) -> ResultOptions:
    """Convert `value` to ResultOptions, rejecting bits outside ResultOptions.ALL.

    Raises:
        ConfigurationError: If value is not an integer flag combination of
            the known artifacts.
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ConfigurationError(
            f"result_options must be a combination of ResultOptions, got {value!r}"
        )
    if int(value) & ~int(ResultOptions.ALL) or int(value) < 0:
        raise ConfigurationError(
            f"result_options {int(value)} contains bits outside ResultOptions.ALL "
            f"({int(ResultOptions.ALL)})"
        )
    return ResultOptions(int(value))


class _NotComputed:
    """Sentinel type for artifacts that were not requested."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_COMPUTED"

    def __bool__(self) -> bool:
        return False


NOT_COMPUTED = _NotComputed()


class ComputeResult:
    """Outcome of one DBSCAN compute call.

    Only the artifacts requested through `result_options` are available;
    `cluster_count`, `result_options` and `attrs` are always available.

    Args:
        result_options: The options the result was assembled for.
        cluster_count: Number of clusters found.
        labels: Array (N,) of int32 cluster ids, or NOT_COMPUTED.
        core_flags: Array (N,) of booleans, or NOT_COMPUTED.
        core_observations: Array (n_core, D) of core rows, or NOT_COMPUTED.
        core_observation_indices: Array (n_core,) of int64 indices, or NOT_COMPUTED.
        attrs: Metadata about the run, keyed by `wdbscan.utils._attrs`.
    """

    def __init__(
        self,
        result_options: ResultOptions,
        cluster_count: int,
        labels: Any = NOT_COMPUTED,
        core_flags: Any = NOT_COMPUTED,
        core_observations: Any = NOT_COMPUTED,
        core_observation_indices: Any = NOT_COMPUTED,
        attrs: Optional[Dict[str, Any]] = None,
    ):
        self.result_options = check_result_options(result_options)
        self.cluster_count = int(cluster_count)
        self._labels = labels
        self._core_flags = core_flags
        self._core_observations = core_observations
        self._core_observation_indices = core_observation_indices
        self.attrs = dict(attrs) if attrs else {}

    @staticmethod
    def _get(value: Any, option: ResultOptions) -> Any:
        if value is NOT_COMPUTED:
            raise ResultNotRequestedError(option)
        return value

    @property
    def labels(self) -> NDArray[np.int32]:
        """Cluster id per observation, -1 for noise."""
        return self._get(self._labels, ResultOptions.LABELS)

    @property
    def core_flags(self) -> NDArray[np.bool_]:
        """True for every observation whose weighted density reaches min_observations."""
        return self._get(self._core_flags, ResultOptions.CORE_FLAGS)

    @property
    def core_observations(self) -> NDArray[np.floating]:
        """Rows of the core observations, in index order."""
        return self._get(self._core_observations, ResultOptions.CORE_OBSERVATIONS)

    @property
    def core_observation_indices(self) -> NDArray[np.int64]:
        """Indices of the core observations, ascending."""
        return self._get(
            self._core_observation_indices, ResultOptions.CORE_OBSERVATION_INDICES
        )

    def is_requested(self, option: ResultOptions) -> bool:
        return bool(self.result_options & option) and option != ResultOptions.NONE

    def __repr__(self) -> str:
        requested = [
            option.name.lower()
            for option in (
                ResultOptions.LABELS,
                ResultOptions.CORE_FLAGS,
                ResultOptions.CORE_OBSERVATIONS,
                ResultOptions.CORE_OBSERVATION_INDICES,
            )
            if self.is_requested(option)
        ]
        return (
            f"ComputeResult(cluster_count={self.cluster_count}, "
            f"requested=[{', '.join(requested)}])"
        )


def assemble_result(
    result_options: ResultOptions,
    data: NDArray[np.floating],
    labels: NDArray[np.int32],
    core_flags: NDArray[np.bool_],
    cluster_count: int,
    attrs: Optional[Dict[str, Any]] = None,
) -> ComputeResult:
    """Materialize the requested artifacts from the engine's internal state.

    Args:
        result_options: Requested artifacts.
        data: Array (N, D) of observations the labels refer to.
        labels: Array (N,) of cluster ids.
        core_flags: Array (N,) of core flags.
        cluster_count: Number of clusters.
        attrs: Run metadata.

    Returns:
        A ComputeResult exposing exactly the requested artifacts.

    Raises:
        ConfigurationError: If result_options has bits outside ResultOptions.ALL.
    """
    result_options = check_result_options(result_options)
    fields: Dict[str, Any] = {}

    if result_options & ResultOptions.LABELS:
        fields["labels"] = labels
    if result_options & ResultOptions.CORE_FLAGS:
        fields["core_flags"] = core_flags
    if result_options & (
        ResultOptions.CORE_OBSERVATIONS | ResultOptions.CORE_OBSERVATION_INDICES
    ):
        core_indices = np.flatnonzero(core_flags).astype(np.int64)
        if result_options & ResultOptions.CORE_OBSERVATION_INDICES:
            fields["core_observation_indices"] = core_indices
        if result_options & ResultOptions.CORE_OBSERVATIONS:
            fields["core_observations"] = data[core_indices]

    return ComputeResult(result_options, cluster_count, attrs=attrs, **fields)
