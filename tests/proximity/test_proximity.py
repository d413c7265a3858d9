import numpy as np
import pytest

from wdbscan import ConfigurationError
from wdbscan.proximity import (
    KDTreeProximity,
    OnDemandProximity,
    PrecomputedProximity,
    get_proximity,
)


def _strategies(eps):
    return [
        PrecomputedProximity(eps),
        OnDemandProximity(eps),
        KDTreeProximity(eps, mem_save_mode=False),
        KDTreeProximity(eps, mem_save_mode=True),
    ]


@pytest.fixture
def random_points():
    """Random 3D observations with a few exact duplicates."""
    rng = np.random.default_rng(42)
    data = rng.uniform(0, 1, size=(250, 3))
    data[10] = data[20]
    data[30] = data[20]
    return np.ascontiguousarray(data)


@pytest.mark.parametrize("eps", [0.0, 0.05, 0.15, 0.4])
def test_strategies_are_equivalent(random_points, eps):
    """
    - test 1: all strategies return identical neighbor sets
    - test 2: all strategies return bit-identical weighted densities
    """
    weights = np.random.default_rng(1).uniform(0, 3, size=random_points.shape[0])
    strategies = [s.fit(random_points) for s in _strategies(eps)]
    reference = strategies[0]

    # test 1
    for i in range(random_points.shape[0]):
        expected = reference.neighbors_of(i)
        for strategy in strategies[1:]:
            np.testing.assert_array_equal(
                strategy.neighbors_of(i), expected, err_msg=repr(strategy)
            )

    # test 2
    expected_densities = reference.weighted_density(weights)
    for strategy in strategies[1:]:
        assert strategy.weighted_density(weights).tobytes() == expected_densities.tobytes()


@pytest.mark.parametrize("strategy", _strategies(5.0), ids=repr)
def test_ties_are_inclusive(strategy):
    """
    - test 1: a pair at exactly eps are neighbors (3-4-5 triangle)
    - test 2: every neighborhood contains the observation itself, in ascending order
    """
    data = np.array([[0.0, 0.0], [3.0, 4.0], [6.0, 8.000001], [100.0, 100.0]])
    strategy.fit(data)

    # test 1
    np.testing.assert_array_equal(strategy.neighbors_of(0), [0, 1])
    np.testing.assert_array_equal(strategy.neighbors_of(1), [0, 1])

    # test 2
    np.testing.assert_array_equal(strategy.neighbors_of(2), [2])
    np.testing.assert_array_equal(strategy.neighbors_of(3), [3])


@pytest.mark.parametrize("strategy", _strategies(0.0), ids=repr)
def test_eps_zero_keeps_coincident_points(strategy):
    data = np.array([[1.0, 1.0], [1.0, 1.0], [1.0, 1.0 + 1e-12]])
    strategy.fit(data)
    np.testing.assert_array_equal(strategy.neighbors_of(0), [0, 1])
    np.testing.assert_array_equal(strategy.neighbors_of(2), [2])


def test_default_weighted_density_matches_kernels(random_points):
    """
    - test 1: the base-class density loop agrees with the parallel kernels
    """
    weights = np.random.default_rng(7).uniform(0, 1, size=random_points.shape[0])
    kd = KDTreeProximity(0.2).fit(random_points)
    brute = OnDemandProximity(0.2).fit(random_points)
    np.testing.assert_array_equal(kd.weighted_density(weights), brute.weighted_density(weights))


def test_unfitted_strategy_raises():
    with pytest.raises(RuntimeError):
        OnDemandProximity(1.0).neighbors_of(0)


def test_release_drops_buffers(random_points):
    strategy = PrecomputedProximity(0.1).fit(random_points)
    strategy.release()
    assert strategy.n_observations == 0
    with pytest.raises(RuntimeError):
        strategy.neighbors_of(0)


@pytest.mark.parametrize(
    "method,mem_save_mode,expected",
    [
        ("brute_force", False, PrecomputedProximity),
        ("brute_force", True, OnDemandProximity),
        ("kd_tree", False, KDTreeProximity),
        ("kd_tree", True, KDTreeProximity),
    ],
)
def test_get_proximity(method, mem_save_mode, expected):
    strategy = get_proximity(method, mem_save_mode, 0.5)
    assert isinstance(strategy, expected)
    assert strategy.eps == 0.5


def test_get_proximity_errors():
    with pytest.raises(ConfigurationError):
        get_proximity("ball_tree", False, 0.5)
    with pytest.raises(ConfigurationError):
        get_proximity("brute_force", False, -1.0)


def test_float32_strategies_are_equivalent(random_points):
    """
    - test 1: strategies fitted on float32 data evaluate eps in float32
    - test 2: they still agree on every neighbor set
    """
    data = random_points.astype(np.float32)
    strategies = [s.fit(data) for s in _strategies(0.15)]

    # test 1
    for strategy in strategies:
        assert strategy.dtype == np.float32
        assert strategy.eps_sq == np.float32(0.15) * np.float32(0.15)

    # test 2
    for i in range(data.shape[0]):
        expected = strategies[0].neighbors_of(i)
        for strategy in strategies[1:]:
            np.testing.assert_array_equal(
                strategy.neighbors_of(i), expected, err_msg=repr(strategy)
            )


def test_mem_save_mode_attribute():
    assert PrecomputedProximity(1.0).mem_save_mode is False
    assert OnDemandProximity(1.0).mem_save_mode is True
    assert KDTreeProximity(1.0, mem_save_mode=True).mem_save_mode is True
