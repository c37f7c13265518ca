import math

import numpy as np
import pytest

from tes_thermal import (
    ThermalNetwork, SourceEvaluator, ConstantPower, SolarDayProfile, pv_array_power,
    InvalidParameterError,
)


def make_network():
    net = ThermalNetwork()
    net.add_mass('a', 10.0, 300.0)
    net.add_mass('b', 10.0, 300.0)
    net.add_mass('c', 10.0, 300.0)
    net.add_reference('r', 300.0)
    return net


def test_sums_sources_per_node():
    net = make_network()
    net.add_source('a', 5.0)
    net.add_source('a', 2.5)
    net.add_source('c', lambda t: 0.5 * t)
    evaluator = SourceEvaluator(net)

    assert evaluator.node_order == ['a', 'b', 'c']
    np.testing.assert_allclose(evaluator.power_at(0.0), [7.5, 0.0, 0.0])
    np.testing.assert_allclose(evaluator.power_at(10.0), [7.5, 0.0, 5.0])
    assert evaluator.power_by_node(4.0) == {'a': 7.5, 'b': 0.0, 'c': 2.0}
    assert evaluator.total_power(4.0) == pytest.approx(9.5)
    assert not evaluator.is_constant


def test_repeated_and_out_of_order_evaluation():
    net = make_network()
    net.add_source('b', lambda t: math.sin(t))
    evaluator = SourceEvaluator(net)
    first = [evaluator.power_at(t)[1] for t in (3.0, 1.0, 2.0, 1.0, 3.0)]
    assert first[0] == first[4]
    assert first[1] == first[3]


def test_constant_power_vector_not_shared():
    net = make_network()
    net.add_source('a', 1.0)
    evaluator = SourceEvaluator(net)
    assert evaluator.is_constant
    P = evaluator.power_at(0.0)
    P[0] = 1e9
    assert evaluator.power_at(0.0)[0] == 1.0


def test_custom_node_order():
    net = make_network()
    net.add_source('c', 3.0)
    evaluator = SourceEvaluator(net, ['c', 'a', 'b'])
    np.testing.assert_allclose(evaluator.power_at(0.0), [3.0, 0.0, 0.0])
    with pytest.raises(InvalidParameterError):
        SourceEvaluator(net, ['a', 'b'])


def test_constant_power_rejects_non_finite():
    with pytest.raises(InvalidParameterError):
        ConstantPower(math.inf)
    assert ConstantPower(12)(1e6) == 12.0


def test_solar_day_profile():
    profile = SolarDayProfile(1000.0)
    assert profile(0.0) == 0.0
    assert profile(3 * 3600.0) == 0.0
    assert profile(12 * 3600.0) == pytest.approx(1000.0)
    assert profile(9 * 3600.0) == pytest.approx(1000.0 * math.sin(math.pi / 4))
    assert profile(21 * 3600.0) == 0.0
    # repeats daily
    assert profile(86400.0 + 12 * 3600.0) == pytest.approx(1000.0)

    hours = np.linspace(0.0, 86400.0, 100001)
    mean = np.mean([profile(t) for t in hours])
    assert mean == pytest.approx(profile.mean_power(), rel=1e-3)


def test_solar_day_profile_bad_hours():
    with pytest.raises(InvalidParameterError):
        SolarDayProfile(100.0, sunrise_h=18.0, sunset_h=6.0)


def test_pv_array_power():
    assert pv_array_power(355.0, 10, 0.5) == pytest.approx(1775.0)
    assert pv_array_power(355.0, 10) == pytest.approx(3550.0)
    with pytest.raises(InvalidParameterError):
        pv_array_power(355.0, 10, 1.5)
    with pytest.raises(InvalidParameterError):
        pv_array_power(355.0, -1)
