import math

import numpy as np
import pytest

from tes_thermal import (
    theoretical_no_loss, steady_state_temperature, single_loss_response, compare_to_theory,
)
from tes_thermal.solvers.validator import time_constant


def test_minimal_scenario_numbers():
    final, rate = theoretical_no_loss(298.15, 50.0, 10.0 * 900.0, 3600.0)
    assert final == pytest.approx(318.15)
    assert rate == pytest.approx(0.005556, abs=1e-6)
    assert rate * 60 == pytest.approx(0.3333, abs=1e-4)


def test_no_power_no_change():
    final, rate = theoretical_no_loss(300.0, 0.0, 1.0, 1e6)
    assert final == 300.0
    assert rate == 0.0


def test_single_loss_helpers():
    assert steady_state_temperature(293.15, 50.0, 10.0) == pytest.approx(298.15)
    assert time_constant(9000.0, 10.0) == 900.0
    assert single_loss_response(293.15, 293.15, 50.0, 9000.0, 10.0, 0.0) == pytest.approx(293.15)

    t = np.array([0.0, 900.0, 1e7])
    response = single_loss_response(293.15, 293.15, 50.0, 9000.0, 10.0, t)
    assert response.shape == (3,)
    assert response[1] == pytest.approx(293.15 + 5.0 * (1 - math.exp(-1)))
    assert response[2] == pytest.approx(298.15)


def test_compare_to_theory():
    report = compare_to_theory(318.1504, 318.15)
    assert report.within_tolerance
    assert report.difference == pytest.approx(4e-4)

    assert not compare_to_theory(318.2, 318.15).within_tolerance
    assert not compare_to_theory(math.nan, 318.15).within_tolerance
    assert compare_to_theory(318.2, 318.15, tolerance=0.1).within_tolerance
