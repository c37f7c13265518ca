import math

import pytest

from tes_thermal import MinimalThermalParams, AdvancedThermalParams, SolverConfig, InvalidParameterError
from tes_thermal.core.config import PVParams, FluidParams
from tes_thermal.core.constants import MaterialsDatabase, celsius_to_kelvin, kelvin_to_celsius


def test_minimal_defaults(minimal_params):
    assert minimal_params.thermal_capacity == 9000.0
    assert minimal_params.initial_temp == pytest.approx(298.15)
    assert minimal_params.reference_temp == pytest.approx(293.15)
    assert minimal_params.stop_time == 3600.0


def test_minimal_round_trip_ignores_unknown_keys():
    params = MinimalThermalParams.from_dict({'mass': 2.0, 'power': 10.0, 'colour': 'blue'})
    assert params.mass == 2.0
    assert params.specific_heat == 900.0
    assert MinimalThermalParams.from_dict(params.to_dict()) == params


def test_advanced_defaults(advanced_params):
    assert advanced_params.tes.thermal_capacity == pytest.approx(1.35e8)
    assert advanced_params.hx.conductance == 500.0
    assert advanced_params.pv.total_power == pytest.approx(3550.0)
    assert advanced_params.pv.source_power == pytest.approx(1775.0)
    assert advanced_params.load_temperature == advanced_params.reference_temp
    assert advanced_params.fluid.mass_flow_rate == pytest.approx(100.0)


def test_advanced_nested_from_dict():
    params = AdvancedThermalParams.from_dict({
        'tes': {'volume': 10.0},
        'hx': {'U': 2.0, 'surface_area': 50.0},
        'pv': {'num_panels': 4},
        'load_reference_temp': 300.0,
        'use_solar_profile': True,
    })
    assert params.tes.volume == 10.0
    assert params.tes.density == 1800.0
    assert params.hx.conductance == 100.0
    assert params.pv.num_panels == 4
    assert params.load_temperature == 300.0
    assert params.use_solar_profile
    assert AdvancedThermalParams.from_dict(params.to_dict()) == params


def test_fluid_lookup():
    assert FluidParams(fluid_type='air').density == 1.2
    assert MaterialsDatabase.get_storage('sand').capacitance(2.0) == 2.0 * 1600 * 830
    assert PVParams(power_fraction=1.0).source_power == PVParams().total_power


def test_temperature_conversion():
    assert celsius_to_kelvin(25.0) == pytest.approx(298.15)
    assert kelvin_to_celsius(293.15) == pytest.approx(20.0)


def test_solver_config_defaults_and_round_trip():
    config = SolverConfig()
    assert config.method == 'RK45'
    assert not config.is_stiff
    assert SolverConfig(method='Radau').is_stiff
    restored = SolverConfig.from_dict(SolverConfig(method='BDF', rtol=1e-8, t0=5.0).to_dict())
    assert restored.method == 'BDF'
    assert restored.rtol == 1e-8
    assert restored.t0 == 5.0


@pytest.mark.parametrize('kwargs', [
    {'rtol': 0.0},
    {'atol': -1.0},
    {'max_step': 0.0},
    {'first_step': math.inf},
    {'t0': math.nan},
])
def test_solver_config_rejects_bad_values(kwargs):
    with pytest.raises(InvalidParameterError):
        SolverConfig(**kwargs)


def test_pv_source_power_is_validated():
    with pytest.raises(InvalidParameterError):
        PVParams(power_fraction=1.5).source_power
