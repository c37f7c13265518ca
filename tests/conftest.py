import pytest

from tes_thermal import ThermalNetwork, MinimalThermalParams, AdvancedThermalParams

T_REF = 293.15


@pytest.fixture
def minimal_params():
    return MinimalThermalParams()


@pytest.fixture
def advanced_params():
    return AdvancedThermalParams()


@pytest.fixture
def make_single_mass():
    """Factory for one heated mass tied to a reference through ``conductance``."""
    def factory(capacitance=9000.0, initial_temperature=298.15, power=50.0,
                conductance=0.0, reference_temperature=T_REF):
        network = ThermalNetwork('single')
        network.add_mass('mass', capacitance, initial_temperature)
        network.add_reference('ref', reference_temperature)
        network.add_link('mass', 'ref', conductance)
        if power is not None:
            network.add_source('mass', power)
        return network
    return factory
