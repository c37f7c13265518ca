"""
TES Thermal Network Simulator - Physical Constants and Defaults
===============================================================
Unit conversions, material properties used by the reference scenarios,
and solver defaults.

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Dict

import numpy as np


# =============================================================================
# PHYSICAL CONSTANTS
# =============================================================================

class PhysicalConstants:
    """Fundamental constants and unit conversions."""

    # Absolute zero offset [K]
    CELSIUS_TO_KELVIN = 273.15

    SECONDS_PER_MINUTE = 60.0
    SECONDS_PER_HOUR = 3600.0
    SECONDS_PER_DAY = 86400.0


def celsius_to_kelvin(temp_c):
    """Convert Celsius to Kelvin. Works on scalars and numpy arrays."""
    return np.add(temp_c, PhysicalConstants.CELSIUS_TO_KELVIN)


def kelvin_to_celsius(temp_k):
    """Convert Kelvin to Celsius for presentation."""
    return np.subtract(temp_k, PhysicalConstants.CELSIUS_TO_KELVIN)


# =============================================================================
# MATERIAL PROPERTIES
# =============================================================================

@dataclass(frozen=True)
class StorageMaterial:
    """Bulk properties of a heat storage medium."""
    name: str
    density: float  # kg/m³
    specific_heat: float  # J/(kg·K)

    def capacitance(self, volume_m3: float) -> float:
        """Thermal capacitance [J/K] of ``volume_m3`` of this material."""
        return volume_m3 * self.density * self.specific_heat


class MaterialsDatabase:
    """Storage media and working fluids referenced by the scenarios."""

    STORAGE = {
        'ALUMINIUM': StorageMaterial('Aluminium', density=2700, specific_heat=900),
        'NITRATE_SALT': StorageMaterial('Nitrate salt', density=1800, specific_heat=1500),
        'SAND': StorageMaterial('Sand', density=1600, specific_heat=830),
        'COPPER': StorageMaterial('Copper', density=8960, specific_heat=385),
        'WATER': StorageMaterial('Water', density=1000, specific_heat=4180),
    }

    FLUIDS = {
        'water': StorageMaterial('Water', density=1000, specific_heat=4180),
        'air': StorageMaterial('Air', density=1.2, specific_heat=1005),
    }

    @classmethod
    def get_storage(cls, key: str) -> StorageMaterial:
        return cls.STORAGE[key.upper()]

    @classmethod
    def get_fluid(cls, key: str) -> StorageMaterial:
        return cls.FLUIDS[key.lower()]


# =============================================================================
# SIMULATION DEFAULTS
# =============================================================================

class SimulationDefaults:
    """Default solver parameters."""

    DEFAULT_METHOD = 'RK45'

    # scipy.integrate OdeSolver classes by name
    EXPLICIT_METHODS = ('RK45', 'RK23', 'DOP853')
    IMPLICIT_METHODS = ('Radau', 'BDF', 'LSODA')

    DEFAULT_RTOL = 1e-6
    DEFAULT_ATOL = 1e-9

    # Reference scenario horizons [s]
    MINIMAL_STOP_TIME_S = 3600.0
    RESIDENTIAL_STOP_TIME_S = 86400.0

    # Tolerance for the closed-form no-loss comparison [K]
    THEORY_TOLERANCE_K = 1e-3


SIGNAL_NAMES: Dict[str, str] = {
    'minimal': 'MinimalTemperature',
    'residential': 'StorageTemperature',
}


__all__ = [
    'PhysicalConstants',
    'celsius_to_kelvin',
    'kelvin_to_celsius',
    'StorageMaterial',
    'MaterialsDatabase',
    'SimulationDefaults',
    'SIGNAL_NAMES',
]
