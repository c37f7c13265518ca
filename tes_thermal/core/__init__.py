"""
TES Thermal Network Simulator - Core Module
===========================================
Network model, configuration, constants and error taxonomy.
"""

from .errors import (
    ThermalNetworkError, DuplicateNodeError, UnknownNodeError,
    InvalidParameterError, DisconnectedNetworkError, NoReferenceError,
    MultipleReferenceTemperaturesError, UnknownSignalError, LogSealedError,
    SolverStateError, IntegrationDivergedError,
)

from .network import (
    NodeKind, Node, Link, Source, ThermalNetwork
)

from .power import (
    ConstantPower, SolarDayProfile, pv_array_power
)

from .config import (
    MinimalThermalParams, AdvancedThermalParams, TESParams,
    HeatExchangerParams, FluidParams, PVParams, SolverConfig
)

from .constants import (
    PhysicalConstants, MaterialsDatabase, StorageMaterial, SimulationDefaults,
    SIGNAL_NAMES, celsius_to_kelvin, kelvin_to_celsius
)

__all__ = [
    # Errors
    'ThermalNetworkError', 'DuplicateNodeError', 'UnknownNodeError',
    'InvalidParameterError', 'DisconnectedNetworkError', 'NoReferenceError',
    'MultipleReferenceTemperaturesError', 'UnknownSignalError', 'LogSealedError',
    'SolverStateError', 'IntegrationDivergedError',

    # Network
    'NodeKind', 'Node', 'Link', 'Source', 'ThermalNetwork',
    'ConstantPower', 'SolarDayProfile', 'pv_array_power',

    # Configuration
    'MinimalThermalParams', 'AdvancedThermalParams', 'TESParams',
    'HeatExchangerParams', 'FluidParams', 'PVParams', 'SolverConfig',

    # Constants
    'PhysicalConstants', 'MaterialsDatabase', 'StorageMaterial', 'SimulationDefaults',
    'SIGNAL_NAMES', 'celsius_to_kelvin', 'kelvin_to_celsius',
]
