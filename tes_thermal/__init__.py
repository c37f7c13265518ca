"""
TES Thermal Network Simulator
=============================
Lumped thermal-capacitance network simulation for thermal energy storage.

Features:
- Thermal networks of MASS and REFERENCE nodes, conductive links and heat sources
- Adaptive explicit and implicit (stiff) ODE integration via scipy
- Named signal logging at every accepted integration step
- Closed-form checks for lossless and single-loss-path heating
- Minimal and residential TES + PV reference scenarios

Temperatures are in Kelvin throughout; convert with ``kelvin_to_celsius``
when presenting results.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"

from .core import (
    ThermalNetworkError, DuplicateNodeError, UnknownNodeError,
    InvalidParameterError, DisconnectedNetworkError, NoReferenceError,
    MultipleReferenceTemperaturesError, UnknownSignalError, LogSealedError,
    SolverStateError, IntegrationDivergedError,
    NodeKind, Node, Link, Source, ThermalNetwork,
    ConstantPower, SolarDayProfile, pv_array_power,
    MinimalThermalParams, AdvancedThermalParams, SolverConfig,
    celsius_to_kelvin, kelvin_to_celsius,
)

from .solvers import (
    SourceEvaluator, NetworkState, Signal, SignalLog,
    SolverState, SimulationResult, NetworkSolver, run_network,
    theoretical_no_loss, steady_state_temperature, single_loss_response,
    compare_to_theory,
)

from .scenarios import (
    ScenarioResult,
    build_minimal_network,
    build_residential_network,
    run_minimal_simulation,
    run_residential_simulation,
)

from .utils import get_logger, initialize_logger

__all__ = [
    # Errors
    'ThermalNetworkError', 'DuplicateNodeError', 'UnknownNodeError',
    'InvalidParameterError', 'DisconnectedNetworkError', 'NoReferenceError',
    'MultipleReferenceTemperaturesError', 'UnknownSignalError', 'LogSealedError',
    'SolverStateError', 'IntegrationDivergedError',

    # Network model
    'NodeKind', 'Node', 'Link', 'Source', 'ThermalNetwork',
    'ConstantPower', 'SolarDayProfile', 'pv_array_power',

    # Configuration
    'MinimalThermalParams', 'AdvancedThermalParams', 'SolverConfig',
    'celsius_to_kelvin', 'kelvin_to_celsius',

    # Solvers
    'SourceEvaluator', 'NetworkState', 'Signal', 'SignalLog',
    'SolverState', 'SimulationResult', 'NetworkSolver', 'run_network',
    'theoretical_no_loss', 'steady_state_temperature', 'single_loss_response',
    'compare_to_theory',

    # Scenarios
    'ScenarioResult', 'build_minimal_network', 'build_residential_network',
    'run_minimal_simulation', 'run_residential_simulation',

    # Logging
    'get_logger', 'initialize_logger',
]
