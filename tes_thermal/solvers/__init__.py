"""
TES Thermal Network Simulator - Solvers Module
==============================================
Source evaluation, ODE integration, signal logging and closed-form checks.
"""

from .sources import (
    SourceEvaluator,
)

from .signal_log import (
    NetworkState,
    Signal,
    SignalLog,
    node_temperature,
    rise_rate,
)

from .network_solver import (
    ODE_METHODS,
    SolverState,
    SimulationResult,
    NetworkSolver,
    run_network,
)

from .validator import (
    theoretical_no_loss,
    steady_state_temperature,
    time_constant,
    single_loss_response,
    ValidationReport,
    compare_to_theory,
)

__all__ = [
    # Sources
    'SourceEvaluator',
    # Signal log
    'NetworkState',
    'Signal',
    'SignalLog',
    'node_temperature',
    'rise_rate',
    # Solver
    'ODE_METHODS',
    'SolverState',
    'SimulationResult',
    'NetworkSolver',
    'run_network',
    # Validator
    'theoretical_no_loss',
    'steady_state_temperature',
    'time_constant',
    'single_loss_response',
    'ValidationReport',
    'compare_to_theory',
]
