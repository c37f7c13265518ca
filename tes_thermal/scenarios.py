"""
TES Thermal Network Simulator - Reference Scenarios
===================================================
Builds and runs the two reference circuits of the project.

Minimal circuit:
    Heat Source (+) -> Thermal Mass, Heat Source (-) -> Thermal Reference.
    The source return path is a zero-conductance link, so the mass heats
    without loss and the closed-form check applies.

Residential circuit:
    PV heat source -> Sand_TES thermal mass -> heat exchanger conductance
    -> load-side reference.

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Optional

from .core.config import MinimalThermalParams, AdvancedThermalParams, SolverConfig
from .core.constants import PhysicalConstants, SIGNAL_NAMES
from .core.network import ThermalNetwork
from .core.power import SolarDayProfile
from .solvers.network_solver import NetworkSolver, SimulationResult
from .solvers.signal_log import Signal, SignalLog
from .solvers.validator import theoretical_no_loss, compare_to_theory, ValidationReport
from .utils.logger import get_logger

MINIMAL_MASS = 'Thermal Mass'
MINIMAL_REFERENCE = 'Thermal Reference'
RESIDENTIAL_TES = 'Sand_TES'
RESIDENTIAL_LOAD = 'Load_Reference'

MINIMAL_RATE_SIGNAL = 'MinimalRiseRate'


@dataclass
class ScenarioResult:
    """Outcome of a reference scenario run."""
    name: str
    network: ThermalNetwork
    simulation: SimulationResult
    signal: Signal
    theoretical_final: float  # K, lossless heating
    theoretical_rise_rate: float  # K/s
    validation: Optional[ValidationReport] = None
    exceeds_max_temperature: bool = False

    @property
    def final_temperature(self) -> float:
        return float(self.signal.final_value)


def build_minimal_network(params: Optional[MinimalThermalParams] = None) -> ThermalNetwork:
    params = params or MinimalThermalParams()
    network = ThermalNetwork('MinimalThermalModel')
    network.add_mass(MINIMAL_MASS, params.thermal_capacity, params.initial_temp)
    network.add_reference(MINIMAL_REFERENCE, params.reference_temp)
    network.add_link(MINIMAL_MASS, MINIMAL_REFERENCE, 0.0)
    network.add_source(MINIMAL_MASS, params.power)
    return network


def build_residential_network(params: Optional[AdvancedThermalParams] = None) -> ThermalNetwork:
    params = params or AdvancedThermalParams()
    network = ThermalNetwork('ResidentialBuildingTESandPVcell')
    network.add_mass(RESIDENTIAL_TES, params.tes.thermal_capacity, params.tes.initial_temp)
    network.add_reference(RESIDENTIAL_LOAD, params.load_temperature)
    network.add_link(RESIDENTIAL_TES, RESIDENTIAL_LOAD, params.hx.conductance)

    if params.use_solar_profile:
        network.add_source(RESIDENTIAL_TES, SolarDayProfile(params.pv.source_power))
    else:
        network.add_source(RESIDENTIAL_TES, params.pv.source_power)
    return network


def run_minimal_simulation(params: Optional[MinimalThermalParams] = None,
                           solver_config: Optional[SolverConfig] = None) -> ScenarioResult:
    """Heat the minimal block for ``params.stop_time`` and check it against theory."""
    params = params or MinimalThermalParams()
    logger = get_logger()
    network = build_minimal_network(params)

    log = SignalLog(network)
    signal = log.register_temperature(SIGNAL_NAMES['minimal'], MINIMAL_MASS)
    log.register_rise_rate(MINIMAL_RATE_SIGNAL, MINIMAL_MASS)

    logger.start_run(network.name, dict(params.to_dict(), thermal_capacity=params.thermal_capacity))
    try:
        simulation = NetworkSolver(network, solver_config, log).run(params.stop_time)
    except Exception as e:
        logger.end_run(success=False, message=str(e))
        raise

    final, rate = theoretical_no_loss(params.initial_temp, params.power,
                                      params.thermal_capacity, params.stop_time)
    validation = compare_to_theory(signal.final_value, final)
    logger.end_run(success=True,
                   message=f"final={signal.final_value:.4f}K, theory={final:.4f}K, "
                           f"diff={validation.difference:.2e}K")

    return ScenarioResult(
        name=network.name,
        network=network,
        simulation=simulation,
        signal=signal,
        theoretical_final=final,
        theoretical_rise_rate=rate,
        validation=validation,
    )


def run_residential_simulation(params: Optional[AdvancedThermalParams] = None,
                               solver_config: Optional[SolverConfig] = None) -> ScenarioResult:
    """Charge the TES from the PV source for ``params.stop_time``."""
    params = params or AdvancedThermalParams()
    logger = get_logger()
    network = build_residential_network(params)

    log = SignalLog(network)
    signal = log.register_temperature(SIGNAL_NAMES['residential'], RESIDENTIAL_TES)

    logger.start_run(network.name, {
        'tes_thermal_capacity': params.tes.thermal_capacity,
        'hx_conductance': params.hx.conductance,
        'source_power': params.pv.source_power,
        'solar_profile': params.use_solar_profile,
        'stop_time': params.stop_time,
    })
    if solver_config is None and params.use_solar_profile:
        # keep the step below an hour so a night-time start cannot skip the day
        solver_config = SolverConfig(max_step=PhysicalConstants.SECONDS_PER_HOUR)

    try:
        simulation = NetworkSolver(network, solver_config, log).run(params.stop_time)
    except Exception as e:
        logger.end_run(success=False, message=str(e))
        raise

    final, rate = theoretical_no_loss(params.tes.initial_temp, params.pv.source_power,
                                      params.tes.thermal_capacity, params.stop_time)
    exceeds = bool(signal.values.max() > params.tes.max_temp)
    if exceeds:
        logger.warning(f"{RESIDENTIAL_TES} exceeded its maximum temperature {params.tes.max_temp:.2f}K")
    logger.end_run(success=True, message=f"final={signal.final_value:.4f}K")

    return ScenarioResult(
        name=network.name,
        network=network,
        simulation=simulation,
        signal=signal,
        theoretical_final=final,
        theoretical_rise_rate=rate,
        exceeds_max_temperature=exceeds,
    )


__all__ = [
    'MINIMAL_MASS',
    'MINIMAL_REFERENCE',
    'RESIDENTIAL_TES',
    'RESIDENTIAL_LOAD',
    'MINIMAL_RATE_SIGNAL',
    'ScenarioResult',
    'build_minimal_network',
    'build_residential_network',
    'run_minimal_simulation',
    'run_residential_simulation',
]
