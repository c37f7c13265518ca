"""
TES Thermal Network Simulator - Configuration
=============================================
Parameter structures for the reference scenarios and the solver.

The structures are plain dataclasses filled from whatever the external
parameter source supplies (``from_dict``) and serialisable back to plain
mappings (``to_dict``). Nothing here touches the filesystem.

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from .constants import PhysicalConstants, SimulationDefaults, MaterialsDatabase
from .errors import InvalidParameterError
from .power import pv_array_power


def _filter_kwargs(dc_type, d: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Filter dict keys to those accepted by the dataclass constructor."""
    allowed = getattr(dc_type, '__dataclass_fields__', {}).keys()
    return {k: v for k, v in (d or {}).items() if k in allowed}


# =============================================================================
# MINIMAL SCENARIO
# =============================================================================

@dataclass
class MinimalThermalParams:
    """Small block of material heated by a constant source."""
    mass: float = 10.0  # kg
    specific_heat: float = 900.0  # J/(kg·K), aluminium
    initial_temp: float = 25.0 + PhysicalConstants.CELSIUS_TO_KELVIN  # K
    power: float = 50.0  # W
    reference_temp: float = 20.0 + PhysicalConstants.CELSIUS_TO_KELVIN  # K
    stop_time: float = SimulationDefaults.MINIMAL_STOP_TIME_S  # s

    @property
    def thermal_capacity(self) -> float:
        """m * cp [J/K]"""
        return self.mass * self.specific_heat

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MinimalThermalParams':
        return cls(**_filter_kwargs(cls, data))


# =============================================================================
# RESIDENTIAL (ADVANCED) SCENARIO
# =============================================================================

@dataclass
class TESParams:
    """Thermal energy storage block (molten salt or sand)."""
    volume: float = 50.0  # m³
    density: float = 1800.0  # kg/m³
    specific_heat: float = 1500.0  # J/(kg·K)
    max_temp: float = 650.0 + PhysicalConstants.CELSIUS_TO_KELVIN  # K
    initial_temp: float = 20.0 + PhysicalConstants.CELSIUS_TO_KELVIN  # K

    @property
    def thermal_capacity(self) -> float:
        return self.volume * self.density * self.specific_heat


@dataclass
class HeatExchangerParams:
    """Heat exchanger between the storage and the load side."""
    surface_area: float = 100.0  # m²
    U: float = 5.0  # W/(m²·K)

    @property
    def conductance(self) -> float:
        return self.U * self.surface_area


@dataclass
class FluidParams:
    """Heat recovery working fluid. Informational: the thermal network has no fluid domain."""
    flow_rate: float = 0.1  # m³/s
    fluid_type: str = 'water'

    @property
    def specific_heat(self) -> float:
        return MaterialsDatabase.get_fluid(self.fluid_type).specific_heat

    @property
    def density(self) -> float:
        return MaterialsDatabase.get_fluid(self.fluid_type).density

    @property
    def mass_flow_rate(self) -> float:
        """kg/s"""
        return self.flow_rate * self.density


@dataclass
class PVParams:
    """Photovoltaic array feeding the storage heater."""
    Pm: float = 355.0  # peak power of one panel, W
    Vm: float = 38.8  # voltage at Pmax, V
    num_panels: int = 10
    power_fraction: float = 0.5  # share of peak power delivered as heat

    @property
    def total_power(self) -> float:
        return self.Pm * self.num_panels

    @property
    def source_power(self) -> float:
        return pv_array_power(self.Pm, self.num_panels, self.power_fraction)


@dataclass
class AdvancedThermalParams:
    """Complete residential TES + PV + heat exchanger parameter set."""
    tes: TESParams = field(default_factory=TESParams)
    hx: HeatExchangerParams = field(default_factory=HeatExchangerParams)
    fluid: FluidParams = field(default_factory=FluidParams)
    pv: PVParams = field(default_factory=PVParams)
    reference_temp: float = 20.0 + PhysicalConstants.CELSIUS_TO_KELVIN  # K
    load_reference_temp: Optional[float] = None  # K, defaults to reference_temp
    use_solar_profile: bool = False
    stop_time: float = SimulationDefaults.RESIDENTIAL_STOP_TIME_S  # s

    @property
    def load_temperature(self) -> float:
        if self.load_reference_temp is None:
            return self.reference_temp
        return self.load_reference_temp

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AdvancedThermalParams':
        params = cls(**{k: v for k, v in _filter_kwargs(cls, data).items()
                        if k not in ('tes', 'hx', 'fluid', 'pv')})

        if 'tes' in data:
            params.tes = TESParams(**_filter_kwargs(TESParams, data['tes']))
        if 'hx' in data:
            params.hx = HeatExchangerParams(**_filter_kwargs(HeatExchangerParams, data['hx']))
        if 'fluid' in data:
            params.fluid = FluidParams(**_filter_kwargs(FluidParams, data['fluid']))
        if 'pv' in data:
            params.pv = PVParams(**_filter_kwargs(PVParams, data['pv']))

        return params


# =============================================================================
# SOLVER
# =============================================================================

@dataclass
class SolverConfig:
    """Integration settings.

    ``method`` names a scipy.integrate OdeSolver: RK45, RK23 and DOP853 are
    explicit; Radau, BDF and LSODA handle stiff networks.
    """
    method: str = SimulationDefaults.DEFAULT_METHOD
    rtol: float = SimulationDefaults.DEFAULT_RTOL
    atol: float = SimulationDefaults.DEFAULT_ATOL
    max_step: float = math.inf
    first_step: Optional[float] = None
    t0: float = 0.0

    def __post_init__(self):
        known = SimulationDefaults.EXPLICIT_METHODS + SimulationDefaults.IMPLICIT_METHODS
        if self.method not in known:
            raise InvalidParameterError(
                f"Unknown integration method '{self.method}', expected one of {', '.join(known)}")
        for name in ('rtol', 'atol', 'max_step'):
            value = getattr(self, name)
            if not value > 0:
                raise InvalidParameterError(f"{name} must be > 0, got {value}")
        if self.first_step is not None and not (math.isfinite(self.first_step) and self.first_step > 0):
            raise InvalidParameterError(f"first_step must be finite and > 0, got {self.first_step}")
        if not math.isfinite(self.t0):
            raise InvalidParameterError(f"t0 must be finite, got {self.t0}")

    @property
    def is_stiff(self) -> bool:
        return self.method in SimulationDefaults.IMPLICIT_METHODS

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SolverConfig':
        return cls(**_filter_kwargs(cls, data))


__all__ = [
    'MinimalThermalParams',
    'TESParams',
    'HeatExchangerParams',
    'FluidParams',
    'PVParams',
    'AdvancedThermalParams',
    'SolverConfig',
]
