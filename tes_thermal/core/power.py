"""
TES Thermal Network Simulator - Heat Source Power Functions
===========================================================
Deterministic power profiles ``P(t) -> W`` for heat sources.

Every profile is a pure function of simulation time: adaptive integrators
evaluate them at trial points they may later reject.

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

import math
from dataclasses import dataclass

from .constants import PhysicalConstants
from .errors import InvalidParameterError


def _check_finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be finite, got {value}")
    return value


@dataclass(frozen=True)
class ConstantPower:
    """Same power at every instant."""
    watts: float

    def __post_init__(self):
        object.__setattr__(self, 'watts', _check_finite('watts', self.watts))

    def __call__(self, t: float) -> float:
        return self.watts


@dataclass(frozen=True)
class SolarDayProfile:
    """Half-sine daylight profile repeating every 24 h.

    Power is ``peak_power * sin(pi * (h - sunrise) / (sunset - sunrise))``
    between sunrise and sunset (hours of day, t=0 is midnight) and zero
    at night.
    """
    peak_power: float
    sunrise_h: float = 6.0
    sunset_h: float = 18.0

    def __post_init__(self):
        _check_finite('peak_power', self.peak_power)
        if not 0.0 <= self.sunrise_h < self.sunset_h <= 24.0:
            raise InvalidParameterError(
                f"Need 0 <= sunrise < sunset <= 24, got {self.sunrise_h}..{self.sunset_h}")

    def __call__(self, t: float) -> float:
        hour = (t % PhysicalConstants.SECONDS_PER_DAY) / PhysicalConstants.SECONDS_PER_HOUR
        if self.sunrise_h <= hour <= self.sunset_h:
            daylight = self.sunset_h - self.sunrise_h
            return self.peak_power * math.sin(math.pi * (hour - self.sunrise_h) / daylight)
        return 0.0

    def mean_power(self) -> float:
        """Average power over one full day."""
        daylight = self.sunset_h - self.sunrise_h
        return self.peak_power * (2.0 / math.pi) * daylight / 24.0


def pv_array_power(panel_peak_w: float, n_panels: int, fraction: float = 1.0) -> float:
    """Fixed share of a PV array's peak power, in watts."""
    if n_panels < 0:
        raise InvalidParameterError(f"n_panels must be >= 0, got {n_panels}")
    if not 0.0 <= fraction <= 1.0:
        raise InvalidParameterError(f"fraction must lie in [0, 1], got {fraction}")
    return _check_finite('panel_peak_w', panel_peak_w) * n_panels * fraction


__all__ = [
    'ConstantPower',
    'SolarDayProfile',
    'pv_array_power',
]
