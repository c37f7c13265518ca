"""
TES Thermal Network Simulator - Theoretical Validator
=====================================================
Closed-form results used to sanity-check the numerical solution.

``theoretical_no_loss`` only holds for a single MASS node with no conductive
losses and one constant source: dQ = m * cp * dT with dQ = P * t gives
dT = P * t / (m * cp). The single-loss-path helpers cover one MASS node
tied to a reference through conductance G:

    T(t) = T_ss + (T0 - T_ss) * exp(-G t / C),   T_ss = T_ref + P / G

None of these functions look at a network; choosing when they apply is up
to the caller.

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..core.constants import SimulationDefaults


def theoretical_no_loss(initial_temperature: float, power: float,
                        capacitance: float, t_stop: float) -> Tuple[float, float]:
    """Return ``(final_temperature, rise_rate)`` for a lossless heated mass.

    :param initial_temperature: start temperature [K]
    :param power: constant heat input [W]
    :param capacitance: thermal capacitance m * cp [J/K]
    :param t_stop: heating duration [s]
    :returns: final temperature [K] and rise rate [K/s]
    """
    rise = power / capacitance
    return initial_temperature + rise * t_stop, rise


def steady_state_temperature(reference_temperature: float, power: float,
                             conductance: float) -> float:
    return reference_temperature + power / conductance


def time_constant(capacitance: float, conductance: float) -> float:
    return capacitance / conductance


def single_loss_response(initial_temperature: float, reference_temperature: float,
                         power: float, capacitance: float, conductance: float, t):
    """Temperature of a heated mass losing heat through one conductance.

    ``t`` may be a scalar or an array of times [s].
    """
    t_ss = steady_state_temperature(reference_temperature, power, conductance)
    return t_ss + (initial_temperature - t_ss) * np.exp(-conductance * np.asarray(t) / capacitance)


@dataclass(frozen=True)
class ValidationReport:
    """Simulated vs. theoretical final temperature."""
    simulated: float
    theoretical: float
    tolerance: float

    @property
    def difference(self) -> float:
        return self.simulated - self.theoretical

    @property
    def within_tolerance(self) -> bool:
        return math.isfinite(self.simulated) and abs(self.difference) <= self.tolerance


def compare_to_theory(simulated_final: float, theoretical_final: float,
                      tolerance: float = SimulationDefaults.THEORY_TOLERANCE_K) -> ValidationReport:
    return ValidationReport(float(simulated_final), float(theoretical_final), tolerance)


__all__ = [
    'theoretical_no_loss',
    'steady_state_temperature',
    'time_constant',
    'single_loss_response',
    'ValidationReport',
    'compare_to_theory',
]
