"""
TES Thermal Network Simulator - Network Solver
==============================================
Integrates the temperature ODEs of a lumped thermal network.

For every MASS node i with capacitance C_i:

    dT_i/dt = [ P_i(t) + sum_j G_ij (T_j - T_i) ] / C_i

The system is assembled once per run in matrix form

    C dT/dt = P(t) + b - K T

where K is the conductance Laplacian restricted to MASS nodes and b holds
the heat flow from fixed REFERENCE temperatures (sum of G * T_ref). Only
MASS temperatures are state variables.

Supports:
- Explicit adaptive Runge-Kutta methods (RK45, RK23, DOP853)
- Implicit stiff methods (Radau, BDF, LSODA) with the exact Jacobian
- Signal logging at t0 and at every accepted step

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

import numpy as np
from scipy import sparse
from scipy.integrate import RK45, RK23, DOP853, Radau, BDF, LSODA

from ..core.config import SolverConfig
from ..core.errors import (
    InvalidParameterError, IntegrationDivergedError, SolverStateError, LogSealedError,
)
from ..core.network import ThermalNetwork
from ..utils.logger import get_logger, timed_function, log_section
from .signal_log import SignalLog, NetworkState
from .sources import SourceEvaluator

ODE_METHODS = {
    'RK45': RK45,
    'RK23': RK23,
    'DOP853': DOP853,
    'Radau': Radau,
    'BDF': BDF,
    'LSODA': LSODA,
}


class SolverState(Enum):
    """Solver execution state."""
    NOT_STARTED = 0
    RUNNING = 1
    COMPLETED = 2
    FAILED = 3


@dataclass
class SimulationResult:
    """Trajectory of one completed run."""
    node_ids: List[str]
    times: np.ndarray  # (n_samples,)
    temperatures: np.ndarray  # (n_samples, n_mass) in K
    signal_log: SignalLog
    method: str
    n_steps: int = 0
    n_rhs_evals: int = 0
    compute_time_s: float = 0.0

    def temperature_of(self, node_id: str) -> np.ndarray:
        """Temperature history [K] of one MASS node."""
        try:
            i = self.node_ids.index(node_id)
        except ValueError:
            raise KeyError(f"'{node_id}' is not a MASS node of this run") from None
        return self.temperatures[:, i]

    @property
    def final_time(self) -> float:
        return float(self.times[-1])

    @property
    def final_temperatures(self) -> Dict[str, float]:
        return dict(zip(self.node_ids, self.temperatures[-1].tolist()))

    def get_signal(self, name: str):
        return self.signal_log.get(name)


class NetworkSolver:
    """
    ODE solver for a lumped thermal network.

    A solver instance performs exactly one run:
    NOT_STARTED -> RUNNING -> COMPLETED | FAILED.
    """

    def __init__(self, network: ThermalNetwork, config: Optional[SolverConfig] = None,
                 signal_log: Optional[SignalLog] = None):
        self.network = network
        self.config = config or SolverConfig()
        self.logger = get_logger()

        if signal_log is None:
            signal_log = SignalLog(network)
        elif signal_log.sealed:
            raise LogSealedError("Signal log is sealed and cannot record a new run")
        else:
            signal_log.bind(network)
        self.signal_log = signal_log

        self.state = SolverState.NOT_STARTED

        # Built during run
        self.node_ids: List[str] = []
        self.C_vector: Optional[np.ndarray] = None  # Capacitances
        self.K_matrix: Optional[sparse.csr_matrix] = None  # Conductance Laplacian
        self.b_vector: Optional[np.ndarray] = None  # Reference coupling G * T_ref
        self.J_matrix: Optional[sparse.csr_matrix] = None  # -diag(1/C) K
        self.sources: Optional[SourceEvaluator] = None
        self._reference_temps: Dict[str, float] = {}

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    @timed_function("network_assembly")
    def _assemble(self):
        """Build C, K, b and the Jacobian from the network topology."""
        masses = self.network.mass_nodes
        self.node_ids = [n.node_id for n in masses]
        index = {node_id: i for i, node_id in enumerate(self.node_ids)}
        n = len(self.node_ids)

        self._reference_temps = {r.node_id: r.initial_temperature
                                 for r in self.network.reference_nodes}

        self.C_vector = np.array([node.capacitance for node in masses], dtype=np.float64)
        self.b_vector = np.zeros(n, dtype=np.float64)
        K_rows, K_cols, K_data = [], [], []

        for link in self.network.links:
            G = link.conductance
            if G == 0.0:
                continue
            ia = index.get(link.node_a)
            ib = index.get(link.node_b)

            if ia is not None and ib is not None:
                K_rows += [ia, ib, ia, ib]
                K_cols += [ia, ib, ib, ia]
                K_data += [G, G, -G, -G]
            elif ia is not None:
                K_rows.append(ia)
                K_cols.append(ia)
                K_data.append(G)
                self.b_vector[ia] += G * self._reference_temps[link.node_b]
            elif ib is not None:
                K_rows.append(ib)
                K_cols.append(ib)
                K_data.append(G)
                self.b_vector[ib] += G * self._reference_temps[link.node_a]
            # reference-to-reference links carry no state

        # Duplicate entries are summed on conversion
        self.K_matrix = sparse.csr_matrix(
            (K_data, (K_rows, K_cols)),
            shape=(n, n),
            dtype=np.float64
        )
        self.J_matrix = -sparse.csr_matrix(sparse.diags(1.0 / self.C_vector) @ self.K_matrix)
        self.sources = SourceEvaluator(self.network, self.node_ids)

        self.logger.debug(f"K matrix: {n}x{n}, {self.K_matrix.nnz} non-zeros")
        self.logger.debug(f"Reference heat coupling: {np.sum(self.b_vector):.6g} W")

    # ------------------------------------------------------------------
    # Right-hand side
    # ------------------------------------------------------------------

    def rhs(self, t: float, T: np.ndarray) -> np.ndarray:
        """dT/dt for the MASS state vector ``T`` at time ``t``."""
        P = self.sources.power_at(t)
        return (P + self.b_vector - self.K_matrix.dot(T)) / self.C_vector

    def _dense_jacobian(self, t: float, T: np.ndarray) -> np.ndarray:
        return self.J_matrix.toarray()

    def _make_integrator(self, t0: float, y0: np.ndarray, t_stop: float):
        cfg = self.config
        kwargs = dict(rtol=cfg.rtol, atol=cfg.atol, max_step=cfg.max_step)
        if cfg.first_step is not None:
            kwargs['first_step'] = cfg.first_step

        if cfg.method == 'LSODA':
            kwargs['jac'] = self._dense_jacobian
        elif cfg.is_stiff:
            # constant Jacobian: the network is linear in T
            kwargs['jac'] = self.J_matrix

        return ODE_METHODS[cfg.method](self.rhs, t0, y0, t_stop, **kwargs)

    def _snapshot(self, t: float, T: np.ndarray) -> NetworkState:
        temps = dict(self._reference_temps)
        temps.update(zip(self.node_ids, T.tolist()))
        rates = dict(zip(self.node_ids, self.rhs(t, T).tolist()))
        return NetworkState(t, temps, rates)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def _fail(self, message: str, last_time: float, last_state: np.ndarray):
        self.logger.error(f"Integration diverged: {message}")
        raise IntegrationDivergedError(message, last_time, last_state)

    def run(self, t_stop: float) -> SimulationResult:
        """Integrate from ``config.t0`` to ``t_stop`` and return the trajectory."""
        if self.state is not SolverState.NOT_STARTED:
            raise SolverStateError(f"Solver already used (state={self.state.name})")

        t0 = self.config.t0
        t_stop = float(t_stop)
        if not np.isfinite(t_stop) or t_stop <= t0:
            raise InvalidParameterError(f"t_stop must be finite and > t0={t0}, got {t_stop}")

        self.network.validate()
        if not self.network.mass_nodes:
            raise InvalidParameterError(f"Network '{self.network.name}' has no MASS node to integrate")

        self.state = SolverState.RUNNING
        try:
            with log_section(f"Thermal network run '{self.network.name}'"):
                result = self._integrate(t0, t_stop)
        except Exception:
            # any failure ends the run; samples logged so far stay readable
            self.state = SolverState.FAILED
            self.signal_log.seal()
            raise

        self.signal_log.seal()
        self.state = SolverState.COMPLETED
        return result

    def _integrate(self, t0: float, t_stop: float) -> SimulationResult:
        start_time = time.time()
        self._assemble()

        y0 = np.array([n.initial_temperature for n in self.network.mass_nodes],
                      dtype=np.float64)
        times = [t0]
        states = [y0.copy()]
        if not np.all(np.isfinite(self.rhs(t0, y0))):
            self._fail(f"non-finite derivative at t0={t0:.6g}s", t0, y0)
        self.signal_log.append(t0, self._snapshot(t0, y0))

        self.logger.info(f"Integrating {len(y0)} node(s) from t={t0}s to t={t_stop}s "
                         f"with {self.config.method}")

        integrator = self._make_integrator(t0, y0, t_stop)
        step = 0
        while integrator.status == 'running':
            message = integrator.step()
            if integrator.status == 'failed':
                self._fail(message or "integrator step failed", times[-1], states[-1])

            y = integrator.y
            if not np.all(np.isfinite(y)):
                self._fail(f"non-finite state at t={integrator.t:.6g}s", times[-1], states[-1])

            step += 1
            t = float(integrator.t)
            times.append(t)
            states.append(y.copy())
            self.signal_log.append(t, self._snapshot(t, y))

            if step % 1000 == 0:
                self.logger.debug(f"Step {step}: t={t:.2f}s, "
                                  f"Tmin={np.min(y):.3f}K, Tmax={np.max(y):.3f}K")

        result = SimulationResult(
            node_ids=list(self.node_ids),
            times=np.array(times),
            temperatures=np.vstack(states),
            signal_log=self.signal_log,
            method=self.config.method,
            n_steps=step,
            n_rhs_evals=integrator.nfev,
            compute_time_s=time.time() - start_time,
        )
        self.logger.info(f"Run complete: {step} accepted steps, "
                         f"{integrator.nfev} RHS evaluations in {result.compute_time_s:.3f}s")
        return result


def run_network(network: ThermalNetwork, t_stop: float,
                config: Optional[SolverConfig] = None,
                signal_log: Optional[SignalLog] = None) -> SimulationResult:
    """
    Convenience function to run a network simulation.

    Args:
        network: Thermal network to integrate
        t_stop: End time [s]
        config: Optional solver configuration
        signal_log: Optional log with signals already registered

    Returns:
        SimulationResult with the full trajectory
    """
    solver = NetworkSolver(network, config, signal_log)
    return solver.run(t_stop)


__all__ = [
    'ODE_METHODS',
    'SolverState',
    'SimulationResult',
    'NetworkSolver',
    'run_network',
]
