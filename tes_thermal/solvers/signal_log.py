"""
TES Thermal Network Simulator - Signal Log
==========================================
Named time series captured at the solver's accepted steps.

A signal is registered with a value function ``value_fn(state, t)`` that
maps the network state at time ``t`` to a scalar. The solver calls
``append`` at t0 and after every accepted step; once the run ends the log
is sealed and becomes read-only.

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

from collections.abc import Mapping
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np

from ..core.errors import (
    UnknownNodeError, UnknownSignalError, LogSealedError, InvalidParameterError,
)
from ..core.network import ThermalNetwork


class NetworkState(Mapping):
    """Read-only snapshot of every node temperature [K] at one instant.

    Iterates over node ids like a dict. REFERENCE nodes are included with
    their constant temperature. ``rate(node_id)`` gives dT/dt [K/s], which
    is zero for REFERENCE nodes.
    """

    def __init__(self, time: float, temperatures: Dict[str, float],
                 rates: Optional[Dict[str, float]] = None):
        self.time = time
        self._temperatures = dict(temperatures)
        self._rates = dict(rates or {})

    def __getitem__(self, node_id: str) -> float:
        try:
            return self._temperatures[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._temperatures)

    def __len__(self) -> int:
        return len(self._temperatures)

    def rate(self, node_id: str) -> float:
        if node_id not in self._temperatures:
            raise UnknownNodeError(node_id)
        return self._rates.get(node_id, 0.0)


ValueFunction = Callable[[NetworkState, float], float]


def node_temperature(node_id: str) -> ValueFunction:
    """Value function reading one node's temperature."""
    return lambda state, t: state[node_id]


def rise_rate(node_id: str) -> ValueFunction:
    """Value function reading one node's instantaneous dT/dt."""
    return lambda state, t: state.rate(node_id)


class Signal:
    """Ordered (time, value) samples of one named quantity."""

    def __init__(self, name: str, value_fn: ValueFunction):
        self.name = name
        self.value_fn = value_fn
        self._times: List[float] = []
        self._values: List[float] = []

    def _append(self, t: float, value: float):
        self._times.append(t)
        self._values.append(value)

    @property
    def times(self) -> np.ndarray:
        arr = np.array(self._times, dtype=np.float64)
        arr.flags.writeable = False
        return arr

    @property
    def values(self) -> np.ndarray:
        arr = np.array(self._values, dtype=np.float64)
        arr.flags.writeable = False
        return arr

    @property
    def final_value(self) -> Optional[float]:
        return self._values[-1] if self._values else None

    def as_pairs(self) -> List[Tuple[float, float]]:
        return list(zip(self._times, self._values))

    def __len__(self) -> int:
        return len(self._times)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, samples={len(self)})"


class SignalLog:
    """Collection of signals for one run."""

    def __init__(self, network: Optional[ThermalNetwork] = None):
        self.network = network
        self._signals: Dict[str, Signal] = {}
        self._node_refs: Dict[str, str] = {}  # signal name -> node id
        self._last_time: Optional[float] = None
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def names(self) -> List[str]:
        return list(self._signals)

    def __contains__(self, name: str) -> bool:
        return name in self._signals

    def register(self, name: str, value_fn: ValueFunction) -> Signal:
        """Register ``value_fn(state, t) -> float`` under ``name``."""
        if self._sealed:
            raise LogSealedError(f"Cannot register '{name}': log is sealed")
        if name in self._signals:
            raise InvalidParameterError(f"Signal '{name}' is already registered")
        if not callable(value_fn):
            raise InvalidParameterError(f"Signal '{name}' needs a callable value function")
        signal = Signal(name, value_fn)
        self._signals[name] = signal
        return signal

    def _check_node(self, node_id: str):
        if self.network is not None and node_id not in self.network:
            raise UnknownNodeError(node_id)

    def register_temperature(self, name: str, node_id: str) -> Signal:
        """Register the temperature of ``node_id`` [K]."""
        self._check_node(node_id)
        signal = self.register(name, node_temperature(node_id))
        self._node_refs[name] = node_id
        return signal

    def register_rise_rate(self, name: str, node_id: str) -> Signal:
        """Register the instantaneous dT/dt of ``node_id`` [K/s]."""
        self._check_node(node_id)
        signal = self.register(name, rise_rate(node_id))
        self._node_refs[name] = node_id
        return signal

    def bind(self, network: ThermalNetwork):
        """Attach ``network`` and check every node referenced so far exists in it."""
        if self.network is not None and self.network is not network:
            raise InvalidParameterError("Signal log is bound to a different network")
        for node_id in self._node_refs.values():
            if node_id not in network:
                raise UnknownNodeError(node_id)
        self.network = network

    def append(self, t: float, state: NetworkState):
        """Evaluate every registered signal at ``t`` and store the samples."""
        if self._sealed:
            raise LogSealedError("Cannot append: log is sealed")
        if self._last_time is not None and not t > self._last_time:
            raise InvalidParameterError(
                f"Sample time {t!r} does not follow previous time {self._last_time!r}")
        # Evaluate everything first so a failing value function leaves no partial row
        values = [(signal, float(signal.value_fn(state, t))) for signal in self._signals.values()]
        for signal, value in values:
            signal._append(t, value)
        self._last_time = t

    def get(self, name: str) -> Signal:
        try:
            return self._signals[name]
        except KeyError:
            raise UnknownSignalError(name) from None

    def seal(self):
        self._sealed = True

    def __repr__(self) -> str:
        state = "sealed" if self._sealed else "open"
        return f"SignalLog({', '.join(self._signals)}; {state})"


__all__ = [
    'NetworkState',
    'ValueFunction',
    'Signal',
    'SignalLog',
    'node_temperature',
    'rise_rate',
]
