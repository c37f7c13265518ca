"""
TES Thermal Network Simulator - Error Taxonomy
==============================================
Exceptions raised by the network model, the solver and the signal log.

Structural errors are raised at the call that introduces the defect.
Nothing in the package catches and hides them.

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

from typing import Optional, Sequence

import numpy as np


class ThermalNetworkError(Exception):
    """Base class for every error raised by the package."""


class DuplicateNodeError(ThermalNetworkError):
    """A node with the same id already exists in the network."""

    def __init__(self, node_id: str):
        super().__init__(f"Node '{node_id}' already exists")
        self.node_id = node_id


class UnknownNodeError(ThermalNetworkError, KeyError):
    """A node id was referenced that is not part of the network."""

    def __init__(self, node_id: str):
        super().__init__(f"Unknown node '{node_id}'")
        self.node_id = node_id

    def __str__(self) -> str:
        # KeyError would otherwise quote the whole message
        return self.args[0]


class InvalidParameterError(ThermalNetworkError, ValueError):
    """A numeric input is non-finite or out of its allowed range."""


class DisconnectedNetworkError(ThermalNetworkError):
    """One or more MASS nodes have no link path to a REFERENCE node."""

    def __init__(self, node_ids: Sequence[str]):
        names = ", ".join(sorted(node_ids))
        super().__init__(f"No path to a reference node from: {names}")
        self.node_ids = tuple(node_ids)


class NoReferenceError(ThermalNetworkError):
    """The network has no REFERENCE node."""


class MultipleReferenceTemperaturesError(ThermalNetworkError):
    """REFERENCE nodes disagree on the ground temperature."""


class UnknownSignalError(ThermalNetworkError, KeyError):
    """A signal name was requested that was never registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown signal '{name}'")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class LogSealedError(ThermalNetworkError):
    """The signal log is read-only after its run finished."""


class SolverStateError(ThermalNetworkError):
    """A solver was asked to run while not in the NOT_STARTED state."""


class IntegrationDivergedError(ThermalNetworkError):
    """Integration failed or produced a non-finite state.

    ``last_time`` and ``last_state`` hold the last accepted, finite point so
    the caller can inspect how far the run got.
    """

    def __init__(self, message: str, last_time: float,
                 last_state: Optional[np.ndarray] = None):
        super().__init__(f"{message} (last valid t={last_time:.6g}s)")
        self.last_time = last_time
        self.last_state = None if last_state is None else np.array(last_state, copy=True)


__all__ = [
    'ThermalNetworkError',
    'DuplicateNodeError',
    'UnknownNodeError',
    'InvalidParameterError',
    'DisconnectedNetworkError',
    'NoReferenceError',
    'MultipleReferenceTemperaturesError',
    'UnknownSignalError',
    'LogSealedError',
    'SolverStateError',
    'IntegrationDivergedError',
]
