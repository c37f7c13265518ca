"""
TES Thermal Network Simulator - Source Evaluator
================================================
Resolves the total heat flow injected at every MASS node at time t.

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from ..core.errors import UnknownNodeError, InvalidParameterError
from ..core.network import ThermalNetwork
from ..core.power import ConstantPower


class SourceEvaluator:
    """Sums the network's sources per MASS node.

    The evaluator holds no time-dependent state: ``power_at`` may be called
    at any time, in any order, any number of times.
    """

    def __init__(self, network: ThermalNetwork, node_order: Optional[Sequence[str]] = None):
        if node_order is None:
            node_order = [n.node_id for n in network.mass_nodes]
        self.node_order: List[str] = list(node_order)
        index = {node_id: i for i, node_id in enumerate(self.node_order)}

        self._entries = []
        for source in network.sources:
            if source.node_id not in index:
                if source.node_id not in network:
                    raise UnknownNodeError(source.node_id)
                raise InvalidParameterError(
                    f"Source target '{source.node_id}' is not part of the evaluated node order")
            self._entries.append((index[source.node_id], source))

        # Constant sources are folded into one vector up front
        self._constant = np.zeros(len(self.node_order), dtype=np.float64)
        self._varying: List[tuple] = []
        for i, source in self._entries:
            if isinstance(source.power_fn, ConstantPower):
                self._constant[i] += source.power_fn.watts
            else:
                self._varying.append((i, source))

    @property
    def is_constant(self) -> bool:
        return not self._varying

    def power_at(self, t: float) -> np.ndarray:
        """Total injected power [W] per node in ``node_order``."""
        if not self._varying:
            return self._constant.copy()
        P = self._constant.copy()
        for i, source in self._varying:
            P[i] += source.power(t)
        return P

    def power_by_node(self, t: float) -> Dict[str, float]:
        return dict(zip(self.node_order, self.power_at(t).tolist()))

    def total_power(self, t: float) -> float:
        return float(np.sum(self.power_at(t)))


__all__ = [
    'SourceEvaluator',
]
