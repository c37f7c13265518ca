"""
TES Thermal Network Simulator - Network Model
=============================================
Static graph of thermal nodes, conductive links and heat sources.

A network holds MASS nodes (finite thermal capacitance, temperature evolves)
and REFERENCE nodes (fixed temperature, the thermal ground). Links are
undirected conductances between two nodes; sources inject heat into one
MASS node. The structure is validated on every ``add_*`` call and as a
whole by ``validate()``.

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

import math
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .errors import (
    DuplicateNodeError, UnknownNodeError, InvalidParameterError,
    DisconnectedNetworkError, NoReferenceError, MultipleReferenceTemperaturesError,
)
from .power import ConstantPower

PowerFunction = Callable[[float], float]


class NodeKind(Enum):
    """Types of thermal nodes."""
    MASS = 0       # Thermal capacitance, state variable
    REFERENCE = 1  # Fixed temperature, thermal ground


@dataclass(frozen=True)
class Node:
    """A single point of the network with one temperature."""
    node_id: str
    kind: NodeKind
    initial_temperature: float  # K; constant value for REFERENCE
    capacitance: Optional[float] = None  # J/K, MASS only

    @property
    def is_reference(self) -> bool:
        return self.kind is NodeKind.REFERENCE


@dataclass(frozen=True)
class Link:
    """Undirected conductive coupling between two nodes."""
    node_a: str
    node_b: str
    conductance: float  # W/K

    def other(self, node_id: str) -> str:
        """Return the far end of the link as seen from ``node_id``."""
        return self.node_b if node_id == self.node_a else self.node_a


@dataclass(frozen=True)
class Source:
    """Heat flow injected into one node. Positive power heats the node."""
    node_id: str
    power_fn: PowerFunction

    def power(self, t: float) -> float:
        return float(self.power_fn(t))


class ThermalNetwork:
    """Lumped thermal-capacitance network."""

    def __init__(self, name: str = "network"):
        self.name = name
        self._nodes: Dict[str, Node] = {}
        self._links: List[Link] = []
        self._sources: List[Source] = []
        self._adjacency: Dict[str, List[Link]] = {}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_node(self, node_id: str, kind: NodeKind,
                 capacitance: Optional[float] = None,
                 initial_temperature: Optional[float] = None) -> Node:
        """Add a node. ``initial_temperature`` is in Kelvin and is required."""
        if node_id in self._nodes:
            raise DuplicateNodeError(node_id)
        try:
            kind = NodeKind[kind.upper()] if isinstance(kind, str) else NodeKind(kind)
        except (KeyError, ValueError):
            raise InvalidParameterError(f"Unknown node kind {kind!r}") from None

        if initial_temperature is None:
            raise InvalidParameterError(f"Node '{node_id}' needs an initial temperature")
        temp = float(initial_temperature)
        if not math.isfinite(temp) or temp <= 0.0:
            raise InvalidParameterError(
                f"Node '{node_id}': temperature must be finite and > 0 K, got {initial_temperature}")

        if kind is NodeKind.MASS:
            if capacitance is None:
                raise InvalidParameterError(f"MASS node '{node_id}' needs a capacitance")
            capacitance = float(capacitance)
            if not math.isfinite(capacitance) or capacitance <= 0.0:
                raise InvalidParameterError(
                    f"MASS node '{node_id}': capacitance must be finite and > 0, got {capacitance}")
        else:
            capacitance = None

        node = Node(node_id, kind, temp, capacitance)
        self._nodes[node_id] = node
        self._adjacency[node_id] = []
        return node

    def add_mass(self, node_id: str, capacitance: float, initial_temperature: float) -> Node:
        return self.add_node(node_id, NodeKind.MASS, capacitance, initial_temperature)

    def add_reference(self, node_id: str, temperature: float) -> Node:
        return self.add_node(node_id, NodeKind.REFERENCE, initial_temperature=temperature)

    def add_link(self, node_a: str, node_b: str, conductance: float) -> Link:
        """Connect two nodes with ``conductance`` W/K. Zero is legal and inert."""
        for node_id in (node_a, node_b):
            if node_id not in self._nodes:
                raise UnknownNodeError(node_id)
        if node_a == node_b:
            raise InvalidParameterError(f"Link from '{node_a}' to itself")
        conductance = float(conductance)
        if not math.isfinite(conductance) or conductance < 0.0:
            raise InvalidParameterError(
                f"Link {node_a}-{node_b}: conductance must be finite and >= 0, got {conductance}")

        link = Link(node_a, node_b, conductance)
        self._links.append(link)
        self._adjacency[node_a].append(link)
        self._adjacency[node_b].append(link)
        return link

    def add_source(self, node_id: str, power_fn: Union[PowerFunction, float]) -> Source:
        """Inject heat into a MASS node. A number means constant power."""
        node = self.get_node(node_id)
        if node.is_reference:
            raise InvalidParameterError(f"Cannot inject heat into reference node '{node_id}'")
        if isinstance(power_fn, (int, float)) and not isinstance(power_fn, bool):
            power_fn = ConstantPower(power_fn)
        elif not callable(power_fn):
            raise InvalidParameterError(
                f"Source on '{node_id}' needs a callable or a number, got {type(power_fn).__name__}")

        source = Source(node_id, power_fn)
        self._sources.append(source)
        return source

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_node(self, node_id: str) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    nodes = property(lambda self: list(self._nodes.values()))
    links = property(lambda self: list(self._links))
    sources = property(lambda self: list(self._sources))

    @property
    def mass_nodes(self) -> List[Node]:
        """MASS nodes in insertion order. This order defines the state vector."""
        return [n for n in self._nodes.values() if n.kind is NodeKind.MASS]

    @property
    def reference_nodes(self) -> List[Node]:
        return [n for n in self._nodes.values() if n.kind is NodeKind.REFERENCE]

    @property
    def reference_temperature(self) -> float:
        """The common ground temperature. Raises if the references are ambiguous."""
        self._check_references()
        return self.reference_nodes[0].initial_temperature

    def links_for(self, node_id: str) -> List[Link]:
        if node_id not in self._nodes:
            raise UnknownNodeError(node_id)
        return list(self._adjacency[node_id])

    def sources_for(self, node_id: str) -> List[Source]:
        if node_id not in self._nodes:
            raise UnknownNodeError(node_id)
        return [s for s in self._sources if s.node_id == node_id]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _check_references(self):
        refs = self.reference_nodes
        if not refs:
            raise NoReferenceError(f"Network '{self.name}' has no reference node")
        temps = {n.initial_temperature for n in refs}
        if len(temps) > 1:
            detail = ", ".join(f"{n.node_id}={n.initial_temperature:g}K" for n in refs)
            raise MultipleReferenceTemperaturesError(
                f"Reference nodes disagree on the ground temperature: {detail}")

    def validate(self):
        """Check the network can be solved. Raises on the first defect found."""
        self._check_references()

        # Breadth-first search from every reference through the links
        reached = set()
        queue = deque(n.node_id for n in self.reference_nodes)
        reached.update(queue)
        while queue:
            current = queue.popleft()
            for link in self._adjacency[current]:
                neighbor = link.other(current)
                if neighbor not in reached:
                    reached.add(neighbor)
                    queue.append(neighbor)

        unreachable = [n.node_id for n in self.mass_nodes if n.node_id not in reached]
        if unreachable:
            raise DisconnectedNetworkError(unreachable)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping of the topology. Only constant sources are representable."""
        sources = []
        for s in self._sources:
            if not isinstance(s.power_fn, ConstantPower):
                raise InvalidParameterError(
                    f"Source on '{s.node_id}' is time-varying and cannot be serialized")
            sources.append({'node_id': s.node_id, 'power': s.power_fn.watts})

        return {
            'name': self.name,
            'nodes': [
                {
                    'id': n.node_id,
                    'kind': n.kind.name.lower(),
                    'capacitance': n.capacitance,
                    'initial_temperature': n.initial_temperature,
                }
                for n in self._nodes.values()
            ],
            'links': [
                {'node_a': l.node_a, 'node_b': l.node_b, 'conductance': l.conductance}
                for l in self._links
            ],
            'sources': sources,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ThermalNetwork':
        """Build a network from a plain structured mapping."""
        network = cls(data.get('name', 'network'))
        for n in data.get('nodes', []):
            network.add_node(n['id'], n.get('kind', 'mass'),
                             capacitance=n.get('capacitance'),
                             initial_temperature=n['initial_temperature'])
        for l in data.get('links', []):
            network.add_link(l['node_a'], l['node_b'], l['conductance'])
        for s in data.get('sources', []):
            network.add_source(s['node_id'], s['power'])
        return network

    def __repr__(self) -> str:
        return (f"ThermalNetwork({self.name!r}, masses={len(self.mass_nodes)}, "
                f"references={len(self.reference_nodes)}, links={len(self._links)}, "
                f"sources={len(self._sources)})")


__all__ = [
    'NodeKind',
    'Node',
    'Link',
    'Source',
    'ThermalNetwork',
    'PowerFunction',
]
