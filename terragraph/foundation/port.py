"""
Ports: typed connection points of a node.

A node kind declares ``PortSpec`` entries (role, display name, kind, direction);
when a node is created each spec is bound to the node id and becomes a ``Port``
with the graph-unique id ``f"{node_id}_{role}"``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PortDirection(str, Enum):
    IN = "in"
    OUT = "out"


class PortKind(str, Enum):
    """Value carried by a port."""

    FLOAT = "float"
    TERRAIN = "terrain"


def make_port_id(node_id: int, role: str) -> str:
    return f"{node_id}_{role}"


@dataclass(frozen=True)
class PortSpec:
    """Port declaration of a node kind (not yet bound to a node)."""

    role: str
    name: str
    direction: PortDirection
    kind: PortKind = PortKind.FLOAT
    optional: bool = False

    def __post_init__(self) -> None:
        if not self.role or not self.role.strip():
            raise ValueError("Port role must be non-empty")
        if self.optional and self.direction == PortDirection.OUT:
            raise ValueError("Only input ports can be optional")

    def bind(self, node_id: int) -> Port:
        return Port(
            id=make_port_id(node_id, self.role),
            node_id=node_id,
            role=self.role,
            name=self.name,
            direction=self.direction,
            kind=self.kind,
            optional=self.optional,
        )


def input_port(role: str, name: str, kind: PortKind = PortKind.FLOAT, optional: bool = False) -> PortSpec:
    return PortSpec(role, name, PortDirection.IN, kind, optional)


def output_port(role: str, name: str, kind: PortKind = PortKind.FLOAT) -> PortSpec:
    return PortSpec(role, name, PortDirection.OUT, kind)


@dataclass(frozen=True)
class Port:
    """Port bound to a node."""

    id: str
    node_id: int
    role: str
    name: str
    direction: PortDirection
    kind: PortKind = PortKind.FLOAT
    optional: bool = False

    @property
    def is_input(self) -> bool:
        return self.direction == PortDirection.IN

    @property
    def is_output(self) -> bool:
        return self.direction == PortDirection.OUT

    def compatible_with(self, other: Port) -> bool:
        """
        True if self (source) can feed other (target).
        Source must be OUT, target must be IN, on different nodes, same kind.
        """
        if not self.is_output or not other.is_input:
            return False
        if self.node_id == other.node_id:
            return False
        return self.kind == other.kind
