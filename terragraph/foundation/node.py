"""Node: one instance of a node kind placed in a graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from terragraph.foundation.port import Port


@dataclass
class Node:
    """
    Graph node. ``inputs``/``outputs`` are fixed at creation from the kind's
    port declarations; ``x``/``y`` are editor coordinates only.
    """

    id: int
    kind: str
    inputs: List[Port]
    outputs: List[Port]
    params: Any
    x: float = 0.0
    y: float = 0.0
    extra_params: Dict[str, Any] = field(default_factory=dict)

    def iter_ports(self) -> Iterator[Port]:
        yield from self.inputs
        yield from self.outputs

    def get_input(self, role: str) -> Optional[Port]:
        for p in self.inputs:
            if p.role == role:
                return p
        return None

    def get_output(self, role: str) -> Optional[Port]:
        for p in self.outputs:
            if p.role == role:
                return p
        return None

    @property
    def output(self) -> Optional[Port]:
        """First output port (most kinds have exactly one)."""
        return self.outputs[0] if self.outputs else None

    def __repr__(self) -> str:
        return f"Node(id={self.id}, kind={self.kind!r})"
