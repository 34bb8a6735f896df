"""Graph validation: blocking errors and non-blocking warnings before compilation."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Set

from terragraph.foundation.graph import TerrainGraph


@dataclass
class ValidationResult:
    """Result of graph validation: errors (blocking) and warnings (informational)."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0

    is_valid = valid

    def to_dict(self) -> Dict[str, object]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def validate_graph(graph: TerrainGraph) -> ValidationResult:
    """
    Errors: missing or duplicate terrain output, unconnected output input, any
    required input left open, cycles. Warnings: nodes that do not feed the output.
    """
    errors: List[str] = []
    warnings: List[str] = []

    outputs = graph.output_nodes()
    if not outputs:
        errors.append("Graph has no terrain output node")
    elif len(outputs) > 1:
        errors.append(f"Graph has {len(outputs)} terrain output nodes; expected exactly one")
    output = outputs[0] if outputs else None
    if output is not None and graph.incoming_connection(output.inputs[0].id) is None:
        errors.append("Terrain output node has no input connection")

    for node in graph.nodes:
        if output is not None and node.id == output.id:
            continue
        for port in node.inputs:
            if not port.optional and graph.incoming_connection(port.id) is None:
                errors.append(f"Node {node.id} ({node.kind}) has unconnected input '{port.name}'")

    if _has_cycle(graph):
        errors.append("Graph contains a cycle")

    if output is not None:
        reachable = _feeding(graph, output.id)
        for node in graph.nodes:
            if node.id not in reachable:
                warnings.append(f"Node {node.id} ({node.kind}) is not connected to the terrain output")

    return ValidationResult(errors=errors, warnings=warnings)


def _feeding(graph: TerrainGraph, node_id: int) -> Set[int]:
    """Nodes from which ``node_id`` is reachable (BFS backward on inputs), itself included."""
    reaches: Set[int] = {node_id}
    queue = deque([node_id])
    while queue:
        nid = queue.popleft()
        for src in graph.upstream_nodes(nid):
            if src.id not in reaches:
                reaches.add(src.id)
                queue.append(src.id)
    return reaches


def _has_cycle(graph: TerrainGraph) -> bool:
    """Kahn's algorithm: a cycle leaves nodes with nonzero in-degree."""
    in_degree: Dict[int, int] = {n.id: 0 for n in graph.nodes}
    downstream: Dict[int, List[int]] = {n.id: [] for n in graph.nodes}
    for c in graph.connections:
        src = graph.port_owner(c.from_port)
        dst = graph.port_owner(c.to_port)
        if src is None or dst is None:
            continue
        downstream[src.id].append(dst.id)
        in_degree[dst.id] += 1
    queue = deque(nid for nid, d in in_degree.items() if d == 0)
    visited = 0
    while queue:
        nid = queue.popleft()
        visited += 1
        for nxt in downstream[nid]:
            in_degree[nxt] -= 1
            if in_degree[nxt] == 0:
                queue.append(nxt)
    return visited != len(in_degree)
