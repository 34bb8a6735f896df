"""Evaluator: interprets a terrain graph at a world coordinate.

Evaluation is pull-based: starting from the terrain-output input, each port
asks its source for a value, recursively. Nodes are never cached between
calls; the graph is only read.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Set

from terragraph.foundation.graph import TerrainGraph
from terragraph.foundation.node import Node
from terragraph.foundation.port import Port, PortKind
from terragraph.nodes import AIR, TerrainSample, get_node_kind

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100


def default_value(kind: PortKind) -> Any:
    """Value of an unconnected or unevaluable port."""
    return AIR if kind == PortKind.TERRAIN else 0.0


class _NodeContext:
    """What a node kind's evaluation rule sees: the sample point and lazy inputs."""

    __slots__ = ("_evaluator", "x", "y", "z", "_visiting", "_depth")

    def __init__(self, evaluator: Evaluator, x: float, y: float, z: float, visiting: Set[str], depth: int) -> None:
        self._evaluator = evaluator
        self.x = x
        self.y = y
        self.z = z
        self._visiting = visiting
        self._depth = depth

    def input(self, node: Node, role: str) -> Any:
        port = node.get_input(role)
        if port is None:
            raise KeyError(f"Node {node.id} ({node.kind}) has no input {role!r}")
        return self._evaluator.evaluate_port(port.id, self.x, self.y, self.z, self._visiting, self._depth)

    def is_connected(self, node: Node, role: str) -> bool:
        port = node.get_input(role)
        return port is not None and self._evaluator.graph.incoming_connection(port.id) is not None


class Evaluator:
    """Evaluates ports of a graph at world coordinates.

    Depth counts connections followed, so ``max_depth`` bounds the length of
    the node chain behind a port.

    Recovered anomalies (recursion deeper than ``max_depth``, a port re-entered
    on the current path, a node rule raising) yield the port kind's default
    value and are logged, so one bad node does not abort a whole sampling run.
    """

    def __init__(self, graph: TerrainGraph, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.graph = graph
        self.max_depth = max_depth

    def evaluate_port(
        self,
        port_id: str,
        x: float,
        y: float,
        z: float,
        visiting: Optional[Set[str]] = None,
        depth: int = 0,
    ) -> Any:
        port = self.graph.get_port(port_id)
        if port is None:
            logger.warning("Port not found during evaluation: %s", port_id)
            return 0.0
        if depth > self.max_depth:
            logger.warning("Evaluation depth exceeded %d at port %s", self.max_depth, port_id)
            return default_value(port.kind)
        if visiting is None:
            visiting = set()
        if port_id in visiting:
            logger.warning("Cycle detected at port %s", port_id)
            return default_value(port.kind)

        visiting.add(port_id)
        try:
            if port.is_output:
                node = self.graph.port_owner(port_id)
                return self.evaluate_node(node, port, x, y, z, visiting, depth)
            conn = self.graph.incoming_connection(port_id)
            if conn is None:
                return default_value(port.kind)
            return self.evaluate_port(conn.from_port, x, y, z, visiting, depth + 1)
        finally:
            visiting.discard(port_id)

    def evaluate_node(
        self,
        node: Node,
        port: Port,
        x: float,
        y: float,
        z: float,
        visiting: Optional[Set[str]] = None,
        depth: int = 0,
    ) -> Any:
        """Apply the node kind's rule for output ``port``."""
        ctx = _NodeContext(self, x, y, z, visiting if visiting is not None else set(), depth)
        try:
            return get_node_kind(node.kind).evaluate(node, port, ctx)
        except Exception as e:
            logger.warning("Node %d (%s) failed at (%s, %s, %s): %s", node.id, node.kind, x, y, z, e)
            return default_value(port.kind)

    def evaluate_terrain(self, x: float, y: float, z: float) -> Optional[TerrainSample]:
        """Terrain at (x, y, z), or None when the graph cannot produce one. Never raises."""
        try:
            output = self.graph.get_output_node()
            if output is None or not output.inputs:
                return None
            in_port = output.inputs[0]
            if self.graph.incoming_connection(in_port.id) is None:
                return None
            value = self.evaluate_port(in_port.id, x, y, z)
        except Exception:
            logger.exception("Terrain evaluation failed at (%s, %s, %s)", x, y, z)
            return None
        if not isinstance(value, TerrainSample):
            # numeric compare fallback: no terrain descriptor to report
            logger.debug("Non-terrain value %r at (%s, %s, %s)", value, x, y, z)
            return None
        return value
