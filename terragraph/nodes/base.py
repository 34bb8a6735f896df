"""
NodeKind: behaviour shared by all nodes of one kind.

A kind declares its ports and default params and carries exactly one
evaluation rule and one Lua emission rule. Both rules read inputs through a
context object supplied by the engine:

* evaluation context: ``ctx.x``, ``ctx.y``, ``ctx.z``, ``ctx.input(node, role)``
  (value of an input, or its type default) and ``ctx.is_connected(node, role)``;
* emission context: ``ctx.input(node, role)`` (Lua expression),
  ``ctx.upstream(node, role)`` (source node or None),
  ``ctx.content_var(node)`` (content-id local of a terrain type) and
  ``ctx.block(node, indent)`` (statement lines for a terrain producer).
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from terragraph.foundation.node import Node
from terragraph.foundation.params import EmptyParams
from terragraph.foundation.port import Port, PortDirection, PortSpec


class NodeKind(ABC):
    kind: str = ""
    label: str = ""
    params_cls: type = EmptyParams
    # name of a Lua helper (see terragraph.lua.LUA_HELPERS) the compiled code needs
    lua_helper: Optional[str] = None

    def declare_ports(self) -> List[PortSpec]:
        return []

    def default_params(self, rng: random.Random) -> Any:
        return self.params_cls()

    def create(self, node_id: int, rng: random.Random, x: float = 0.0, y: float = 0.0) -> Node:
        specs = self.declare_ports()
        return Node(
            id=node_id,
            kind=self.kind,
            inputs=[s.bind(node_id) for s in specs if s.direction == PortDirection.IN],
            outputs=[s.bind(node_id) for s in specs if s.direction == PortDirection.OUT],
            params=self.default_params(rng),
            x=float(x),
            y=float(y),
        )

    @abstractmethod
    def evaluate(self, node: Node, port: Port, ctx: Any) -> Any:
        """Value of output ``port`` at ``(ctx.x, ctx.y, ctx.z)``."""

    @abstractmethod
    def emit(self, node: Node, port: Port, ctx: Any) -> str:
        """Lua expression computing output ``port``."""

    def emit_block(self, node: Node, ctx: Any, indent: str) -> List[str]:
        """Statements assigning ``content`` from this node's terrain output."""
        return [f"{indent}content = {self.emit(node, node.output, ctx)}"]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r})"
