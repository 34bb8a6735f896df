"""Node kinds. Importing this package registers every built-in kind."""

from terragraph.nodes.base import NodeKind
from terragraph.nodes.registry import NodeKindRegistry, get_node_kind, register_node_kind
from terragraph.nodes import math_ops, sources, terrain  # noqa: F401  (registration)
from terragraph.nodes.terrain import AIR, TerrainSample

__all__ = [
    "AIR",
    "NodeKind",
    "NodeKindRegistry",
    "TerrainSample",
    "get_node_kind",
    "register_node_kind",
]
