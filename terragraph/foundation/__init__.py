"""Graph data model: ports, typed params, nodes and the terrain graph."""

from terragraph.foundation.port import Port, PortDirection, PortKind, PortSpec, make_port_id
from terragraph.foundation.params import MaterialKind, merge_params, params_to_dict
from terragraph.foundation.node import Node
from terragraph.foundation.graph import (
    GRAPH_CONFIG_SCHEMA_VERSION,
    Connection,
    MutationResult,
    TerrainGraph,
)

__all__ = [
    "GRAPH_CONFIG_SCHEMA_VERSION",
    "Connection",
    "MaterialKind",
    "MutationResult",
    "Node",
    "Port",
    "PortDirection",
    "PortKind",
    "PortSpec",
    "TerrainGraph",
    "make_port_id",
    "merge_params",
    "params_to_dict",
]
