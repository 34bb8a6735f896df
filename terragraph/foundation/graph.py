"""
TerrainGraph: nodes and connections of a terrain function; structure + serialization.

- Nodes (node_id -> Node, ids monotonic from 1), connections (from_port -> to_port)
- Port id -> (node, port) table rebuilt on every structural mutation
- Mutations report failure through MutationResult and leave the graph unchanged
- Structure round-trips through to_config / from_config (YAML via OmegaConf)
"""

from __future__ import annotations

import copy
import json
import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Set, Tuple, Union

from omegaconf import DictConfig, OmegaConf

from terragraph.foundation.node import Node
from terragraph.foundation.params import merge_params, params_to_dict
from terragraph.foundation.port import Port
from terragraph.nodes import get_node_kind

logger = logging.getLogger(__name__)

GRAPH_CONFIG_SCHEMA_VERSION = "1.0"
OUTPUT_KIND = "terrain-output"


@dataclass(frozen=True)
class Connection:
    """Directed connection from an output port to an input port."""

    from_port: str
    to_port: str

    def __post_init__(self) -> None:
        for name in ("from_port", "to_port"):
            v = getattr(self, name)
            if not v or not str(v).strip():
                raise ValueError(f"{name} must be non-empty")


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a graph mutation: ``ok`` plus a human-readable message. Truthy iff ok."""

    ok: bool
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok


def _ok(message: str = "") -> MutationResult:
    return MutationResult(True, message)


def _fail(message: str) -> MutationResult:
    logger.debug("Graph mutation rejected: %s", message)
    return MutationResult(False, message)


class TerrainGraph:
    """
    Graph = nodes + connections. At most one connection per input port and no
    cycles; exactly one terrain-output is expected for evaluation (checked by
    validation, not enforced here).
    """

    _template_builders: Dict[str, Callable[["TerrainGraph"], None]] = {}

    def __init__(self, seed: Optional[int] = None) -> None:
        self._nodes: Dict[int, Node] = {}
        self._connections: List[Connection] = []
        self._next_node_id = 1
        # seeds fresh noise nodes; pass ``seed`` for reproducible graphs
        self._rng = random.Random(seed)
        self._ports: Dict[str, Tuple[Node, Port]] = {}
        self._incoming: Dict[str, Connection] = {}
        self._downstream: Dict[int, Set[int]] = {}
        # bumped on every structural change
        self._version = 0

    # ------------------------------------------------------------------ index

    def _reindex(self) -> None:
        self._ports = {}
        for node in self._nodes.values():
            for port in node.iter_ports():
                self._ports[port.id] = (node, port)
        self._incoming = {c.to_port: c for c in self._connections}
        self._downstream = {nid: set() for nid in self._nodes}
        for c in self._connections:
            src = self._ports[c.from_port][0].id
            dst = self._ports[c.to_port][0].id
            self._downstream[src].add(dst)
        self._version += 1

    # -------------------------------------------------------------- accessors

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def connections(self) -> List[Connection]:
        return list(self._connections)

    @property
    def node_ids(self) -> Set[int]:
        return set(self._nodes)

    @property
    def next_node_id(self) -> int:
        return self._next_node_id

    @property
    def version(self) -> int:
        return self._version

    def get_node(self, node_id: int) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_port(self, port_id: str) -> Optional[Port]:
        entry = self._ports.get(port_id)
        return entry[1] if entry else None

    def port_owner(self, port_id: str) -> Optional[Node]:
        entry = self._ports.get(port_id)
        return entry[0] if entry else None

    def incoming_connection(self, port_id: str) -> Optional[Connection]:
        return self._incoming.get(port_id)

    def connections_of(self, node_id: int) -> List[Connection]:
        """Connections touching any port of the node."""
        node = self._nodes.get(node_id)
        if node is None:
            return []
        port_ids = {p.id for p in node.iter_ports()}
        return [c for c in self._connections if c.from_port in port_ids or c.to_port in port_ids]

    def upstream_nodes(self, node_id: int) -> List[Node]:
        """Nodes feeding an input of ``node_id``."""
        node = self._nodes.get(node_id)
        if node is None:
            return []
        out = []
        for port in node.inputs:
            c = self._incoming.get(port.id)
            if c is not None:
                out.append(self._ports[c.from_port][0])
        return out

    def output_nodes(self) -> List[Node]:
        return [n for n in self._nodes.values() if n.kind == OUTPUT_KIND]

    def get_output_node(self) -> Optional[Node]:
        """The first terrain-output node, if any."""
        outputs = self.output_nodes()
        return outputs[0] if outputs else None

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))

    def __repr__(self) -> str:
        return f"TerrainGraph(nodes={len(self._nodes)}, connections={len(self._connections)})"

    # -------------------------------------------------------------- mutations

    def add_node(self, kind: str, x: float = 0.0, y: float = 0.0) -> Node:
        """Create a node of ``kind`` with default params. Unknown kinds raise KeyError."""
        node = get_node_kind(kind).create(self._next_node_id, self._rng, x, y)
        self._next_node_id += 1
        self._nodes[node.id] = node
        self._reindex()
        logger.debug("Added node %d (%s)", node.id, kind)
        return node

    def remove_node(self, node_id: int) -> MutationResult:
        node = self._nodes.get(node_id)
        if node is None:
            return _fail(f"Node not found: {node_id}")
        if node.kind == OUTPUT_KIND and len(self.output_nodes()) == 1:
            return _fail("Cannot remove the terrain output node")
        touching = set(self.connections_of(node_id))
        self._connections = [c for c in self._connections if c not in touching]
        del self._nodes[node_id]
        self._reindex()
        logger.debug("Removed node %d and %d connection(s)", node_id, len(touching))
        return _ok(f"Removed node {node_id}")

    def add_connection(self, from_port: str, to_port: str) -> MutationResult:
        """
        Connect an output port to an input port. Replaces any existing connection
        into ``to_port``; rejects unknown ports, wrong direction, mismatched kinds
        and edges that would close a cycle.
        """
        src = self._ports.get(from_port)
        dst = self._ports.get(to_port)
        if src is None:
            return _fail(f"Port not found: {from_port}")
        if dst is None:
            return _fail(f"Port not found: {to_port}")
        src_node, src_port = src
        dst_node, dst_port = dst
        if src_node.id == dst_node.id:
            return _fail("Connection would create a cycle (node connected to itself)")
        if not src_port.is_output or not dst_port.is_input:
            return _fail("Connections must go from an output port to an input port")
        if not src_port.compatible_with(dst_port):
            return _fail(
                f"Incompatible port kinds: {src_port.kind.value} ({from_port}) -> {dst_port.kind.value} ({to_port})"
            )
        if self._reaches(dst_node.id, src_node.id):
            return _fail("Connection would create a cycle")

        replaced = self._incoming.get(to_port)
        if replaced is not None:
            self._connections.remove(replaced)
        self._connections.append(Connection(from_port, to_port))
        self._reindex()
        logger.debug("Connected %s -> %s", from_port, to_port)
        return _ok(f"Replaced connection from {replaced.from_port}" if replaced else "Connected")

    def _reaches(self, start: int, target: int) -> bool:
        """DFS along outgoing connections from ``start``."""
        stack = [start]
        seen: Set[int] = set()
        while stack:
            nid = stack.pop()
            if nid == target:
                return True
            if nid in seen:
                continue
            seen.add(nid)
            stack.extend(self._downstream.get(nid, ()))
        return False

    def remove_connection(
        self, from_port: Union[str, Connection], to_port: Optional[str] = None
    ) -> MutationResult:
        if isinstance(from_port, Connection):
            from_port, to_port = from_port.from_port, from_port.to_port
        conn = next((c for c in self._connections if c.from_port == from_port and c.to_port == to_port), None)
        if conn is None:
            return _fail(f"Connection not found: {from_port} -> {to_port}")
        self._connections.remove(conn)
        self._reindex()
        return _ok("Disconnected")

    def update_node_params(self, node_id: int, updates: Mapping[str, Any]) -> MutationResult:
        """
        Partial update. Known fields (snake_case or editor camelCase) are validated
        as a whole; unknown fields are kept in ``node.extra_params``.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return _fail(f"Node not found: {node_id}")
        try:
            params, extras = merge_params(node.params, updates)
        except (ValueError, TypeError) as e:
            return _fail(f"Invalid parameters for node {node_id}: {e}")
        node.params = params
        node.extra_params.update(extras)
        self._version += 1
        return _ok("Updated")

    def clear(self) -> None:
        self._nodes = {}
        self._connections = []
        self._next_node_id = 1
        self._reindex()

    def clone(self) -> TerrainGraph:
        """Independent deep copy, safe to hand to another thread."""
        return copy.deepcopy(self)

    # ------------------------------------------------------------ engine glue

    def evaluate_terrain(self, x: float, y: float, z: float):
        from terragraph.engine.evaluator import Evaluator
        return Evaluator(self).evaluate_terrain(x, y, z)

    def validate(self):
        from terragraph.engine.validation import validate_graph
        return validate_graph(self)

    def compile(self, **options: Any):
        from terragraph.engine.compiler import LuaCompiler
        return LuaCompiler(self, **options).compile()

    # ---------------------------------------------------------- serialization

    def to_config(self) -> Dict[str, Any]:
        """Structure as plain data: schema_version, nodes (with params), connections."""
        nodes_cfg = []
        for node in self._nodes.values():
            entry: Dict[str, Any] = {
                "id": node.id,
                "kind": node.kind,
                "x": node.x,
                "y": node.y,
                "params": params_to_dict(node.params),
            }
            if node.extra_params:
                entry["extra_params"] = dict(node.extra_params)
            nodes_cfg.append(entry)
        return {
            "schema_version": GRAPH_CONFIG_SCHEMA_VERSION,
            "next_node_id": self._next_node_id,
            "nodes": nodes_cfg,
            "connections": [{"from": c.from_port, "to": c.to_port} for c in self._connections],
        }

    @classmethod
    def from_config(cls, config: Union[Mapping[str, Any], DictConfig], seed: Optional[int] = None) -> TerrainGraph:
        """
        Build a graph from ``to_config`` output. Node ids are kept. Invalid params or
        connections raise ValueError; unknown kinds raise KeyError.
        """
        if isinstance(config, DictConfig):
            config = OmegaConf.to_container(config, resolve=True)
        version = str(config.get("schema_version", GRAPH_CONFIG_SCHEMA_VERSION))
        if version != GRAPH_CONFIG_SCHEMA_VERSION:
            logger.warning("Graph config schema %s differs from %s", version, GRAPH_CONFIG_SCHEMA_VERSION)

        g = cls(seed=seed)
        for entry in config.get("nodes", []):
            node_id = int(entry["id"])
            if node_id in g._nodes:
                raise ValueError(f"Duplicate node id in config: {node_id}")
            node = get_node_kind(entry["kind"]).create(node_id, g._rng, entry.get("x", 0.0), entry.get("y", 0.0))
            node.params, extras = merge_params(node.params, entry.get("params") or {})
            node.extra_params.update(extras)
            node.extra_params.update(entry.get("extra_params") or {})
            g._nodes[node_id] = node
            g._next_node_id = max(g._next_node_id, node_id + 1)
        g._next_node_id = max(g._next_node_id, int(config.get("next_node_id", 1)))
        g._reindex()

        for c in config.get("connections", []):
            result = g.add_connection(c["from"], c["to"])
            if not result:
                raise ValueError(f"Invalid connection {c['from']} -> {c['to']}: {result.message}")
        return g

    @classmethod
    def from_yaml(cls, path: str, seed: Optional[int] = None) -> TerrainGraph:
        """Load a graph config from a YAML (or JSON) file."""
        return cls.from_config(OmegaConf.load(path), seed=seed)

    def to_yaml(self) -> str:
        return OmegaConf.to_yaml(OmegaConf.create(self.to_config()))

    def save_yaml(self, path: str) -> None:
        OmegaConf.save(OmegaConf.create(self.to_config()), path)

    def save_config(self, path: str) -> None:
        """Write graph structure (to_config) to a JSON file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_config(), f, indent=2)

    # -------------------------------------------------------------- templates

    @classmethod
    def register_template(cls, name: str):
        """Decorator: register ``builder(graph)`` that populates an empty graph."""

        def decorator(builder: Callable[["TerrainGraph"], None]) -> Callable[["TerrainGraph"], None]:
            cls._template_builders[name] = builder
            return builder
        return decorator

    @classmethod
    def from_template(cls, template_name: str, seed: Optional[int] = None) -> TerrainGraph:
        """Build a graph from a named template (see terragraph.templates)."""
        import terragraph.templates  # noqa: F401  (registers built-in templates)

        builders = cls._template_builders
        if template_name not in builders:
            raise KeyError(f"Unknown template: {template_name!r}. Known: {sorted(builders)}")
        g = cls(seed=seed)
        builders[template_name](g)
        return g
