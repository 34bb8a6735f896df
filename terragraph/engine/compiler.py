"""Lua compiler: turns a terrain graph into a Luamap mod script.

The generated program mirrors the Evaluator: every node kind emits one
expression (or, for terrain producers, one statement block), and compare
nodes become nested ``if`` blocks choosing the ``content`` id.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from terragraph.foundation.graph import TerrainGraph
from terragraph.foundation.node import Node
from terragraph.lua import LUA_HELPERS, check_syntax, content_var, lua_number, lua_string
from terragraph.nodes import get_node_kind
from terragraph.nodes.sources import noise_name
from terragraph.engine.validation import validate_graph

logger = logging.getLogger(__name__)

DEFAULT_HEADER = "-- Luamap generated terrain"
NOISE_KINDS = {"noise2d": "2d", "noise3d": "3d"}
INDENT = "    "


@dataclass
class CompileResult:
    """Outcome of compilation. ``code`` is None when validation failed."""

    valid: bool
    code: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {"valid": self.valid, "code": self.code, "errors": list(self.errors), "warnings": list(self.warnings)}


class _EmitContext:
    """What a node kind's emission rule sees: Lua expressions of its inputs."""

    def __init__(self, graph: TerrainGraph) -> None:
        self._graph = graph
        self._visiting: Set[str] = set()
        self.content_vars: Dict[int, str] = {}

    def input(self, node: Node, role: str) -> str:
        port = node.get_input(role)
        if port is None:
            raise KeyError(f"Node {node.id} ({node.kind}) has no input {role!r}")
        conn = self._graph.incoming_connection(port.id)
        if conn is None:
            return "0"
        return self.port_expr(conn.from_port)

    def port_expr(self, port_id: str) -> str:
        if port_id in self._visiting:
            raise ValueError(f"Cycle through port {port_id}")
        node = self._graph.port_owner(port_id)
        port = self._graph.get_port(port_id)
        self._visiting.add(port_id)
        try:
            return get_node_kind(node.kind).emit(node, port, self)
        finally:
            self._visiting.discard(port_id)

    def content_var(self, node: Node) -> str:
        """Local holding the content id of terrain-type ``node``."""
        var = self.content_vars.get(node.id)
        return var if var is not None else content_var(node.params.name)

    def upstream(self, node: Node, role: str) -> Optional[Node]:
        port = node.get_input(role)
        conn = self._graph.incoming_connection(port.id) if port is not None else None
        return self._graph.port_owner(conn.from_port) if conn is not None else None

    def block(self, node: Node, indent: str) -> List[str]:
        key = f"block:{node.id}"
        if key in self._visiting:
            raise ValueError(f"Cycle through node {node.id}")
        self._visiting.add(key)
        try:
            return get_node_kind(node.kind).emit_block(node, self, indent)
        finally:
            self._visiting.discard(key)


class LuaCompiler:
    """Compiles a graph into Lua for the Luamap mod.

    Validation runs first; a graph with errors yields ``CompileResult(valid=False,
    code=None)``. Generated code that fails the structural syntax check is still
    returned, marked invalid.
    """

    def __init__(self, graph: TerrainGraph, water_level: float = 0, header: str = DEFAULT_HEADER) -> None:
        self.graph = graph
        self.water_level = water_level
        self.header = header

    def compile(self) -> CompileResult:
        validation = validate_graph(self.graph)
        if not validation.valid:
            logger.info("Compilation refused: %d validation error(s)", len(validation.errors))
            return CompileResult(False, None, list(validation.errors), list(validation.warnings))
        try:
            code = self.generate()
        except Exception as e:
            logger.exception("Lua generation failed")
            return CompileResult(False, None, [f"Code generation failed: {e}"], list(validation.warnings))

        syntax_errors = check_syntax(code)
        if syntax_errors:
            logger.warning("Generated Lua failed the syntax check: %s", "; ".join(syntax_errors))
            return CompileResult(False, code, syntax_errors, list(validation.warnings))
        logger.info("Compiled %d node(s) into %d line(s) of Lua", len(self.graph), code.count("\n"))
        return CompileResult(True, code, [], list(validation.warnings))

    # ------------------------------------------------------------ generation

    def generate(self) -> str:
        """Lua source for the graph (no validation)."""
        ctx = _EmitContext(self.graph)
        declared: Dict[str, str] = {}
        content_lines = self._content_ids(ctx, declared)
        body = self._logic_body(ctx, declared, content_lines)

        lines = [self.header, "luamap.set_singlenode()", ""]
        lines += self._noise_registrations()
        lines += content_lines
        lines.append("")
        lines += self._helpers()
        lines += [
            f"local water_level = {lua_number(self.water_level)}",
            "",
            "local old_logic = luamap.logic",
            "",
            "function luamap.logic(noise_vals, x, y, z, seed, original_content)",
            f"{INDENT}-- Get any terrain defined in another mod",
            f"{INDENT}local content = old_logic(noise_vals, x, y, z, seed, original_content)",
            "",
        ]
        lines += body
        lines += [f"{INDENT}return content", "end", ""]
        return "\n".join(lines)

    def _noise_registrations(self) -> List[str]:
        lines: List[str] = []
        for node in self.graph.nodes:
            dim = NOISE_KINDS.get(node.kind)
            if dim is None:
                continue
            p = node.params
            spread = f"x={lua_number(p.spread_x)}, y={lua_number(p.spread_y)}"
            if dim == "3d":
                spread += f", z={lua_number(p.spread_z)}"
            lines += [
                f'luamap.register_noise("{noise_name(node.id)}", {{',
                f'{INDENT}type = "{dim}",',
                f"{INDENT}np_vals = {{",
                f"{INDENT * 2}offset = {lua_number(p.offset)},",
                f"{INDENT * 2}scale = {lua_number(p.scale)},",
                f"{INDENT * 2}spread = {{{spread}}},",
                f"{INDENT * 2}seed = {p.seed},",
                f"{INDENT * 2}octaves = {p.octaves},",
                f"{INDENT * 2}persist = {lua_number(p.persist)},",
                f"{INDENT * 2}lacunarity = {lua_number(p.lacunarity)},",
                f'{INDENT * 2}flags = "{" ".join(p.flags.names())}"',
                f"{INDENT}}},",
                "})",
                "",
            ]
        return lines

    def _content_ids(self, ctx: _EmitContext, declared: Dict[str, str]) -> List[str]:
        lines = ["-- Define content IDs"]
        for var, name in (("c_air", "air"), ("c_water", "default:water_source")):
            _claim(declared, var, name)
            lines.append(f"local {var} = minetest.get_content_id({lua_string(name)})")
        for node in self.graph.nodes:
            if node.kind != "terrain-type":
                continue
            name = node.params.name
            var, new = _claim(declared, content_var(name), name, suffix=f"_{node.id}")
            ctx.content_vars[node.id] = var
            if new:
                lines.append(f"local {var} = minetest.get_content_id({lua_string(name)})")
        return lines

    def _helpers(self) -> List[str]:
        lines: List[str] = []
        seen: Set[str] = set()
        for node in self.graph.nodes:
            helper = get_node_kind(node.kind).lua_helper
            if helper and helper not in seen:
                seen.add(helper)
                lines += LUA_HELPERS[helper].rstrip("\n").split("\n") + [""]
        return lines

    def _logic_body(self, ctx: _EmitContext, declared: Dict[str, str], content_lines: List[str]) -> List[str]:
        output = self.graph.get_output_node()
        if output is None:
            return []
        if any(n.kind == "compare" for n in self.graph.nodes):
            source = ctx.upstream(output, "in")
            if source is None:
                return []
            return [f"{INDENT}-- Terrain evaluation"] + ctx.block(source, INDENT) + [""]

        # no compare anywhere: plain height threshold on the output's input
        stone, new = _claim(declared, "c_stone", "default:stone")
        if new:
            content_lines.append(f"local {stone} = minetest.get_content_id({lua_string('default:stone')})")
        return [
            f"{INDENT}-- Terrain evaluation",
            f"{INDENT}local height = {ctx.input(output, 'in')}",
            "",
            f"{INDENT}if y < 0 then",
            f"{INDENT * 2}content = c_water",
            f"{INDENT}end",
            f"{INDENT}if y < height then",
            f"{INDENT * 2}content = {stone}",
            f"{INDENT}end",
            "",
        ]


def _claim(declared: Dict[str, str], var: str, name: str, suffix: str = "_1") -> Tuple[str, bool]:
    """
    Reserve a Lua local for content ``name``. A local already bound to another
    name is never reused; ``suffix`` is appended until the identifier is free.
    Returns the local and whether it still needs declaring.
    """
    while var in declared and declared[var] != name:
        var += suffix
    if var in declared:
        return var, False
    declared[var] = name
    return var, True


def compile_graph(graph: TerrainGraph, **options) -> CompileResult:
    return LuaCompiler(graph, **options).compile()
