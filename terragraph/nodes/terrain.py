"""Terrain kinds: terrain types, comparisons that choose between them, and the graph output."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import List

from terragraph.foundation.params import CompareParams, MaterialKind, TerrainTypeParams
from terragraph.foundation.port import PortKind, PortSpec, input_port, output_port
from terragraph.lua import LUA_OPERATORS, lua_number
from terragraph.nodes.base import NodeKind
from terragraph.nodes.registry import register_node_kind

COMPARISONS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "==": operator.eq,
    "!=": operator.ne,
}


@dataclass(frozen=True)
class TerrainSample:
    """What occupies a voxel: material class, display color and terrain type name."""

    material: MaterialKind
    color: str
    name: str = ""

    @property
    def material_kind(self) -> str:
        return self.material.value

    @property
    def is_solid(self) -> bool:
        return self.material == MaterialKind.SOLID


AIR = TerrainSample(MaterialKind.AIR, "#aaccff", "air")


@register_node_kind("terrain-type")
class TerrainTypeKind(NodeKind):
    label = "Terrain Type"
    params_cls = TerrainTypeParams

    def declare_ports(self) -> List[PortSpec]:
        return [output_port("out", "Terrain", PortKind.TERRAIN)]

    def evaluate(self, node, port, ctx):
        p: TerrainTypeParams = node.params
        return TerrainSample(p.material, p.color, p.name)

    def emit(self, node, port, ctx):
        return ctx.content_var(node)


@register_node_kind("compare")
class CompareKind(NodeKind):
    """``A op B`` picks the If True / If False branch; unconnected branches fall back to a number."""

    label = "Compare"
    params_cls = CompareParams

    def declare_ports(self) -> List[PortSpec]:
        return [
            input_port("in1", "A"),
            input_port("in2", "B"),
            input_port("useTrue", "If True", PortKind.TERRAIN, optional=True),
            input_port("useFalse", "If False", PortKind.TERRAIN, optional=True),
            output_port("out", "Result", PortKind.TERRAIN),
        ]

    def evaluate(self, node, port, ctx):
        p: CompareParams = node.params
        taken = COMPARISONS[p.operator](ctx.input(node, "in1"), ctx.input(node, "in2"))
        role, fallback = ("useTrue", p.use_true) if taken else ("useFalse", p.use_false)
        # only the taken branch is evaluated
        if ctx.is_connected(node, role):
            return ctx.input(node, role)
        return fallback

    def emit(self, node, port, ctx):
        # no expression form; terrain selection is emitted by emit_block
        return "0"

    def emit_block(self, node, ctx, indent):
        p: CompareParams = node.params
        inner = indent + "    "
        lines = [
            f"{indent}-- Comparison {node.id}",
            f"{indent}if {ctx.input(node, 'in1')} {LUA_OPERATORS[p.operator]} {ctx.input(node, 'in2')} then",
        ]
        lines += self._branch(node, "useTrue", p.use_true, ctx, inner)
        lines.append(f"{indent}else")
        lines += self._branch(node, "useFalse", p.use_false, ctx, inner)
        lines.append(f"{indent}end")
        return lines

    def _branch(self, node, role, fallback, ctx, indent) -> List[str]:
        source = ctx.upstream(node, role)
        if source is None:
            return [f"{indent}content = {lua_number(fallback)}"]
        return ctx.block(source, indent)


@register_node_kind("terrain-output")
class TerrainOutputKind(NodeKind):
    label = "Terrain Output"

    def declare_ports(self) -> List[PortSpec]:
        return [input_port("in", "Terrain", PortKind.TERRAIN)]

    def evaluate(self, node, port, ctx):
        return ctx.input(node, "in")

    def emit(self, node, port, ctx):
        return ctx.input(node, "in")
