"""Arithmetic, interpolation and shaping kinds."""

from __future__ import annotations

import math
from typing import List

from terragraph.lua import lua_number
from terragraph.foundation.params import DistanceParams, GaussianParams, LerpParams, RemapParams
from terragraph.foundation.port import PortSpec, input_port, output_port
from terragraph.nodes.base import NodeKind
from terragraph.nodes.registry import register_node_kind


def _clamp01(t: float) -> float:
    return max(0.0, min(1.0, t))


def _pow(base: float, exponent: float) -> float:
    # NaN for a negative base with a fractional exponent instead of a complex result
    if exponent == 1.0:
        return base
    try:
        return math.pow(base, exponent)
    except ValueError:
        return math.nan
    except OverflowError:
        return math.inf


def lerp_value(a: float, b: float, t: float, power: float = 1.0) -> float:
    t = _clamp01(t)
    return (1.0 - t) * _pow(a, power) + t * _pow(b, power)


def coserp_value(a: float, b: float, t: float) -> float:
    t = _clamp01(t)
    f = (1.0 - math.cos(t * math.pi)) / 2.0
    return a * (1.0 - f) + b * f


def remap_value(v: float, in_min: float, in_max: float, out_min: float, out_max: float) -> float:
    if in_min == in_max:
        return float(out_min)
    return (v - in_min) / (in_max - in_min) * (out_max - out_min) + out_min


def gaussian_value(x: float, y: float, z: float, cx: float, cy: float, cz: float, spread: float) -> float:
    dx = x - cx
    dy = y - cy
    dz = z - cz
    return math.exp(-(dx * dx + dy * dy + dz * dz) / (2.0 * spread * spread))


def _xyz_inputs() -> List[PortSpec]:
    return [input_port("x", "X"), input_port("y", "Y"), input_port("z", "Z")]


class BinaryOpKind(NodeKind):
    """Two FLOAT inputs A, B -> Result."""

    symbol = "+"

    def declare_ports(self) -> List[PortSpec]:
        return [input_port("in1", "A"), input_port("in2", "B"), output_port("out", "Result")]

    def apply(self, a: float, b: float) -> float:
        raise NotImplementedError

    def evaluate(self, node, port, ctx):
        return self.apply(ctx.input(node, "in1"), ctx.input(node, "in2"))

    def emit(self, node, port, ctx):
        return f"({ctx.input(node, 'in1')} {self.symbol} {ctx.input(node, 'in2')})"


@register_node_kind("add")
class AddKind(BinaryOpKind):
    label = "Add"
    symbol = "+"

    def apply(self, a, b):
        return a + b


@register_node_kind("subtract")
class SubtractKind(BinaryOpKind):
    label = "Subtract"
    symbol = "-"

    def apply(self, a, b):
        return a - b


@register_node_kind("multiply")
class MultiplyKind(BinaryOpKind):
    label = "Multiply"
    symbol = "*"

    def apply(self, a, b):
        return a * b


@register_node_kind("abs")
class AbsKind(NodeKind):
    label = "Absolute"

    def declare_ports(self) -> List[PortSpec]:
        return [input_port("in", "Value"), output_port("out", "Result")]

    def evaluate(self, node, port, ctx):
        return abs(ctx.input(node, "in"))

    def emit(self, node, port, ctx):
        return f"math.abs({ctx.input(node, 'in')})"


class InterpolateKind(NodeKind):
    def declare_ports(self) -> List[PortSpec]:
        return [
            input_port("in1", "A"),
            input_port("in2", "B"),
            input_port("factor", "Factor"),
            output_port("out", "Result"),
        ]

    def _args(self, node, ctx) -> str:
        return f"{ctx.input(node, 'in1')}, {ctx.input(node, 'in2')}, {ctx.input(node, 'factor')}"


@register_node_kind("lerp")
class LerpKind(InterpolateKind):
    label = "Lerp"
    params_cls = LerpParams

    def evaluate(self, node, port, ctx):
        return lerp_value(
            ctx.input(node, "in1"), ctx.input(node, "in2"), ctx.input(node, "factor"), node.params.power
        )

    def emit(self, node, port, ctx):
        if node.params.power == 1.0:
            return f"luamap.lerp({self._args(node, ctx)})"
        return f"luamap.lerp({self._args(node, ctx)}, {lua_number(node.params.power)})"


@register_node_kind("coserp")
class CoserpKind(InterpolateKind):
    label = "Coserp"

    def evaluate(self, node, port, ctx):
        return coserp_value(ctx.input(node, "in1"), ctx.input(node, "in2"), ctx.input(node, "factor"))

    def emit(self, node, port, ctx):
        return f"luamap.coserp({self._args(node, ctx)})"


@register_node_kind("gaussian")
class GaussianKind(NodeKind):
    label = "Gaussian"
    params_cls = GaussianParams
    lua_helper = "gaussian"

    def declare_ports(self) -> List[PortSpec]:
        return _xyz_inputs() + [output_port("out", "Result")]

    def evaluate(self, node, port, ctx):
        p: GaussianParams = node.params
        return gaussian_value(
            ctx.input(node, "x"), ctx.input(node, "y"), ctx.input(node, "z"),
            p.center_x, p.center_y, p.center_z, p.spread,
        )

    def emit(self, node, port, ctx):
        p: GaussianParams = node.params
        args = ", ".join(ctx.input(node, r) for r in ("x", "y", "z"))
        consts = ", ".join(lua_number(v) for v in (p.center_x, p.center_y, p.center_z, p.spread))
        return f"gaussian({args}, {consts})"


@register_node_kind("remap")
class RemapKind(NodeKind):
    label = "Remap"
    params_cls = RemapParams

    def declare_ports(self) -> List[PortSpec]:
        return [input_port("in", "Value"), output_port("out", "Result")]

    def evaluate(self, node, port, ctx):
        p: RemapParams = node.params
        return remap_value(ctx.input(node, "in"), p.in_min, p.in_max, p.out_min, p.out_max)

    def emit(self, node, port, ctx):
        p: RemapParams = node.params
        bounds = ", ".join(lua_number(v) for v in (p.in_min, p.in_max, p.out_min, p.out_max))
        return f"luamap.remap({ctx.input(node, 'in')}, {bounds})"


@register_node_kind("distance")
class DistanceKind(NodeKind):
    label = "Distance"
    params_cls = DistanceParams

    def declare_ports(self) -> List[PortSpec]:
        return _xyz_inputs() + [output_port("out", "Distance")]

    def evaluate(self, node, port, ctx):
        p: DistanceParams = node.params
        dx = ctx.input(node, "x") - p.point_x
        dy = ctx.input(node, "y") - p.point_y
        dz = ctx.input(node, "z") - p.point_z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def emit(self, node, port, ctx):
        p: DistanceParams = node.params
        terms = " + ".join(
            f"({ctx.input(node, role)} - {lua_number(point)})^2"
            for role, point in (("x", p.point_x), ("y", p.point_y), ("z", p.point_z))
        )
        return f"math.sqrt({terms})"
