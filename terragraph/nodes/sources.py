"""Source kinds: noise fields, the Mandelbrot field and world position."""

from __future__ import annotations

import random
from typing import List

from terragraph.lua import lua_number
from terragraph.foundation.params import MandelbrotParams
from terragraph.foundation.port import PortSpec, output_port
from terragraph.nodes.base import NodeKind
from terragraph.nodes.math_ops import remap_value
from terragraph.nodes.registry import register_node_kind
from terragraph.noise.fractal import (
    NoiseParams,
    NoiseParams3D,
    fractal_noise_2d,
    fractal_noise_3d,
    mandelbrot_escape_steps,
)

SEED_RANGE = 100000


def noise_name(node_id: int) -> str:
    """Luamap noise registration name of a noise node."""
    return f"noise_{node_id}"


@register_node_kind("noise2d")
class Noise2DKind(NodeKind):
    label = "2D Noise"
    params_cls = NoiseParams

    def declare_ports(self) -> List[PortSpec]:
        return [output_port("out", "Value")]

    def default_params(self, rng: random.Random) -> NoiseParams:
        return self.params_cls(seed=rng.randrange(SEED_RANGE))

    def evaluate(self, node, port, ctx):
        # 2D noise is a heightmap over the horizontal plane
        return fractal_noise_2d(node.params, ctx.x, ctx.z, 0)

    def emit(self, node, port, ctx):
        return f"noise_vals.{noise_name(node.id)}"


@register_node_kind("noise3d")
class Noise3DKind(Noise2DKind):
    label = "3D Noise"
    params_cls = NoiseParams3D

    def evaluate(self, node, port, ctx):
        return fractal_noise_3d(node.params, ctx.x, ctx.y, ctx.z, 0)


@register_node_kind("mandelbrot")
class MandelbrotKind(NodeKind):
    label = "Mandelbrot"
    params_cls = MandelbrotParams
    lua_helper = "mandelbrot"

    def declare_ports(self) -> List[PortSpec]:
        return [output_port("out", "Value")]

    def evaluate(self, node, port, ctx):
        p: MandelbrotParams = node.params
        steps = mandelbrot_escape_steps(ctx.x / p.scale + p.offset_x, ctx.z / p.scale + p.offset_z, p.steps)
        if p.remap:
            return remap_value(steps, 0, p.steps, p.remap_min, p.remap_max)
        return float(steps)

    def emit(self, node, port, ctx):
        p: MandelbrotParams = node.params
        expr = (
            f"mandelbrot((x / {lua_number(p.scale)}) + {lua_number(p.offset_x)}, "
            f"(z / {lua_number(p.scale)}) + {lua_number(p.offset_z)}, {p.steps})"
        )
        if p.remap:
            expr = f"luamap.remap({expr}, 0, {p.steps}, {lua_number(p.remap_min)}, {lua_number(p.remap_max)})"
        return expr


@register_node_kind("position")
class PositionKind(NodeKind):
    label = "Position"

    _AXES = {"outX": "x", "outY": "y", "outZ": "z"}

    def declare_ports(self) -> List[PortSpec]:
        return [output_port("outX", "X"), output_port("outY", "Y"), output_port("outZ", "Z")]

    def evaluate(self, node, port, ctx):
        return float(getattr(ctx, self._AXES[port.role]))

    def emit(self, node, port, ctx):
        return self._AXES[port.role]
