"""
Built-in graph templates.

Both are height-based: ``position.Y`` is compared against a 2D noise heightmap,
so everything below the surface is stone.
"""

from __future__ import annotations

from terragraph.foundation.graph import TerrainGraph
from terragraph.foundation.node import Node
from terragraph.noise.fractal import NoiseFlags


def _connect(graph: TerrainGraph, from_port: str, to_port: str) -> None:
    result = graph.add_connection(from_port, to_port)
    if not result:
        raise ValueError(f"Template connection {from_port} -> {to_port} failed: {result.message}")


def _terrain(graph: TerrainGraph, name: str, material: str, color: str, x: float, y: float) -> Node:
    node = graph.add_node("terrain-type", x, y)
    graph.update_node_params(node.id, {"name": name, "material": material, "color": color})
    return node


@TerrainGraph.register_template("simple")
def build_simple(graph: TerrainGraph) -> None:
    """Stone below a noise surface (scale 20), air above."""
    position = graph.add_node("position", 100, 150)
    noise = graph.add_node("noise2d", 300, 100)
    graph.update_node_params(noise.id, {"scale": 20})
    compare = graph.add_node("compare", 500, 150)
    stone = _terrain(graph, "default:stone", "solid", "#888888", 300, 250)
    air = _terrain(graph, "air", "air", "#aaccff", 300, 350)
    output = graph.add_node("terrain-output", 700, 150)

    _connect(graph, f"{position.id}_outY", f"{compare.id}_in1")
    _connect(graph, f"{noise.id}_out", f"{compare.id}_in2")
    _connect(graph, f"{stone.id}_out", f"{compare.id}_useTrue")
    _connect(graph, f"{air.id}_out", f"{compare.id}_useFalse")
    _connect(graph, f"{compare.id}_out", f"{output.id}_in")


@TerrainGraph.register_template("layered")
def build_layered(graph: TerrainGraph) -> None:
    """Stone under rolling hills, water below level 0, air elsewhere."""
    position = graph.add_node("position", 100, 200)
    hills = graph.add_node("noise2d", 300, 100)
    graph.update_node_params(hills.id, {
        "offset": 0,
        "scale": 50,
        "spread_x": 384,
        "spread_y": 256,
        "seed": 5900033,
        "octaves": 5,
        "persist": 0.63,
        "lacunarity": 2.0,
        "flags": NoiseFlags.DEFAULTS,
    })
    compare = graph.add_node("compare", 500, 200)
    stone = _terrain(graph, "default:stone", "solid", "#888888", 350, 300)
    water = _terrain(graph, "default:water_source", "liquid", "#4444ff", 650, 300)
    water_compare = graph.add_node("compare", 650, 200)
    graph.update_node_params(water_compare.id, {"use_true": 0, "use_false": 0})
    # zero-scale noise is a constant 0: the water level
    water_level = graph.add_node("noise2d", 500, 100)
    graph.update_node_params(water_level.id, {"offset": 0, "scale": 0, "spread_x": 100, "spread_y": 100})
    air = _terrain(graph, "air", "air", "#aaccff", 500, 400)
    output = graph.add_node("terrain-output", 800, 200)

    _connect(graph, f"{position.id}_outY", f"{compare.id}_in1")
    _connect(graph, f"{position.id}_outY", f"{water_compare.id}_in1")
    _connect(graph, f"{water_level.id}_out", f"{water_compare.id}_in2")
    _connect(graph, f"{hills.id}_out", f"{compare.id}_in2")
    _connect(graph, f"{stone.id}_out", f"{compare.id}_useTrue")
    _connect(graph, f"{water_compare.id}_out", f"{compare.id}_useFalse")
    _connect(graph, f"{water.id}_out", f"{water_compare.id}_useTrue")
    _connect(graph, f"{air.id}_out", f"{water_compare.id}_useFalse")
    _connect(graph, f"{compare.id}_out", f"{output.id}_in")


def template_names():
    return sorted(TerrainGraph._template_builders)
