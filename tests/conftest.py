"""Shared fixtures: seeded graphs and the height-threshold scenario graph."""
from typing import Callable

import pytest

from terragraph import TerrainGraph


def _connect(graph: TerrainGraph, from_port: str, to_port: str) -> None:
    result = graph.add_connection(from_port, to_port)
    assert result.ok, result.message


@pytest.fixture
def connect() -> Callable[[TerrainGraph, str, str], None]:
    return _connect


@pytest.fixture
def graph() -> TerrainGraph:
    return TerrainGraph(seed=1234)


@pytest.fixture
def height_graph() -> TerrainGraph:
    """
    position.Y < noise2d(scale=1) ? stone : air.

    Node ids: 1 position, 2 noise2d, 3 compare, 4 stone, 5 air, 6 output.
    """
    g = TerrainGraph(seed=1234)
    position = g.add_node("position")
    noise = g.add_node("noise2d")
    assert g.update_node_params(noise.id, {"scale": 1})
    compare = g.add_node("compare")
    stone = g.add_node("terrain-type")
    assert g.update_node_params(stone.id, {"name": "default:stone", "material": "solid", "color": "#888888"})
    air = g.add_node("terrain-type")
    assert g.update_node_params(air.id, {"name": "air", "material": "air", "color": "#aaccff"})
    output = g.add_node("terrain-output")

    _connect(g, f"{position.id}_outY", f"{compare.id}_in1")
    _connect(g, f"{noise.id}_out", f"{compare.id}_in2")
    _connect(g, f"{stone.id}_out", f"{compare.id}_useTrue")
    _connect(g, f"{air.id}_out", f"{compare.id}_useFalse")
    _connect(g, f"{compare.id}_out", f"{output.id}_in")
    return g
