"""Tests for the built-in graph templates."""

import pytest

from terragraph import MaterialKind, TerrainGraph
from terragraph.noise import fractal_noise_2d
from terragraph.templates import template_names


def test_template_names() -> None:
    assert template_names() == ["layered", "simple"]


@pytest.mark.parametrize("name", ["simple", "layered"])
def test_templates_are_valid(name: str) -> None:
    g = TerrainGraph.from_template(name, seed=11)
    result = g.validate()
    assert result.valid, result.errors
    assert result.warnings == []
    assert g.compile().valid


@pytest.mark.parametrize("name", ["simple", "layered"])
def test_templates_height_threshold(name: str) -> None:
    g = TerrainGraph.from_template(name, seed=11)
    assert g.evaluate_terrain(5, -1000, 5).material == MaterialKind.SOLID
    assert g.evaluate_terrain(5, 1000, 5).material == MaterialKind.AIR


def test_layered_structure() -> None:
    g = TerrainGraph.from_template("layered")
    kinds = [n.kind for n in g.nodes]
    assert kinds.count("compare") == 2
    assert kinds.count("terrain-type") == 3
    hills = g.get_node(2).params
    assert (hills.seed, hills.octaves, hills.spread_x, hills.spread_y) == (5900033, 5, 384, 256)
    assert g.get_node(7).params.scale == 0


def test_layered_water_below_sea_level() -> None:
    g = TerrainGraph.from_template("layered")
    hills = g.get_node(2).params
    for x in range(0, 2000, 97):
        surface = fractal_noise_2d(hills, x, 0)
        expected = MaterialKind.SOLID if -0.5 < surface else MaterialKind.LIQUID
        assert g.evaluate_terrain(x, -0.5, 0).material == expected


def test_unknown_template() -> None:
    with pytest.raises(KeyError, match="Unknown template"):
        TerrainGraph.from_template("volcano")
