"""Tests for engine.compiler and the Lua helpers."""

import pytest

from terragraph import LuaCompiler, TerrainGraph, compile_graph
from terragraph.lua import check_syntax, content_var, lua_number, sanitize_identifier


def _feed_compare(graph: TerrainGraph, connect, source_port: str, other_port: str = "1_outY") -> None:
    """Wire ``source_port < other_port`` into a compare that drives the terrain output."""
    compare = graph.add_node("compare")
    out = graph.add_node("terrain-output")
    connect(graph, source_port, f"{compare.id}_in1")
    connect(graph, other_port, f"{compare.id}_in2")
    connect(graph, f"{compare.id}_out", f"{out.id}_in")


def _code(graph: TerrainGraph) -> str:
    result = graph.compile()
    assert result.valid, result.errors
    return result.code


def test_lua_number() -> None:
    assert lua_number(1.0) == "1"
    assert lua_number(0.6) == "0.6"
    assert lua_number(-1415 / 2000) == "-0.7075"
    assert lua_number(10000000.0) == "10000000"
    assert lua_number(True) == "1"


def test_identifiers() -> None:
    assert sanitize_identifier("Default:Dirt With Grass") == "default_dirt_with_grass"
    assert content_var("default:stone") == "c_default_stone"


def test_check_syntax() -> None:
    assert check_syntax("function f(x)\n    if x then return 1 end\nend\n") == []
    assert check_syntax("for i = 0, 3 do print(i) end") == []
    assert check_syntax('-- if ( unbalanced in a comment\nlocal s = "end ("') == []
    errors = check_syntax("function f(\n")
    assert len(errors) == 2
    assert any("parentheses" in e for e in errors)
    assert any("'end'" in e for e in errors)
    assert any("braces" in e for e in check_syntax("local t = {"))


def test_scenario_compiles(height_graph: TerrainGraph) -> None:
    result = height_graph.compile()
    assert result.valid
    assert result.errors == [] and result.warnings == []
    code = result.code
    seed = height_graph.get_node(2).params.seed
    assert code.startswith("-- Luamap generated terrain\nluamap.set_singlenode()\n")
    assert 'luamap.register_noise("noise_2", {' in code
    assert 'type = "2d",' in code
    assert "spread = {x=250, y=250}," in code
    assert f"seed = {seed}," in code
    assert 'flags = "defaults"' in code
    assert 'local c_air = minetest.get_content_id("air")' in code
    assert 'local c_water = minetest.get_content_id("default:water_source")' in code
    assert 'local c_default_stone = minetest.get_content_id("default:stone")' in code
    assert code.count("local c_air =") == 1
    assert "local old_logic = luamap.logic" in code
    assert "function luamap.logic(noise_vals, x, y, z, seed, original_content)" in code
    assert "local content = old_logic(noise_vals, x, y, z, seed, original_content)" in code
    assert "if y < noise_vals.noise_2 then" in code
    assert "content = c_default_stone" in code
    assert "content = c_air" in code
    assert code.endswith("    return content\nend\n")
    assert "local function mandelbrot" not in code
    assert "local function gaussian" not in code


def test_invalid_graph_refused(height_graph: TerrainGraph) -> None:
    assert height_graph.remove_connection("3_out", "6_in")
    result = height_graph.compile()
    assert not result.valid
    assert result.code is None
    assert "Terrain output node has no input connection" in result.errors


def test_warnings_do_not_block(height_graph: TerrainGraph) -> None:
    height_graph.add_node("noise3d")
    result = compile_graph(height_graph)
    assert result.valid
    assert len(result.warnings) == 1
    assert 'luamap.register_noise("noise_7", {' in result.code
    assert 'type = "3d",' in result.code
    assert "spread = {x=250, y=250, z=250}," in result.code


def test_not_equal_is_lua_tilde(height_graph: TerrainGraph) -> None:
    assert height_graph.update_node_params(3, {"operator": "!="})
    code = _code(height_graph)
    assert "if y ~= noise_vals.noise_2 then" in code
    assert "!=" not in code


def test_flags_string(height_graph: TerrainGraph) -> None:
    assert height_graph.update_node_params(2, {"flags": "defaults eased absvalue"})
    assert 'flags = "defaults eased absvalue"' in _code(height_graph)


def test_unconnected_branch_uses_fallback(height_graph: TerrainGraph) -> None:
    assert height_graph.remove_connection("5_out", "3_useFalse")
    assert height_graph.update_node_params(3, {"useFalse": 7})
    code = _code(height_graph)
    assert "content = 7" in code


def test_nested_compares(connect) -> None:
    g = TerrainGraph.from_template("layered", seed=3)
    code = _code(g)
    assert code.count("if y < ") == 2
    assert "content = c_default_water_source" in code
    assert "content = c_air" in code
    # inner block is indented one level deeper than the outer one
    assert "\n        if y < noise_vals.noise_" in code
    assert check_syntax(code) == []


def test_fallback_height_rule(graph: TerrainGraph, connect) -> None:
    t = graph.add_node("terrain-type")
    out = graph.add_node("terrain-output")
    connect(graph, f"{t.id}_out", f"{out.id}_in")
    code = _code(graph)
    assert "local height = c_stone" in code
    assert "if y < 0 then" in code
    assert "if y < height then" in code
    assert code.count("local c_stone =") == 1


def test_fallback_declares_stone(graph: TerrainGraph, connect) -> None:
    t = graph.add_node("terrain-type")
    assert graph.update_node_params(t.id, {"name": "default:sand"})
    out = graph.add_node("terrain-output")
    connect(graph, f"{t.id}_out", f"{out.id}_in")
    code = _code(graph)
    assert 'local c_stone = minetest.get_content_id("default:stone")' in code


def test_colliding_terrain_identifiers_stay_distinct(height_graph: TerrainGraph) -> None:
    assert height_graph.update_node_params(4, {"name": "rock a"})
    assert height_graph.update_node_params(5, {"name": "rock_a"})
    assert height_graph.evaluate_terrain(0, -100, 0).name == "rock a"
    assert height_graph.evaluate_terrain(0, 100, 0).name == "rock_a"

    code = _code(height_graph)
    assert 'local c_rock_a = minetest.get_content_id("rock a")' in code
    assert 'local c_rock_a_5 = minetest.get_content_id("rock_a")' in code
    lines = [line.strip() for line in code.splitlines()]
    assert "content = c_rock_a" in lines
    assert "content = c_rock_a_5" in lines


def test_terrain_named_like_builtin_local(height_graph: TerrainGraph) -> None:
    assert height_graph.update_node_params(4, {"name": "water"})
    code = _code(height_graph)
    assert 'local c_water = minetest.get_content_id("default:water_source")' in code
    assert 'local c_water_4 = minetest.get_content_id("water")' in code
    assert "content = c_water_4" in code


def test_fallback_stone_not_shadowed(graph: TerrainGraph, connect) -> None:
    t = graph.add_node("terrain-type")
    assert graph.update_node_params(t.id, {"name": "stone"})
    out = graph.add_node("terrain-output")
    connect(graph, f"{t.id}_out", f"{out.id}_in")
    code = _code(graph)
    assert 'local c_stone = minetest.get_content_id("stone")' in code
    assert 'local c_stone_1 = minetest.get_content_id("default:stone")' in code
    assert "content = c_stone_1" in code


@pytest.mark.parametrize(
    "kind,params,expected",
    [
        ("abs", {}, "math.abs(x)"),
        ("remap", {"outMax": 2}, "luamap.remap(x, 0, 1, 0, 2)"),
    ],
)
def test_unary_templates(graph: TerrainGraph, connect, kind, params, expected) -> None:
    graph.add_node("position")
    n = graph.add_node(kind)
    connect(graph, "1_outX", f"{n.id}_in")
    if params:
        assert graph.update_node_params(n.id, params)
    _feed_compare(graph, connect, f"{n.id}_out")
    assert f"if {expected} < y then" in _code(graph)


@pytest.mark.parametrize(
    "kind,params,expected",
    [
        ("add", {}, "(x + z)"),
        ("subtract", {}, "(x - z)"),
        ("multiply", {}, "(x * z)"),
        ("lerp", {}, "luamap.lerp(x, z, y)"),
        ("lerp", {"power": 2}, "luamap.lerp(x, z, y, 2)"),
        ("coserp", {}, "luamap.coserp(x, z, y)"),
    ],
)
def test_binary_templates(graph: TerrainGraph, connect, kind, params, expected) -> None:
    graph.add_node("position")
    n = graph.add_node(kind)
    connect(graph, "1_outX", f"{n.id}_in1")
    connect(graph, "1_outZ", f"{n.id}_in2")
    if n.get_input("factor") is not None:
        connect(graph, "1_outY", f"{n.id}_factor")
    if params:
        assert graph.update_node_params(n.id, params)
    _feed_compare(graph, connect, f"{n.id}_out")
    assert f"if {expected} < y then" in _code(graph)


def test_gaussian_and_distance_templates(graph: TerrainGraph, connect) -> None:
    graph.add_node("position")
    g = graph.add_node("gaussian")
    d = graph.add_node("distance")
    for node in (g, d):
        for axis in ("X", "Y", "Z"):
            connect(graph, f"1_out{axis}", f"{node.id}_{axis.lower()}")
    assert graph.update_node_params(d.id, {"pointY": 64})
    add = graph.add_node("add")
    connect(graph, f"{g.id}_out", f"{add.id}_in1")
    connect(graph, f"{d.id}_out", f"{add.id}_in2")
    _feed_compare(graph, connect, f"{add.id}_out")
    code = _code(graph)
    assert "(gaussian(x, y, z, 0, 0, 0, 100) + math.sqrt((x - 0)^2 + (y - 64)^2 + (z - 0)^2))" in code
    assert "local function gaussian(x, y, z, cx, cy, cz, spread)" in code


def test_mandelbrot_template(graph: TerrainGraph, connect) -> None:
    graph.add_node("position")
    m = graph.add_node("mandelbrot")
    _feed_compare(graph, connect, f"{m.id}_out")
    code = _code(graph)
    assert "luamap.remap(mandelbrot((x / 10000000) + -0.7075, (z / 10000000) + -0.353, 150), 0, 150, 0, 1)" in code
    assert "local function mandelbrot(x, z, steps)" in code
    assert graph.update_node_params(m.id, {"remap": False})
    assert "if mandelbrot((x / 10000000) + -0.7075, (z / 10000000) + -0.353, 150) < y then" in _code(graph)


def test_water_level_and_header(height_graph: TerrainGraph) -> None:
    code = LuaCompiler(height_graph, water_level=4, header="-- my world").compile().code
    assert code.startswith("-- my world\n")
    assert "local water_level = 4" in code


def test_syntax_failure_keeps_code(height_graph: TerrainGraph, monkeypatch) -> None:
    monkeypatch.setattr(LuaCompiler, "generate", lambda self: "function luamap.logic(\n")
    result = height_graph.compile()
    assert not result.valid
    assert result.code == "function luamap.logic(\n"
    assert len(result.errors) == 2


def test_generation_error_reported(height_graph: TerrainGraph, monkeypatch) -> None:
    def boom(self):
        raise RuntimeError("boom")

    monkeypatch.setattr(LuaCompiler, "generate", boom)
    result = height_graph.compile()
    assert not result.valid
    assert result.code is None
    assert result.errors == ["Code generation failed: boom"]


def test_compile_does_not_mutate(height_graph: TerrainGraph) -> None:
    before = height_graph.to_config()
    height_graph.compile()
    assert height_graph.to_config() == before
