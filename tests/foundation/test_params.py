"""Tests for foundation.params: typed params, aliases and partial merges."""

import pytest

from terragraph.foundation.params import (
    CompareParams,
    GaussianParams,
    MandelbrotParams,
    MaterialKind,
    TerrainTypeParams,
    canonical_field,
    merge_params,
    params_to_dict,
)
from terragraph.noise import NoiseFlags, NoiseParams, NoiseParams3D


def test_canonical_field() -> None:
    assert canonical_field("spreadX") == "spread_x"
    assert canonical_field("remapMin") == "remap_min"
    assert canonical_field("useTrue") == "use_true"
    assert canonical_field("offset") == "offset"
    assert canonical_field("spread_x") == "spread_x"
    assert canonical_field("type") == "material"
    assert canonical_field("materialKind") == "material"


def test_defaults() -> None:
    m = MandelbrotParams()
    assert m.scale == 10000000
    assert m.offset_x == pytest.approx(-0.7075)
    assert m.offset_z == pytest.approx(-0.353)
    assert m.steps == 150 and m.remap is True
    assert CompareParams().operator == "<"
    t = TerrainTypeParams()
    assert (t.name, t.material, t.color) == ("Stone", MaterialKind.SOLID, "#888888")


def test_merge_known_and_unknown_fields() -> None:
    params, extras = merge_params(NoiseParams(), {"spreadX": 384, "octaves": "5", "label": "hills"})
    assert params.spread_x == 384
    assert params.octaves == 5
    assert params.spread_y == 250
    assert extras == {"label": "hills"}


def test_merge_coerces_types() -> None:
    params, _ = merge_params(MandelbrotParams(), {"steps": "40", "remap": "false", "scale": "2"})
    assert params.steps == 40
    assert params.remap is False
    assert params.scale == 2.0
    t, _ = merge_params(TerrainTypeParams(), {"type": "liquid"})
    assert t.material == MaterialKind.LIQUID


def test_merge_rejects_bad_values() -> None:
    with pytest.raises(ValueError, match="operator"):
        merge_params(CompareParams(), {"operator": "=>"})
    with pytest.raises(ValueError, match="spread"):
        merge_params(GaussianParams(), {"spread": 0})
    with pytest.raises(ValueError):
        merge_params(TerrainTypeParams(), {"material": "plasma"})
    with pytest.raises(ValueError):
        merge_params(MandelbrotParams(), {"steps": "many"})


def test_noise_params_coerce_float_fields() -> None:
    params, _ = merge_params(NoiseParams(), {"scale": "2", "offset": "-1.5", "persist": "0.25", "spreadY": "64"})
    assert params.scale == 2.0
    assert type(params.scale) is float
    assert params.offset == -1.5
    assert params.persist == 0.25
    assert params.spread_y == 64.0
    for field in ("offset", "scale", "persist", "lacunarity", "spread_x"):
        with pytest.raises(ValueError):
            merge_params(NoiseParams(), {field: "abc"})
    with pytest.raises(TypeError):
        merge_params(NoiseParams(), {"scale": None})
    with pytest.raises(ValueError, match="spread_z"):
        merge_params(NoiseParams3D(), {"spread_z": "0"})


def test_merge_without_known_fields_returns_same_object() -> None:
    p = CompareParams()
    merged, extras = merge_params(p, {"note": 1})
    assert merged is p
    assert extras == {"note": 1}


def test_params_to_dict_flattens_enums() -> None:
    d = params_to_dict(NoiseParams(flags=NoiseFlags.DEFAULTS | NoiseFlags.ABSVALUE, seed=9))
    assert d["flags"] == 5
    assert type(d["flags"]) is int
    assert d["seed"] == 9
    assert params_to_dict(TerrainTypeParams())["material"] == "solid"
