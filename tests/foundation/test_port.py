"""Tests for foundation.port."""

import pytest

from terragraph.foundation.port import (
    Port,
    PortDirection,
    PortKind,
    PortSpec,
    input_port,
    make_port_id,
    output_port,
)


def test_port_spec_bind() -> None:
    spec = input_port("in1", "A")
    p = spec.bind(7)
    assert p.id == "7_in1" == make_port_id(7, "in1")
    assert p.node_id == 7
    assert p.name == "A"
    assert p.kind == PortKind.FLOAT
    assert p.is_input is True
    assert p.is_output is False


def test_port_spec_empty_role_raises() -> None:
    with pytest.raises(ValueError, match="non-empty"):
        PortSpec("", "A", PortDirection.IN)


def test_output_cannot_be_optional() -> None:
    with pytest.raises(ValueError, match="optional"):
        PortSpec("out", "Result", PortDirection.OUT, optional=True)


def test_port_compatible_with() -> None:
    out_f = output_port("out", "Value").bind(1)
    in_f = input_port("in1", "A").bind(2)
    in_t = input_port("useTrue", "If True", PortKind.TERRAIN, optional=True).bind(2)
    out_t = output_port("out", "Terrain", PortKind.TERRAIN).bind(3)
    assert out_f.compatible_with(in_f) is True
    assert out_t.compatible_with(in_t) is True
    assert out_f.compatible_with(in_t) is False
    assert out_t.compatible_with(in_f) is False
    # direction matters
    assert in_f.compatible_with(out_f) is False
    # same node never connects to itself
    assert out_f.compatible_with(input_port("in1", "A").bind(1)) is False


def test_port_is_frozen() -> None:
    p = Port("1_out", 1, "out", "Value", PortDirection.OUT)
    with pytest.raises(Exception):
        p.name = "other"  # type: ignore[misc]
