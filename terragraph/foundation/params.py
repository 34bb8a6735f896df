"""
Typed node parameters.

Each node kind owns a frozen dataclass of parameters. Updates are partial:
``merge_params`` replaces only the named fields (accepting the editor's
camelCase names such as ``spreadX``) and hands back any field the kind does not
know so the node can keep it alongside.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from terragraph.noise.fractal import NoiseFlags, NoiseParams, NoiseParams3D

COMPARE_OPERATORS = ("<", "<=", ">", ">=", "==", "!=")

# editor names that do not follow the plain camelCase -> snake_case rule
_ALIASES = {
    "type": "material",
    "materialKind": "material",
    "material_kind": "material",
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class MaterialKind(str, Enum):
    SOLID = "solid"
    LIQUID = "liquid"
    AIR = "air"


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off", ""):
            return False
        raise ValueError(f"Not a boolean: {value!r}")
    return bool(value)


_COERCE = {"float": float, "int": int, "bool": _to_bool, "str": str}


@dataclass(frozen=True)
class ParamsBase:
    """Coerces declared scalar fields, then runs ``validate``."""

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            convert = _COERCE.get(f.type if isinstance(f.type, str) else getattr(f.type, "__name__", ""))
            if convert is not None:
                object.__setattr__(self, f.name, convert(getattr(self, f.name)))
        self.validate()

    def validate(self) -> None:
        pass


@dataclass(frozen=True)
class EmptyParams(ParamsBase):
    pass


@dataclass(frozen=True)
class MandelbrotParams(ParamsBase):
    scale: float = 10000000.0
    offset_x: float = -1415 / 2000
    offset_z: float = -706 / 2000
    steps: int = 150
    remap: bool = True
    remap_min: float = 0.0
    remap_max: float = 1.0

    def validate(self) -> None:
        if self.scale == 0.0:
            raise ValueError("scale must be non-zero")
        if self.steps < 0:
            raise ValueError(f"steps must be >= 0, got {self.steps}")


@dataclass(frozen=True)
class LerpParams(ParamsBase):
    power: float = 1.0


@dataclass(frozen=True)
class GaussianParams(ParamsBase):
    center_x: float = 0.0
    center_y: float = 0.0
    center_z: float = 0.0
    spread: float = 100.0

    def validate(self) -> None:
        if self.spread == 0.0:
            raise ValueError("spread must be non-zero")


@dataclass(frozen=True)
class RemapParams(ParamsBase):
    in_min: float = 0.0
    in_max: float = 1.0
    out_min: float = 0.0
    out_max: float = 1.0


@dataclass(frozen=True)
class DistanceParams(ParamsBase):
    point_x: float = 0.0
    point_y: float = 0.0
    point_z: float = 0.0


@dataclass(frozen=True)
class CompareParams(ParamsBase):
    operator: str = "<"
    use_true: float = 1.0
    use_false: float = 0.0

    def validate(self) -> None:
        if self.operator not in COMPARE_OPERATORS:
            raise ValueError(f"Unknown operator {self.operator!r}; expected one of {', '.join(COMPARE_OPERATORS)}")


@dataclass(frozen=True)
class TerrainTypeParams(ParamsBase):
    name: str = "Stone"
    material: MaterialKind = MaterialKind.SOLID
    color: str = "#888888"

    def validate(self) -> None:
        object.__setattr__(self, "material", MaterialKind(self.material))
        if not self.name.strip():
            raise ValueError("Terrain type name must be non-empty")


def canonical_field(name: str) -> str:
    """Map an editor field name (``spreadX``, ``type``) to the dataclass field name."""
    if name in _ALIASES:
        return _ALIASES[name]
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def merge_params(params: Any, updates: Mapping[str, Any]) -> Tuple[Any, Dict[str, Any]]:
    """
    Return (new_params, extras): known fields replaced on a copy of ``params``,
    unknown ones returned untouched. Raises ValueError/TypeError on bad values.
    """
    known = {f.name for f in dataclasses.fields(params)}
    typed: Dict[str, Any] = {}
    extras: Dict[str, Any] = {}
    for key, value in updates.items():
        field_name = canonical_field(str(key))
        if field_name in known:
            typed[field_name] = value
        else:
            extras[str(key)] = value
    if not typed:
        return params, extras
    return dataclasses.replace(params, **typed), extras


def params_to_dict(params: Any) -> Dict[str, Any]:
    """Plain dict of a params dataclass; enums flattened to their values."""
    out: Dict[str, Any] = {}
    for f in dataclasses.fields(params):
        value = getattr(params, f.name)
        if isinstance(value, NoiseFlags):
            value = int(value)
        elif isinstance(value, Enum):
            value = value.value
        out[f.name] = value
    return out


__all__ = [
    "COMPARE_OPERATORS",
    "CompareParams",
    "DistanceParams",
    "EmptyParams",
    "GaussianParams",
    "LerpParams",
    "MandelbrotParams",
    "MaterialKind",
    "NoiseParams",
    "NoiseParams3D",
    "ParamsBase",
    "RemapParams",
    "TerrainTypeParams",
    "canonical_field",
    "merge_params",
    "params_to_dict",
]
