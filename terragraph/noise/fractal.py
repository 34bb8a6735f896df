"""
Fractal (multi-octave) noise and the Mandelbrot escape-time field.

``NoiseParams`` has the same shape as the params of a ``noise2d`` node and the
``np_vals`` table Luamap registers, so one record drives both the preview and
the exported Lua.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntFlag
from typing import List

from terragraph.noise.lattice import gradient_noise_2d, gradient_noise_3d


class NoiseFlags(IntFlag):
    """Luanti noise flags (bit values match ``NOISE_FLAG_*``)."""

    NONE = 0x00
    DEFAULTS = 0x01
    EASED = 0x02
    ABSVALUE = 0x04

    def names(self) -> List[str]:
        """Lower-case flag names in bit order, as written in Luamap ``flags`` strings."""
        return [f.name.lower() for f in (NoiseFlags.DEFAULTS, NoiseFlags.EASED, NoiseFlags.ABSVALUE) if self & f]

    @classmethod
    def parse(cls, value) -> "NoiseFlags":
        """Accept an int, a NoiseFlags, or a string such as ``"defaults, absvalue"``."""
        if isinstance(value, str):
            flags = cls.NONE
            for token in value.replace(",", " ").split():
                try:
                    flags |= cls[token.upper()]
                except KeyError:
                    raise ValueError(f"Unknown noise flag: {token!r}") from None
            return flags
        return cls(int(value))


@dataclass(frozen=True)
class NoiseParams:
    offset: float = 0.0
    scale: float = 1.0
    spread_x: float = 250.0
    spread_y: float = 250.0
    seed: int = 0
    octaves: int = 3
    persist: float = 0.6
    lacunarity: float = 2.0
    flags: NoiseFlags = NoiseFlags.DEFAULTS

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", NoiseFlags.parse(self.flags))
        object.__setattr__(self, "seed", int(self.seed))
        object.__setattr__(self, "octaves", int(self.octaves))
        for name in ("offset", "scale", "persist", "lacunarity") + self._spread_fields():
            object.__setattr__(self, name, float(getattr(self, name)))
        if self.octaves < 0:
            raise ValueError(f"octaves must be >= 0, got {self.octaves}")
        for name in self._spread_fields():
            if getattr(self, name) == 0.0:
                raise ValueError(f"{name} must be non-zero")

    def _spread_fields(self):
        return ("spread_x", "spread_y")


@dataclass(frozen=True)
class NoiseParams3D(NoiseParams):
    spread_z: float = 250.0

    def _spread_fields(self):
        return ("spread_x", "spread_y", "spread_z")


def fractal_noise_2d(params: NoiseParams, x: float, y: float, seed_offset: int = 0) -> float:
    """Octave sum of :func:`gradient_noise_2d`; eased when DEFAULTS or EASED is set."""
    x /= params.spread_x
    y /= params.spread_y
    seed = seed_offset + params.seed
    eased = bool(params.flags & (NoiseFlags.DEFAULTS | NoiseFlags.EASED))
    absvalue = bool(params.flags & NoiseFlags.ABSVALUE)

    f = 1.0
    g = 1.0
    a = 0.0
    for i in range(params.octaves):
        v = gradient_noise_2d(x * f, y * f, seed + i, eased)
        if absvalue:
            v = abs(v)
        a += g * v
        f *= params.lacunarity
        g *= params.persist
    return params.offset + a * params.scale


def fractal_noise_3d(params: NoiseParams3D, x: float, y: float, z: float, seed_offset: int = 0) -> float:
    """Octave sum of :func:`gradient_noise_3d`; eased only when EASED is set."""
    x /= params.spread_x
    y /= params.spread_y
    z /= params.spread_z
    seed = seed_offset + params.seed
    eased = bool(params.flags & NoiseFlags.EASED)
    absvalue = bool(params.flags & NoiseFlags.ABSVALUE)

    f = 1.0
    g = 1.0
    a = 0.0
    for i in range(params.octaves):
        v = gradient_noise_3d(x * f, y * f, z * f, seed + i, eased)
        if absvalue:
            v = abs(v)
        a += g * v
        f *= params.lacunarity
        g *= params.persist
    return params.offset + a * params.scale


def mandelbrot_escape_steps(x: float, z: float, max_steps: int) -> int:
    """Iteration index at which z -> z^2 + c leaves radius sqrt(20), or ``max_steps``."""
    max_steps = int(max_steps)
    if not (math.isfinite(x) and math.isfinite(z)):
        return max_steps
    a = 0.0
    b = 0.0
    for i in range(max_steps + 1):
        a, b = a * a - b * b + x, 2.0 * a * b + z
        if a * a + b * b > 20.0:
            return i
    return max_steps
