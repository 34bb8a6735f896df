"""
Lattice hashing and gradient noise.

Integer arithmetic reproduces Luanti's C++ noise with 32-bit wraparound, so a
graph previewed here and exported to Lua samples the same values in-game.
Every step ends in ``& 0x7fffffff``: only the low 31 bits survive, and those
bits are identical for exact and wrapped integer arithmetic.
"""

from __future__ import annotations

import math

NOISE_MAGIC_X = 1619
NOISE_MAGIC_Y = 31337
NOISE_MAGIC_Z = 52591
NOISE_MAGIC_SEED = 1013

_MASK31 = 0x7FFFFFFF


def _scramble(n: int) -> float:
    n &= _MASK31
    n = (n >> 13) ^ n
    n = (n * (n * n * 60493 + 19990303) + 1376312589) & _MASK31
    return 1.0 - n / 0x40000000


def lattice_hash_2d(x: float, y: float, seed: int) -> float:
    """Pseudo-random value in (-1, 1] for an integer lattice point."""
    x, y = math.floor(x), math.floor(y)
    return _scramble(NOISE_MAGIC_X * x + NOISE_MAGIC_Y * y + NOISE_MAGIC_SEED * int(seed))


def lattice_hash_3d(x: float, y: float, z: float, seed: int) -> float:
    """3D variant of :func:`lattice_hash_2d`."""
    x, y, z = math.floor(x), math.floor(y), math.floor(z)
    return _scramble(
        NOISE_MAGIC_X * x + NOISE_MAGIC_Y * y + NOISE_MAGIC_Z * z + NOISE_MAGIC_SEED * int(seed)
    )


def ease_curve(t: float) -> float:
    """Quintic fade 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (6.0 * t - 15.0) + 10.0)


def lerp_1d(v0: float, v1: float, t: float) -> float:
    return v0 + (v1 - v0) * t


def bilerp_2d(v00: float, v10: float, v01: float, v11: float, x: float, y: float, eased: bool) -> float:
    if eased:
        x = ease_curve(x)
        y = ease_curve(y)
    u = lerp_1d(v00, v10, x)
    v = lerp_1d(v01, v11, x)
    return lerp_1d(u, v, y)


def trilerp_3d(
    v000: float, v100: float, v010: float, v110: float,
    v001: float, v101: float, v011: float, v111: float,
    x: float, y: float, z: float, eased: bool,
) -> float:
    # easing applied once here; the inner 2D blends run un-eased
    if eased:
        x = ease_curve(x)
        y = ease_curve(y)
        z = ease_curve(z)
    u = bilerp_2d(v000, v100, v010, v110, x, y, False)
    v = bilerp_2d(v001, v101, v011, v111, x, y, False)
    return lerp_1d(u, v, z)


def gradient_noise_2d(x: float, y: float, seed: int, eased: bool = True) -> float:
    """Value noise at (x, y): hashed lattice corners blended bilinearly. NaN for non-finite input."""
    if not (math.isfinite(x) and math.isfinite(y)):
        return math.nan
    x0 = math.floor(x)
    y0 = math.floor(y)
    xl = x - x0
    yl = y - y0
    v00 = lattice_hash_2d(x0, y0, seed)
    v10 = lattice_hash_2d(x0 + 1, y0, seed)
    v01 = lattice_hash_2d(x0, y0 + 1, seed)
    v11 = lattice_hash_2d(x0 + 1, y0 + 1, seed)
    return bilerp_2d(v00, v10, v01, v11, xl, yl, eased)


def gradient_noise_3d(x: float, y: float, z: float, seed: int, eased: bool = False) -> float:
    """Value noise at (x, y, z). Unlike the 2D variant, un-eased by default."""
    if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
        return math.nan
    x0 = math.floor(x)
    y0 = math.floor(y)
    z0 = math.floor(z)
    xl = x - x0
    yl = y - y0
    zl = z - z0
    return trilerp_3d(
        lattice_hash_3d(x0, y0, z0, seed),
        lattice_hash_3d(x0 + 1, y0, z0, seed),
        lattice_hash_3d(x0, y0 + 1, z0, seed),
        lattice_hash_3d(x0 + 1, y0 + 1, z0, seed),
        lattice_hash_3d(x0, y0, z0 + 1, seed),
        lattice_hash_3d(x0 + 1, y0, z0 + 1, seed),
        lattice_hash_3d(x0, y0 + 1, z0 + 1, seed),
        lattice_hash_3d(x0 + 1, y0 + 1, z0 + 1, seed),
        xl, yl, zl, eased,
    )
