"""Deterministic noise matching Luanti's C++ implementation."""

from terragraph.noise.fractal import (
    NoiseFlags,
    NoiseParams,
    NoiseParams3D,
    fractal_noise_2d,
    fractal_noise_3d,
    mandelbrot_escape_steps,
)
from terragraph.noise.lattice import (
    bilerp_2d,
    ease_curve,
    gradient_noise_2d,
    gradient_noise_3d,
    lattice_hash_2d,
    lattice_hash_3d,
    lerp_1d,
    trilerp_3d,
)

__all__ = [
    "NoiseFlags",
    "NoiseParams",
    "NoiseParams3D",
    "bilerp_2d",
    "ease_curve",
    "fractal_noise_2d",
    "fractal_noise_3d",
    "gradient_noise_2d",
    "gradient_noise_3d",
    "lattice_hash_2d",
    "lattice_hash_3d",
    "lerp_1d",
    "mandelbrot_escape_steps",
    "trilerp_3d",
]
