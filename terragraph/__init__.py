"""
terragraph: node-graph terrain prototyping for the Luamap mod of Luanti/Minetest.

Build a graph of noise, math and comparison nodes, preview it with
``evaluate_terrain`` and export an equivalent Lua script with ``compile``::

    from terragraph import TerrainGraph

    g = TerrainGraph.from_template("simple", seed=1)
    g.evaluate_terrain(0, -50, 0)   # TerrainSample(material=SOLID, ...)
    print(g.compile().code)
"""

__version__ = "0.1.0"

from terragraph.noise import (
    NoiseFlags,
    NoiseParams,
    NoiseParams3D,
    fractal_noise_2d,
    fractal_noise_3d,
    gradient_noise_2d,
    gradient_noise_3d,
    lattice_hash_2d,
    lattice_hash_3d,
    mandelbrot_escape_steps,
)
from terragraph.foundation import (
    Connection,
    MaterialKind,
    MutationResult,
    Node,
    Port,
    PortKind,
    TerrainGraph,
)
from terragraph.nodes import AIR, NodeKind, TerrainSample, register_node_kind
from terragraph.engine import (
    CompileResult,
    Evaluator,
    LuaCompiler,
    ValidationResult,
    VoxelGrid,
    compile_graph,
    sample_voxels,
    validate_graph,
)

__all__ = [
    "AIR",
    "CompileResult",
    "Connection",
    "Evaluator",
    "LuaCompiler",
    "MaterialKind",
    "MutationResult",
    "Node",
    "NodeKind",
    "NoiseFlags",
    "NoiseParams",
    "NoiseParams3D",
    "Port",
    "PortKind",
    "TerrainGraph",
    "TerrainSample",
    "ValidationResult",
    "VoxelGrid",
    "compile_graph",
    "fractal_noise_2d",
    "fractal_noise_3d",
    "gradient_noise_2d",
    "gradient_noise_3d",
    "lattice_hash_2d",
    "lattice_hash_3d",
    "mandelbrot_escape_steps",
    "register_node_kind",
    "sample_voxels",
    "validate_graph",
]
