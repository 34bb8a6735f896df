"""Evaluation, validation, Lua compilation and voxel sampling of terrain graphs."""

from terragraph.engine.evaluator import DEFAULT_MAX_DEPTH, Evaluator, default_value
from terragraph.engine.validation import ValidationResult, validate_graph
from terragraph.engine.compiler import CompileResult, LuaCompiler, compile_graph
from terragraph.engine.sampler import VoxelGrid, sample_voxels

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "CompileResult",
    "Evaluator",
    "LuaCompiler",
    "ValidationResult",
    "VoxelGrid",
    "compile_graph",
    "default_value",
    "sample_voxels",
    "validate_graph",
]
