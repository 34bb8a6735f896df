"""Command-line interface.

Usage::

    terragraph template layered -o world.yaml
    terragraph validate world.yaml
    terragraph compile world.yaml -o init.lua
    terragraph eval world.yaml 10 -5 20
    terragraph sample world.yaml --resolution 24
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from omegaconf import DictConfig

from terragraph.engine.compiler import LuaCompiler
from terragraph.engine.evaluator import Evaluator
from terragraph.engine.sampler import sample_voxels
from terragraph.engine.validation import validate_graph
from terragraph.foundation.graph import TerrainGraph
from terragraph.nodes import NodeKindRegistry
from terragraph.templates import template_names
from terragraph.utils.config import load_config

logger = logging.getLogger(__name__)


def _print_messages(label: str, messages: List[str]) -> None:
    for m in messages:
        print(f"{label}: {m}")


def _cmd_validate(args: argparse.Namespace, cfg: DictConfig) -> int:
    result = validate_graph(TerrainGraph.from_yaml(args.graph))
    _print_messages("error", result.errors)
    _print_messages("warning", result.warnings)
    print("Graph is valid" if result.valid else "Graph has errors")
    return 0 if result.valid else 1


def _cmd_compile(args: argparse.Namespace, cfg: DictConfig) -> int:
    graph = TerrainGraph.from_yaml(args.graph)
    result = LuaCompiler(graph, water_level=cfg.compiler.water_level, header=cfg.compiler.header).compile()
    _print_messages("warning", result.warnings)
    _print_messages("error", result.errors)
    if result.code is None:
        return 1
    if args.output:
        Path(args.output).write_text(result.code, encoding="utf-8")
        print(f"Saved: {args.output}")
    else:
        sys.stdout.write(result.code)
    return 0 if result.valid else 1


def _cmd_eval(args: argparse.Namespace, cfg: DictConfig) -> int:
    graph = TerrainGraph.from_yaml(args.graph)
    sample = Evaluator(graph, max_depth=cfg.evaluator.max_depth).evaluate_terrain(args.x, args.y, args.z)
    if sample is None:
        print("none")
        return 1
    print(f"{sample.name} ({sample.material_kind}, {sample.color})")
    return 0


def _cmd_sample(args: argparse.Namespace, cfg: DictConfig) -> int:
    graph = TerrainGraph.from_yaml(args.graph)
    grid = sample_voxels(
        graph,
        scale=args.scale if args.scale is not None else cfg.sampler.scale,
        resolution=args.resolution if args.resolution is not None else cfg.sampler.resolution,
        solid_only=cfg.sampler.solid_only,
        max_depth=cfg.evaluator.max_depth,
    )
    print(f"{grid.filled_count} voxel(s) at resolution {grid.resolution}, step {grid.step:g}")
    for idx, color in enumerate(grid.palette):
        count = int((grid.colors == idx).sum())
        print(f"  {color} {grid.names.get(color, '')}: {count}")
    return 0


def _cmd_template(args: argparse.Namespace, cfg: DictConfig) -> int:
    graph = TerrainGraph.from_template(args.name, seed=args.seed)
    if args.output:
        graph.save_yaml(args.output)
        print(f"Saved: {args.output}")
    else:
        sys.stdout.write(graph.to_yaml())
    return 0


def _cmd_kinds(args: argparse.Namespace, cfg: DictConfig) -> int:
    for kind in NodeKindRegistry.global_registry().kinds():
        print(kind)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="terragraph", description="Node-graph terrain prototyper for Luamap")
    parser.add_argument("--config", help="Engine config file (YAML)")
    parser.add_argument("--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
                        help="Override a config value, e.g. --set compiler.water_level=4")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate", help="Validate a graph file")
    p.add_argument("graph", help="Graph file (YAML or JSON)")
    p.set_defaults(func=_cmd_validate)

    p = sub.add_parser("compile", help="Compile a graph file to Luamap Lua")
    p.add_argument("graph", help="Graph file (YAML or JSON)")
    p.add_argument("--output", "-o", help="Write Lua here instead of stdout")
    p.set_defaults(func=_cmd_compile)

    p = sub.add_parser("eval", help="Evaluate the terrain at one point")
    p.add_argument("graph", help="Graph file (YAML or JSON)")
    p.add_argument("x", type=float)
    p.add_argument("y", type=float)
    p.add_argument("z", type=float)
    p.set_defaults(func=_cmd_eval)

    p = sub.add_parser("sample", help="Sample a voxel preview volume")
    p.add_argument("graph", help="Graph file (YAML or JSON)")
    p.add_argument("--scale", type=float)
    p.add_argument("--resolution", type=int)
    p.set_defaults(func=_cmd_sample)

    p = sub.add_parser("template", help="Write a built-in example graph")
    p.add_argument("name", choices=template_names())
    p.add_argument("--seed", type=int, help="Seed for randomly seeded noise nodes")
    p.add_argument("--output", "-o", help="Write YAML here instead of stdout")
    p.set_defaults(func=_cmd_template)

    p = sub.add_parser("kinds", help="List registered node kinds")
    p.set_defaults(func=_cmd_kinds)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config(args.config, args.overrides)
    level = "INFO" if args.verbose else str(cfg.logging.level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING))
    try:
        return args.func(args, cfg)
    except (KeyError, ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
