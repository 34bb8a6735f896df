"""Voxel sampling: evaluates a graph over a regular lattice for previews."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from terragraph.engine.evaluator import DEFAULT_MAX_DEPTH, Evaluator
from terragraph.foundation.graph import TerrainGraph

logger = logging.getLogger(__name__)

EMPTY = -1
# large preview volumes are capped to keep sampling interactive
LARGE_SCALE = 1000.0
LARGE_SCALE_MAX_RESOLUTION = 48


@dataclass
class VoxelGrid:
    """
    Sampled volume. ``colors[i, j, k]`` indexes ``palette`` (``EMPTY`` for no voxel);
    voxel (i, j, k) sits at world ``(i, j, k) * step``.
    """

    colors: np.ndarray
    palette: List[str]
    scale: float
    resolution: int
    names: Dict[str, str] = field(default_factory=dict)

    @property
    def step(self) -> float:
        return self.scale / self.resolution if self.resolution else 0.0

    @property
    def mask(self) -> np.ndarray:
        return self.colors != EMPTY

    @property
    def filled_count(self) -> int:
        return int(np.count_nonzero(self.mask))

    def color_at(self, i: int, j: int, k: int) -> Optional[str]:
        idx = int(self.colors[i, j, k])
        return None if idx == EMPTY else self.palette[idx]

    def positions(self) -> np.ndarray:
        """World coordinates of filled voxels, shape (N, 3)."""
        return np.argwhere(self.mask).astype(np.float64) * self.step


def sample_voxels(
    graph: TerrainGraph,
    scale: float = 100.0,
    resolution: int = 16,
    solid_only: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> VoxelGrid:
    """
    Evaluate the graph at every lattice point of ``[0, scale]^3`` with
    ``resolution`` cells per axis. Non-solid samples are skipped when ``solid_only``.
    """
    if resolution < 1:
        raise ValueError(f"resolution must be >= 1, got {resolution}")
    if scale > LARGE_SCALE:
        resolution = min(resolution, LARGE_SCALE_MAX_RESOLUTION)

    evaluator = Evaluator(graph, max_depth=max_depth)
    n = resolution + 1
    colors = np.full((n, n, n), EMPTY, dtype=np.int16)
    palette: List[str] = []
    color_index: Dict[str, int] = {}
    names: Dict[str, str] = {}
    coords = np.linspace(0.0, scale, n)
    progress_every = max(1, resolution // 10)

    for xi in range(n):
        if resolution > 32 and xi % progress_every == 0:
            logger.info("Voxel sampling: %d%% complete", int(xi / resolution * 100))
        wx = float(coords[xi])
        for yi in range(n):
            wy = float(coords[yi])
            for zi in range(n):
                sample = evaluator.evaluate_terrain(wx, wy, float(coords[zi]))
                if sample is None or (solid_only and not sample.is_solid):
                    continue
                idx = color_index.get(sample.color)
                if idx is None:
                    idx = color_index[sample.color] = len(palette)
                    palette.append(sample.color)
                    names[sample.color] = sample.name
                colors[xi, yi, zi] = idx

    grid = VoxelGrid(colors=colors, palette=palette, scale=float(scale), resolution=resolution, names=names)
    logger.info("Sampled %d voxel(s) at resolution %d", grid.filled_count, resolution)
    return grid
