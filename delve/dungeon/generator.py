"""Grid allocation and shape masking (the first generation phase)."""
from __future__ import annotations

import math
import random
from typing import Sequence

from .cells import CellFlag, Grid
from .config import DungeonConfig
from .tiles import ROUND_LAYOUT


def rand(rng: random.Random, n) -> int:
    """Uniform integer in [0, n); 0 when the range is empty."""
    n = int(n)
    return rng.randrange(n) if n > 0 else 0


class GridSize:
    """Derived dimensions: n_i/n_j intersections per axis, even n_rows/n_cols."""

    def __init__(self, config: DungeonConfig):
        self.n_i = config.n_rows // 2
        self.n_j = config.n_cols // 2
        self.n_rows = self.n_i * 2
        self.n_cols = self.n_j * 2
        self.max_row = self.n_rows - 1
        self.max_col = self.n_cols - 1
        self.room_base = (config.room_min + 1) // 2
        self.room_radix = ((config.room_max - config.room_min) // 2) + 1


def init_grid(config: DungeonConfig, size: GridSize | None = None) -> Grid:
    size = size or GridSize(config)
    grid = Grid(size.n_rows, size.n_cols)
    stencil = config.stencil
    if stencil is not None:
        mask_cells(grid, size, stencil)
    elif config.dungeon_layout == ROUND_LAYOUT:
        round_mask(grid, size)
    return grid


def mask_cells(grid: Grid, size: GridSize, mask: Sequence[Sequence[int]]) -> int:
    """Block every cell that samples a zero from the stencil scaled over the grid."""
    r_x = len(mask) / (size.n_rows + 1)
    c_x = len(mask[0]) / (size.n_cols + 1)
    blocked = 0
    for r in range(size.n_rows):
        for c in range(size.n_cols):
            if not mask[int(r * r_x)][int(c * c_x)]:
                grid[r, c].set(CellFlag.BLOCKED)
                blocked += 1
    return blocked


def round_mask(grid: Grid, size: GridSize) -> int:
    center_r = size.n_rows // 2
    center_c = size.n_cols // 2
    blocked = 0
    for r in range(size.n_rows):
        for c in range(size.n_cols):
            d = math.sqrt((r - center_r) ** 2 + (c - center_c) ** 2)
            if d > center_c:
                grid[r, c].set(CellFlag.BLOCKED)
                blocked += 1
    return blocked


__all__ = ["GridSize", "init_grid", "mask_cells", "round_mask", "rand"]
