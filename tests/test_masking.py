import random

import pytest

from delve.dungeon import Dungeon
from delve.dungeon.cells import CellFlag
from delve.dungeon.config import DungeonConfig
from delve.dungeon.generator import GridSize, init_grid, mask_cells, rand
from delve.dungeon.tiles import DUNGEON_LAYOUT
from tests.dungeon_test_utils import stencil_value


def test_odd_sizes_are_coerced_to_even():
    size = GridSize(DungeonConfig(n_rows=40, n_cols=21))
    assert (size.n_i, size.n_j) == (20, 10)
    assert (size.n_rows, size.n_cols) == (40, 20)
    assert (size.max_row, size.max_col) == (39, 19)
    grid = init_grid(DungeonConfig(n_rows=40, n_cols=21))
    assert (grid.height, grid.width) == (41, 21)


def test_room_size_parameters():
    size = GridSize(DungeonConfig(room_min=3, room_max=9))
    assert size.room_base == 2
    assert size.room_radix == 4


def test_no_layout_leaves_grid_open():
    for layout in ("None", "Hexagon"):
        grid = init_grid(DungeonConfig(dungeon_layout=layout))
        assert grid.count(CellFlag.BLOCKED) == 0, layout


def test_box_blocks_the_centre():
    grid = init_grid(DungeonConfig(dungeon_layout="Box"))
    assert grid[19, 19].has(CellFlag.BLOCKED)
    assert not grid[0, 0].has(CellFlag.BLOCKED)
    assert not grid[1, 19].has(CellFlag.BLOCKED)


def test_cross_blocks_the_corners():
    grid = init_grid(DungeonConfig(dungeon_layout="Cross"))
    assert grid[0, 0].has(CellFlag.BLOCKED)
    assert grid[37, 37].has(CellFlag.BLOCKED)
    assert not grid[19, 0].has(CellFlag.BLOCKED)
    assert not grid[19, 19].has(CellFlag.BLOCKED)


def test_stencil_sampling_matches_scaled_lookup():
    cfg = DungeonConfig(dungeon_layout="Cross", n_rows=25, n_cols=41)
    size = GridSize(cfg)
    grid = init_grid(cfg, size)
    mask = DUNGEON_LAYOUT["Cross"]
    for r in range(size.n_rows):
        for c in range(size.n_cols):
            blocked = grid[r, c].has(CellFlag.BLOCKED)
            assert blocked == (not stencil_value(mask, r, c, size.n_rows, size.n_cols)), (r, c)
    # the padding row and column are never sampled
    assert not any(grid[size.n_rows, c].has(CellFlag.BLOCKED) for c in range(grid.width))
    assert not any(grid[r, size.n_cols].has(CellFlag.BLOCKED) for r in range(grid.height))


def test_custom_mask():
    cfg = DungeonConfig(mask=[[1, 0], [1, 1]])
    size = GridSize(cfg)
    grid = init_grid(cfg, size)
    assert grid[0, 37].has(CellFlag.BLOCKED)
    assert not grid[37, 37].has(CellFlag.BLOCKED)
    fresh = init_grid(DungeonConfig())
    assert mask_cells(fresh, size, cfg.mask) == grid.count(CellFlag.BLOCKED)


def test_round_layout():
    grid = init_grid(DungeonConfig(dungeon_layout="Round"))
    assert grid[0, 0].has(CellFlag.BLOCKED)
    assert not grid[19, 19].has(CellFlag.BLOCKED)
    assert not grid[0, 19].has(CellFlag.BLOCKED), "radius boundary itself stays open"
    assert not grid[19, 37].has(CellFlag.BLOCKED)


@pytest.mark.parametrize("layout", ["Box", "Cross", "Round"])
def test_masked_dungeon_keeps_rooms_out_and_clears_blocks(layout):
    d = Dungeon(DungeonConfig(dungeon_layout=layout), seed=2024)
    assert d.grid.count(CellFlag.BLOCKED) == 0, "blocks are cleared at the end"
    assert d.metrics["blocks_cleared"] > 0
    if layout != "Round":
        mask = DUNGEON_LAYOUT[layout]
        for room in d.rooms.values():
            for r, c in room.cells():
                assert stencil_value(mask, r, c, d.n_rows, d.n_cols), f"room {room.id} inside mask at {(r, c)}"


def test_rand_empty_range_is_zero():
    rng = random.Random(1)
    state = rng.getstate()
    assert rand(rng, 0) == 0
    assert rand(rng, -3) == 0
    assert rng.getstate() == state
    assert all(0 <= rand(rng, 5) < 5 for _ in range(50))
