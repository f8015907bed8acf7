import pytest

from delve.dungeon import Dungeon
from delve.dungeon.cells import CellFlag
from delve.dungeon.config import DungeonConfig
from delve.dungeon.connectivity import corridor_components
from delve.dungeon.pruning import collapse, collapse_tunnels, empty_blocks
from tests.dungeon_test_utils import blank_dungeon, carve, intersections


def _stub(**cfg):
    return blank_dungeon(DungeonConfig(**cfg), seed=9)


def test_collapse_eats_a_whole_stub():
    d = _stub()
    carve(d, [(3, 3), (3, 4), (3, 5)])
    assert collapse(d, 3, 3) == 3
    assert d.grid.count(CellFlag.CORRIDOR) == 0
    assert d.metrics["deadends_collapsed"] == 3


def test_collapse_stops_at_a_junction():
    d = _stub()
    # a T: horizontal run with a spur dropping from its middle
    carve(d, [(3, c) for c in range(3, 8)])
    carve(d, [(4, 5), (5, 5)])
    cleared = collapse(d, 5, 5)
    assert cleared == 2
    assert not d.grid[4, 5].has(CellFlag.CORRIDOR)
    assert all(d.grid[3, c].has(CellFlag.CORRIDOR) for c in range(3, 8))


def test_collapse_resets_labels():
    d = _stub()
    carve(d, [(3, 3), (3, 4), (3, 5), (3, 6), (3, 7)])
    d.grid[3, 3].label = "?"
    collapse(d, 3, 3)
    assert d.grid[3, 3].label == ""


@pytest.mark.parametrize("extra", [CellFlag.STAIR_DN, CellFlag.STAIR_UP, CellFlag.ROOM])
def test_collapse_spares_stairs_and_rooms(extra):
    d = _stub()
    carve(d, [(3, 3), (3, 4), (3, 5)])
    d.grid[3, 3].add(extra)
    assert collapse(d, 3, 3) == 0
    assert d.grid[3, 3].has(CellFlag.CORRIDOR)


def test_collapse_ignores_closed_cells():
    d = _stub()
    assert collapse(d, 3, 3) == 0


def test_full_collapse_draws_no_random_numbers():
    d = _stub()
    carve(d, [(3, c) for c in range(3, 10)])
    state = d.rng.getstate()
    collapse_tunnels(d, 100)
    assert d.rng.getstate() == state
    assert d.grid.count(CellFlag.CORRIDOR) == 0


def test_zero_percent_is_a_no_op():
    d = _stub()
    carve(d, [(3, 3), (3, 4), (3, 5)])
    state = d.rng.getstate()
    assert collapse_tunnels(d, 0) == 0
    assert d.rng.getstate() == state
    assert d.grid.count(CellFlag.CORRIDOR) == 3


def test_empty_blocks_is_idempotent():
    d = _stub(dungeon_layout="Round")
    blocked = d.grid.count(CellFlag.BLOCKED)
    assert blocked > 0
    assert empty_blocks(d) == blocked
    assert empty_blocks(d) == 0
    assert d.grid.count(CellFlag.BLOCKED) == 0
    assert d.metrics["blocks_cleared"] == blocked
    assert all(cell.flags == CellFlag.NOTHING for _, _, cell in d.grid.cells())


@pytest.mark.parametrize("seed", [5, 55, 555])
def test_full_pruning_keeps_rooms_connected_to_corridors(seed):
    d = Dungeon(DungeonConfig(remove_deadends=100), seed=seed)
    assert d.metrics["deadends_collapsed"] > 0
    for r, c, cell in intersections(d):
        if cell.has(CellFlag.CORRIDOR) and not cell.has(CellFlag.ROOM) and not cell.is_stairs():
            open_sides = sum(
                1
                for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1))
                if d.grid.get(r + dr, c + dc) is not None and d.grid[r + dr, c + dc].is_openspace()
            )
            assert open_sides >= 2, f"dead end left at {(r, c)}"


def test_pruning_never_splits_the_maze():
    d = Dungeon(DungeonConfig(room_max=41, remove_deadends=50, add_stairs=0), seed=77)
    assert len(corridor_components(d.grid)) <= 1
    assert d.metrics["deadends_collapsed"] > 0


def test_pruned_dungeon_has_fewer_corridors():
    sparse = Dungeon(DungeonConfig(remove_deadends=100), seed=8)
    dense = Dungeon(DungeonConfig(remove_deadends=0), seed=8)
    assert sparse.grid.count(CellFlag.CORRIDOR) < dense.grid.count(CellFlag.CORRIDOR)
    assert dense.metrics["deadends_collapsed"] == 0
