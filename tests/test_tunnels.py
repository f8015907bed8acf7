import random
from types import SimpleNamespace

import pytest

from delve.dungeon import Dungeon
from delve.dungeon.cells import CellFlag
from delve.dungeon.config import DungeonConfig
from delve.dungeon.connectivity import corridor_components
from delve.dungeon.tiles import DIRECTIONS, EAST, NORTH
from delve.dungeon.tunnels import corridors, open_tunnel, sound_tunnel, tunnel, tunnel_dirs
from tests.dungeon_test_utils import blank_dungeon, intersections


def _dirs_for(layout, seed=5):
    return SimpleNamespace(rng=random.Random(seed), config=DungeonConfig(corridor_layout=layout))


def test_tunnel_dirs_is_a_shuffle_without_history():
    dirs = tunnel_dirs(_dirs_for("Straight"), None)
    assert sorted(dirs) == sorted(DIRECTIONS)


def test_straight_corridors_always_lead_with_last_heading():
    d = _dirs_for("Straight")
    for _ in range(20):
        dirs = tunnel_dirs(d, EAST)
        assert dirs[0] == EAST
        assert len(dirs) == 5


def test_labyrinth_never_biases():
    d = _dirs_for("Labyrinth")
    for _ in range(20):
        assert len(tunnel_dirs(d, NORTH)) == 4


def test_open_tunnel_carves_two_cells_ahead(stub):
    assert open_tunnel(stub, 1, 1, EAST)
    for c in (3, 4, 5):
        cell = stub.grid[3, c]
        assert cell.has(CellFlag.CORRIDOR) and not cell.has(CellFlag.ENTRANCE)
    # the freshly carved target is now closed to a second tunnel
    assert not open_tunnel(stub, 1, 3, "west")


def test_tunnels_stop_at_the_grid_edge(stub):
    assert not open_tunnel(stub, 0, 0, NORTH)
    assert not sound_tunnel(stub, 0, 1, -1, 1)
    last = stub.dims.n_j - 1
    assert not open_tunnel(stub, 0, last, EAST)


def test_perimeter_blocks_tunnels(stub):
    stub.grid[3, 4].add(CellFlag.PERIMETER)
    assert not open_tunnel(stub, 1, 1, EAST)
    assert not stub.grid[3, 3].has(CellFlag.CORRIDOR)


def test_tunnel_through_entrance_notch(stub):
    stub.grid[3, 4].add(CellFlag.ENTRANCE | CellFlag.DOOR)
    assert open_tunnel(stub, 1, 1, EAST)
    cell = stub.grid[3, 4]
    assert cell.has(CellFlag.CORRIDOR | CellFlag.DOOR)
    assert not cell.has(CellFlag.ENTRANCE)


def test_single_walk_reaches_every_intersection_of_an_open_grid():
    d = blank_dungeon(DungeonConfig(n_rows=21, n_cols=31, corridor_layout="Labyrinth"), seed=8)
    tunnel(d, 1, 1)
    for r, c, cell in intersections(d):
        assert cell.has(CellFlag.CORRIDOR), (r, c)
    # no corner cell between intersections is ever dug
    for r in range(0, d.dims.n_rows + 1, 2):
        for c in range(0, d.dims.n_cols + 1, 2):
            assert not d.grid[r, c].has(CellFlag.CORRIDOR), (r, c)
    assert len(corridor_components(d.grid)) == 1


def test_walks_never_start_in_masked_cells():
    d = blank_dungeon(DungeonConfig(dungeon_layout="Box"), seed=3)
    corridors(d)
    assert not any(cell.has(CellFlag.CORRIDOR) and cell.has(CellFlag.BLOCKED) for _, _, cell in d.grid.cells())
    assert d.metrics["corridor_cells"] == d.grid.count(CellFlag.CORRIDOR) > 0


def test_walks_start_on_the_first_row_and_column(stub):
    # a wall along row 2 seals the top row of intersections off from the rest
    for c in range(stub.grid.width):
        stub.grid[2, c].add(CellFlag.PERIMETER)
    assert corridors(stub) == 2
    for c in range(1, stub.dims.n_cols, 2):
        assert stub.grid[1, c].has(CellFlag.CORRIDOR), (1, c)
    assert stub.grid[3, 1].has(CellFlag.CORRIDOR)
    assert sorted(len(comp) for comp in corridor_components(stub.grid)) == [
        stub.dims.n_cols - 1,
        stub.grid.count(CellFlag.CORRIDOR) - (stub.dims.n_cols - 1),
    ]


def test_large_open_grid_does_not_recurse():
    # 199x199 gives a walk depth in the thousands
    d = blank_dungeon(DungeonConfig(n_rows=199, n_cols=199), seed=12)
    corridors(d)
    assert len(corridor_components(d.grid)) == 1


@pytest.mark.parametrize("seed", [4, 40, 400])
def test_roomless_maze_is_one_network(seed):
    d = Dungeon(DungeonConfig(room_max=41, remove_deadends=0, add_stairs=0), seed=seed)
    assert d.rooms == {}
    assert len(corridor_components(d.grid)) == 1
