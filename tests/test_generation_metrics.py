from delve.dungeon import Dungeon, DungeonConfig
from delve.dungeon.cells import CellFlag
from delve.dungeon.metrics import init_metrics

PHASES = {"init_grid", "emplace_rooms", "open_rooms", "label_rooms", "corridors", "emplace_stairs", "clean"}


def test_metrics_keys_present():
    d = Dungeon(seed=12345)
    for k in init_metrics():
        assert k in d.metrics, f"missing metric {k}"
    assert set(d.metrics["phase_ms"]) == PHASES
    assert d.metrics["runtime_ms"] >= 0


def test_metrics_agree_with_the_dungeon():
    d = Dungeon(DungeonConfig(dungeon_layout="Box"), seed=2468)
    m = d.metrics
    assert m["rooms_placed"] == len(d.rooms)
    assert m["stairs_placed"] == len(d.stairs)
    assert m["doors_created"] >= 1
    assert m["corridor_cells"] > 0
    assert m["blocks_cleared"] > 0
    # every surviving door was carved once; mirrors add the rest
    doors = sum(len(g) for g in d.door_groups)
    assert doors <= m["doors_created"] + m["doors_mirrored"]
    assert m["doors_dropped"] <= m["doors_created"]


def test_corridor_count_is_taken_before_cleanup():
    d = Dungeon(DungeonConfig(remove_deadends=100), seed=3)
    assert d.metrics["corridor_cells"] >= d.grid.count(CellFlag.CORRIDOR)


def test_metrics_can_be_disabled():
    d = Dungeon(seed=5, enable_metrics=False)
    assert d.metrics == {}
    # generation itself is unaffected
    assert d.to_ascii() == Dungeon(seed=5).to_ascii()


def test_metrics_env_override(monkeypatch):
    monkeypatch.setenv("DELVE_ENABLE_GENERATION_METRICS", "0")
    assert Dungeon(seed=5).metrics == {}
    monkeypatch.setenv("DELVE_ENABLE_GENERATION_METRICS", "yes")
    assert Dungeon(seed=5).metrics
    # an explicit argument wins over the environment
    monkeypatch.setenv("DELVE_ENABLE_GENERATION_METRICS", "false")
    assert Dungeon(seed=5, enable_metrics=True).metrics
