"""Pipeline orchestration for dungeon generation.

`Dungeon` owns the grid, the room registry and the single random stream, and
runs the phases in a fixed order so a seed always reproduces the same map:
mask, rooms, doors, labels, corridors, stairs, cleanup.
"""
from __future__ import annotations

import os
import random
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger
from .cells import CellFlag, Grid
from .config import DungeonConfig
from .doors import Door, fix_doors, open_rooms
from .features import Stairs, emplace_stairs
from .generator import GridSize, init_grid
from .metrics import init_metrics
from .pruning import empty_blocks, remove_deadends
from .rooms import Room, emplace_rooms, label_rooms
from .tiles import BLANK_GLYPH, CORRIDOR_GLYPH, DOOR_GLYPH, ROOM_GLYPH
from .tunnels import corridors

log = get_logger("delve.dungeon")

_FALSEY = {"0", "false", "no", "off", ""}


@dataclass
class Dungeon:
    config: Optional[DungeonConfig] = None
    seed: Optional[int] = None
    enable_metrics: Optional[bool] = None
    rng: Optional[random.Random] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.config is None:
            self.config = DungeonConfig()
        # explicit seed > config seed > fresh random one; 0 is a valid seed
        if self.seed is None:
            self.seed = self.config.seed
        if self.rng is None:
            if self.seed is None:
                self.seed = random.randint(1, 1_000_000)
            self.rng = random.Random(self.seed)
        if self.enable_metrics is None:
            raw = os.environ.get("DELVE_ENABLE_GENERATION_METRICS")
            self.enable_metrics = True if raw is None else raw.strip().lower() not in _FALSEY
        self.metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        self.dims = GridSize(self.config)
        self.grid: Optional[Grid] = None
        self.rooms: Dict[int, Room] = {}
        self.stairs: List[Stairs] = []
        self.door_groups: List[List[Door]] = []
        self._run_pipeline()

    @property
    def n_rows(self) -> int:
        return self.dims.n_rows

    @property
    def n_cols(self) -> int:
        return self.dims.n_cols

    def _run_pipeline(self):
        """Execute the ordered generation phases, timing each into `phase_ms`."""
        start = time.perf_counter()
        phase_times: Dict[str, int] = {}

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            ms = int((time.perf_counter() - ps) * 1000)
            phase_times[label] = ms
            log.debug(event="phase", phase=label, ms=ms, seed=self.seed)
            return r

        self.grid = _phase("init_grid", init_grid, self.config, self.dims)
        _phase("emplace_rooms", emplace_rooms, self)
        _phase("open_rooms", open_rooms, self)
        _phase("label_rooms", label_rooms, self)
        _phase("corridors", corridors, self)
        if self.config.add_stairs:
            _phase("emplace_stairs", emplace_stairs, self)
        _phase("clean", self._clean_dungeon)

        runtime_ms = int((time.perf_counter() - start) * 1000)
        if self.enable_metrics:
            self.metrics["runtime_ms"] = runtime_ms
            self.metrics["phase_ms"] = phase_times
        log.info(
            event="dungeon_generated",
            seed=self.seed,
            rooms=len(self.rooms),
            doors=sum(len(g) for g in self.door_groups),
            stairs=len(self.stairs),
            runtime_ms=runtime_ms,
        )

    def _clean_dungeon(self):
        if self.config.remove_deadends:
            remove_deadends(self)
        self.door_groups = fix_doors(self)
        empty_blocks(self)

    # -- output ----------------------------------------------------------
    def glyph_at(self, r: int, c: int) -> str:
        cell = self.grid[r, c]
        if cell.label:
            return cell.label
        if cell.has(CellFlag.ROOM):
            return ROOM_GLYPH
        if cell.has(CellFlag.CORRIDOR):
            return CORRIDOR_GLYPH
        if cell.is_doorspace():
            return DOOR_GLYPH
        return BLANK_GLYPH

    def to_ascii(self, compact: bool = False) -> str:
        """Render one text line per grid row; glyphs are space separated unless compact."""
        sep = "" if compact else " "
        lines = []
        for r in range(self.grid.height):
            lines.append(sep.join(self.glyph_at(r, c) for c in range(self.grid.width)).rstrip())
        return "\n".join(lines)

    def to_json(self) -> Dict[str, Any]:
        cfg = asdict(self.config)
        cfg["seed"] = self.seed
        return {
            "seed": self.seed,
            "config": cfg,
            "n_rows": self.n_rows,
            "n_cols": self.n_cols,
            "rooms": [self.rooms[rid].to_dict() for rid in sorted(self.rooms)],
            "stairs": [s.to_dict() for s in self.stairs],
            "cells": [
                {"row": r, "col": c, **cell.to_dict()}
                for r, c, cell in self.grid.cells()
                if cell.flags != CellFlag.NOTHING or cell.label
            ],
            "map": self.to_ascii(compact=True).split("\n"),
            "metrics": self.metrics,
        }


def create_dungeon(options: Optional[DungeonConfig] = None, rng: Optional[random.Random] = None) -> Dungeon:
    """Functional entry point: generate with `options`, drawing from `rng` when given."""
    return Dungeon(options, rng=rng)


__all__ = ["Dungeon", "create_dungeon"]
