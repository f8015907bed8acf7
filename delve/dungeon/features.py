"""Stair placement at corridor dead-end pockets."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from .cells import CellFlag
from .generator import rand
from .tiles import DIRECTIONS, STAIR_DOWN_GLYPH, STAIR_END, STAIR_UP_GLYPH

if TYPE_CHECKING:
    from .pipeline import Dungeon


@dataclass
class Stairs:
    row: int
    col: int
    next_row: int
    next_col: int
    direction: str
    key: Optional[str] = None

    def to_dict(self):
        return {
            "row": self.row,
            "col": self.col,
            "next_row": self.next_row,
            "next_col": self.next_col,
            "direction": self.direction,
            "key": self.key,
        }


def stair_ends(dungeon: "Dungeon") -> List[Stairs]:
    """Corridor intersections walled on three sides with a straight approach on the fourth."""
    grid, size = dungeon.grid, dungeon.dims
    ends: List[Stairs] = []
    for i in range(size.n_i):
        r = (i * 2) + 1
        for j in range(size.n_j):
            c = (j * 2) + 1
            cell = grid[r, c]
            if not cell.has(CellFlag.CORRIDOR) or cell.is_stairs():
                continue
            for direction in DIRECTIONS:
                template = STAIR_END[direction]
                if grid.matches(r, c, corridor=template["corridor"], walled=template["walled"]):
                    dr, dc = template["next"]
                    ends.append(Stairs(r, c, r + dr, c + dc, direction))
                    break
    return ends


def emplace_stairs(dungeon: "Dungeon") -> List[Stairs]:
    """Place up to `add_stairs` stairs: first down, second up, the rest a coin flip."""
    n = dungeon.config.add_stairs
    if n <= 0:
        return []
    grid, rng = dungeon.grid, dungeon.rng
    candidates = stair_ends(dungeon)
    if dungeon.enable_metrics:
        dungeon.metrics["stair_candidates"] = len(candidates)
    placed: List[Stairs] = []
    for i in range(n):
        if not candidates:
            break
        stairs = candidates.pop(rand(rng, len(candidates)))
        kind = i if i < 2 else rand(rng, 2)
        cell = grid[stairs.row, stairs.col]
        if kind == 0:
            cell.add(CellFlag.STAIR_DN)
            cell.label = STAIR_DOWN_GLYPH
            stairs.key = "down"
        else:
            cell.add(CellFlag.STAIR_UP)
            cell.label = STAIR_UP_GLYPH
            stairs.key = "up"
        placed.append(stairs)
    dungeon.stairs.extend(placed)
    if dungeon.enable_metrics:
        dungeon.metrics["stairs_placed"] = len(dungeon.stairs)
    return placed


__all__ = ["Stairs", "stair_ends", "emplace_stairs"]
