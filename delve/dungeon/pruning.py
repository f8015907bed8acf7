"""Cleanup passes run after corridors and stairs are in place.

`remove_deadends` trims corridor stubs back toward the network, and
`empty_blocks` wipes the masking so only shape survives in the final grid.
Door reconciliation lives with the rest of the door logic in doors.py.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

from .cells import CellFlag
from .generator import rand
from .tiles import CLOSE_END

if TYPE_CHECKING:
    from .pipeline import Dungeon


def remove_deadends(dungeon: "Dungeon") -> int:
    return collapse_tunnels(dungeon, dungeon.config.remove_deadends)


def collapse_tunnels(dungeon: "Dungeon", p: int) -> int:
    """Visit each open intersection and, with probability p percent, collapse it.

    Returns the number of corridor cells cleared. No random draw is made
    when p is 100.
    """
    if not p:
        return 0
    grid, size, rng = dungeon.grid, dungeon.dims, dungeon.rng
    cleared = 0
    for i in range(size.n_i):
        r = (i * 2) + 1
        for j in range(size.n_j):
            c = (j * 2) + 1
            cell = grid[r, c]
            if not cell.is_openspace():
                continue
            if cell.is_stairs():
                continue
            if p == 100 or rand(rng, 100) < p:
                cleared += collapse(dungeon, r, c)
    return cleared


def collapse(dungeon: "Dungeon", r: int, c: int) -> int:
    """Clear a dead end and keep walking back along the corridor it hangs off."""
    grid = dungeon.grid
    cleared = 0
    pending: List[Tuple[int, int]] = [(r, c)]
    while pending:
        r, c = pending.pop()
        cell = grid.get(r, c)
        if cell is None or not _collapsible(cell):
            continue
        for direction, template in CLOSE_END.items():
            if not grid.matches(r, c, walled=template["walled"]):
                continue
            for dr, dc in template["close"]:
                grid[r + dr, c + dc].clear()
            cleared += 1
            dr, dc = template["recurse"]
            pending.append((r + dr, c + dc))
            break
    if dungeon.enable_metrics:
        dungeon.metrics["deadends_collapsed"] += cleared
    return cleared


def _collapsible(cell) -> bool:
    return cell.has(CellFlag.CORRIDOR) and not cell.has(CellFlag.ROOM) and not cell.is_stairs()


def empty_blocks(dungeon: "Dungeon") -> int:
    """Reset every BLOCKED cell to a blank one; safe to run repeatedly."""
    cleared = 0
    for _, _, cell in dungeon.grid.cells():
        if cell.has(CellFlag.BLOCKED):
            cell.clear()
            cleared += 1
    if dungeon.enable_metrics:
        dungeon.metrics["blocks_cleared"] += cleared
    return cleared


__all__ = ["remove_deadends", "collapse_tunnels", "collapse", "empty_blocks"]
