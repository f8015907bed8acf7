"""Corridor carving: a randomized maze walk over the odd-odd intersections.

The walk is the classic recursive backtracker run on an explicit stack so a
large open grid cannot exhaust the interpreter's recursion limit. Each stack
frame owns its shuffled direction order, drawn when the frame is pushed, so
the random stream is consumed exactly as the recursive formulation would.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

from .cells import CellFlag
from .generator import rand
from .tiles import DI, DIRECTIONS, DJ

if TYPE_CHECKING:
    from .pipeline import Dungeon


def corridors(dungeon: "Dungeon") -> int:
    """Launch a walk from every intersection not yet carved; returns walks started."""
    grid, size = dungeon.grid, dungeon.dims
    walks = 0
    for i in range(size.n_i):
        r = (i * 2) + 1
        for j in range(size.n_j):
            c = (j * 2) + 1
            # a walk may never start inside masked-out terrain
            if grid[r, c].has(CellFlag.CORRIDOR | CellFlag.BLOCKED):
                continue
            tunnel(dungeon, i, j)
            walks += 1
    if dungeon.enable_metrics:
        dungeon.metrics["corridor_cells"] = grid.count(CellFlag.CORRIDOR)
    return walks


def tunnel(dungeon: "Dungeon", i: int, j: int, last_dir: Optional[str] = None) -> None:
    stack: List[Tuple[int, int, Iterator[str]]] = [(i, j, iter(tunnel_dirs(dungeon, last_dir)))]
    while stack:
        ci, cj, dirs = stack[-1]
        for direction in dirs:
            if open_tunnel(dungeon, ci, cj, direction):
                ni, nj = ci + DI[direction], cj + DJ[direction]
                stack.append((ni, nj, iter(tunnel_dirs(dungeon, direction))))
                break
        else:
            stack.pop()


def tunnel_dirs(dungeon: "Dungeon", last_dir: Optional[str]) -> List[str]:
    """Shuffled headings, optionally led by the previous one for straighter runs."""
    rng = dungeon.rng
    p = dungeon.config.straightness
    dirs = list(DIRECTIONS)
    rng.shuffle(dirs)
    if last_dir and p and rand(rng, 100) < p:
        dirs.insert(0, last_dir)
    return dirs


def open_tunnel(dungeon: "Dungeon", i: int, j: int, direction: str) -> bool:
    this_r = (i * 2) + 1
    this_c = (j * 2) + 1
    next_r = ((i + DI[direction]) * 2) + 1
    next_c = ((j + DJ[direction]) * 2) + 1
    mid_r = (this_r + next_r) // 2
    mid_c = (this_c + next_c) // 2
    if sound_tunnel(dungeon, mid_r, mid_c, next_r, next_c):
        delve_tunnel(dungeon, this_r, this_c, next_r, next_c)
        return True
    return False


def sound_tunnel(dungeon: "Dungeon", mid_r: int, mid_c: int, next_r: int, next_c: int) -> bool:
    grid, size = dungeon.grid, dungeon.dims
    if next_r < 0 or next_r > size.n_rows:
        return False
    if next_c < 0 or next_c > size.n_cols:
        return False
    for r in range(min(mid_r, next_r), max(mid_r, next_r) + 1):
        for c in range(min(mid_c, next_c), max(mid_c, next_c) + 1):
            if grid[r, c].is_blocked_corridor():
                return False
    return True


def delve_tunnel(dungeon: "Dungeon", this_r: int, this_c: int, next_r: int, next_c: int) -> None:
    grid = dungeon.grid
    for r in range(min(this_r, next_r), max(this_r, next_r) + 1):
        for c in range(min(this_c, next_c), max(this_c, next_c) + 1):
            cell = grid[r, c]
            cell.remove(CellFlag.ENTRANCE)
            cell.add(CellFlag.CORRIDOR)


__all__ = ["corridors", "tunnel", "tunnel_dirs", "open_tunnel", "sound_tunnel", "delve_tunnel"]
