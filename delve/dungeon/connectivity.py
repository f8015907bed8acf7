"""Read-only structural checks over a finished dungeon.

Nothing here mutates the grid; the generation phases never call these. They
back the `diagnose` command, scripts/diagnose_seeds.py and the test-suite.
"""
from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Set, Tuple

from .cells import CellFlag, Coord2D, DungeonCell, Grid
from .doors import DOOR_TYPES
from .tiles import NO_ROOM, OPPOSITE

if TYPE_CHECKING:
    from .pipeline import Dungeon

_STEPS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def _components(grid: Grid, keep: Callable[[DungeonCell], bool]) -> List[Set[Coord2D]]:
    seen: Set[Coord2D] = set()
    comps: List[Set[Coord2D]] = []
    for r, c, cell in grid.cells():
        if (r, c) in seen or not keep(cell):
            continue
        comp = {(r, c)}
        seen.add((r, c))
        q = deque([(r, c)])
        while q:
            cr, cc = q.popleft()
            for dr, dc in _STEPS:
                nr, nc = cr + dr, cc + dc
                if (nr, nc) in seen:
                    continue
                nxt = grid.get(nr, nc)
                if nxt is not None and keep(nxt):
                    seen.add((nr, nc))
                    comp.add((nr, nc))
                    q.append((nr, nc))
        comps.append(comp)
    comps.sort(key=len, reverse=True)
    return comps


def corridor_components(grid: Grid) -> List[Set[Coord2D]]:
    """4-connected groups of CORRIDOR cells, largest first."""
    return _components(grid, lambda cell: cell.has(CellFlag.CORRIDOR))


def open_components(grid: Grid) -> List[Set[Coord2D]]:
    """4-connected groups of walkable cells (room, corridor or entrance), largest first."""
    return _components(grid, lambda cell: cell.is_openspace())


def room_graph(dungeon: "Dungeon") -> Dict[int, Set[int]]:
    graph: Dict[int, Set[int]] = {room_id: set() for room_id in dungeon.rooms}
    for room_id, room in dungeon.rooms.items():
        for _, door in room.all_doors():
            if door.out_id != NO_ROOM and door.out_id in graph:
                graph[room_id].add(door.out_id)
                graph[door.out_id].add(room_id)
    return graph


def unmirrored_doors(dungeon: "Dungeon") -> List[Tuple[int, str, Tuple[int, int]]]:
    """Doors naming a far-side room that holds no matching record facing back."""
    missing = []
    for room_id in sorted(dungeon.rooms):
        for direction, door in dungeon.rooms[room_id].all_doors():
            if door.out_id == NO_ROOM:
                continue
            other = dungeon.rooms.get(door.out_id)
            back = other.doors.get(OPPOSITE[direction], []) if other else []
            if not any(d.position == door.position and d.out_id == room_id for d in back):
                missing.append((room_id, direction, door.position))
    return missing


def bad_door_cells(dungeon: "Dungeon") -> List[Tuple[int, int]]:
    """Door positions whose wall cell does not carry exactly one door-kind flag."""
    bad = []
    for room_id in sorted(dungeon.rooms):
        for _, door in dungeon.rooms[room_id].all_doors():
            cell = dungeon.grid[door.row, door.col]
            kinds = [kind.flag for kind in DOOR_TYPES.values() if cell.has(kind.flag)]
            if len(kinds) != 1 or kinds[0] is not door.flag:
                bad.append(door.position)
    return bad


def overlapping_rooms(dungeon: "Dungeon") -> List[Tuple[int, int]]:
    ids = sorted(dungeon.rooms)
    pairs = []
    for n, a_id in enumerate(ids):
        a = dungeon.rooms[a_id]
        for b_id in ids[n + 1:]:
            b = dungeon.rooms[b_id]
            if a.north <= b.south and b.north <= a.south and a.west <= b.east and b.west <= a.east:
                pairs.append((a_id, b_id))
    return pairs


def stray_room_ids(dungeon: "Dungeon") -> List[Tuple[int, int]]:
    """Cells whose room id disagrees with the room boxes."""
    stray = []
    for r, c, cell in dungeon.grid.cells():
        owner = next((rid for rid, room in dungeon.rooms.items() if room.contains(r, c)), NO_ROOM)
        if cell.room_id != owner or cell.has(CellFlag.ROOM) != (owner != NO_ROOM):
            stray.append((r, c))
    return stray


def analyze(dungeon: "Dungeon") -> Dict[str, Any]:
    """Summarize structure plus any invariant violations under `issues`."""
    corridors = corridor_components(dungeon.grid)
    graph = room_graph(dungeon)
    report: Dict[str, Any] = {
        "seed": dungeon.seed,
        "rooms": len(dungeon.rooms),
        "doors": len({door.position for room in dungeon.rooms.values() for _, door in room.all_doors()}),
        "stairs": len(dungeon.stairs),
        "corridor_cells": sum(len(comp) for comp in corridors),
        "corridor_components": len(corridors),
        "open_components": len(open_components(dungeon.grid)),
        "rooms_without_doors": sorted(rid for rid, room in dungeon.rooms.items() if not room.doors),
        "room_links": sum(len(v) for v in graph.values()) // 2,
    }
    issues: List[str] = []
    for room_id, direction, pos in unmirrored_doors(dungeon):
        issues.append(f"unmirrored door room={room_id} dir={direction} at={pos}")
    for pos in bad_door_cells(dungeon):
        issues.append(f"door cell flags wrong at={pos}")
    for a_id, b_id in overlapping_rooms(dungeon):
        issues.append(f"rooms overlap a={a_id} b={b_id}")
    stray = stray_room_ids(dungeon)
    if stray:
        issues.append(f"room id mismatch cells={len(stray)} first={stray[0]}")
    if any(cell.has(CellFlag.BLOCKED) for _, _, cell in dungeon.grid.cells()):
        issues.append("blocked cells left after cleanup")
    report["issues"] = issues
    return report


__all__ = [
    "corridor_components",
    "open_components",
    "room_graph",
    "unmirrored_doors",
    "bad_door_cells",
    "overlapping_rooms",
    "stray_room_ids",
    "analyze",
]
