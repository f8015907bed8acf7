"""Door logic: carving openings out of room perimeters and reconciling door records.

Doors are created once per room during carving and recorded only on the
initiating room. After corridors and dead-end cleanup, `fix_doors` drops the
records whose wall cell was consumed and mirrors every surviving door into the
room on its far side.
"""
from __future__ import annotations

import math
from dataclasses import replace
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Set, Tuple

from .cells import CellFlag
from .generator import rand
from .rooms import DOOR_TYPES, Door, DoorKind, Room
from .tiles import DI, DJ, DOOR_KINDS, DOOR_ROLL, EAST, NO_ROOM, NORTH, OPPOSITE, SOUTH, WEST

if TYPE_CHECKING:
    from .pipeline import Dungeon


class Sill(NamedTuple):
    sill_r: int
    sill_c: int
    dir: str
    door_r: int
    door_c: int
    out_id: int


def generate_door_type(rng) -> DoorKind:
    roll = rand(rng, DOOR_ROLL)
    for bound, key, *_ in DOOR_KINDS:
        if roll < bound:
            return DOOR_TYPES[key]
    return DOOR_TYPES[DOOR_KINDS[-1][1]]


def alloc_opens(room: Room, rng) -> int:
    """Door budget grows with the square root of the room's half-grid area."""
    room_h = ((room.south - room.north) // 2) + 1
    room_w = ((room.east - room.west) // 2) + 1
    flumph = int(math.sqrt(room_w * room_h))
    return flumph + rand(rng, flumph)


def check_sill(dungeon: "Dungeon", room: Room, sill_r: int, sill_c: int, direction: str) -> Optional[Sill]:
    grid = dungeon.grid
    door_r = sill_r + DI[direction]
    door_c = sill_c + DJ[direction]
    door_cell = grid[door_r, door_c]
    if not door_cell.has(CellFlag.PERIMETER):
        return None
    if door_cell.is_blocked_door():
        return None
    out_r = door_r + DI[direction]
    out_c = door_c + DJ[direction]
    out_cell = grid[out_r, out_c]
    if out_cell.has(CellFlag.BLOCKED):
        return None
    out_id = out_cell.room_id if out_cell.has(CellFlag.ROOM) else NO_ROOM
    return Sill(sill_r, sill_c, direction, door_r, door_c, out_id)


def door_sills(dungeon: "Dungeon", room: Room) -> List[Sill]:
    """Candidate openings along each room edge that is not against the grid border."""
    size = dungeon.dims
    sills: List[Sill] = []

    def collect(edge_cells, direction):
        for r, c in edge_cells:
            sill = check_sill(dungeon, room, r, c, direction)
            if sill:
                sills.append(sill)

    if room.north >= 3:
        collect(((room.north, c) for c in range(room.west, room.east + 1, 2)), NORTH)
    if room.south <= size.n_rows - 3:
        collect(((room.south, c) for c in range(room.west, room.east + 1, 2)), SOUTH)
    if room.west >= 3:
        collect(((r, room.west) for r in range(room.north, room.south + 1, 2)), WEST)
    if room.east <= size.n_cols - 3:
        collect(((r, room.east) for r in range(room.north, room.south + 1, 2)), EAST)
    return sills


def open_rooms(dungeon: "Dungeon") -> None:
    connected: Set[Tuple[int, int]] = set()
    for room_id in sorted(dungeon.rooms):
        open_room(dungeon, dungeon.rooms[room_id], connected)


def open_room(dungeon: "Dungeon", room: Room, connected: Set[Tuple[int, int]]) -> int:
    """Carve a random subset of the room's sills into doors; returns doors created.

    Every discarded sill (wall already a door, or rooms already linked) also
    shrinks the budget, so crowded rooms can end up with fewer doors.
    """
    grid, rng, metrics = dungeon.grid, dungeon.rng, dungeon.metrics
    sills = door_sills(dungeon, room)
    if not sills:
        return 0
    n_opens = alloc_opens(room, rng)
    created = 0
    i = 0
    while i < n_opens and sills:
        i += 1
        sill = sills.pop(rand(rng, len(sills)))
        door_cell = grid[sill.door_r, sill.door_c]
        if door_cell.is_doorspace():
            n_opens -= 1
            _count(dungeon, "doors_skipped")
            continue
        if sill.out_id != NO_ROOM:
            connect = (min(room.id, sill.out_id), max(room.id, sill.out_id))
            if connect in connected:
                n_opens -= 1
                _count(dungeon, "doors_skipped")
                continue
            connected.add(connect)

        for x in range(3):
            cell = grid[sill.sill_r + DI[sill.dir] * x, sill.sill_c + DJ[sill.dir] * x]
            cell.remove(CellFlag.PERIMETER)
            cell.add(CellFlag.ENTRANCE)

        kind = generate_door_type(rng)
        door_cell.add(kind.flag)
        door_cell.label = kind.glyph
        door = Door(sill.door_r, sill.door_c, kind.key, kind.type, sill.out_id)
        room.doors.setdefault(sill.dir, []).append(door)
        created += 1
    if dungeon.enable_metrics:
        metrics["doors_created"] += created
    return created


def _count(dungeon, key: str, n: int = 1) -> None:
    if dungeon.enable_metrics:
        dungeon.metrics[key] += n


def fix_doors(dungeon: "Dungeon") -> List[List[Door]]:
    """Drop consumed doors and mirror each surviving door into its far-side room.

    Each physical door (by position) is mirrored at most once. Surviving per-room,
    per-direction lists are returned as door groups.
    """
    grid = dungeon.grid
    fixed: Set[Tuple[int, int]] = set()
    groups: List[List[Door]] = []
    for room_id in sorted(dungeon.rooms):
        room = dungeon.rooms[room_id]
        for direction in sorted(room.doors):
            shiny: List[Door] = []
            for door in room.doors[direction]:
                if not grid[door.row, door.col].is_openspace():
                    _count(dungeon, "doors_dropped")
                    continue
                if door.position not in fixed:
                    if door.out_id != NO_ROOM and door.out_id in dungeon.rooms:
                        out_dir = OPPOSITE[direction]
                        mirror = replace(door, out_id=room.id)
                        dungeon.rooms[door.out_id].doors.setdefault(out_dir, []).append(mirror)
                        _count(dungeon, "doors_mirrored")
                    fixed.add(door.position)
                shiny.append(door)
            if shiny:
                room.doors[direction] = shiny
                groups.append(list(shiny))
            else:
                del room.doors[direction]
    return groups


__all__ = [
    "Door",
    "DoorKind",
    "DOOR_TYPES",
    "Sill",
    "generate_door_type",
    "alloc_opens",
    "check_sill",
    "door_sills",
    "open_rooms",
    "open_room",
    "fix_doors",
]
