from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, NamedTuple, Optional, Tuple, Union

from .cells import CellFlag
from .generator import rand
from .tiles import DOOR_KINDS, MAX_ROOMS, NO_ROOM

if TYPE_CHECKING:
    from .pipeline import Dungeon


@dataclass(frozen=True)
class DoorKind:
    key: str
    flag: CellFlag
    glyph: str
    type: str


DOOR_TYPES: Dict[str, DoorKind] = {
    key: DoorKind(key, CellFlag[flag_name], glyph, type_name) for _, key, flag_name, glyph, type_name in DOOR_KINDS
}


@dataclass
class Door:
    row: int
    col: int
    key: str
    type: str
    out_id: int = NO_ROOM

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    @property
    def glyph(self) -> str:
        return DOOR_TYPES[self.key].glyph

    @property
    def flag(self) -> CellFlag:
        return DOOR_TYPES[self.key].flag

    def to_dict(self):
        return {"row": self.row, "col": self.col, "key": self.key, "type": self.type, "out_id": self.out_id}


@dataclass
class Room:
    id: int
    north: int
    south: int
    west: int
    east: int
    doors: Dict[str, List[Door]] = field(default_factory=dict)

    @property
    def row(self) -> int:
        return self.north

    @property
    def col(self) -> int:
        return self.west

    @property
    def height(self) -> int:
        return self.south - self.north + 1

    @property
    def width(self) -> int:
        return self.east - self.west + 1

    @property
    def area(self) -> int:
        return self.height * self.width

    @property
    def center(self) -> Tuple[int, int]:
        return ((self.north + self.south) // 2, (self.west + self.east) // 2)

    def cells(self) -> Iterator[Tuple[int, int]]:
        for r in range(self.north, self.south + 1):
            for c in range(self.west, self.east + 1):
                yield r, c

    def contains(self, r: int, c: int) -> bool:
        return self.north <= r <= self.south and self.west <= c <= self.east

    def all_doors(self):
        for direction in sorted(self.doors):
            for door in self.doors[direction]:
                yield direction, door

    def to_dict(self):
        return {
            "id": self.id,
            "north": self.north,
            "south": self.south,
            "west": self.west,
            "east": self.east,
            "height": self.height,
            "width": self.width,
            "area": self.area,
            "doors": {d: [door.to_dict() for door in lst] for d, lst in sorted(self.doors.items())},
        }


class Placed(NamedTuple):
    room: Room


class Rejected(NamedTuple):
    reason: str


Placement = Union[Placed, Rejected]


def emplace_rooms(dungeon: "Dungeon") -> int:
    """Run the configured placement policy; returns the number of rooms placed."""
    before = len(dungeon.rooms)
    if dungeon.config.room_layout == "Packed":
        pack_rooms(dungeon)
    else:
        scatter_rooms(dungeon)
    return len(dungeon.rooms) - before


def pack_rooms(dungeon: "Dungeon") -> None:
    grid, size, rng = dungeon.grid, dungeon.dims, dungeon.rng
    for i in range(size.n_i):
        r = (i * 2) + 1
        for j in range(size.n_j):
            c = (j * 2) + 1
            if grid[r, c].has(CellFlag.ROOM):
                continue
            # keep the outer band from filling solid
            if (i == 0 or j == 0) and rng.randint(0, 1):
                continue
            emplace_room(dungeon, i, j)


def alloc_rooms(dungeon: "Dungeon") -> int:
    dungeon_area = dungeon.dims.n_cols * dungeon.dims.n_rows
    room_area = dungeon.config.room_max * dungeon.config.room_max
    return dungeon_area // room_area if room_area > 0 else 0


def scatter_rooms(dungeon: "Dungeon") -> None:
    for _ in range(alloc_rooms(dungeon)):
        emplace_room(dungeon)


def set_room(
    dungeon: "Dungeon",
    i: Optional[int] = None,
    j: Optional[int] = None,
    height: Optional[int] = None,
    width: Optional[int] = None,
) -> Tuple[int, int, int, int]:
    """Resolve unspecified size/anchor in half-grid units."""
    size, rng = dungeon.dims, dungeon.rng
    base, radix = size.room_base, size.room_radix
    if height is None:
        if i is None:
            height = rand(rng, radix) + base
        else:
            room_space = max(0, size.n_i - base - i)
            height = rand(rng, min(room_space, radix)) + base
    if width is None:
        if j is None:
            width = rand(rng, radix) + base
        else:
            room_space = max(0, size.n_j - base - j)
            width = rand(rng, min(room_space, radix)) + base
    if i is None:
        i = rand(rng, size.n_i - height)
    if j is None:
        j = rand(rng, size.n_j - width)
    return i, j, height, width


def sound_room(dungeon: "Dungeon", r1: int, c1: int, r2: int, c2: int) -> Optional[str]:
    """Return a rejection reason for the candidate box, or None when it is free."""
    grid = dungeon.grid
    hit = set()
    for r in range(r1, r2 + 1):
        for c in range(c1, c2 + 1):
            cell = grid[r, c]
            if cell.has(CellFlag.BLOCKED):
                return "blocked"
            if cell.has(CellFlag.ROOM):
                hit.add(cell.room_id)
    return "overlap" if hit else None


def emplace_room(
    dungeon: "Dungeon",
    i: Optional[int] = None,
    j: Optional[int] = None,
    height: Optional[int] = None,
    width: Optional[int] = None,
) -> Placement:
    """Try to place one room; rejected attempts leave the grid untouched."""
    metrics = dungeon.metrics
    if dungeon.enable_metrics:
        metrics["rooms_attempted"] += 1
    result = _try_room(dungeon, i, j, height, width)
    if dungeon.enable_metrics:
        if isinstance(result, Rejected):
            metrics["rooms_rejected"][result.reason] += 1
        else:
            metrics["rooms_placed"] += 1
    return result


def _try_room(dungeon, i, j, height, width) -> Placement:
    if len(dungeon.rooms) >= MAX_ROOMS:
        return Rejected("room_cap")
    size, grid = dungeon.dims, dungeon.grid
    i, j, height, width = set_room(dungeon, i, j, height, width)

    r1 = i * 2 + 1
    c1 = j * 2 + 1
    r2 = (i + height) * 2 - 1
    c2 = (j + width) * 2 - 1
    if r1 < 1 or r2 > size.max_row or c1 < 1 or c2 > size.max_col:
        return Rejected("out_of_bounds")

    reason = sound_room(dungeon, r1, c1, r2, c2)
    if reason:
        return Rejected(reason)

    room_id = len(dungeon.rooms) + 1
    for r in range(r1, r2 + 1):
        for c in range(c1, c2 + 1):
            cell = grid[r, c]
            if cell.has(CellFlag.ENTRANCE):
                cell.clear_espace()
            elif cell.has(CellFlag.PERIMETER):
                cell.remove(CellFlag.PERIMETER)
            cell.add(CellFlag.ROOM)
            cell.room_id = room_id

    room = Room(room_id, r1, r2, c1, c2)
    dungeon.rooms[room_id] = room

    # padding row/col keeps r1-1 .. r2+1 inside the grid
    for r in range(r1 - 1, r2 + 2):
        _mark_perimeter(grid[r, c1 - 1])
        _mark_perimeter(grid[r, c2 + 1])
    for c in range(c1 - 1, c2 + 2):
        _mark_perimeter(grid[r1 - 1, c])
        _mark_perimeter(grid[r2 + 1, c])
    return Placed(room)


def _mark_perimeter(cell) -> None:
    if not (cell.has(CellFlag.ROOM) or cell.has(CellFlag.ENTRANCE)):
        cell.add(CellFlag.PERIMETER)


def label_rooms(dungeon: "Dungeon") -> None:
    """Write each room id on its middle row, one digit per cell."""
    grid = dungeon.grid
    for room_id in sorted(dungeon.rooms):
        room = dungeon.rooms[room_id]
        label = str(room.id)
        label_r = (room.north + room.south) // 2
        label_c = (room.west + room.east - len(label)) // 2 + 1
        for k, ch in enumerate(label):
            grid[label_r, label_c + k].label = ch


__all__ = [
    "DoorKind",
    "DOOR_TYPES",
    "Door",
    "Room",
    "Placed",
    "Rejected",
    "Placement",
    "emplace_rooms",
    "pack_rooms",
    "scatter_rooms",
    "alloc_rooms",
    "set_room",
    "sound_room",
    "emplace_room",
    "label_rooms",
]
