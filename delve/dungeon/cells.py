from __future__ import annotations

from enum import Flag, auto
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .tiles import NO_ROOM

Coord2D = Tuple[int, int]


class CellFlag(Flag):
    NOTHING = 0
    BLOCKED = auto()
    ROOM = auto()
    CORRIDOR = auto()
    PERIMETER = auto()
    ENTRANCE = auto()
    ARCH = auto()
    DOOR = auto()
    LOCKED = auto()
    TRAPPED = auto()
    SECRET = auto()
    PORTC = auto()
    STAIR_DN = auto()
    STAIR_UP = auto()


DOORSPACE = CellFlag.ARCH | CellFlag.DOOR | CellFlag.LOCKED | CellFlag.TRAPPED | CellFlag.SECRET | CellFlag.PORTC
OPENSPACE = CellFlag.ROOM | CellFlag.CORRIDOR | CellFlag.ENTRANCE
STAIRS = CellFlag.STAIR_DN | CellFlag.STAIR_UP
BLOCK_ROOM = CellFlag.BLOCKED | CellFlag.ROOM
BLOCK_CORR = CellFlag.BLOCKED | CellFlag.PERIMETER | CellFlag.CORRIDOR
BLOCK_DOOR = CellFlag.BLOCKED | DOORSPACE
ESPACE = CellFlag.ENTRANCE | DOORSPACE

_FLAG_NAMES = [f for f in CellFlag if f is not CellFlag.NOTHING]


class CellStateError(ValueError):
    """Raised when a flag change would put BLOCKED together with ROOM/CORRIDOR."""


class DungeonCell:
    """One grid position: flag set, owning room id and an optional glyph label."""

    __slots__ = ("flags", "room_id", "label")

    def __init__(self, flags: CellFlag = CellFlag.NOTHING, room_id: int = NO_ROOM, label: str = ""):
        self.flags = flags
        self.room_id = room_id
        self.label = label

    # -- queries -----------------------------------------------------------
    def has(self, flag: CellFlag) -> bool:
        return bool(self.flags & flag)

    def is_blocked_room(self) -> bool:
        return self.has(BLOCK_ROOM)

    def is_blocked_corridor(self) -> bool:
        return self.has(BLOCK_CORR)

    def is_blocked_door(self) -> bool:
        return self.has(BLOCK_DOOR)

    def has_label(self) -> bool:
        return bool(self.label)

    def is_espace(self) -> bool:
        return self.has(ESPACE) or self.has_label()

    def is_openspace(self) -> bool:
        return self.has(OPENSPACE)

    def is_doorspace(self) -> bool:
        return self.has(DOORSPACE)

    def is_stairs(self) -> bool:
        return self.has(STAIRS)

    def flag_names(self) -> List[str]:
        return [f.name for f in _FLAG_NAMES if f in self.flags]

    # -- mutation ----------------------------------------------------------
    def add(self, flag: CellFlag) -> None:
        merged = self.flags | flag
        if merged & CellFlag.BLOCKED and merged & (CellFlag.ROOM | CellFlag.CORRIDOR):
            raise CellStateError(f"cannot combine {self.flag_names()} with {flag}")
        self.flags = merged

    def remove(self, flag: CellFlag) -> None:
        self.flags &= ~flag

    def set(self, flag: CellFlag) -> None:
        self.flags = CellFlag.NOTHING
        self.add(flag)

    def clear(self) -> None:
        """Reset to a blank cell (flags, room id and label)."""
        self.flags = CellFlag.NOTHING
        self.room_id = NO_ROOM
        self.label = ""

    def clear_espace(self) -> None:
        self.label = ""
        self.remove(ESPACE)

    def to_dict(self) -> Dict[str, object]:
        d: Dict[str, object] = {"flags": self.flag_names()}
        if self.label:
            d["label"] = self.label
        if self.has(CellFlag.ROOM):
            d["room_id"] = self.room_id
        return d

    def __repr__(self) -> str:
        return f"DungeonCell({'|'.join(self.flag_names()) or 'NOTHING'}, room_id={self.room_id}, label={self.label!r})"


class Grid:
    """Bounds-checked 2D cell array addressed as grid[r, c].

    Negative or overflowing coordinates raise IndexError instead of wrapping.
    """

    def __init__(self, n_rows: int, n_cols: int):
        # one row/col of padding beyond the nominal play area
        self.height = n_rows + 1
        self.width = n_cols + 1
        self.rows: List[List[DungeonCell]] = [[DungeonCell() for _ in range(self.width)] for _ in range(self.height)]

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.height and 0 <= c < self.width

    def __getitem__(self, rc: Coord2D) -> DungeonCell:
        r, c = rc
        if not self.in_bounds(r, c):
            raise IndexError(f"cell ({r}, {c}) outside {self.height}x{self.width} grid")
        return self.rows[r][c]

    def get(self, r: int, c: int) -> Optional[DungeonCell]:
        return self.rows[r][c] if self.in_bounds(r, c) else None

    def __iter__(self) -> Iterator[List[DungeonCell]]:
        return iter(self.rows)

    def cells(self) -> Iterator[Tuple[int, int, DungeonCell]]:
        for r, row in enumerate(self.rows):
            for c, cell in enumerate(row):
                yield r, c, cell

    def matches(
        self,
        r: int,
        c: int,
        corridor: Sequence[Coord2D] = (),
        walled: Sequence[Coord2D] = (),
    ) -> bool:
        """Template probe: every `corridor` offset is CORRIDOR, no `walled` offset is open.

        Off-grid offsets count as closed, non-corridor space.
        """
        for dr, dc in corridor:
            cell = self.get(r + dr, c + dc)
            if cell is None or not cell.has(CellFlag.CORRIDOR):
                return False
        for dr, dc in walled:
            cell = self.get(r + dr, c + dc)
            if cell is not None and cell.is_openspace():
                return False
        return True

    def count(self, flag: CellFlag) -> int:
        return sum(1 for _, _, cell in self.cells() if cell.has(flag))


__all__ = [
    "CellFlag",
    "CellStateError",
    "Coord2D",
    "DungeonCell",
    "Grid",
    "DOORSPACE",
    "OPENSPACE",
    "STAIRS",
    "BLOCK_ROOM",
    "BLOCK_CORR",
    "BLOCK_DOOR",
    "ESPACE",
]
