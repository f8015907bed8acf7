# Lookup tables shared by the generation phases. Offsets are (row, col).

NORTH = "north"
SOUTH = "south"
WEST = "west"
EAST = "east"

DIRECTIONS = (NORTH, SOUTH, WEST, EAST)

DI = {NORTH: -1, SOUTH: 1, WEST: 0, EAST: 0}
DJ = {NORTH: 0, SOUTH: 0, WEST: -1, EAST: 1}

OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, WEST: EAST, EAST: WEST}

# Stencils scaled over the whole grid; 0 = blocked.
DUNGEON_LAYOUT = {
    "Box": ((1, 1, 1), (1, 0, 1), (1, 1, 1)),
    "Cross": ((0, 1, 0), (1, 1, 1), (0, 1, 0)),
}
ROUND_LAYOUT = "Round"

# Straightness bias (percent chance to keep the previous heading).
CORRIDOR_LAYOUT = {
    "Labyrinth": 0,
    "Bent": 50,
    "Straight": 100,
}

ROOM_LAYOUTS = ("Packed", "Scattered")

# Stair pocket: three corridor cells straight ahead, seven closed guard cells.
STAIR_END = {
    NORTH: {
        "walled": ((1, -1), (0, -1), (-1, -1), (-1, 0), (-1, 1), (0, 1), (1, 1)),
        "corridor": ((0, 0), (1, 0), (2, 0)),
        "next": (1, 0),
    },
    SOUTH: {
        "walled": ((-1, -1), (0, -1), (1, -1), (1, 0), (1, 1), (0, 1), (-1, 1)),
        "corridor": ((0, 0), (-1, 0), (-2, 0)),
        "next": (-1, 0),
    },
    WEST: {
        "walled": ((-1, 1), (-1, 0), (-1, -1), (0, -1), (1, -1), (1, 0), (1, 1)),
        "corridor": ((0, 0), (0, 1), (0, 2)),
        "next": (0, 1),
    },
    EAST: {
        "walled": ((-1, -1), (-1, 0), (-1, 1), (0, 1), (1, 1), (1, 0), (1, -1)),
        "corridor": ((0, 0), (0, -1), (0, -2)),
        "next": (0, -1),
    },
}

# Dead end opening toward the keyed direction; "recurse" is the cell to re-test.
CLOSE_END = {
    NORTH: {
        "walled": ((0, -1), (1, -1), (1, 0), (1, 1), (0, 1)),
        "close": ((0, 0),),
        "recurse": (-1, 0),
    },
    SOUTH: {
        "walled": ((0, -1), (-1, -1), (-1, 0), (-1, 1), (0, 1)),
        "close": ((0, 0),),
        "recurse": (1, 0),
    },
    WEST: {
        "walled": ((-1, 0), (-1, 1), (0, 1), (1, 1), (1, 0)),
        "close": ((0, 0),),
        "recurse": (0, -1),
    },
    EAST: {
        "walled": ((-1, 0), (-1, -1), (0, -1), (1, -1), (1, 0)),
        "close": ((0, 0),),
        "recurse": (0, 1),
    },
}

# Door kinds: (upper bound on a rand(110) roll, key, flag name, glyph, type name).
DOOR_ROLL = 110
DOOR_KINDS = (
    (15, "arch", "ARCH", "a", "Archway"),
    (60, "open", "DOOR", "o", "Unlocked Door"),
    (75, "lock", "LOCKED", "x", "Locked Door"),
    (90, "trap", "TRAPPED", "t", "Trapped Door"),
    (100, "secret", "SECRET", "s", "Secret Door"),
    (110, "portc", "PORTC", "p", "Portcullis"),
)

STAIR_DOWN_GLYPH = "d"
STAIR_UP_GLYPH = "u"

# Console rendering glyphs (label overrides all of these).
ROOM_GLYPH = "X"
CORRIDOR_GLYPH = "x"
DOOR_GLYPH = "D"
BLANK_GLYPH = " "

NO_ROOM = 0
MAX_ROOMS = 999

__all__ = [
    "NORTH",
    "SOUTH",
    "WEST",
    "EAST",
    "DIRECTIONS",
    "DI",
    "DJ",
    "OPPOSITE",
    "DUNGEON_LAYOUT",
    "ROUND_LAYOUT",
    "CORRIDOR_LAYOUT",
    "ROOM_LAYOUTS",
    "STAIR_END",
    "CLOSE_END",
    "DOOR_ROLL",
    "DOOR_KINDS",
    "STAIR_DOWN_GLYPH",
    "STAIR_UP_GLYPH",
    "ROOM_GLYPH",
    "CORRIDOR_GLYPH",
    "DOOR_GLYPH",
    "BLANK_GLYPH",
    "NO_ROOM",
    "MAX_ROOMS",
]
