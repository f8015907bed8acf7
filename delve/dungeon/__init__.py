"""Public dungeon package interface."""

from .cells import CellFlag, CellStateError, DungeonCell, Grid  # noqa: F401
from .config import ConfigError, DungeonConfig, Options  # noqa: F401
from .doors import Door  # noqa: F401
from .features import Stairs  # noqa: F401
from .pipeline import Dungeon, create_dungeon  # noqa: F401
from .rooms import Placed, Rejected, Room  # noqa: F401

__all__ = [
    "CellFlag",
    "CellStateError",
    "DungeonCell",
    "Grid",
    "ConfigError",
    "DungeonConfig",
    "Options",
    "Door",
    "Stairs",
    "Dungeon",
    "create_dungeon",
    "Placed",
    "Rejected",
    "Room",
]
