"""
project: Delve
module: __init__.py
License: MIT

Seeded grid dungeon generator.

The generation pipeline lives in `delve.dungeon`; `delve.logging_utils`
provides the key=value logger every phase reports through. The command line
front end is `run.py` at the repository root.
"""

from .dungeon import ConfigError, Dungeon, DungeonConfig, create_dungeon  # noqa: F401

__all__ = ["ConfigError", "Dungeon", "DungeonConfig", "create_dungeon"]
