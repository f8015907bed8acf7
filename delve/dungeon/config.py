from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import List, Mapping, Optional, Sequence, Union

from ..logging_utils import get_logger
from .tiles import CORRIDOR_LAYOUT, DUNGEON_LAYOUT, ROOM_LAYOUTS, ROUND_LAYOUT

log = get_logger("delve.dungeon.config")


class ConfigError(ValueError):
    """Raised by DungeonConfig.validate() with every problem found."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


@dataclass
class DungeonConfig:
    n_rows: int = 39
    n_cols: int = 39
    dungeon_layout: str = "None"
    room_min: int = 3
    room_max: int = 9
    room_layout: str = "Scattered"
    corridor_layout: Union[str, int] = "Bent"
    remove_deadends: int = 50
    add_stairs: int = 2
    map_style: str = "Standard"
    cell_size: int = 18
    seed: Optional[int] = None
    # Custom stencil; takes precedence over a named dungeon_layout.
    mask: Optional[Sequence[Sequence[int]]] = None

    @property
    def straightness(self) -> int:
        """Corridor straightness bias 0-100 (layout name or raw percentage)."""
        if isinstance(self.corridor_layout, str):
            if self.corridor_layout in CORRIDOR_LAYOUT:
                return CORRIDOR_LAYOUT[self.corridor_layout]
            return int(self.corridor_layout)
        return int(self.corridor_layout)

    @property
    def stencil(self) -> Optional[Sequence[Sequence[int]]]:
        if self.mask is not None:
            return self.mask
        return DUNGEON_LAYOUT.get(self.dungeon_layout)

    def validate(self) -> "DungeonConfig":
        """Check ranges the generator assumes; raises ConfigError listing all failures.

        An unrecognised dungeon_layout is not an error: it only means no mask, so
        it is logged as a warning.
        """
        problems: List[str] = []
        if self.n_rows < 3:
            problems.append(f"n_rows must be >= 3 (got {self.n_rows})")
        if self.n_cols < 3:
            problems.append(f"n_cols must be >= 3 (got {self.n_cols})")
        if self.room_min < 1:
            problems.append(f"room_min must be >= 1 (got {self.room_min})")
        if self.room_max < self.room_min:
            problems.append(f"room_max ({self.room_max}) must be >= room_min ({self.room_min})")
        if self.room_layout not in ROOM_LAYOUTS:
            problems.append(f"room_layout must be one of {', '.join(ROOM_LAYOUTS)} (got {self.room_layout!r})")
        try:
            straight = self.straightness
        except ValueError:
            problems.append(f"unknown corridor_layout {self.corridor_layout!r}")
        else:
            if not 0 <= straight <= 100:
                problems.append(f"corridor_layout must be within 0-100 (got {straight})")
        if not 0 <= self.remove_deadends <= 100:
            problems.append(f"remove_deadends must be within 0-100 (got {self.remove_deadends})")
        if self.add_stairs < 0:
            problems.append(f"add_stairs must be >= 0 (got {self.add_stairs})")
        if self.mask is not None:
            if not self.mask or not self.mask[0]:
                problems.append("mask must be a non-empty 2D stencil")
            elif any(len(row) != len(self.mask[0]) for row in self.mask):
                problems.append("mask rows must all have the same length")
        elif self.dungeon_layout not in DUNGEON_LAYOUT and self.dungeon_layout not in ("None", ROUND_LAYOUT):
            log.warn(event="unknown_dungeon_layout", layout=self.dungeon_layout, masking="none")
        if problems:
            raise ConfigError(problems)
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, prefix: str = "DELVE_", **overrides) -> "DungeonConfig":
        """Build a config from DELVE_* variables; keyword overrides win over the environment."""
        env = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            if f.name == "mask":
                continue
            key = prefix + f.name.upper()
            if key not in env or env[key] == "":
                continue
            raw = env[key]
            if f.name in ("dungeon_layout", "room_layout", "map_style"):
                values[f.name] = raw
            elif f.name == "corridor_layout":
                values[f.name] = int(raw) if raw.lstrip("-").isdigit() else raw
            else:
                try:
                    values[f.name] = int(raw)
                except ValueError:
                    raise ConfigError([f"{key} must be an integer (got {raw!r})"]) from None
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def with_overrides(self, **changes) -> "DungeonConfig":
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


Options = DungeonConfig

__all__ = ["DungeonConfig", "Options", "ConfigError"]
