import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve.dungeon import DungeonConfig  # noqa: E402
from tests.dungeon_test_utils import blank_dungeon  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_delve_env(monkeypatch):
    """Keep a developer's DELVE_* shell variables from leaking into generation."""
    for key in list(os.environ):
        if key.startswith("DELVE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def stub():
    """Empty 39x39 grid with the dungeon attributes the phase functions read."""
    return blank_dungeon(DungeonConfig(), seed=1)
