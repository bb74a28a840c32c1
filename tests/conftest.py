import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve.models import World, new_player  # noqa: E402
from delve.services import persistence  # noqa: E402
from delve.visibility import StaticVisibility  # noqa: E402
from tests.dungeon_test_utils import open_grid  # noqa: E402


class ScriptedRandom(random.Random):
    """Random whose ``random()`` replays a script, then a fixed fallback.

    Integer draws (randint, choice) still come from the seeded generator.
    """

    def __init__(self, script=(), fallback=0.99, seed=0):
        super().__init__(seed)
        self.script = list(script)
        self.fallback = fallback

    def random(self):
        if self.script:
            return self.script.pop(0)
        return self.fallback


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def no_miss():
    """RNG that never triggers the 10% miss roll."""
    return ScriptedRandom(fallback=0.99)


@pytest.fixture()
def always_miss():
    return ScriptedRandom(fallback=0.0)


@pytest.fixture()
def world():
    """20x20 open floor, nothing explored."""
    return World(grid=open_grid(20, 20))


@pytest.fixture()
def entities():
    """Store holding only the player at (5, 5)."""
    return [new_player(5, 5)]


@pytest.fixture()
def visibility():
    """Oracle that sees the whole 20x20 test floor."""
    return StaticVisibility((x, y) for x in range(20) for y in range(20))


@pytest.fixture()
def save_url(tmp_path):
    url = f"sqlite:///{(tmp_path / 'saves' / 'test.db').as_posix()}"
    yield url
    persistence.dispose_engines()


@pytest.fixture(autouse=True)
def _quiet_logs(monkeypatch):
    """Keep structured log lines out of captured output unless a test opts in."""
    monkeypatch.setenv("DELVE_LOG_LEVEL", "error")
    monkeypatch.delenv("DELVE_LOG_JSON", raising=False)
    yield
