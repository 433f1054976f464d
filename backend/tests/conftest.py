import asyncio
import itertools
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Avoid startup validation error when importing the app
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:5173")
os.environ.setdefault("ALLOW_CREDENTIALS", "true")

from courtside.actions import DEFAULT_HIDDEN_ACTIONS  # noqa: E402
from courtside.models import MatchMetadata, Player  # noqa: E402
from courtside.services.match_state import MatchState  # noqa: E402


class FakeClock:
    def __init__(self, start=1_000):
        self.now = start

    def __call__(self):
        self.now += 10
        return self.now


@pytest.fixture
def make_match():
    """Build a match with a deterministic clock and sequential ids."""

    def _make(sport="volleyball", players=(), **metadata):
        counter = itertools.count(1)
        return MatchState(
            sport,
            match_id=f"{sport}-match",
            players=[Player(id=pid, name=pid.title(), number=str(i)) for i, pid in enumerate(players, 1)],
            metadata=MatchMetadata(**metadata),
            clock=FakeClock(),
            id_factory=lambda: f"id{next(counter)}",
        )

    return _make


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from courtside.main import app
    from courtside.store import actions_config, match_store

    asyncio.run(match_store.clear())
    actions_config.custom_actions.clear()
    actions_config.hidden_actions[:] = list(DEFAULT_HIDDEN_ACTIONS)
    with TestClient(app) as c:
        yield c
    asyncio.run(match_store.clear())
