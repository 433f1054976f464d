"""Padel scoring engine.
Tracks points -> games using tennis rules.

``config`` may contain ``goldenPoint`` – at 40-40 the next point wins the
game – which is the inverse of tennis' ``advantageRule``; ``tiebreakTo``
and ``tiebreakEnabled`` behave as in tennis.
"""

from typing import Dict, Iterable, Optional

from ..models import Point
from . import tennis


def init_state(config: Dict) -> Dict:
    """Initialise the scoreboard state."""

    cfg = dict(config)
    if "goldenPoint" in cfg:
        cfg["advantageRule"] = not cfg.pop("goldenPoint")
    return tennis.init_state(cfg)


apply = tennis.apply
summary = tennis.summary


def compute_game_state(
    points: Iterable[Point],
    config: Optional[Dict] = None,
    initial_server: str = "blue",
) -> tennis.TennisGameState:
    state = init_state(config or {})
    for point in points:
        state = apply(point, state)
    return summary(state, initial_server)
