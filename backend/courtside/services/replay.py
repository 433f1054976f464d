"""Play-by-play projection over a settled point log.

Nothing here mutates the match: a replay view is computed from the log and
two cursor indices.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence

from ..models import Point, RallyAction
from ..scoring import tally

OVERVIEW = -1


def clamp_point_index(index: int, total: int) -> int:
    if total == 0 or index < 0:
        return OVERVIEW
    return min(index, total - 1)


def clamp_action_index(index: int, point: Optional[Point]) -> int:
    if point is None or not point.rally_actions:
        return 0
    return max(0, min(index, len(point.rally_actions) - 1))


def replay_view(
    points: Sequence[Point],
    point_index: int = OVERVIEW,
    action_index: int = 0,
    weighted: bool = False,
    game_fold: Optional[Callable[[Sequence[Point]], Any]] = None,
) -> Dict:
    """Project the log onto one viewed point and one of its rally actions.

    ``point_index`` of -1 (or any negative index) is the overview, with the
    score after the whole log. Otherwise the running score is the score after
    the viewed point.

    ``game_fold`` projects a prefix of the log onto the game-set state for
    sports scored in games; its result is reported as ``gameState``.
    """
    total = len(points)
    index = clamp_point_index(point_index, total)
    if index == OVERVIEW:
        return {
            "overview": True,
            "pointIndex": OVERVIEW,
            "actionIndex": 0,
            "totalPoints": total,
            "point": None,
            "action": None,
            "totalActions": 0,
            "score": tally.compute_score(points, weighted=weighted),
            "gameState": game_fold(points) if game_fold else None,
            "hasPrevious": False,
            "hasNext": total > 0,
        }

    point = points[index]
    a_index = clamp_action_index(action_index, point)
    action: Optional[RallyAction] = point.rally_actions[a_index] if point.rally_actions else None
    return {
        "overview": False,
        "pointIndex": index,
        "actionIndex": a_index,
        "totalPoints": total,
        "point": point,
        "action": action,
        "totalActions": len(point.rally_actions or ()),
        "score": tally.compute_score(points[: index + 1], weighted=weighted),
        "gameState": game_fold(points[: index + 1]) if game_fold else None,
        "hasPrevious": True,
        "hasNext": index < total - 1,
    }
