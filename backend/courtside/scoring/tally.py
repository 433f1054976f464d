"""Rally-point tally engine (volleyball, basketball).

Every non-neutral point counts for the team it is attributed to. With
``weighted`` enabled (basketball) a scored point is worth its
``point_value`` instead of 1; faults still count 1 for the benefiting team.
"""

from typing import Dict, Iterable, Optional

from ..models import Point, Score


def init_state(config: Dict) -> Dict:
    """Initialise the scoreboard state."""
    return {
        "config": {
            "weighted": config.get("weighted", False),
            "initialServer": config.get("initialServer", "blue"),
        },
        "score": {"blue": 0, "red": 0},
        "server": config.get("initialServer", "blue"),
    }


def point_worth(point: Point, weighted: bool) -> int:
    if point.type == "neutral":
        return 0
    if weighted and point.type == "scored":
        return point.point_value if point.point_value is not None else 1
    return 1


def apply(point: Point, state: Dict) -> Dict:
    if point.team not in ("blue", "red"):
        raise ValueError("invalid point team")
    if point.type == "neutral":
        return state
    state["score"][point.team] += point_worth(point, state["config"]["weighted"])
    state["server"] = point.team
    return state


def summary(state: Dict) -> Dict:
    return {
        "score": dict(state["score"]),
        "servingTeam": state["server"],
    }


def fold(points: Iterable[Point], config: Optional[Dict] = None) -> Dict:
    state = init_state(config or {})
    for point in points:
        state = apply(point, state)
    return state


def compute_score(points: Iterable[Point], weighted: bool = False) -> Score:
    state = fold(points, {"weighted": weighted})
    return Score(blue=state["score"]["blue"], red=state["score"]["red"])


def serving_team(points: Iterable[Point], initial_server: str = "blue") -> str:
    """The team credited with the most recent non-neutral point."""
    return fold(points, {"initialServer": initial_server})["server"]
