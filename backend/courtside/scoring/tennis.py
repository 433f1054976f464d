"""Tennis scoring engine.
Tracks points → games within the current set, with deuce/advantage or
golden point, tiebreak at 6-6 and server rotation.

The state is never stored on its own: :func:`compute_game_state` replays the
whole point log of the set on every call.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from ..models import Point, Score

TENNIS_POINTS = ("0", "15", "30", "40")


def init_state(config: Dict) -> Dict:
    """Initialise the scoreboard state."""
    return {
        "config": {
            "advantageRule": config.get("advantageRule", True),
            "tiebreakEnabled": config.get("tiebreakEnabled", True),
            "tiebreakTo": config.get("tiebreakTo", 7),
            "gamesTo": config.get("gamesTo", 6),
        },
        "points": {"blue": 0, "red": 0},
        "games": {"blue": 0, "red": 0},
        "tiebreak": False,
        "setJustWon": None,
        "gamesCompleted": 0,
    }


def _other(side: str) -> str:
    return "red" if side == "blue" else "blue"


def _game_winner(ps: int, po: int, advantage_rule: bool) -> bool:
    if ps < 4:
        return False
    if advantage_rule:
        return ps - po >= 2
    return ps > po


def _award_game(side: str, state: Dict) -> None:
    state["games"][side] += 1
    state["gamesCompleted"] += 1
    state["points"]["blue"] = state["points"]["red"] = 0


def apply(point: Point, state: Dict) -> Dict:
    side = point.team
    if side not in ("blue", "red"):
        raise ValueError("invalid tennis point")
    opp = _other(side)
    cfg = state["config"]

    state["setJustWon"] = None
    if point.type == "neutral":
        return state
    state["points"][side] += 1
    ps, po = state["points"][side], state["points"][opp]

    if state["tiebreak"]:
        if ps >= cfg["tiebreakTo"] and ps - po >= 2:
            _award_game(side, state)
            state["tiebreak"] = False
            state["setJustWon"] = side
        return state

    if _game_winner(ps, po, cfg["advantageRule"]):
        _award_game(side, state)
        gs, go = state["games"][side], state["games"][opp]
        games_to = cfg["gamesTo"]
        if gs >= games_to and gs - go >= 2:
            state["setJustWon"] = side
        elif (
            cfg["tiebreakEnabled"]
            and state["games"]["blue"] == games_to
            and state["games"]["red"] == games_to
        ):
            state["tiebreak"] = True
    return state


def format_game_score(pts_blue: int, pts_red: int, advantage_rule: bool = True) -> Dict[str, str]:
    """Render a non-tiebreak game score as 0/15/30/40/Ad."""
    if pts_blue < 3 or pts_red < 3:
        return {
            "blue": TENNIS_POINTS[min(pts_blue, 3)],
            "red": TENNIS_POINTS[min(pts_red, 3)],
        }
    # deuce, and golden point never shows an advantage
    if pts_blue == pts_red or not advantage_rule:
        return {"blue": "40", "red": "40"}
    if pts_blue > pts_red:
        return {"blue": "Ad", "red": "40"}
    return {"blue": "40", "red": "Ad"}


def serving_team(state: Dict, initial_server: str = "blue") -> str:
    other = _other(initial_server)
    server = initial_server if state["gamesCompleted"] % 2 == 0 else other
    if not state["tiebreak"]:
        return server
    played = state["points"]["blue"] + state["points"]["red"]
    if played == 0:
        return server
    # one point for the opening server, then two each
    return _other(server) if ((played - 1) // 2) % 2 == 0 else server


def serving_side(state: Dict) -> str:
    played = state["points"]["blue"] + state["points"]["red"]
    return "deuce" if played % 2 == 0 else "ad"


@dataclass(frozen=True)
class TennisGameState:
    games: Score
    game_score: Dict[str, str]
    tiebreak: bool
    set_just_won: Optional[str]
    serving_team: str
    serving_side: str
    total_games_in_set: int
    points_in_game: Score

    @property
    def games_display(self) -> str:
        return f"{self.games.blue} - {self.games.red}"


def summary(state: Dict, initial_server: str = "blue") -> TennisGameState:
    pts = state["points"]
    if state["tiebreak"]:
        game_score = {"blue": str(pts["blue"]), "red": str(pts["red"])}
    else:
        game_score = format_game_score(
            pts["blue"], pts["red"], state["config"]["advantageRule"]
        )
    return TennisGameState(
        games=Score(blue=state["games"]["blue"], red=state["games"]["red"]),
        game_score=game_score,
        tiebreak=state["tiebreak"],
        set_just_won=state["setJustWon"],
        serving_team=serving_team(state, initial_server),
        serving_side=serving_side(state),
        total_games_in_set=state["gamesCompleted"],
        points_in_game=Score(blue=pts["blue"], red=pts["red"]),
    )


def compute_game_state(
    points: Iterable[Point],
    config: Optional[Dict] = None,
    initial_server: str = "blue",
) -> TennisGameState:
    state = init_state(config or {})
    for point in points:
        state = apply(point, state)
    return summary(state, initial_server)
