"""Domain records shared by the court, scoring and match services.

Every record is a frozen dataclass: a concluded point is never mutated in
place, the only later change (attaching a player) goes through
``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal, Optional, Tuple

Team = Literal["blue", "red"]
PointType = Literal["scored", "fault", "neutral"]
Side = Literal["left", "right"]
ServingSide = Literal["deuce", "ad"]

TEAMS: Tuple[str, str] = ("blue", "red")
POINT_TYPES: Tuple[str, str, str] = ("scored", "fault", "neutral")

# Position used for actions that have no real court location (service
# misses, double faults, matches recorded without a court).
NO_POSITION: Tuple[float, float] = (-1.0, -1.0)


def other_team(team: str) -> str:
    if team not in TEAMS:
        raise ValueError(f"unknown team {team!r}")
    return "red" if team == "blue" else "blue"


def has_position(x: float, y: float) -> bool:
    return 0.0 <= x <= 1.0 and 0.0 <= y <= 1.0


@dataclass(frozen=True)
class ActionMeta:
    """Extra data carried by a selection made from a custom action."""

    label: Optional[str] = None
    sigil: Optional[str] = None
    points: Optional[int] = None
    show_on_court: Optional[bool] = None
    assign_to_player: Optional[bool] = None


@dataclass(frozen=True)
class RallyAction:
    id: str
    team: str
    type: str
    action: str
    x: float
    y: float
    timestamp: int
    player_id: Optional[str] = None
    start_x: Optional[float] = None
    start_y: Optional[float] = None
    end_x: Optional[float] = None
    end_y: Optional[float] = None
    point_value: Optional[int] = None
    custom_action_label: Optional[str] = None
    sigil: Optional[str] = None

    @property
    def has_direction(self) -> bool:
        return self.start_x is not None and self.end_x is not None

    def with_player(self, player_id: Optional[str]) -> "RallyAction":
        return replace(self, player_id=player_id)


@dataclass(frozen=True)
class Point:
    id: str
    team: str
    type: str
    action: str
    x: float
    y: float
    timestamp: int
    player_id: Optional[str] = None
    rally_actions: Optional[Tuple[RallyAction, ...]] = None
    point_value: Optional[int] = None
    custom_action_label: Optional[str] = None
    sigil: Optional[str] = None
    show_on_court: Optional[bool] = None

    @property
    def has_position(self) -> bool:
        return has_position(self.x, self.y)

    def with_player(self, player_id: Optional[str]) -> "Point":
        """Attach ``player_id`` to the point and to its concluding action."""

        rally = self.rally_actions
        if rally:
            rally = rally[:-1] + (rally[-1].with_player(player_id),)
        return replace(self, player_id=player_id, rally_actions=rally)


@dataclass(frozen=True)
class Score:
    blue: int = 0
    red: int = 0

    def get(self, team: str) -> int:
        return self.blue if team == "blue" else self.red

    def as_dict(self) -> dict:
        return {"blue": self.blue, "red": self.red}


@dataclass(frozen=True)
class SetData:
    id: str
    number: int
    points: Tuple[Point, ...]
    score: Score
    winner: Optional[str]
    duration: int


@dataclass(frozen=True)
class Player:
    id: str
    name: str = ""
    number: Optional[str] = None


@dataclass(frozen=True)
class MatchMetadata:
    has_court: bool = True
    advantage_rule: bool = True
    tiebreak_enabled: bool = True
    is_performance_mode: bool = False
    direction_mode: bool = False
    auto_end_set: bool = True
    initial_server: str = "blue"


@dataclass(frozen=True)
class TeamNames:
    blue: str = "Blue"
    red: str = "Red"

    def as_dict(self) -> dict:
        return {"blue": self.blue, "red": self.red}


@dataclass(frozen=True)
class Selection:
    """The pending (team, type, action) choice plus any custom-action data."""

    team: str
    type: str
    action: str
    meta: ActionMeta = field(default_factory=ActionMeta)
