"""Live match coordinator.

Owns the point log of the period being played, the completed periods, the
rally accumulator and the player-assignment slot, and derives every score by
folding the log through the match's :class:`SportRules`.

Mutations on a finished match are no-ops that return ``False`` (or an
``ignored`` outcome) instead of raising, so a replayed match stays
inspectable.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

from ..actions import SERVICE_FAULT_ACTIONS
from ..courts.geometry import Rect
from ..models import (
    ActionMeta,
    MatchMetadata,
    Player,
    Point,
    RallyAction,
    Score,
    SetData,
    TeamNames,
    has_position,
)
from ..scoring.rules import SportRules, get_rules
from ..scoring.tennis import TennisGameState
from . import rally as rally_mod
from .rally import RallyAccumulator, TapOutcome
from .stats import sets_score

logger = logging.getLogger(__name__)

# Winner recorded when a period is ended manually on a tied score.
TIE_WINNER = "blue"

SELECTED = "selected"
PARKED = "parked"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class PendingPoint:
    """A concluded point waiting for a player before it joins the log.

    ``index`` is where it goes back into the log: the log length when it was
    concluded, pulled down if undo shortens the log below it.
    """

    point: Point
    index: int


class MatchState:
    def __init__(
        self,
        sport: str = "volleyball",
        *,
        match_id: Optional[str] = None,
        team_names: Optional[TeamNames] = None,
        players: Optional[List[Player]] = None,
        metadata: Optional[MatchMetadata] = None,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self.rules: SportRules = get_rules(sport)
        self.sport = sport
        self.id = match_id or id_factory()
        self.team_names = team_names or TeamNames()
        self.players: List[Player] = list(players or [])
        self.metadata = metadata or MatchMetadata()
        self._clock = clock
        self._new_id = id_factory

        self.points: List[Point] = []
        self.completed_sets: List[SetData] = []
        self.current_set_number = 1
        self.sides_swapped = False
        self.chrono_seconds = 0
        self.finished = False
        self.awaiting_new_set = False
        self.pending: Optional[PendingPoint] = None
        self.accumulator = RallyAccumulator(
            performance_mode=self.metadata.is_performance_mode,
            direction_mode=self.metadata.direction_mode,
            id_factory=id_factory,
        )

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def score(self) -> Score:
        return self.rules.score(self.points, self.metadata)

    @property
    def game_state(self) -> Optional[TennisGameState]:
        return self.rules.game_state(self.points, self.metadata)

    @property
    def serving_team(self) -> str:
        return self.rules.serving_team(self.points, self.metadata)

    @property
    def serving_side(self) -> str:
        return self.rules.serving_side(self.points, self.metadata)

    @property
    def sets_score(self) -> Score:
        return sets_score(self.completed_sets)

    @property
    def selection(self):
        return self.accumulator.selection

    @property
    def pending_player_assignment(self) -> bool:
        return self.pending is not None

    def zone_highlights(self) -> List[Rect]:
        sel = self.accumulator.selection
        if sel is None or not self.metadata.has_court:
            return []
        return self.rules.zone_highlights(
            sel.team, sel.action, sel.type, self.sides_swapped, self.serving_side
        )

    # ------------------------------------------------------------------
    # Selection and taps
    # ------------------------------------------------------------------

    def select_action(
        self,
        team: str,
        point_type: str,
        action: str,
        meta: Optional[ActionMeta] = None,
        *,
        player_id: Optional[str] = None,
    ) -> TapOutcome:
        if self.finished:
            logger.debug("match %s finished; ignoring selection", self.id)
            return TapOutcome(rally_mod.IGNORED)
        category = self.rules.category_of(action)
        if category != point_type:
            raise ValueError(
                f"action {action!r} is not a {point_type} action for {self.sport}"
            )
        self.accumulator.select(team, point_type, action, meta)

        if self.rules.auto_resolves(action, self.metadata.has_court) and not self.awaiting_new_set:
            return self._record_without_court(player_id)
        return TapOutcome(SELECTED)

    def cancel_selection(self) -> bool:
        if self.finished or self.accumulator.selection is None:
            return False
        self.accumulator.cancel()
        return True

    def record_tap(self, x: float, y: float, *, player_id: Optional[str] = None) -> TapOutcome:
        if self.finished or self.awaiting_new_set:
            return TapOutcome(rally_mod.IGNORED)
        sel = self.accumulator.selection
        if sel is None:
            return TapOutcome(rally_mod.IGNORED)
        if not self.metadata.has_court:
            return self._record_without_court(player_id)
        if not has_position(x, y):
            logger.debug("tap (%s, %s) is off the court canvas", x, y)
            return TapOutcome(rally_mod.REJECTED)

        if self.accumulator.needs_direction_origin():
            return self.accumulator.arm_direction(x, y)

        zone = self.rules.classify_zone(x, y)
        allowed = self.rules.is_zone_allowed(
            zone, sel.team, sel.action, sel.type, self.sides_swapped, self.serving_side
        )
        if not allowed:
            logger.debug("zone %s not allowed for %s/%s/%s", zone, sel.team, sel.type, sel.action)
            return TapOutcome(rally_mod.REJECTED, zone=zone)

        outcome = self.accumulator.record(
            x,
            y,
            self._timestamp(),
            player_id=player_id,
            point_value=self.rules.point_value(sel.action, sel.meta),
        )
        return self._settle(outcome._replace(zone=zone), sel.meta.assign_to_player)

    def _record_without_court(self, player_id: Optional[str]) -> TapOutcome:
        sel = self.accumulator.selection
        outcome = self.accumulator.record_without_court(
            self._timestamp(),
            player_id=player_id,
            point_value=self.rules.point_value(sel.action, sel.meta),
        )
        return self._settle(outcome, sel.meta.assign_to_player)

    def _timestamp(self) -> int:
        now = self._clock()
        latest = [p.timestamp for p in self.points[-1:]]
        latest += [a.timestamp for a in self.accumulator.rally[-1:]]
        if self.pending is not None:
            latest.append(self.pending.point.timestamp)
        return max([now] + latest)

    def _settle(self, outcome: TapOutcome, assign_to_player: Optional[bool]) -> TapOutcome:
        if outcome.status != rally_mod.CONCLUDED:
            return outcome
        point = outcome.point
        if self.requires_player(point, assign_to_player):
            if self.pending is not None:
                # one slot only: the older point goes in unattributed
                self._commit_pending(None)
            self.pending = PendingPoint(point, len(self.points))
            logger.debug("point %s parked for player assignment", point.id)
            return outcome._replace(status=PARKED)
        self._commit(point, len(self.points))
        return outcome

    def requires_player(self, point: Point, assign_to_player: Optional[bool] = None) -> bool:
        """Whether a concluded point waits for a player before joining the log.

        The roster is the blue team's. Blue's own actions, neutral actions
        and red points won on a blue fault are attributed; red winners are
        not, and neither is a point blue won on a bare serve error.
        """

        if not self.players or point.player_id is not None:
            return False
        if assign_to_player is False:
            return False
        if point.type == "neutral":
            return True
        if point.team == "blue":
            return not (point.type == "fault" and point.action in SERVICE_FAULT_ACTIONS)
        return point.type == "fault"

    def _commit(self, point: Point, index: int) -> None:
        index = min(index, len(self.points))
        self.points.insert(index, point)
        if self.pending is not None and index < self.pending.index:
            self.pending.index += 1
        self._maybe_end_set()

    def _commit_pending(self, player_id: Optional[str]) -> None:
        pending = self.pending
        self.pending = None
        point = pending.point.with_player(player_id) if player_id else pending.point
        self._commit(point, pending.index)

    def _log_with_pending(self) -> List[Point]:
        """The log in play order, with the parked point back in its place."""
        if self.pending is None:
            return list(self.points)
        index = min(self.pending.index, len(self.points))
        return self.points[:index] + [self.pending.point] + self.points[index:]

    def _maybe_end_set(self) -> None:
        if not self.metadata.auto_end_set:
            return
        # a parked point may already have been played after the one just logged
        state = self.rules.game_state(self._log_with_pending(), self.metadata)
        if state is not None and state.set_just_won is not None:
            logger.info(
                "match %s: set %d won by %s", self.id, self.current_set_number, state.set_just_won
            )
            self.end_set()

    # ------------------------------------------------------------------
    # Player assignment
    # ------------------------------------------------------------------

    def assign_player(self, player_id: str) -> bool:
        if self.finished or self.pending is None:
            return False
        self._commit_pending(player_id)
        return True

    def skip_player_assignment(self) -> bool:
        if self.finished or self.pending is None:
            return False
        self._commit_pending(None)
        return True

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        """Step back one event.

        An in-progress rally loses its last sub-action first. Otherwise the
        most recent concluded point (parked or logged) is removed, and if it
        carried a rally everything but its concluding action becomes the
        in-progress rally again.
        """

        if self.finished:
            return False
        acc = self.accumulator
        if acc.direction_origin is not None:
            acc.direction_origin = None
            return True

        if acc.pop_last() is not None:
            return True

        if self.pending is not None and self.pending.index >= len(self.points):
            point = self.pending.point
            self.pending = None
        elif self.points:
            point = self.points.pop()
            if self.pending is not None:
                self.pending.index = min(self.pending.index, len(self.points))
        else:
            return False

        if point.rally_actions:
            acc.reopen(point)
        return True

    # ------------------------------------------------------------------
    # Period lifecycle
    # ------------------------------------------------------------------

    def _freeze_set(self) -> SetData:
        score = self.rules.set_score(self.points, self.metadata)
        winner = TIE_WINNER if score.blue == score.red else ("blue" if score.blue > score.red else "red")
        return SetData(
            id=self._new_id(),
            number=self.current_set_number,
            points=tuple(self.points),
            score=score,
            winner=winner,
            duration=self.chrono_seconds,
        )

    def end_set(self) -> bool:
        if self.finished:
            return False
        if self.pending is not None:
            self._commit_pending(None)
            if not self.points:
                # the committed point closed the set on its own
                return True
        if not self.points:
            return False
        set_data = self._freeze_set()
        self.completed_sets.append(set_data)
        logger.info(
            "match %s: %s %d ended %d-%d",
            self.id,
            self.rules.period_label.lower(),
            set_data.number,
            set_data.score.blue,
            set_data.score.red,
        )
        self.points = []
        self.chrono_seconds = 0
        self.accumulator.clear()
        self.current_set_number += 1
        self.awaiting_new_set = True
        return True

    def start_new_set(self) -> bool:
        if self.finished or not self.awaiting_new_set:
            return False
        self.awaiting_new_set = False
        self.sides_swapped = not self.sides_swapped
        return True

    def finish_match(self) -> bool:
        if self.finished:
            return False
        if self.pending is not None:
            self._commit_pending(None)
        if self.points:
            self.completed_sets.append(self._freeze_set())
            self.points = []
        self.accumulator.clear()
        self.awaiting_new_set = False
        self.finished = True
        logger.info("match %s finished after %d periods", self.id, len(self.completed_sets))
        return True

    def switch_sides(self) -> bool:
        if self.finished:
            return False
        self.sides_swapped = not self.sides_swapped
        return True

    def tick(self, seconds: int = 1) -> bool:
        if self.finished or self.awaiting_new_set:
            return False
        self.chrono_seconds += seconds
        return True

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def add_player(self, player: Player) -> bool:
        if self.finished or any(p.id == player.id for p in self.players):
            return False
        self.players.append(player)
        return True

    def remove_player(self, player_id: str) -> bool:
        """Drop a roster entry; points already attributed to it keep the id."""
        if self.finished:
            return False
        before = len(self.players)
        self.players = [p for p in self.players if p.id != player_id]
        return len(self.players) != before

    # ------------------------------------------------------------------
    # Snapshot round trip
    # ------------------------------------------------------------------

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sport": self.sport,
            "teamNames": self.team_names.as_dict(),
            "completedSets": [set_to_dict(s) for s in self.completed_sets],
            "currentSetNumber": self.current_set_number,
            "points": [point_to_dict(p) for p in self.points],
            "sidesSwapped": self.sides_swapped,
            "chronoSeconds": self.chrono_seconds,
            "players": [asdict(p) for p in self.players],
            "metadata": metadata_to_dict(self.metadata),
            "finished": self.finished,
            "awaitingNewSet": self.awaiting_new_set,
            "pendingRally": [rally_action_to_dict(a) for a in self.accumulator.rally],
            "pendingPoint": (
                {"point": point_to_dict(self.pending.point), "index": self.pending.index}
                if self.pending is not None
                else None
            ),
        }

    @classmethod
    def from_snapshot(
        cls,
        data: Dict[str, Any],
        *,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_id,
    ) -> "MatchState":
        names = data.get("teamNames") or {}
        match = cls(
            data.get("sport", "volleyball"),
            match_id=data.get("id"),
            team_names=TeamNames(**names) if names else None,
            players=[Player(**p) for p in data.get("players") or []],
            metadata=metadata_from_dict(data.get("metadata") or {}),
            clock=clock,
            id_factory=id_factory,
        )
        match.completed_sets = [set_from_dict(s) for s in data.get("completedSets") or []]
        match.current_set_number = int(data.get("currentSetNumber", len(match.completed_sets) + 1))
        match.points = [point_from_dict(p) for p in data.get("points") or []]
        match.sides_swapped = bool(data.get("sidesSwapped", False))
        match.chrono_seconds = int(data.get("chronoSeconds", 0))
        match.finished = bool(data.get("finished", False))
        match.awaiting_new_set = bool(data.get("awaitingNewSet", False))
        match.accumulator.restore(
            [rally_action_from_dict(a) for a in data.get("pendingRally") or []]
        )
        pending = data.get("pendingPoint")
        if pending:
            match.pending = PendingPoint(point_from_dict(pending["point"]), int(pending["index"]))
        return match


# ----------------------------------------------------------------------
# Plain-dict codec used for persistence snapshots
# ----------------------------------------------------------------------

_RALLY_FIELDS = {
    "player_id": "playerId",
    "start_x": "startX",
    "start_y": "startY",
    "end_x": "endX",
    "end_y": "endY",
    "point_value": "pointValue",
    "custom_action_label": "customActionLabel",
    "sigil": "sigil",
}

_POINT_FIELDS = {
    "player_id": "playerId",
    "point_value": "pointValue",
    "custom_action_label": "customActionLabel",
    "sigil": "sigil",
    "show_on_court": "showOnCourt",
}

_METADATA_FIELDS = {
    "has_court": "hasCourt",
    "advantage_rule": "advantageRule",
    "tiebreak_enabled": "tiebreakEnabled",
    "is_performance_mode": "isPerformanceMode",
    "direction_mode": "directionMode",
    "auto_end_set": "autoEndSet",
    "initial_server": "initialServer",
}


def _base_dict(obj) -> Dict[str, Any]:
    return {
        "id": obj.id,
        "team": obj.team,
        "type": obj.type,
        "action": obj.action,
        "x": obj.x,
        "y": obj.y,
        "timestamp": obj.timestamp,
    }


def rally_action_to_dict(action: RallyAction) -> Dict[str, Any]:
    out = _base_dict(action)
    for attr, key in _RALLY_FIELDS.items():
        value = getattr(action, attr)
        if value is not None:
            out[key] = value
    return out


def rally_action_from_dict(data: Dict[str, Any]) -> RallyAction:
    kwargs = {attr: data.get(key) for attr, key in _RALLY_FIELDS.items()}
    return RallyAction(
        id=data["id"],
        team=data["team"],
        type=data["type"],
        action=data["action"],
        x=float(data["x"]),
        y=float(data["y"]),
        timestamp=int(data["timestamp"]),
        **kwargs,
    )


def point_to_dict(point: Point) -> Dict[str, Any]:
    out = _base_dict(point)
    for attr, key in _POINT_FIELDS.items():
        value = getattr(point, attr)
        if value is not None:
            out[key] = value
    if point.rally_actions:
        out["rallyActions"] = [rally_action_to_dict(a) for a in point.rally_actions]
    return out


def point_from_dict(data: Dict[str, Any]) -> Point:
    kwargs = {attr: data.get(key) for attr, key in _POINT_FIELDS.items()}
    rally = data.get("rallyActions")
    return Point(
        id=data["id"],
        team=data["team"],
        type=data["type"],
        action=data["action"],
        x=float(data["x"]),
        y=float(data["y"]),
        timestamp=int(data["timestamp"]),
        rally_actions=tuple(rally_action_from_dict(a) for a in rally) if rally else None,
        **kwargs,
    )


def set_to_dict(set_data: SetData) -> Dict[str, Any]:
    return {
        "id": set_data.id,
        "number": set_data.number,
        "points": [point_to_dict(p) for p in set_data.points],
        "score": set_data.score.as_dict(),
        "winner": set_data.winner,
        "duration": set_data.duration,
    }


def set_from_dict(data: Dict[str, Any]) -> SetData:
    score = data.get("score") or {}
    return SetData(
        id=data.get("id") or _new_id(),
        number=int(data["number"]),
        points=tuple(point_from_dict(p) for p in data.get("points") or []),
        score=Score(blue=int(score.get("blue", 0)), red=int(score.get("red", 0))),
        winner=data.get("winner"),
        duration=int(data.get("duration", 0)),
    )


def metadata_to_dict(metadata: MatchMetadata) -> Dict[str, Any]:
    return {key: getattr(metadata, attr) for attr, key in _METADATA_FIELDS.items()}


def metadata_from_dict(data: Dict[str, Any]) -> MatchMetadata:
    kwargs = {attr: data[key] for attr, key in _METADATA_FIELDS.items() if key in data}
    return MatchMetadata(**kwargs)
