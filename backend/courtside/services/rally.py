"""Rally accumulation state machine.

Turns the operator's taps into concluded points. In performance mode neutral
sub-actions pile up in an in-progress rally until a scoring or fault action
concludes it; the concluded point then carries the whole rally, concluding
action last. Direction mode splits each sub-action into two taps, origin
then landing spot.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, List, NamedTuple, Optional, Tuple

from ..models import (
    NO_POSITION,
    POINT_TYPES,
    TEAMS,
    ActionMeta,
    Point,
    RallyAction,
    Selection,
)

logger = logging.getLogger(__name__)

IDLE = "idle"
ACTION_SELECTED = "action_selected"
RALLY_BUILDING = "rally_building"
AWAITING_DIRECTION = "awaiting_direction"

IGNORED = "ignored"
REJECTED = "rejected"
DIRECTION_ARMED = "direction_armed"
ACCUMULATED = "accumulated"
CONCLUDED = "concluded"


class TapOutcome(NamedTuple):
    status: str
    point: Optional[Point] = None
    rally_action: Optional[RallyAction] = None
    zone: Optional[str] = None


def _new_id() -> str:
    return uuid.uuid4().hex


class RallyAccumulator:
    def __init__(
        self,
        *,
        performance_mode: bool = False,
        direction_mode: bool = False,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self.performance_mode = performance_mode
        # direction tracking only exists on top of rally tracking
        self.direction_mode = direction_mode and performance_mode
        self._new_id = id_factory
        self.selection: Optional[Selection] = None
        self.rally: List[RallyAction] = []
        self.direction_origin: Optional[Tuple[float, float]] = None

    @property
    def state(self) -> str:
        if self.direction_origin is not None:
            return AWAITING_DIRECTION
        if self.rally:
            return RALLY_BUILDING
        if self.selection is not None:
            return ACTION_SELECTED
        return IDLE

    def select(
        self,
        team: str,
        point_type: str,
        action: str,
        meta: Optional[ActionMeta] = None,
    ) -> Selection:
        if team not in TEAMS:
            raise ValueError(f"unknown team {team!r}")
        if point_type not in POINT_TYPES:
            raise ValueError(f"unknown point type {point_type!r}")
        self.selection = Selection(team, point_type, action, meta or ActionMeta())
        self.direction_origin = None
        return self.selection

    def cancel(self) -> None:
        self.selection = None
        self.direction_origin = None

    def needs_direction_origin(self) -> bool:
        return self.direction_mode and self.direction_origin is None

    def arm_direction(self, x: float, y: float) -> TapOutcome:
        if self.selection is None:
            return TapOutcome(IGNORED)
        self.direction_origin = (x, y)
        return TapOutcome(DIRECTION_ARMED)

    def record(
        self,
        x: float,
        y: float,
        timestamp: int,
        *,
        player_id: Optional[str] = None,
        point_value: Optional[int] = None,
        direction: bool = True,
    ) -> TapOutcome:
        """Feed one validated tap; returns what it did to the rally."""

        sel = self.selection
        if sel is None:
            return TapOutcome(IGNORED)

        start = self.direction_origin if direction else None
        action = RallyAction(
            id=self._new_id(),
            team=sel.team,
            type=sel.type,
            action=sel.action,
            x=x,
            y=y,
            timestamp=timestamp,
            player_id=player_id,
            start_x=start[0] if start else None,
            start_y=start[1] if start else None,
            end_x=x if start else None,
            end_y=y if start else None,
            point_value=point_value,
            custom_action_label=sel.meta.label,
            sigil=sel.meta.sigil,
        )
        self.direction_origin = None

        if sel.type == "neutral" and self.performance_mode:
            self.rally.append(action)
            logger.debug("rally sub-action %s (%d pending)", sel.action, len(self.rally))
            return TapOutcome(ACCUMULATED, rally_action=action)

        rally = tuple(self.rally) + (action,) if self.performance_mode else None
        point = Point(
            id=self._new_id(),
            team=sel.team,
            type=sel.type,
            action=sel.action,
            x=x,
            y=y,
            timestamp=timestamp,
            player_id=player_id,
            rally_actions=rally,
            point_value=point_value,
            custom_action_label=sel.meta.label,
            sigil=sel.meta.sigil,
            show_on_court=sel.meta.show_on_court,
        )
        self.rally = []
        self.selection = None
        return TapOutcome(CONCLUDED, point=point)

    def record_without_court(self, timestamp: int, **kwargs) -> TapOutcome:
        x, y = NO_POSITION
        self.direction_origin = None
        return self.record(x, y, timestamp, direction=False, **kwargs)

    def pop_last(self) -> Optional[RallyAction]:
        if not self.rally:
            return None
        return self.rally.pop()

    def reopen(self, point: Point) -> None:
        """Restore a concluded point's build-up as the in-progress rally."""

        rally = point.rally_actions or ()
        self.rally = list(rally[:-1])
        self.selection = None
        self.direction_origin = None

    def restore(self, rally: List[RallyAction]) -> None:
        self.rally = list(rally)

    def clear(self) -> None:
        self.selection = None
        self.rally = []
        self.direction_origin = None
