"""Tennis zone model.

Doubles court at x 30-570 / y 40-360, singles sidelines at y=80 and y=320,
service lines at x=165 and x=435 with the centre service line at y=200.
"""

from __future__ import annotations

from typing import List, Optional

from ..actions import ACE_ACTIONS, action_keys
from .geometry import (
    COURT_HEIGHT,
    COURT_WIDTH,
    FULL_COURT,
    Rect,
    ace_lands_top,
    ace_target_zone,
    opposite,
    team_side,
)

COURT_LEFT = 30.0
COURT_RIGHT = 570.0
COURT_TOP = 40.0
COURT_BOTTOM = 360.0
SINGLES_TOP = 80.0
SINGLES_BOTTOM = 320.0
NET_X = 300.0
NET_HALF_WIDTH = 12.0
MID_Y = 200.0
SERVICE_LEFT = 165.0
SERVICE_RIGHT = 435.0

ZONES = (
    "left_court",
    "right_court",
    "net",
    "service_box_left_top",
    "service_box_left_bottom",
    "service_box_right_top",
    "service_box_right_bottom",
    "outside_left",
    "outside_right",
)

SCORED_ACTIONS = action_keys("tennis", "scored")
OUT_ACTIONS = frozenset({"out_long", "out_wide"})


def classify_zone(cx: float, cy: float) -> str:
    inside = COURT_LEFT <= cx <= COURT_RIGHT and COURT_TOP <= cy <= COURT_BOTTOM
    if not inside:
        return "outside_left" if cx < NET_X else "outside_right"
    if abs(cx - NET_X) < NET_HALF_WIDTH:
        return "net"
    if SINGLES_TOP <= cy <= SINGLES_BOTTOM:
        if SERVICE_LEFT <= cx < NET_X:
            return "service_box_left_top" if cy < MID_Y else "service_box_left_bottom"
        if NET_X < cx <= SERVICE_RIGHT:
            return "service_box_right_top" if cy < MID_Y else "service_box_right_bottom"
    return "left_court" if cx < NET_X else "right_court"


def is_zone_allowed(
    zone: str,
    team: str,
    action: str,
    point_type: str,
    sides_swapped: bool,
    serving_side: Optional[str] = None,
) -> bool:
    own = team_side(team, sides_swapped)
    opp = opposite(own)
    target = ace_target_zone(own, serving_side)

    if action in ACE_ACTIONS:
        return zone == target
    if action in SCORED_ACTIONS:
        return zone in (
            f"{opp}_court",
            f"service_box_{opp}_top",
            f"service_box_{opp}_bottom",
        )

    if action == "double_fault":
        return zone.startswith("outside") or zone == "net" or (
            zone.startswith("service_box") and zone != target
        )
    if action == "net_error":
        return zone == "net"
    if action in OUT_ACTIONS:
        return zone == f"outside_{opp}"
    return True


def zone_highlights(
    team: str,
    action: str,
    point_type: str,
    sides_swapped: bool,
    serving_side: Optional[str] = None,
) -> List[Rect]:
    own = team_side(team, sides_swapped)
    opp = opposite(own)

    if action in ACE_ACTIONS:
        top = ace_lands_top(own, serving_side)
        x = SERVICE_LEFT if opp == "left" else NET_X
        w = (NET_X - SERVICE_LEFT) if opp == "left" else (SERVICE_RIGHT - NET_X)
        y = SINGLES_TOP if top else MID_Y
        h = (MID_Y - SINGLES_TOP) if top else (SINGLES_BOTTOM - MID_Y)
        return [Rect(x, y, w, h)]
    if action in SCORED_ACTIONS:
        if opp == "right":
            return [Rect(NET_X, COURT_TOP, COURT_RIGHT - NET_X, COURT_BOTTOM - COURT_TOP)]
        return [Rect(COURT_LEFT, COURT_TOP, NET_X - COURT_LEFT, COURT_BOTTOM - COURT_TOP)]
    if action == "net_error":
        return [
            Rect(NET_X - NET_HALF_WIDTH, COURT_TOP, NET_HALF_WIDTH * 2, COURT_BOTTOM - COURT_TOP)
        ]
    if action in OUT_ACTIONS:
        if opp == "right":
            return [
                Rect(COURT_RIGHT, 0.0, COURT_WIDTH - COURT_RIGHT, COURT_HEIGHT),
                Rect(NET_X, 0.0, COURT_RIGHT - NET_X, COURT_TOP),
                Rect(NET_X, COURT_BOTTOM, COURT_RIGHT - NET_X, COURT_HEIGHT - COURT_BOTTOM),
            ]
        return [
            Rect(0.0, 0.0, COURT_LEFT, COURT_HEIGHT),
            Rect(COURT_LEFT, 0.0, NET_X - COURT_LEFT, COURT_TOP),
            Rect(COURT_LEFT, COURT_BOTTOM, NET_X - COURT_LEFT, COURT_HEIGHT - COURT_BOTTOM),
        ]
    return [FULL_COURT]
