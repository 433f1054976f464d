"""Volleyball zone model.

Court lines at x 20-580 / y 20-380 with the net at x=300. Everything inside
the canvas but off the court is "outside" on the side of the net it lies on.
"""

from __future__ import annotations

from typing import List, Optional

from ..actions import action_keys
from .geometry import COURT_HEIGHT, COURT_WIDTH, FULL_COURT, Rect, opposite, team_side

COURT_LEFT = 20.0
COURT_RIGHT = 580.0
COURT_TOP = 20.0
COURT_BOTTOM = 380.0
NET_X = 300.0
NET_HALF_WIDTH = 15.0

ZONES = ("left_court", "right_court", "net", "outside_left", "outside_right", "none")

OFFENSIVE_ACTIONS = action_keys("volleyball", "scored")


def classify_zone(cx: float, cy: float) -> str:
    if not (0.0 <= cx <= COURT_WIDTH and 0.0 <= cy <= COURT_HEIGHT):
        return "none"
    inside = COURT_LEFT <= cx <= COURT_RIGHT and COURT_TOP <= cy <= COURT_BOTTOM
    if inside:
        if abs(cx - NET_X) < NET_HALF_WIDTH:
            return "net"
        return "left_court" if cx < NET_X else "right_court"
    return "outside_left" if cx < NET_X else "outside_right"


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

    if action in OFFENSIVE_ACTIONS:
        return zone == f"{opp}_court"

    if action in ("out", "service_miss"):
        return zone == f"outside_{opp}"
    if action == "net_fault":
        return zone == "net"
    if action == "block_out":
        # ball rebounded off the block into the blocking side's outside area
        return zone == f"outside_{own}"
    return True


def _half(side: str) -> Rect:
    if side == "right":
        return Rect(NET_X, COURT_TOP, COURT_RIGHT - NET_X, COURT_BOTTOM - COURT_TOP)
    return Rect(COURT_LEFT, COURT_TOP, NET_X - COURT_LEFT, COURT_BOTTOM - COURT_TOP)


def _outside(side: str) -> List[Rect]:
    if side == "right":
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


def zone_highlights(
    team: str,
    action: str,
    point_type: str,
    sides_swapped: bool,
    serving_side: Optional[str] = None,
) -> List[Rect]:
    own = team_side(team, sides_swapped)
    opp = opposite(own)

    if action in OFFENSIVE_ACTIONS:
        return [_half(opp)]
    if action in ("out", "service_miss"):
        return _outside(opp)
    if action == "net_fault":
        return [
            Rect(NET_X - NET_HALF_WIDTH, COURT_TOP, NET_HALF_WIDTH * 2, COURT_BOTTOM - COURT_TOP)
        ]
    if action == "block_out":
        return _outside(own)
    return [FULL_COURT]
