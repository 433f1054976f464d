"""Basketball zone model.

Each half holds a basket 30px in from the baseline. The three-point line is
an arc of radius 120 centred 20px in front of the basket, joined to the
baseline by straight corner lines at y=80 and y=320. A team shoots at the
basket in the opponent's half.
"""

from __future__ import annotations

import math
from typing import List, Optional

from .geometry import FULL_COURT, Rect, opposite, team_side

COURT_LEFT = 20.0
COURT_RIGHT = 580.0
COURT_TOP = 20.0
COURT_BOTTOM = 380.0
MID_X = 300.0
MID_Y = 200.0
ARC_RADIUS = 120.0
ARC_CENTER_LEFT = 70.0
ARC_CENTER_RIGHT = 530.0
CORNER_TOP = 80.0
CORNER_BOTTOM = 320.0

ZONES = (
    "two_point_left",
    "two_point_right",
    "three_point_left",
    "three_point_right",
    "outside",
)

SHOT_ZONES = {
    "free_throw": "two_point",
    "two_points": "two_point",
    "three_points": "three_point",
}


def _inside_arc(cx: float, cy: float, side: str) -> bool:
    center = ARC_CENTER_LEFT if side == "left" else ARC_CENTER_RIGHT
    in_corner_band = cx <= center if side == "left" else cx >= center
    if in_corner_band:
        return CORNER_TOP <= cy <= CORNER_BOTTOM
    return math.hypot(cx - center, cy - MID_Y) <= ARC_RADIUS


def classify_zone(cx: float, cy: float) -> str:
    if not (COURT_LEFT <= cx <= COURT_RIGHT and COURT_TOP <= cy <= COURT_BOTTOM):
        return "outside"
    side = "left" if cx < MID_X else "right"
    if _inside_arc(cx, cy, side):
        return f"two_point_{side}"
    return f"three_point_{side}"


def is_zone_allowed(
    zone: str,
    team: str,
    action: str,
    point_type: str,
    sides_swapped: bool,
    serving_side: Optional[str] = None,
) -> bool:
    opp = opposite(team_side(team, sides_swapped))

    if action in SHOT_ZONES:
        return zone == f"{SHOT_ZONES[action]}_{opp}"
    if point_type == "scored":
        return zone in (f"two_point_{opp}", f"three_point_{opp}")
    return True


def zone_highlights(
    team: str,
    action: str,
    point_type: str,
    sides_swapped: bool,
    serving_side: Optional[str] = None,
) -> List[Rect]:
    opp = opposite(team_side(team, sides_swapped))

    if action in SHOT_ZONES or point_type == "scored":
        if opp == "right":
            return [Rect(MID_X, COURT_TOP, COURT_RIGHT - MID_X, COURT_BOTTOM - COURT_TOP)]
        return [Rect(COURT_LEFT, COURT_TOP, MID_X - COURT_LEFT, COURT_BOTTOM - COURT_TOP)]
    return [FULL_COURT]
