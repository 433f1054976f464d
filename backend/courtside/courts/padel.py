"""Padel zone model.

Landscape court with the back glass on the left/right, side walls on the
top/bottom and the wire grille on the side walls next to the net. Service
boxes sit between the service lines and the net, split by the centre line.
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
COURT_TOP = 30.0
COURT_BOTTOM = 370.0
NET_X = 300.0
NET_HALF_WIDTH = 12.0
MID_Y = 200.0

SERVICE_LEFT = 165.0
SERVICE_RIGHT = 435.0

WALL_THICKNESS = 20.0
ENCLOSURE_LEFT = COURT_LEFT - WALL_THICKNESS
ENCLOSURE_RIGHT = COURT_RIGHT + WALL_THICKNESS
ENCLOSURE_TOP = COURT_TOP - WALL_THICKNESS
ENCLOSURE_BOTTOM = COURT_BOTTOM + WALL_THICKNESS

GRILLE_HALF_WIDTH = 80.0

ZONES = (
    "left_court",
    "right_court",
    "net",
    "service_box_left_top",
    "service_box_left_bottom",
    "service_box_right_top",
    "service_box_right_bottom",
    "back_glass_left",
    "back_glass_right",
    "side_wall_top",
    "side_wall_bottom",
    "grille",
    "outside",
)

SCORED_ACTIONS = action_keys("padel", "scored")
SIDE_WALLS = ("side_wall_top", "side_wall_bottom")


def classify_zone(cx: float, cy: float) -> str:
    in_enclosure = (
        ENCLOSURE_LEFT <= cx <= ENCLOSURE_RIGHT and ENCLOSURE_TOP <= cy <= ENCLOSURE_BOTTOM
    )
    if not in_enclosure:
        return "outside"

    in_court = COURT_LEFT <= cx <= COURT_RIGHT and COURT_TOP <= cy <= COURT_BOTTOM
    if in_court:
        if abs(cx - NET_X) < NET_HALF_WIDTH:
            return "net"
        if SERVICE_LEFT <= cx < NET_X:
            return "service_box_left_top" if cy < MID_Y else "service_box_left_bottom"
        if NET_X < cx <= SERVICE_RIGHT:
            return "service_box_right_top" if cy < MID_Y else "service_box_right_bottom"
        return "left_court" if cx < NET_X else "right_court"

    if (cy < COURT_TOP or cy > COURT_BOTTOM) and abs(cx - NET_X) < GRILLE_HALF_WIDTH:
        return "grille"
    if cx < COURT_LEFT and COURT_TOP <= cy <= COURT_BOTTOM:
        return "back_glass_left"
    if cx > COURT_RIGHT and COURT_TOP <= cy <= COURT_BOTTOM:
        return "back_glass_right"
    if cy < COURT_TOP:
        return "side_wall_top"
    return "side_wall_bottom"


def _court_zones(side: str) -> tuple:
    return (
        f"{side}_court",
        f"service_box_{side}_top",
        f"service_box_{side}_bottom",
    )


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
        glass = f"back_glass_{opp}"
        if action == "par_3":
            return zone in (glass, "grille") + SIDE_WALLS
        return zone in _court_zones(opp) + (glass, "grille")

    if action == "padel_double_fault":
        return zone in ("outside", "net") or (
            zone.startswith("service_box") and zone != target
        )
    if action == "padel_net_error":
        return zone == "net"
    if action == "padel_out":
        return zone == "outside" or zone in SIDE_WALLS
    if action == "grille_error":
        return zone == "grille"
    if action == "vitre_error":
        return zone in ("back_glass_left", "back_glass_right") + SIDE_WALLS
    return True


def _service_box(side: str, top: bool) -> Rect:
    x = SERVICE_LEFT if side == "left" else NET_X
    w = (NET_X - SERVICE_LEFT) if side == "left" else (SERVICE_RIGHT - NET_X)
    y = COURT_TOP if top else MID_Y
    h = (MID_Y - COURT_TOP) if top else (COURT_BOTTOM - MID_Y)
    return Rect(x, y, w, h)


def zone_highlights(
    team: str,
    action: str,
    point_type: str,
    sides_swapped: bool,
    serving_side: Optional[str] = None,
) -> List[Rect]:
    own = team_side(team, sides_swapped)
    opp = opposite(own)
    enclosure_h = ENCLOSURE_BOTTOM - ENCLOSURE_TOP
    enclosure_w = ENCLOSURE_RIGHT - ENCLOSURE_LEFT

    if action in ACE_ACTIONS:
        return [_service_box(opp, ace_lands_top(own, serving_side))]

    if action in SCORED_ACTIONS:
        if action == "par_3":
            glass_x = COURT_RIGHT if opp == "right" else ENCLOSURE_LEFT
            # the grille sits inside the side wall strips
            return [
                Rect(glass_x, COURT_TOP, WALL_THICKNESS, COURT_BOTTOM - COURT_TOP),
                Rect(ENCLOSURE_LEFT, ENCLOSURE_TOP, enclosure_w, WALL_THICKNESS),
                Rect(ENCLOSURE_LEFT, COURT_BOTTOM, enclosure_w, WALL_THICKNESS),
            ]
        if opp == "right":
            return [Rect(NET_X, ENCLOSURE_TOP, ENCLOSURE_RIGHT - NET_X, enclosure_h)]
        return [Rect(ENCLOSURE_LEFT, ENCLOSURE_TOP, NET_X - ENCLOSURE_LEFT, enclosure_h)]

    if action == "padel_net_error":
        return [
            Rect(NET_X - NET_HALF_WIDTH, COURT_TOP, NET_HALF_WIDTH * 2, COURT_BOTTOM - COURT_TOP)
        ]
    if action == "grille_error":
        return [
            Rect(NET_X - GRILLE_HALF_WIDTH, ENCLOSURE_TOP, GRILLE_HALF_WIDTH * 2, WALL_THICKNESS),
            Rect(NET_X - GRILLE_HALF_WIDTH, COURT_BOTTOM, GRILLE_HALF_WIDTH * 2, WALL_THICKNESS),
        ]
    if action == "vitre_error":
        return [
            Rect(ENCLOSURE_LEFT, COURT_TOP, WALL_THICKNESS, COURT_BOTTOM - COURT_TOP),
            Rect(COURT_RIGHT, COURT_TOP, WALL_THICKNESS, COURT_BOTTOM - COURT_TOP),
            Rect(COURT_LEFT, ENCLOSURE_TOP, COURT_RIGHT - COURT_LEFT, WALL_THICKNESS),
            Rect(COURT_LEFT, COURT_BOTTOM, COURT_RIGHT - COURT_LEFT, WALL_THICKNESS),
        ]
    if action == "padel_out":
        return [
            Rect(0.0, 0.0, COURT_WIDTH, ENCLOSURE_TOP),
            Rect(0.0, ENCLOSURE_BOTTOM, COURT_WIDTH, COURT_HEIGHT - ENCLOSURE_BOTTOM),
            Rect(0.0, 0.0, ENCLOSURE_LEFT, COURT_HEIGHT),
            Rect(ENCLOSURE_RIGHT, 0.0, COURT_WIDTH - ENCLOSURE_RIGHT, COURT_HEIGHT),
            Rect(COURT_LEFT, ENCLOSURE_TOP, COURT_RIGHT - COURT_LEFT, WALL_THICKNESS),
            Rect(COURT_LEFT, COURT_BOTTOM, COURT_RIGHT - COURT_LEFT, WALL_THICKNESS),
        ]
    return [FULL_COURT]
