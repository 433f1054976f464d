"""Shared court-space geometry.

Taps arrive as normalized ``(x, y)`` in ``[0, 1]``; every zone model works in
a 600x400 court space obtained by scaling them. Teams are mapped to a
physical side before any zone rule is applied, so the rules never mention a
team colour.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

COURT_WIDTH = 600.0
COURT_HEIGHT = 400.0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.w and self.y <= py <= self.y + self.h

    def as_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


FULL_COURT = Rect(0.0, 0.0, COURT_WIDTH, COURT_HEIGHT)


def to_court_space(x: float, y: float) -> Tuple[float, float]:
    return x * COURT_WIDTH, y * COURT_HEIGHT


def team_side(team: str, sides_swapped: bool) -> str:
    """Physical side occupied by ``team``; blue starts on the left."""

    if team not in ("blue", "red"):
        raise ValueError(f"unknown team {team!r}")
    if sides_swapped:
        return "right" if team == "blue" else "left"
    return "left" if team == "blue" else "right"


def opposite(side: str) -> str:
    return "right" if side == "left" else "left"


def ace_lands_top(server_side: str, serving_side: Optional[str]) -> bool:
    """Diagonal rule: which half of the receiver's service area an ace hits.

    A deuce-court serve from the left crosses to the top box, an ad-court
    serve to the bottom box; serving from the right mirrors it.
    """

    side = serving_side or "deuce"
    if server_side == "left":
        return side == "deuce"
    return side == "ad"


def ace_target_zone(server_side: str, serving_side: Optional[str]) -> str:
    receiver = opposite(server_side)
    suffix = "top" if ace_lands_top(server_side, serving_side) else "bottom"
    return f"service_box_{receiver}_{suffix}"
