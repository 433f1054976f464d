from typing import Any, Dict, List, Optional

from ..models import NO_POSITION, POINT_TYPES, TEAMS
from ..scoring.rules import available_sports


class ValidationError(Exception):
    """Raised when a match snapshot breaks the match invariants."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def _check_coordinate(label: str, x: Any, y: Any) -> None:
    if isinstance(x, bool) or isinstance(y, bool):
        raise ValidationError(f"{label} coordinates must be numbers (not booleans).")
    try:
        fx, fy = float(x), float(y)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} coordinates must be numbers.")
    if (fx, fy) == NO_POSITION:
        return
    if not (0.0 <= fx <= 1.0 and 0.0 <= fy <= 1.0):
        raise ValidationError(
            f"{label} coordinates must lie in [0, 1] or be the ({NO_POSITION[0]:g}, "
            f"{NO_POSITION[1]:g}) sentinel."
        )


def _check_event(label: str, event: Any) -> None:
    if not isinstance(event, dict):
        raise ValidationError(f"{label} must be an object.")
    for key in ("id", "team", "type", "action", "x", "y", "timestamp"):
        if key not in event:
            raise ValidationError(f"{label} must include {key}.")
    if event["team"] not in TEAMS:
        raise ValidationError(f"{label} has an unknown team {event['team']!r}.")
    if event["type"] not in POINT_TYPES:
        raise ValidationError(f"{label} has an unknown type {event['type']!r}.")
    _check_coordinate(label, event["x"], event["y"])


def validate_point(label: str, point: Any) -> None:
    """Check one point, including its rally if it carries one.

    The rally's last action must be the point's own concluding action.
    """
    _check_event(label, point)
    rally = point.get("rallyActions")
    if rally is None:
        return
    if not isinstance(rally, list) or len(rally) == 0:
        raise ValidationError(f"{label} rallyActions must be a non-empty list.")
    for j, action in enumerate(rally, start=1):
        _check_event(f"{label} rally action #{j}", action)
    last = rally[-1]
    if (last["team"], last["type"], last["action"]) != (
        point["team"],
        point["type"],
        point["action"],
    ):
        raise ValidationError(f"{label} rally must end with the point's own action.")


def _check_timestamps(label: str, points: List[Dict[str, Any]]) -> None:
    previous: Optional[int] = None
    for i, point in enumerate(points, start=1):
        ts = point["timestamp"]
        if previous is not None and ts < previous:
            raise ValidationError(f"{label} point #{i} is older than the point before it.")
        previous = ts


def validate_snapshot(snapshot: Dict[str, Any]) -> None:
    """Validate a persistence snapshot before it is reloaded.

    Rules:
    - ``sport`` must be a known sport
    - completed sets are numbered 1..n and ``currentSetNumber`` is n + 1
    - every point has a known team/type and coordinates in [0, 1] or the sentinel
    - point timestamps never go backwards within a set
    - a point's rally ends with that point's own action
    """

    if not isinstance(snapshot, dict):
        raise ValidationError("Snapshot must be an object.")

    sport = snapshot.get("sport", "volleyball")
    if sport not in available_sports():
        raise ValidationError(f"Unknown sport {sport!r}.")

    sets = snapshot.get("completedSets") or []
    if not isinstance(sets, list):
        raise ValidationError("completedSets must be a list.")
    for i, s in enumerate(sets, start=1):
        if not isinstance(s, dict):
            raise ValidationError(f"Set #{i} must be an object.")
        if s.get("number") != i:
            raise ValidationError(f"Set #{i} is numbered {s.get('number')!r}; sets must be numbered 1..n.")
        if s.get("winner") not in TEAMS:
            raise ValidationError(f"Set #{i} must have a winner.")
        points = s.get("points") or []
        for j, point in enumerate(points, start=1):
            validate_point(f"Set #{i} point #{j}", point)
        _check_timestamps(f"Set #{i}", points)

    current = snapshot.get("currentSetNumber", len(sets) + 1)
    if isinstance(current, bool) or current != len(sets) + 1:
        raise ValidationError(
            f"currentSetNumber must be {len(sets) + 1} after {len(sets)} completed set(s)."
        )

    points = snapshot.get("points") or []
    if not isinstance(points, list):
        raise ValidationError("points must be a list.")
    for j, point in enumerate(points, start=1):
        validate_point(f"Point #{j}", point)
    _check_timestamps("Current set", points)

    for j, action in enumerate(snapshot.get("pendingRally") or [], start=1):
        _check_event(f"Pending rally action #{j}", action)

    pending = snapshot.get("pendingPoint")
    if pending:
        if not isinstance(pending, dict) or "point" not in pending:
            raise ValidationError("pendingPoint must include the parked point.")
        validate_point("Pending point", pending["point"])
        index = pending.get("index")
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= len(points):
            raise ValidationError(f"pendingPoint index must be between 0 and {len(points)}.")

    chrono = snapshot.get("chronoSeconds", 0)
    if isinstance(chrono, bool) or not isinstance(chrono, int) or chrono < 0:
        raise ValidationError("chronoSeconds must be an integer >= 0.")

    return None
