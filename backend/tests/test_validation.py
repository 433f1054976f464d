import copy

import pytest
from courtside.services.match_state import MatchState
from courtside.services.validation import ValidationError, validate_snapshot


def _point(pid, team="blue", ts=1, **extra):
    point = {"id": pid, "team": team, "type": "scored", "action": "attack", "x": 0.7, "y": 0.5, "timestamp": ts}
    point.update(extra)
    return point


def _snapshot():
    return {
        "sport": "volleyball",
        "completedSets": [
            {"id": "s1", "number": 1, "points": [_point("a")], "score": {"blue": 1, "red": 0}, "winner": "blue", "duration": 30}
        ],
        "currentSetNumber": 2,
        "points": [_point("b", ts=5), _point("c", team="red", ts=6, x=-1.0, y=-1.0)],
        "chronoSeconds": 12,
    }


def test_accepts_valid_snapshot() -> None:
    validate_snapshot(_snapshot())
    validate_snapshot({})


def test_accepts_engine_snapshot(make_match) -> None:
    match = make_match(has_court=False)
    match.select_action("blue", "scored", "attack")
    match.end_set()
    validate_snapshot(match.to_snapshot())
    assert isinstance(MatchState.from_snapshot(match.to_snapshot()), MatchState)


def _break(path, value):
    snap = _snapshot()
    target = snap
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    return snap


@pytest.mark.parametrize(
    "snapshot, msg",
    [
        (_break(("sport",), "curling"), "unknown sport"),
        (_break(("completedSets", 0, "number"), 2), "numbered 1..n"),
        (_break(("currentSetNumber",), 3), "currentsetnumber must be 2"),
        (_break(("points", 0, "x"), 1.5), "[0, 1]"),
        (_break(("points", 0, "team"), "green"), "unknown team"),
        (_break(("points", 1, "timestamp"), 2), "older than"),
        (_break(("points", 0, "rallyActions"), [_point("r", team="red")]), "rally must end"),
        (_break(("chronoSeconds",), -1), ">= 0"),
        (_break(("pendingPoint",), {"point": _point("p"), "index": 9}), "between 0 and 2"),
        ("not a dict", "must be an object"),
    ],
    ids=[
        "sport",
        "set-numbering",
        "current-set",
        "coordinates",
        "team",
        "timestamps",
        "rally-end",
        "chrono",
        "pending-index",
        "not-a-dict",
    ],
)
def test_rejects_invalid_snapshots(snapshot, msg) -> None:
    with pytest.raises(ValidationError) as exc:
        validate_snapshot(copy.deepcopy(snapshot))  # type: ignore[arg-type]
    assert msg.lower() in str(exc.value).lower()


def test_set_needs_a_winner() -> None:
    with pytest.raises(ValidationError):
        validate_snapshot(_break(("completedSets", 0, "winner"), None))
