import itertools
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from courtside.models import NO_POSITION, ActionMeta
from courtside.services import rally
from courtside.services.rally import RallyAccumulator


def _acc(**kwargs):
    counter = itertools.count(1)
    return RallyAccumulator(id_factory=lambda: f"r{next(counter)}", **kwargs)


def test_select_rejects_unknown_team_and_type():
    acc = _acc()
    with pytest.raises(ValueError):
        acc.select("green", "scored", "attack")
    with pytest.raises(ValueError):
        acc.select("blue", "bonus", "attack")


def test_tap_without_selection_is_ignored():
    acc = _acc()
    assert acc.record(0.5, 0.5, 1).status == rally.IGNORED
    assert acc.state == rally.IDLE


def test_simple_mode_concludes_every_tap():
    acc = _acc()
    acc.select("blue", "scored", "attack")
    assert acc.state == rally.ACTION_SELECTED
    outcome = acc.record(0.7, 0.4, 100)
    assert outcome.status == rally.CONCLUDED
    point = outcome.point
    assert (point.team, point.type, point.action, point.x, point.y) == ("blue", "scored", "attack", 0.7, 0.4)
    assert point.rally_actions is None
    assert acc.selection is None
    assert acc.state == rally.IDLE


def test_neutral_without_performance_mode_concludes():
    acc = _acc()
    acc.select("red", "neutral", "other_volley_neutral")
    outcome = acc.record(0.2, 0.2, 1)
    assert outcome.status == rally.CONCLUDED
    assert outcome.point.type == "neutral"


def test_performance_mode_accumulates_neutrals():
    acc = _acc(performance_mode=True)
    acc.select("blue", "neutral", "other_volley_neutral")
    first = acc.record(0.2, 0.5, 1)
    second = acc.record(0.3, 0.5, 2)
    assert first.status == second.status == rally.ACCUMULATED
    assert acc.state == rally.RALLY_BUILDING
    # ready for the next sub-action
    assert acc.selection is not None

    acc.select("blue", "scored", "attack")
    outcome = acc.record(0.8, 0.5, 3)
    point = outcome.point
    assert [a.id for a in point.rally_actions] == ["r1", "r2", "r3"]
    last = point.rally_actions[-1]
    assert (last.team, last.type, last.action) == (point.team, point.type, point.action)
    assert acc.rally == []
    assert acc.state == rally.IDLE


def test_custom_action_meta_travels_with_point():
    acc = _acc()
    meta = ActionMeta(label="Pipe", sigil="PI", show_on_court=False)
    acc.select("blue", "scored", "other_offensive", meta)
    point = acc.record(0.8, 0.5, 1).point
    assert point.custom_action_label == "Pipe"
    assert point.sigil == "PI"
    assert point.show_on_court is False


def test_direction_mode_takes_origin_then_landing():
    acc = _acc(performance_mode=True, direction_mode=True)
    acc.select("blue", "neutral", "other_volley_neutral")
    assert acc.needs_direction_origin()
    assert acc.arm_direction(0.1, 0.1).status == rally.DIRECTION_ARMED
    assert acc.state == rally.AWAITING_DIRECTION

    outcome = acc.record(0.4, 0.6, 5)
    action = outcome.rally_action
    assert action.has_direction
    assert (action.start_x, action.start_y, action.end_x, action.end_y) == (0.1, 0.1, 0.4, 0.6)
    assert (action.x, action.y) == (0.4, 0.6)
    assert acc.needs_direction_origin()


def test_direction_mode_requires_performance_mode():
    acc = _acc(direction_mode=True)
    assert acc.direction_mode is False
    acc.select("blue", "scored", "attack")
    assert not acc.needs_direction_origin()


def test_record_without_court_uses_sentinel():
    acc = _acc()
    acc.select("red", "fault", "service_miss")
    point = acc.record_without_court(7).point
    assert (point.x, point.y) == NO_POSITION
    assert not point.has_position


def test_pop_last_and_reopen():
    acc = _acc(performance_mode=True)
    acc.select("blue", "neutral", "other_volley_neutral")
    acc.record(0.2, 0.5, 1)
    acc.record(0.3, 0.5, 2)
    assert acc.pop_last().id == "r2"
    assert [a.id for a in acc.rally] == ["r1"]

    acc.select("red", "scored", "attack")
    point = acc.record(0.2, 0.5, 3).point
    acc.reopen(point)
    assert [a.id for a in acc.rally] == ["r1"]
    assert acc.selection is None
    assert acc.pop_last().id == "r1"
    assert acc.pop_last() is None
