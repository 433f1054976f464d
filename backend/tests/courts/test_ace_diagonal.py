import os, sys
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from courtside.courts import padel, tennis
from courtside.courts.geometry import ace_lands_top, ace_target_zone


@pytest.mark.parametrize(
    "server_side, serving_side, top",
    [
        ("left", "deuce", True),
        ("left", "ad", False),
        ("right", "deuce", False),
        ("right", "ad", True),
        ("left", None, True),
    ],
    ids=["left-deuce", "left-ad", "right-deuce", "right-ad", "default-deuce"],
)
def test_diagonal_rule(server_side, serving_side, top):
    assert ace_lands_top(server_side, serving_side) is top


def test_target_zone_is_on_receiver_side():
    assert ace_target_zone("left", "deuce") == "service_box_right_top"
    assert ace_target_zone("right", "deuce") == "service_box_left_bottom"


@pytest.mark.parametrize("court, action", [(tennis, "tennis_ace"), (padel, "padel_ace")])
def test_ace_accepts_only_the_diagonal_box(court, action):
    boxes = [
        "service_box_right_top",
        "service_box_right_bottom",
        "service_box_left_top",
        "service_box_left_bottom",
    ]
    allowed = [z for z in boxes if court.is_zone_allowed(z, "blue", action, "scored", False, "deuce")]
    assert allowed == ["service_box_right_top"]
    allowed = [z for z in boxes if court.is_zone_allowed(z, "blue", action, "scored", False, "ad")]
    assert allowed == ["service_box_right_bottom"]


@pytest.mark.parametrize("court, action", [(tennis, "tennis_ace"), (padel, "padel_ace")])
def test_ace_after_switching_sides(court, action):
    assert court.is_zone_allowed("service_box_left_bottom", "blue", action, "scored", True, "deuce")
    assert not court.is_zone_allowed("service_box_left_top", "blue", action, "scored", True, "deuce")


@pytest.mark.parametrize(
    "court, action", [(tennis, "double_fault"), (padel, "padel_double_fault")]
)
def test_double_fault_excludes_the_target_box(court, action):
    assert not court.is_zone_allowed("service_box_right_top", "blue", action, "fault", False, "deuce")
    assert court.is_zone_allowed("service_box_right_bottom", "blue", action, "fault", False, "deuce")
    assert court.is_zone_allowed("net", "blue", action, "fault", False, "deuce")


def test_ace_highlight_matches_target_box():
    (rect,) = tennis.zone_highlights("blue", "tennis_ace", "scored", False, "deuce")
    assert rect.x == tennis.NET_X
    assert rect.y == tennis.SINGLES_TOP
    (rect,) = padel.zone_highlights("blue", "padel_ace", "scored", False, "ad")
    assert rect.y == padel.MID_Y
