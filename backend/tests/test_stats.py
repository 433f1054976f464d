import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from courtside.models import Player, Point, Score, SetData
from courtside.scoring import get_rules
from courtside.services.stats import (
    compute_player_stats,
    compute_team_stats,
    match_stats,
    points_for_set,
    sets_score,
    spatial_points,
)


def _pt(team, type_, action, player=None, x=0.5, y=0.5):
    return Point(
        id=f"{team}-{action}-{player}",
        team=team,
        type=type_,
        action=action,
        x=x,
        y=y,
        timestamp=0,
        player_id=player,
    )


def _set(number, winner, points=()):
    return SetData(id=f"s{number}", number=number, points=tuple(points), score=Score(), winner=winner, duration=0)


def test_team_stats_split_scored_and_faults():
    points = [
        _pt("blue", "scored", "attack"),
        _pt("blue", "scored", "attack"),
        _pt("blue", "fault", "out"),
        _pt("red", "fault", "net_fault"),
        _pt("red", "neutral", "other_volley_neutral"),
    ]
    stats = compute_team_stats(points)
    assert stats["blue"]["points"] == 3
    assert stats["blue"]["scored"] == 2
    assert stats["blue"]["scoredByAction"] == {"attack": 2}
    # red's fault point means blue erred
    assert stats["blue"]["faultsCommitted"] == 1
    assert stats["blue"]["faultsByAction"] == {"net_fault": 1}
    assert stats["red"]["faultsCommitted"] == 1
    assert stats["red"]["neutral"] == 1


def test_player_stats_efficiency_and_ordering():
    players = [Player("p1", "Ana", "7"), Player("p2", "Bo", "9")]
    points = [
        _pt("blue", "scored", "attack", "p1"),
        _pt("blue", "fault", "out", "p1"),
        _pt("red", "fault", "net_fault", "p1"),
        _pt("blue", "scored", "block", "p2"),
        _pt("blue", "scored", "ace", "p2"),
        _pt("blue", "scored", "attack", "p2"),
    ]
    rows = compute_player_stats(points, players)
    assert [r["player"].id for r in rows] == ["p2", "p1"]
    p1 = rows[1]
    assert (p1["pointsWon"], p1["faults"], p1["total"]) == (2, 1, 3)
    assert p1["efficiency"] == 66.7
    assert rows[0]["byAction"] == {"block": 1, "ace": 1, "attack": 1}


def test_players_without_points_are_left_out():
    rows = compute_player_stats([], [Player("p1")])
    assert rows == []


def test_unknown_player_shows_as_ghost():
    rows = compute_player_stats([_pt("blue", "scored", "attack", "gone")], [Player("p1")])
    assert len(rows) == 1
    assert rows[0]["ghost"] is True
    assert rows[0]["player"].number == "?"


def test_spatial_filter_drops_unpositioned_and_serve_errors():
    rules = get_rules("volleyball")
    points = [
        _pt("blue", "scored", "attack"),
        _pt("red", "fault", "service_miss"),
        _pt("blue", "scored", "block", x=-1.0, y=-1.0),
    ]
    assert [p.action for p in spatial_points(points, rules)] == ["attack"]


def test_spatial_filter_skips_racket_sport_faults():
    points = [_pt("blue", "fault", "out_long"), _pt("blue", "scored", "smash")]
    assert [p.action for p in spatial_points(points, get_rules("tennis"))] == ["smash"]
    assert len(spatial_points(points, get_rules("volleyball"))) == 2


def test_hidden_custom_action_points_are_not_spatial():
    point = Point(id="c", team="blue", type="scored", action="other_offensive", x=0.6, y=0.5, timestamp=0, show_on_court=False)
    assert spatial_points([point], get_rules("volleyball")) == []


def test_sets_score_and_set_filter():
    s1 = _set(1, "blue", [_pt("blue", "scored", "attack")])
    s2 = _set(2, "red", [_pt("red", "scored", "attack")])
    current = [_pt("blue", "scored", "block")]
    assert sets_score([s1, s2]) == Score(blue=1, red=1)
    assert [p.action for p in points_for_set([s1, s2], current)] == ["attack", "attack", "block"]
    assert points_for_set([s1, s2], current, 2)[0].team == "red"
    assert points_for_set([s1, s2], current, 3) == current


def test_match_stats_bundle():
    s1 = _set(1, "blue", [_pt("blue", "scored", "attack", "p1")])
    stats = match_stats([s1], [], [Player("p1")], get_rules("volleyball"), set_number=1)
    assert stats["setsScore"] == {"blue": 1, "red": 0}
    assert stats["teams"]["blue"]["points"] == 1
    assert stats["players"][0]["pointsWon"] == 1
    assert len(stats["spatial"]) == 1
