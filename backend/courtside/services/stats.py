from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from ..models import TEAMS, Player, Point, Score, SetData, other_team
from ..scoring import tally
from ..scoring.rules import SportRules


def points_for_set(
    completed_sets: Sequence[SetData],
    current_points: Sequence[Point],
    set_number: Optional[int] = None,
) -> List[Point]:
    """Return the points of one set, or of the whole match when ``set_number`` is ``None``.

    A set number past the completed sets selects the set in progress.
    """
    if set_number is None:
        pts: List[Point] = []
        for s in completed_sets:
            pts.extend(s.points)
        pts.extend(current_points)
        return pts
    for s in completed_sets:
        if s.number == set_number:
            return list(s.points)
    if set_number > len(completed_sets):
        return list(current_points)
    return []


def sets_score(completed_sets: Iterable[SetData]) -> Score:
    won = Counter(s.winner for s in completed_sets)
    return Score(blue=won["blue"], red=won["red"])


def compute_team_stats(points: Sequence[Point], weighted: bool = False) -> Dict[str, Dict]:
    """Break down what each team won, and how.

    A team's faults are the fault points credited to its opponent.
    """
    score = tally.compute_score(points, weighted=weighted)
    stats: Dict[str, Dict] = {}
    for team in TEAMS:
        opponent = other_team(team)
        scored = [p for p in points if p.team == team and p.type == "scored"]
        won_on_fault = [p for p in points if p.team == team and p.type == "fault"]
        committed = [p for p in points if p.team == opponent and p.type == "fault"]
        stats[team] = {
            "points": score.get(team),
            "scored": len(scored),
            "wonOnFaults": len(won_on_fault),
            "faultsCommitted": len(committed),
            "scoredByAction": dict(Counter(p.action for p in scored)),
            "faultsByAction": dict(Counter(p.action for p in committed)),
            "neutral": sum(1 for p in points if p.team == team and p.type == "neutral"),
        }
    return stats


def ghost_player(player_id: str) -> Player:
    """Stand-in for a player removed from the roster after being credited."""
    return Player(id=player_id, name="", number="?")


def compute_player_stats(
    points: Sequence[Point], players: Sequence[Player]
) -> List[Dict]:
    """Per-player totals for the roster team (blue).

    Players referenced by points but missing from the roster are reported as
    ghosts. Players with nothing recorded are left out; the rest are sorted
    by points won.
    """
    roster = {p.id: p for p in players}
    for point in points:
        if point.player_id and point.player_id not in roster:
            roster[point.player_id] = ghost_player(point.player_id)

    rows = []
    for player in roster.values():
        mine = [p for p in points if p.player_id == player.id]
        scored = [p for p in mine if p.team == "blue" and p.type == "scored"]
        fault_wins = [p for p in mine if p.team == "blue" and p.type == "fault"]
        faults = [p for p in mine if p.team == "red"]
        won = len(scored) + len(fault_wins)
        total = won + len(faults)
        if total == 0:
            continue
        rows.append(
            {
                "player": player,
                "ghost": player.id not in {p.id for p in players},
                "pointsWon": won,
                "scored": len(scored),
                "wonOnFaults": len(fault_wins),
                "faults": len(faults),
                "byAction": dict(Counter(p.action for p in scored)),
                "total": total,
                "efficiency": round(won / total * 100, 1),
            }
        )
    rows.sort(key=lambda r: r["pointsWon"], reverse=True)
    return rows


def spatial_points(points: Sequence[Point], rules: SportRules) -> List[Point]:
    """Points worth drawing on a court or heatmap."""
    return [p for p in points if rules.is_spatial(p)]


def match_stats(
    completed_sets: Sequence[SetData],
    current_points: Sequence[Point],
    players: Sequence[Player],
    rules: SportRules,
    set_number: Optional[int] = None,
) -> Dict:
    pts = points_for_set(completed_sets, current_points, set_number)
    return {
        "set": set_number,
        "setsScore": sets_score(completed_sets).as_dict(),
        "teams": compute_team_stats(pts, weighted=rules.weighted),
        "players": compute_player_stats(pts, players),
        "spatial": spatial_points(pts, rules),
    }
