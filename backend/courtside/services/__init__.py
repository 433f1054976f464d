"""Match services: rally tracking, the live match coordinator and read-only projections."""

from .validation import ValidationError, validate_snapshot
from .rally import RallyAccumulator, TapOutcome
from .match_state import MatchState, TIE_WINNER
from .stats import (
    compute_player_stats,
    compute_team_stats,
    match_stats,
    sets_score,
    spatial_points,
)
from .replay import replay_view

__all__ = [
    "validate_snapshot",
    "ValidationError",
    "RallyAccumulator",
    "TapOutcome",
    "MatchState",
    "TIE_WINNER",
    "compute_player_stats",
    "compute_team_stats",
    "match_stats",
    "sets_score",
    "spatial_points",
    "replay_view",
]
