"""Per-sport rule bundles.

A match picks its :class:`SportRules` once, through :func:`get_rules`, and
then asks it for zone decisions and score folds; nothing downstream branches
on the sport name.
"""

from __future__ import annotations

from types import ModuleType
from typing import Dict, Iterable, List, Optional, Sequence

from .. import actions as catalog
from ..courts import basketball as basketball_court
from ..courts import padel as padel_court
from ..courts import tennis as tennis_court
from ..courts import volleyball as volleyball_court
from ..courts.geometry import Rect, to_court_space
from ..models import ActionMeta, MatchMetadata, Point, Score
from . import padel as padel_engine
from . import tally
from . import tennis as tennis_engine


class SportRules:
    sport: str = ""
    court: ModuleType = volleyball_court
    weighted: bool = False
    period_label: str = "Set"

    # -- vocabulary -----------------------------------------------------

    def actions(self, category: str) -> List[catalog.ActionDef]:
        return catalog.actions_for(self.sport, category)

    def category_of(self, action: str) -> Optional[str]:
        for category in ("scored", "fault", "neutral"):
            if action in catalog.action_keys(self.sport, category):
                return category
        return None

    def auto_resolves(self, action: str, has_court: bool = True) -> bool:
        """Actions recorded without waiting for a court tap."""
        return not has_court or action in catalog.SERVICE_FAULT_ACTIONS

    def point_value(self, action: str, meta: Optional[ActionMeta] = None) -> Optional[int]:
        if not self.weighted:
            return None
        if meta is not None and meta.points is not None:
            return meta.points
        return catalog.action_points(self.sport, action)

    # -- zones ----------------------------------------------------------

    def classify_zone(self, x: float, y: float) -> str:
        cx, cy = to_court_space(x, y)
        return self.court.classify_zone(cx, cy)

    def is_zone_allowed(
        self,
        zone: str,
        team: str,
        action: str,
        point_type: str,
        sides_swapped: bool,
        serving_side: Optional[str] = None,
    ) -> bool:
        return self.court.is_zone_allowed(
            zone, team, action, point_type, sides_swapped, serving_side
        )

    def zone_highlights(
        self,
        team: str,
        action: str,
        point_type: str,
        sides_swapped: bool,
        serving_side: Optional[str] = None,
    ) -> List[Rect]:
        return self.court.zone_highlights(
            team, action, point_type, sides_swapped, serving_side
        )

    def is_spatial(self, point: Point) -> bool:
        """Whether ``point`` has a real court position worth drawing."""
        if not point.has_position or point.action in catalog.SERVICE_FAULT_ACTIONS:
            return False
        return point.show_on_court is not False

    # -- scoring --------------------------------------------------------

    def score(self, points: Sequence[Point], metadata: MatchMetadata) -> Score:
        return tally.compute_score(points, weighted=self.weighted)

    def set_score(self, points: Sequence[Point], metadata: MatchMetadata) -> Score:
        """The score frozen into a finished set."""
        return self.score(points, metadata)

    def game_state(
        self, points: Sequence[Point], metadata: MatchMetadata
    ) -> Optional[tennis_engine.TennisGameState]:
        return None

    def serving_team(self, points: Sequence[Point], metadata: MatchMetadata) -> str:
        return tally.serving_team(points, metadata.initial_server)

    def serving_side(self, points: Sequence[Point], metadata: MatchMetadata) -> str:
        return "deuce"


class VolleyballRules(SportRules):
    sport = "volleyball"
    court = volleyball_court


class BasketballRules(SportRules):
    sport = "basketball"
    court = basketball_court
    weighted = True
    period_label = "Quarter"

    def auto_resolves(self, action: str, has_court: bool = True) -> bool:
        return not has_court


class GameSetRules(SportRules):
    """Tennis-style point → game → set scoring."""

    engine: ModuleType = tennis_engine
    period_label = "Set"

    def _config(self, metadata: MatchMetadata) -> Dict:
        return {
            "advantageRule": metadata.advantage_rule,
            "tiebreakEnabled": metadata.tiebreak_enabled,
        }

    def game_state(
        self, points: Sequence[Point], metadata: MatchMetadata
    ) -> tennis_engine.TennisGameState:
        return self.engine.compute_game_state(
            points, self._config(metadata), metadata.initial_server
        )

    def set_score(self, points: Sequence[Point], metadata: MatchMetadata) -> Score:
        return self.game_state(points, metadata).games

    def serving_team(self, points: Sequence[Point], metadata: MatchMetadata) -> str:
        return self.game_state(points, metadata).serving_team

    def serving_side(self, points: Sequence[Point], metadata: MatchMetadata) -> str:
        return self.game_state(points, metadata).serving_side

    def is_spatial(self, point: Point) -> bool:
        # an opponent's fault has no court position in racket sports
        return point.type != "fault" and super().is_spatial(point)


class TennisRules(GameSetRules):
    sport = "tennis"
    court = tennis_court


class PadelRules(GameSetRules):
    sport = "padel"
    court = padel_court
    engine = padel_engine


RULES: Dict[str, SportRules] = {
    rules.sport: rules
    for rules in (VolleyballRules(), TennisRules(), PadelRules(), BasketballRules())
}


def get_rules(sport: str) -> SportRules:
    try:
        return RULES[sport]
    except KeyError:
        raise ValueError(f"unknown sport {sport!r}") from None


def available_sports() -> Iterable[str]:
    return tuple(RULES)
