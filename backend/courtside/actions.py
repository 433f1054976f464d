"""Per-sport action vocabularies and the operator's custom action catalog."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Dict, List, NamedTuple, Optional

from .models import ActionMeta, POINT_TYPES

SPORTS = ("volleyball", "tennis", "padel", "basketball")


class ActionDef(NamedTuple):
    key: str
    label: str
    points: Optional[int] = None


SPORT_ACTIONS: Dict[str, Dict[str, List[ActionDef]]] = {
    "volleyball": {
        "scored": [
            ActionDef("attack", "Attack"),
            ActionDef("ace", "Ace"),
            ActionDef("block", "Block"),
            ActionDef("bidouille", "Tip"),
            ActionDef("seconde_main", "Setter dump"),
            ActionDef("other_offensive", "Other"),
        ],
        "fault": [
            ActionDef("out", "Out"),
            ActionDef("net_fault", "Net"),
            ActionDef("service_miss", "Missed serve"),
            ActionDef("block_out", "Block out"),
            ActionDef("other_volley_fault", "Other"),
        ],
        "neutral": [
            ActionDef("other_volley_neutral", "Other"),
        ],
    },
    "tennis": {
        "scored": [
            ActionDef("tennis_ace", "Ace"),
            ActionDef("winner_forehand", "Forehand winner"),
            ActionDef("winner_backhand", "Backhand winner"),
            ActionDef("volley_winner", "Volley winner"),
            ActionDef("smash", "Smash"),
            ActionDef("drop_shot_winner", "Drop shot"),
            ActionDef("other_tennis_winner", "Other"),
        ],
        "fault": [
            ActionDef("double_fault", "Double fault"),
            ActionDef("unforced_error_forehand", "Forehand error"),
            ActionDef("unforced_error_backhand", "Backhand error"),
            ActionDef("net_error", "Net"),
            ActionDef("out_long", "Long"),
            ActionDef("out_wide", "Wide"),
            ActionDef("other_tennis_fault", "Other"),
        ],
        "neutral": [
            ActionDef("other_tennis_neutral", "Other"),
        ],
    },
    "padel": {
        "scored": [
            ActionDef("padel_ace", "Ace"),
            ActionDef("vibora", "Vibora"),
            ActionDef("bandeja", "Bandeja"),
            ActionDef("smash_padel", "Smash"),
            ActionDef("volee", "Volley"),
            ActionDef("bajada", "Bajada"),
            ActionDef("chiquita_winner", "Chiquita"),
            ActionDef("par_3", "Por 3"),
            ActionDef("other_padel_winner", "Other"),
        ],
        "fault": [
            ActionDef("padel_double_fault", "Double fault"),
            ActionDef("padel_unforced_error", "Unforced error"),
            ActionDef("padel_net_error", "Net"),
            ActionDef("padel_out", "Out"),
            ActionDef("grille_error", "Grille"),
            ActionDef("vitre_error", "Glass"),
            ActionDef("other_padel_fault", "Other"),
        ],
        "neutral": [
            ActionDef("other_padel_neutral", "Other"),
        ],
    },
    "basketball": {
        "scored": [
            ActionDef("free_throw", "Free throw", 1),
            ActionDef("two_points", "2 points", 2),
            ActionDef("three_points", "3 points", 3),
            ActionDef("other_basket_scored", "Other", 1),
        ],
        "fault": [
            ActionDef("turnover", "Turnover"),
            ActionDef("foul_committed", "Foul"),
            ActionDef("other_basket_fault", "Other"),
        ],
        "neutral": [
            ActionDef("missed_shot", "Missed shot"),
            ActionDef("other_basket_neutral", "Other"),
        ],
    },
}

OTHER_ACTION_KEYS: Dict[str, Dict[str, str]] = {
    "volleyball": {
        "scored": "other_offensive",
        "fault": "other_volley_fault",
        "neutral": "other_volley_neutral",
    },
    "tennis": {
        "scored": "other_tennis_winner",
        "fault": "other_tennis_fault",
        "neutral": "other_tennis_neutral",
    },
    "padel": {
        "scored": "other_padel_winner",
        "fault": "other_padel_fault",
        "neutral": "other_padel_neutral",
    },
    "basketball": {
        "scored": "other_basket_scored",
        "fault": "other_basket_fault",
        "neutral": "other_basket_neutral",
    },
}

ACE_ACTIONS = frozenset({"ace", "tennis_ace", "padel_ace"})

# Serve errors: recorded without a court tap and never shown spatially.
SERVICE_FAULT_ACTIONS = frozenset({"service_miss", "double_fault", "padel_double_fault"})

DEFAULT_HIDDEN_ACTIONS = ("other_offensive", "other_volley_fault")


def actions_for(sport: str, category: str) -> List[ActionDef]:
    if sport not in SPORT_ACTIONS:
        raise ValueError(f"unknown sport {sport!r}")
    if category not in POINT_TYPES:
        raise ValueError(f"unknown point type {category!r}")
    return list(SPORT_ACTIONS[sport][category])


def action_keys(sport: str, category: str) -> frozenset:
    return frozenset(a.key for a in actions_for(sport, category))


def action_points(sport: str, action: str) -> Optional[int]:
    for defs in SPORT_ACTIONS.get(sport, {}).values():
        for a in defs:
            if a.key == action:
                return a.points
    return None


@dataclass
class CustomAction:
    id: str
    label: str
    sport: str
    category: str
    points: Optional[int] = None
    sigil: Optional[str] = None
    show_on_court: bool = True
    assign_to_player: bool = True

    @property
    def key(self) -> str:
        """The built-in "other" action this custom action is recorded as."""
        return OTHER_ACTION_KEYS[self.sport][self.category]

    def meta(self) -> ActionMeta:
        return ActionMeta(
            label=self.label,
            sigil=self.sigil,
            points=self.points,
            show_on_court=self.show_on_court,
            assign_to_player=self.assign_to_player,
        )


def _normalize_sigil(sigil: Optional[str]) -> Optional[str]:
    if not sigil:
        return None
    return sigil.strip()[:2].upper() or None


@dataclass
class ActionsConfig:
    """Hidden built-in actions plus operator-defined custom actions."""

    hidden_actions: List[str] = field(default_factory=lambda: list(DEFAULT_HIDDEN_ACTIONS))
    custom_actions: List[CustomAction] = field(default_factory=list)

    def toggle_visibility(self, key: str) -> bool:
        """Hide or unhide ``key``; returns ``True`` when it is now hidden."""
        if key in self.hidden_actions:
            self.hidden_actions.remove(key)
            return False
        self.hidden_actions.append(key)
        return True

    def add_custom_action(
        self,
        label: str,
        sport: str,
        category: str,
        *,
        points: Optional[int] = None,
        sigil: Optional[str] = None,
        show_on_court: Optional[bool] = None,
        assign_to_player: Optional[bool] = None,
    ) -> CustomAction:
        if sport not in SPORT_ACTIONS:
            raise ValueError(f"unknown sport {sport!r}")
        if category not in POINT_TYPES:
            raise ValueError(f"unknown point type {category!r}")
        label = label.strip()
        if not label:
            raise ValueError("label must not be empty")
        action = CustomAction(
            id=uuid.uuid4().hex,
            label=label,
            sport=sport,
            category=category,
            points=points,
            sigil=_normalize_sigil(sigil),
            # Neutral custom actions stay off the court unless asked for.
            show_on_court=show_on_court if show_on_court is not None else category != "neutral",
            assign_to_player=True if assign_to_player is None else assign_to_player,
        )
        self.custom_actions.append(action)
        return action

    def update_custom_action(self, action_id: str, **changes) -> Optional[CustomAction]:
        for idx, action in enumerate(self.custom_actions):
            if action.id != action_id:
                continue
            if "label" in changes and changes["label"] is not None:
                changes["label"] = changes["label"].strip()
            if "sigil" in changes:
                changes["sigil"] = _normalize_sigil(changes["sigil"])
            updated = replace(
                action, **{k: v for k, v in changes.items() if v is not None}
            )
            self.custom_actions[idx] = updated
            return updated
        return None

    def delete_custom_action(self, action_id: str) -> bool:
        before = len(self.custom_actions)
        self.custom_actions = [a for a in self.custom_actions if a.id != action_id]
        return len(self.custom_actions) != before

    def get_custom_action(self, action_id: str) -> Optional[CustomAction]:
        return next((a for a in self.custom_actions if a.id == action_id), None)

    def visible_actions(self, sport: str, category: str) -> List[dict]:
        visible = [
            {"key": a.key, "label": a.label, "points": a.points}
            for a in actions_for(sport, category)
            if a.key not in self.hidden_actions
        ]
        for c in self.custom_actions:
            if c.sport != sport or c.category != category or c.id in self.hidden_actions:
                continue
            visible.append(
                {
                    "key": c.key,
                    "label": c.label,
                    "points": c.points,
                    "customId": c.id,
                    "sigil": c.sigil,
                    "showOnCourt": c.show_on_court,
                    "assignToPlayer": c.assign_to_player,
                }
            )
        return visible
