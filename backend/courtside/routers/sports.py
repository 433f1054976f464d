from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ..actions import ActionsConfig, CustomAction
from ..exceptions import UnknownSport, http_problem
from ..models import POINT_TYPES
from ..schemas import (
    ActionOut,
    CustomActionCreate,
    CustomActionUpdate,
    SportActionsOut,
    SportOut,
)
from ..scoring import available_sports, get_rules
from ..scoring.rules import GameSetRules
from ..store import get_actions_config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sports", tags=["sports"])


SPORT_NAMES: dict[str, str] = {
    "volleyball": "Volleyball",
    "tennis": "Tennis",
    "padel": "Padel",
    "basketball": "Basketball",
}


def _sport_name(sport_id: str) -> str:
    name = SPORT_NAMES.get(sport_id)
    if name:
        return name
    return sport_id.replace("_", " ").replace("-", " ").strip().title() or sport_id


def _require_sport(sport: str) -> str:
    if sport not in available_sports():
        raise UnknownSport(sport)
    return sport


def _actions_out(config: ActionsConfig, sport: str) -> SportActionsOut:
    by_category = {
        category: [ActionOut.model_validate(a) for a in config.visible_actions(sport, category)]
        for category in POINT_TYPES
    }
    return SportActionsOut(sport=sport, **by_category)


def _custom_out(action: CustomAction) -> ActionOut:
    return ActionOut(
        key=action.key,
        label=action.label,
        points=action.points,
        custom_id=action.id,
        sigil=action.sigil,
        show_on_court=action.show_on_court,
        assign_to_player=action.assign_to_player,
    )


def _require_custom(config: ActionsConfig, sport: str, action_id: str) -> CustomAction:
    existing = config.get_custom_action(action_id)
    if existing is None or existing.sport != sport:
        raise http_problem(404, f"custom action '{action_id}' not found", "custom_action_not_found")
    return existing


# GET /api/v0/sports
@router.get("", response_model=list[SportOut])
async def list_sports() -> list[SportOut]:
    out = []
    for sport_id in available_sports():
        rules = get_rules(sport_id)
        out.append(
            SportOut(
                id=sport_id,
                name=_sport_name(sport_id),
                period_label=rules.period_label,
                weighted=rules.weighted,
                games=isinstance(rules, GameSetRules),
            )
        )
    # deterministic ordering for consumers
    return sorted(out, key=lambda s: (s.name.lower(), s.id))


# GET /api/v0/sports/{sport}/actions
@router.get("/{sport}/actions", response_model=SportActionsOut)
async def list_actions(
    sport: str, config: ActionsConfig = Depends(get_actions_config)
) -> SportActionsOut:
    return _actions_out(config, _require_sport(sport))


# POST /api/v0/sports/{sport}/custom-actions
@router.post("/{sport}/custom-actions", response_model=ActionOut, status_code=201)
async def create_custom_action(
    sport: str,
    body: CustomActionCreate,
    config: ActionsConfig = Depends(get_actions_config),
) -> ActionOut:
    _require_sport(sport)
    action = config.add_custom_action(
        body.label,
        sport,
        body.category,
        points=body.points,
        sigil=body.sigil,
        show_on_court=body.show_on_court,
        assign_to_player=body.assign_to_player,
    )
    logger.info("custom action %r added to %s/%s", action.label, sport, action.category)
    return _custom_out(action)


# DELETE /api/v0/sports/{sport}/custom-actions/{action_id}
@router.delete("/{sport}/custom-actions/{action_id}", status_code=204)
async def delete_custom_action(
    sport: str, action_id: str, config: ActionsConfig = Depends(get_actions_config)
) -> None:
    _require_custom(config, _require_sport(sport), action_id)
    config.delete_custom_action(action_id)


# PATCH /api/v0/sports/{sport}/custom-actions/{action_id}
@router.patch("/{sport}/custom-actions/{action_id}", response_model=ActionOut)
async def update_custom_action(
    sport: str,
    action_id: str,
    body: CustomActionUpdate,
    config: ActionsConfig = Depends(get_actions_config),
) -> ActionOut:
    _require_custom(config, _require_sport(sport), action_id)
    updated = config.update_custom_action(action_id, **body.model_dump(exclude_unset=True))
    return _custom_out(updated)


# POST /api/v0/sports/{sport}/actions/{key}/visibility
@router.post("/{sport}/actions/{key}/visibility", response_model=SportActionsOut)
async def toggle_action_visibility(
    sport: str, key: str, config: ActionsConfig = Depends(get_actions_config)
) -> SportActionsOut:
    _require_sport(sport)
    rules = get_rules(sport)
    if rules.category_of(key) is None and config.get_custom_action(key) is None:
        raise http_problem(404, f"action '{key}' not found for {sport}", "action_not_found")
    config.toggle_visibility(key)
    return _actions_out(config, sport)
