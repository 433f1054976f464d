import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..actions import ActionsConfig
from ..config import DEFAULT_SPORT
from ..exceptions import InvalidSnapshot, MatchNotFound, UnknownSport, http_problem
from ..models import Player, TeamNames
from ..schemas import (
    AssignIn,
    GameStateOut,
    MatchCreate,
    MatchSnapshot,
    MatchStateOut,
    PlayerModel,
    PointModel,
    RallyActionModel,
    ReplayOut,
    SelectionIn,
    SelectionOut,
    StatsOut,
    TapIn,
    TapOut,
)
from ..scoring import available_sports
from ..scoring.tennis import TennisGameState
from ..services.match_state import (
    MatchState,
    metadata_from_dict,
    point_to_dict,
    rally_action_to_dict,
)
from ..services.rally import TapOutcome
from ..services.replay import replay_view
from ..services.stats import match_stats, points_for_set
from ..services.validation import ValidationError, validate_snapshot
from ..store import MatchStore, get_actions_config, get_store

logger = logging.getLogger(__name__)

# Resource-only prefix; versioning is added in main.py
router = APIRouter(prefix="/matches", tags=["matches"])


def _point_out(point) -> PointModel:
    return PointModel.model_validate(point_to_dict(point))


def _outcome_out(outcome: Optional[TapOutcome]) -> Optional[TapOut]:
    if outcome is None:
        return None
    return TapOut(
        status=outcome.status,
        zone=outcome.zone,
        point_id=outcome.point.id if outcome.point is not None else None,
    )


def _game_out(game: Optional[TennisGameState]) -> Optional[GameStateOut]:
    if game is None:
        return None
    return GameStateOut(
        games=game.games.as_dict(),
        game_score=game.game_score,
        tiebreak=game.tiebreak,
        set_just_won=game.set_just_won,
        serving_team=game.serving_team,
        serving_side=game.serving_side,
        total_games_in_set=game.total_games_in_set,
        points_in_game=game.points_in_game.as_dict(),
    )


def _state_out(
    match: MatchState, *, applied: bool = True, outcome: Optional[TapOutcome] = None
) -> MatchStateOut:
    sel = match.selection
    snapshot = match.to_snapshot()
    return MatchStateOut(
        id=match.id,
        sport=match.sport,
        period_label=match.rules.period_label,
        team_names=snapshot["teamNames"],
        score=match.score.as_dict(),
        sets_score=match.sets_score.as_dict(),
        game_state=_game_out(match.game_state),
        serving_team=match.serving_team,
        serving_side=match.serving_side,
        current_set_number=match.current_set_number,
        chrono_seconds=match.chrono_seconds,
        sides_swapped=match.sides_swapped,
        finished=match.finished,
        awaiting_new_set=match.awaiting_new_set,
        rally_state=match.accumulator.state,
        selection=(
            SelectionOut(team=sel.team, type=sel.type, action=sel.action, label=sel.meta.label)
            if sel is not None
            else None
        ),
        highlights=[r.as_dict() for r in match.zone_highlights()],
        pending_rally=snapshot["pendingRally"],
        pending_player_assignment=match.pending_player_assignment,
        pending_point=(
            _point_out(match.pending.point) if match.pending is not None else None
        ),
        points=snapshot["points"],
        completed_sets=snapshot["completedSets"],
        players=snapshot["players"],
        applied=applied,
        outcome=_outcome_out(outcome),
    )


async def _get_match(mid: str, store: MatchStore) -> MatchState:
    match = await store.get(mid)
    if match is None:
        raise MatchNotFound(mid)
    return match


# POST /api/v0/matches
@router.post("", response_model=MatchStateOut, status_code=201)
async def create_match(
    body: MatchCreate, store: MatchStore = Depends(get_store)
) -> MatchStateOut:
    sport = (body.sport or DEFAULT_SPORT).strip().lower()
    if sport not in available_sports():
        raise UnknownSport(sport)
    match = MatchState(
        sport,
        team_names=TeamNames(**body.team_names.model_dump()),
        players=[Player(**p.model_dump()) for p in body.players],
        metadata=metadata_from_dict(body.metadata.model_dump(by_alias=True)),
    )
    await store.put(match)
    logger.info("match %s created (%s)", match.id, sport)
    return _state_out(match)


# GET /api/v0/matches/{mid}
@router.get("/{mid}", response_model=MatchStateOut)
async def get_match(mid: str, store: MatchStore = Depends(get_store)) -> MatchStateOut:
    return _state_out(await _get_match(mid, store))


# DELETE /api/v0/matches/{mid}
@router.delete("/{mid}", status_code=204)
async def delete_match(mid: str, store: MatchStore = Depends(get_store)) -> None:
    if not await store.delete(mid):
        raise MatchNotFound(mid)


# PUT /api/v0/matches/{mid}/selection
@router.put("/{mid}/selection", response_model=MatchStateOut)
async def select_action(
    mid: str,
    body: SelectionIn,
    store: MatchStore = Depends(get_store),
    config: ActionsConfig = Depends(get_actions_config),
) -> MatchStateOut:
    match = await _get_match(mid, store)
    action, meta = body.action, None
    if body.custom_action_id:
        custom = config.get_custom_action(body.custom_action_id)
        if custom is None or custom.sport != match.sport:
            raise http_problem(
                404,
                f"custom action '{body.custom_action_id}' not found",
                "custom_action_not_found",
            )
        action, meta = custom.key, custom.meta()
    try:
        outcome = match.select_action(
            body.team, body.type, action, meta, player_id=body.player_id
        )
    except ValueError as exc:
        raise http_problem(422, str(exc), "invalid_action")
    return _state_out(match, applied=outcome.status != "ignored", outcome=outcome)


# DELETE /api/v0/matches/{mid}/selection
@router.delete("/{mid}/selection", response_model=MatchStateOut)
async def cancel_selection(mid: str, store: MatchStore = Depends(get_store)) -> MatchStateOut:
    match = await _get_match(mid, store)
    return _state_out(match, applied=match.cancel_selection())


# POST /api/v0/matches/{mid}/taps
@router.post("/{mid}/taps", response_model=MatchStateOut)
async def record_tap(
    mid: str, body: TapIn, store: MatchStore = Depends(get_store)
) -> MatchStateOut:
    match = await _get_match(mid, store)
    outcome = match.record_tap(body.x, body.y, player_id=body.player_id)
    applied = outcome.status not in ("ignored", "rejected")
    return _state_out(match, applied=applied, outcome=outcome)


# POST /api/v0/matches/{mid}/undo
@router.post("/{mid}/undo", response_model=MatchStateOut)
async def undo(mid: str, store: MatchStore = Depends(get_store)) -> MatchStateOut:
    match = await _get_match(mid, store)
    return _state_out(match, applied=match.undo())


# POST /api/v0/matches/{mid}/assign
@router.post("/{mid}/assign", response_model=MatchStateOut)
async def assign_player(
    mid: str, body: AssignIn, store: MatchStore = Depends(get_store)
) -> MatchStateOut:
    match = await _get_match(mid, store)
    if body.player_id is None:
        return _state_out(match, applied=match.skip_player_assignment())
    if not any(p.id == body.player_id for p in match.players):
        raise http_problem(422, f"player '{body.player_id}' is not on the roster", "unknown_player")
    return _state_out(match, applied=match.assign_player(body.player_id))


# POST /api/v0/matches/{mid}/players
@router.post("/{mid}/players", response_model=MatchStateOut)
async def add_player(
    mid: str, body: PlayerModel, store: MatchStore = Depends(get_store)
) -> MatchStateOut:
    match = await _get_match(mid, store)
    return _state_out(match, applied=match.add_player(Player(**body.model_dump())))


# DELETE /api/v0/matches/{mid}/players/{pid}
@router.delete("/{mid}/players/{pid}", response_model=MatchStateOut)
async def remove_player(
    mid: str, pid: str, store: MatchStore = Depends(get_store)
) -> MatchStateOut:
    match = await _get_match(mid, store)
    return _state_out(match, applied=match.remove_player(pid))


# POST /api/v0/matches/{mid}/end-set
@router.post("/{mid}/end-set", response_model=MatchStateOut)
async def end_set(mid: str, store: MatchStore = Depends(get_store)) -> MatchStateOut:
    match = await _get_match(mid, store)
    return _state_out(match, applied=match.end_set())


# POST /api/v0/matches/{mid}/new-set
@router.post("/{mid}/new-set", response_model=MatchStateOut)
async def start_new_set(mid: str, store: MatchStore = Depends(get_store)) -> MatchStateOut:
    match = await _get_match(mid, store)
    return _state_out(match, applied=match.start_new_set())


# POST /api/v0/matches/{mid}/finish
@router.post("/{mid}/finish", response_model=MatchStateOut)
async def finish_match(mid: str, store: MatchStore = Depends(get_store)) -> MatchStateOut:
    match = await _get_match(mid, store)
    return _state_out(match, applied=match.finish_match())


# POST /api/v0/matches/{mid}/switch-sides
@router.post("/{mid}/switch-sides", response_model=MatchStateOut)
async def switch_sides(mid: str, store: MatchStore = Depends(get_store)) -> MatchStateOut:
    match = await _get_match(mid, store)
    return _state_out(match, applied=match.switch_sides())


# GET /api/v0/matches/{mid}/snapshot
@router.get("/{mid}/snapshot", response_model=MatchSnapshot)
async def get_snapshot(mid: str, store: MatchStore = Depends(get_store)) -> MatchSnapshot:
    match = await _get_match(mid, store)
    return MatchSnapshot.model_validate(match.to_snapshot())


# PUT /api/v0/matches/{mid}/snapshot
@router.put("/{mid}/snapshot", response_model=MatchStateOut)
async def load_snapshot(
    mid: str, body: MatchSnapshot, store: MatchStore = Depends(get_store)
) -> MatchStateOut:
    data = body.model_dump(by_alias=True, exclude_none=True)
    data["id"] = mid
    try:
        validate_snapshot(data)
    except ValidationError as exc:
        raise InvalidSnapshot(exc.detail)
    match = MatchState.from_snapshot(data)
    await store.put(match)
    logger.info("match %s reloaded from snapshot", mid)
    return _state_out(match)


def _default_set(match: MatchState) -> int:
    if match.points or not match.completed_sets:
        return match.current_set_number
    return match.completed_sets[-1].number


# GET /api/v0/matches/{mid}/stats
@router.get("/{mid}/stats", response_model=StatsOut)
async def get_stats(
    mid: str,
    set_number: Optional[int] = Query(None, alias="set", ge=1),
    store: MatchStore = Depends(get_store),
) -> StatsOut:
    match = await _get_match(mid, store)
    stats = match_stats(
        match.completed_sets, match.points, match.players, match.rules, set_number
    )
    return StatsOut(
        set=stats["set"],
        sets_score=stats["setsScore"],
        teams=stats["teams"],
        players=[
            {**row, "player": PlayerModel(**asdict(row["player"]))}
            for row in stats["players"]
        ],
        spatial=[_point_out(p) for p in stats["spatial"]],
    )


# GET /api/v0/matches/{mid}/replay
@router.get("/{mid}/replay", response_model=ReplayOut)
async def get_replay(
    mid: str,
    point: int = Query(-1),
    action: int = Query(0),
    set_number: Optional[int] = Query(None, alias="set", ge=1),
    store: MatchStore = Depends(get_store),
) -> ReplayOut:
    match = await _get_match(mid, store)
    number = set_number if set_number is not None else _default_set(match)
    points = points_for_set(match.completed_sets, match.points, number)
    view = replay_view(
        points,
        point,
        action,
        weighted=match.rules.weighted,
        game_fold=lambda prefix: match.rules.game_state(prefix, match.metadata),
    )
    return ReplayOut(
        overview=view["overview"],
        point_index=view["pointIndex"],
        action_index=view["actionIndex"],
        total_points=view["totalPoints"],
        total_actions=view["totalActions"],
        point=_point_out(view["point"]) if view["point"] is not None else None,
        action=(
            RallyActionModel.model_validate(rally_action_to_dict(view["action"]))
            if view["action"] is not None
            else None
        ),
        score=view["score"].as_dict(),
        game_state=_game_out(view["gameState"]),
        has_previous=view["hasPrevious"],
        has_next=view["hasNext"],
    )
