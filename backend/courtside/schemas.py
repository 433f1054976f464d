from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import NO_POSITION

TeamLiteral = Literal["blue", "red"]
PointTypeLiteral = Literal["scored", "fault", "neutral"]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SportOut(CamelModel):
    id: str
    name: str
    period_label: str = Field(alias="periodLabel")
    weighted: bool
    games: bool


class ActionOut(CamelModel):
    key: str
    label: str
    points: Optional[int] = None
    custom_id: Optional[str] = Field(default=None, alias="customId")
    sigil: Optional[str] = None
    show_on_court: Optional[bool] = Field(default=None, alias="showOnCourt")
    assign_to_player: Optional[bool] = Field(default=None, alias="assignToPlayer")


class SportActionsOut(BaseModel):
    sport: str
    scored: List[ActionOut]
    fault: List[ActionOut]
    neutral: List[ActionOut]


class CustomActionCreate(CamelModel):
    label: str = Field(..., min_length=1, max_length=60)
    category: PointTypeLiteral
    points: Optional[int] = Field(default=None, ge=0, le=3)
    sigil: Optional[str] = Field(default=None, max_length=8)
    show_on_court: Optional[bool] = Field(default=None, alias="showOnCourt")
    assign_to_player: Optional[bool] = Field(default=None, alias="assignToPlayer")

    @field_validator("label", mode="before")
    @classmethod
    def _validate_label(cls, value: str) -> str:
        if not isinstance(value, str):
            raise TypeError("label must be a string")
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("label must not be empty")
        return trimmed


class CustomActionUpdate(CamelModel):
    label: Optional[str] = Field(default=None, min_length=1, max_length=60)
    points: Optional[int] = Field(default=None, ge=0, le=3)
    sigil: Optional[str] = Field(default=None, max_length=8)
    show_on_court: Optional[bool] = Field(default=None, alias="showOnCourt")
    assign_to_player: Optional[bool] = Field(default=None, alias="assignToPlayer")


class PlayerModel(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    number: Optional[str] = None


class TeamNamesModel(BaseModel):
    blue: str = "Blue"
    red: str = "Red"


class MetadataModel(CamelModel):
    has_court: bool = Field(default=True, alias="hasCourt")
    advantage_rule: bool = Field(default=True, alias="advantageRule")
    tiebreak_enabled: bool = Field(default=True, alias="tiebreakEnabled")
    is_performance_mode: bool = Field(default=False, alias="isPerformanceMode")
    direction_mode: bool = Field(default=False, alias="directionMode")
    auto_end_set: bool = Field(default=True, alias="autoEndSet")
    initial_server: TeamLiteral = Field(default="blue", alias="initialServer")


class MatchCreate(CamelModel):
    sport: Optional[str] = None
    team_names: TeamNamesModel = Field(default_factory=TeamNamesModel, alias="teamNames")
    players: List[PlayerModel] = Field(default_factory=list)
    metadata: MetadataModel = Field(default_factory=MetadataModel)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @model_validator(mode="after")
    def _unique_players(self):
        ids = [p.id for p in self.players]
        if len(ids) != len(set(ids)):
            raise ValueError("player ids must be unique")
        return self


class SelectionIn(CamelModel):
    team: TeamLiteral
    type: PointTypeLiteral
    action: str
    custom_action_id: Optional[str] = Field(default=None, alias="customActionId")
    player_id: Optional[str] = Field(default=None, alias="playerId")


class TapIn(CamelModel):
    x: float
    y: float
    player_id: Optional[str] = Field(default=None, alias="playerId")


class AssignIn(CamelModel):
    """``playerId`` of ``null`` skips the assignment."""

    player_id: Optional[str] = Field(default=None, alias="playerId")


# ---------------------------------------------------------------------------
# Persistence snapshot
# ---------------------------------------------------------------------------


def _check_position(x: float, y: float) -> None:
    if (x, y) == NO_POSITION:
        return
    if not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0):
        raise ValueError("coordinates must lie in [0, 1] or be the (-1, -1) sentinel")


class RallyActionModel(CamelModel):
    id: str
    team: TeamLiteral
    type: PointTypeLiteral
    action: str
    x: float
    y: float
    timestamp: int
    player_id: Optional[str] = Field(default=None, alias="playerId")
    start_x: Optional[float] = Field(default=None, alias="startX")
    start_y: Optional[float] = Field(default=None, alias="startY")
    end_x: Optional[float] = Field(default=None, alias="endX")
    end_y: Optional[float] = Field(default=None, alias="endY")
    point_value: Optional[int] = Field(default=None, alias="pointValue")
    custom_action_label: Optional[str] = Field(default=None, alias="customActionLabel")
    sigil: Optional[str] = None

    @model_validator(mode="after")
    def _validate_position(self):
        _check_position(self.x, self.y)
        return self


class PointModel(CamelModel):
    id: str
    team: TeamLiteral
    type: PointTypeLiteral
    action: str
    x: float
    y: float
    timestamp: int
    player_id: Optional[str] = Field(default=None, alias="playerId")
    rally_actions: Optional[List[RallyActionModel]] = Field(default=None, alias="rallyActions")
    point_value: Optional[int] = Field(default=None, alias="pointValue")
    custom_action_label: Optional[str] = Field(default=None, alias="customActionLabel")
    sigil: Optional[str] = None
    show_on_court: Optional[bool] = Field(default=None, alias="showOnCourt")

    @model_validator(mode="after")
    def _validate_position(self):
        _check_position(self.x, self.y)
        return self


class ScoreModel(BaseModel):
    blue: int = 0
    red: int = 0


class SetDataModel(BaseModel):
    id: str
    number: int = Field(..., ge=1)
    points: List[PointModel]
    score: ScoreModel
    winner: TeamLiteral
    duration: int = Field(default=0, ge=0)


class PendingPointModel(BaseModel):
    point: PointModel
    index: int = Field(..., ge=0)


class MatchSnapshot(CamelModel):
    id: Optional[str] = None
    sport: str = "volleyball"
    team_names: TeamNamesModel = Field(default_factory=TeamNamesModel, alias="teamNames")
    completed_sets: List[SetDataModel] = Field(default_factory=list, alias="completedSets")
    current_set_number: int = Field(default=1, ge=1, alias="currentSetNumber")
    points: List[PointModel] = Field(default_factory=list)
    sides_swapped: bool = Field(default=False, alias="sidesSwapped")
    chrono_seconds: int = Field(default=0, ge=0, alias="chronoSeconds")
    players: List[PlayerModel] = Field(default_factory=list)
    metadata: MetadataModel = Field(default_factory=MetadataModel)
    finished: bool = False
    awaiting_new_set: bool = Field(default=False, alias="awaitingNewSet")
    pending_rally: List[RallyActionModel] = Field(default_factory=list, alias="pendingRally")
    pending_point: Optional[PendingPointModel] = Field(default=None, alias="pendingPoint")


# ---------------------------------------------------------------------------
# Live state
# ---------------------------------------------------------------------------


class RectOut(BaseModel):
    x: float
    y: float
    w: float
    h: float


class GameStateOut(CamelModel):
    games: ScoreModel
    game_score: Dict[str, str] = Field(alias="gameScore")
    tiebreak: bool
    set_just_won: Optional[TeamLiteral] = Field(default=None, alias="setJustWon")
    serving_team: TeamLiteral = Field(alias="servingTeam")
    serving_side: str = Field(alias="servingSide")
    total_games_in_set: int = Field(alias="totalGamesInSet")
    points_in_game: ScoreModel = Field(alias="pointsInGame")


class SelectionOut(BaseModel):
    team: TeamLiteral
    type: PointTypeLiteral
    action: str
    label: Optional[str] = None


class TapOut(CamelModel):
    status: str
    zone: Optional[str] = None
    point_id: Optional[str] = Field(default=None, alias="pointId")


class MatchStateOut(CamelModel):
    id: str
    sport: str
    period_label: str = Field(alias="periodLabel")
    team_names: TeamNamesModel = Field(alias="teamNames")
    score: ScoreModel
    sets_score: ScoreModel = Field(alias="setsScore")
    game_state: Optional[GameStateOut] = Field(default=None, alias="gameState")
    serving_team: TeamLiteral = Field(alias="servingTeam")
    serving_side: str = Field(alias="servingSide")
    current_set_number: int = Field(alias="currentSetNumber")
    chrono_seconds: int = Field(alias="chronoSeconds")
    sides_swapped: bool = Field(alias="sidesSwapped")
    finished: bool
    awaiting_new_set: bool = Field(alias="awaitingNewSet")
    rally_state: str = Field(alias="rallyState")
    selection: Optional[SelectionOut] = None
    highlights: List[RectOut] = Field(default_factory=list)
    pending_rally: List[RallyActionModel] = Field(default_factory=list, alias="pendingRally")
    pending_player_assignment: bool = Field(alias="pendingPlayerAssignment")
    pending_point: Optional[PointModel] = Field(default=None, alias="pendingPoint")
    points: List[PointModel]
    completed_sets: List[SetDataModel] = Field(alias="completedSets")
    players: List[PlayerModel]
    applied: bool = True
    outcome: Optional[TapOut] = None


class PlayerStatsOut(CamelModel):
    player: PlayerModel
    ghost: bool
    points_won: int = Field(alias="pointsWon")
    scored: int
    won_on_faults: int = Field(alias="wonOnFaults")
    faults: int
    by_action: Dict[str, int] = Field(alias="byAction")
    total: int
    efficiency: float


class TeamStatsOut(CamelModel):
    points: int
    scored: int
    won_on_faults: int = Field(alias="wonOnFaults")
    faults_committed: int = Field(alias="faultsCommitted")
    scored_by_action: Dict[str, int] = Field(alias="scoredByAction")
    faults_by_action: Dict[str, int] = Field(alias="faultsByAction")
    neutral: int


class StatsOut(CamelModel):
    set: Optional[int] = None
    sets_score: ScoreModel = Field(alias="setsScore")
    teams: Dict[str, TeamStatsOut]
    players: List[PlayerStatsOut]
    spatial: List[PointModel]


class ReplayOut(CamelModel):
    overview: bool
    point_index: int = Field(alias="pointIndex")
    action_index: int = Field(alias="actionIndex")
    total_points: int = Field(alias="totalPoints")
    total_actions: int = Field(alias="totalActions")
    point: Optional[PointModel] = None
    action: Optional[RallyActionModel] = None
    score: ScoreModel
    game_state: Optional[GameStateOut] = Field(default=None, alias="gameState")
    has_previous: bool = Field(alias="hasPrevious")
    has_next: bool = Field(alias="hasNext")
