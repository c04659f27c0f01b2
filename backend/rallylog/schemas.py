from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)


class Winner(str, Enum):
    YOU = "you"
    OPPONENT = "opponent"
    NONE = "none"


class Side(str, Enum):
    YOU = "you"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Side":
        return Side.OPPONENT if self is Side.YOU else Side.YOU

    @property
    def display(self) -> str:
        return "You" if self is Side.YOU else "Opponent"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class SportOut(BaseModel):
    id: str
    name: str
    clutch_threshold: int = Field(alias="clutchThreshold")

    model_config = ConfigDict(populate_by_name=True)


# -----------------------------------------------------------------------------
# Inputs
# -----------------------------------------------------------------------------
class ScoreEvent(_Frozen):
    """One scored point as reported by the watch."""

    timestamp: float = 0.0
    player1_score: int = Field(default=0, ge=0, alias="player1Score")
    player2_score: int = Field(default=0, ge=0, alias="player2Score")
    # Older watch builds send "scoringPlayer".
    scoring_player_hint: str = Field(
        default="",
        validation_alias=AliasChoices("scoringPlayerHint", "scoringPlayer"),
        serialization_alias="scoringPlayerHint",
    )
    is_serve_point: bool = Field(default=False, alias="isServePoint")
    shot_type: Optional[str] = Field(default=None, alias="shotType")

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        """Allow events to be provided as ``(p1, p2, hint, is_serve)`` tuples."""
        if isinstance(value, (list, tuple)) and 2 <= len(value) <= 4:
            keys = ("player1Score", "player2Score", "scoringPlayerHint", "isServePoint")
            return dict(zip(keys, value))
        return value

    @property
    def score(self) -> tuple[int, int]:
        return self.player1_score, self.player2_score


class MatchBoundary(_Frozen):
    player1_games: int = Field(ge=0, alias="player1Games")
    player2_games: int = Field(ge=0, alias="player2Games")
    tiebreak_player1: Optional[int] = Field(default=None, ge=0, alias="tiebreakPlayer1")
    tiebreak_player2: Optional[int] = Field(default=None, ge=0, alias="tiebreakPlayer2")

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return {"player1Games": value[0], "player2Games": value[1]}
        return value

    @model_validator(mode="after")
    def _tiebreak_pair(self) -> "MatchBoundary":
        if (self.tiebreak_player1 is None) != (self.tiebreak_player2 is None):
            raise ValueError("tiebreak score requires both tiebreakPlayer1 and tiebreakPlayer2")
        return self


# -----------------------------------------------------------------------------
# Point-by-point reconstruction
# -----------------------------------------------------------------------------
class ServerState(_Frozen):
    side: Side = Side.YOU
    slot: Literal[1, 2] = 1

    @property
    def label(self) -> str:
        return f"{self.side.display} S{self.slot}"


class ReconstructedPoint(_Frozen):
    sequence_number: int = Field(alias="sequenceNumber")
    score_label: str = Field(alias="scoreLabel")
    display_score: str = Field(alias="displayScore")
    winner: Winner
    server: str
    server_side: Side = Field(alias="serverSide")
    server_slot: Literal[1, 2] = Field(alias="serverSlot")
    is_side_out: bool = Field(default=False, alias="isSideOut")
    timestamp: float = 0.0
    player1_score: int = Field(alias="player1Score")
    player2_score: int = Field(alias="player2Score")
    shot_type: Optional[str] = Field(default=None, alias="shotType")


class PointGroup(_Frozen):
    title: str
    player1_games: int = Field(default=0, alias="player1Games")
    player2_games: int = Field(default=0, alias="player2Games")
    tiebreak_player1: Optional[int] = Field(default=None, alias="tiebreakPlayer1")
    tiebreak_player2: Optional[int] = Field(default=None, alias="tiebreakPlayer2")
    points: List[ReconstructedPoint] = Field(default_factory=list)

    @computed_field(alias="isWin")  # type: ignore[prop-decorator]
    @property
    def is_win(self) -> bool:
        # A tied boundary renders as a win; this is a display convention only.
        return self.player1_games >= self.player2_games


# -----------------------------------------------------------------------------
# Insights
# -----------------------------------------------------------------------------
class ServeInsights(_Frozen):
    you_served_points: int = Field(default=0, alias="youServedPoints")
    you_served_points_won: int = Field(default=0, alias="youServedPointsWon")
    partner_served_points: int = Field(default=0, alias="partnerServedPoints")
    partner_served_points_won: int = Field(default=0, alias="partnerServedPointsWon")
    opponent_served_points: int = Field(default=0, alias="opponentServedPoints")
    opponent_served_points_won: int = Field(default=0, alias="opponentServedPointsWon")
    your_serve_win_rate: float = Field(default=0.0, alias="yourServeWinRate")
    partner_serve_win_rate: float = Field(default=0.0, alias="partnerServeWinRate")
    return_rate: float = Field(default=0.0, alias="returnRate")
    return_label: str = Field(default="Return win rate", alias="returnLabel")
    your_serve_win_pct: int = Field(default=0, alias="yourServeWinPct")
    partner_serve_win_pct: int = Field(default=0, alias="partnerServeWinPct")
    return_pct: int = Field(default=0, alias="returnPct")

    @computed_field(alias="pointsWonOnServe")  # type: ignore[prop-decorator]
    @property
    def points_won_on_serve(self) -> int:
        return self.you_served_points_won + self.partner_served_points_won

    @computed_field(alias="totalServePoints")  # type: ignore[prop-decorator]
    @property
    def total_serve_points(self) -> int:
        return self.you_served_points + self.partner_served_points


class MomentumInsights(_Frozen):
    your_max_streak: int = Field(default=0, alias="yourMaxStreak")
    opponent_max_streak: int = Field(default=0, alias="opponentMaxStreak")
    lead_changes: int = Field(default=0, alias="leadChanges")
    your_biggest_lead: int = Field(default=0, alias="yourBiggestLead")
    opponent_biggest_lead: int = Field(default=0, alias="opponentBiggestLead")
    rolling_win_pct: List[float] = Field(default_factory=list, alias="rollingWinPct")
    summary: str = ""
    advantage: str = ""


class ClutchInsights(_Frozen):
    game_points_played: int = Field(default=0, alias="gamePointsPlayed")
    game_points_won: int = Field(default=0, alias="gamePointsWon")
    clutch_rate: float = Field(default=0.0, alias="clutchRate")
    clutch_pct: int = Field(default=0, alias="clutchPct")
    break_points_played: int = Field(default=0, alias="breakPointsPlayed")
    break_points_converted: int = Field(default=0, alias="breakPointsConverted")
    break_point_conversion_rate: float = Field(default=0.0, alias="breakPointConversionRate")


class KeyMoment(_Frozen):
    title: str
    description: str
    score: str
    is_positive: bool = Field(default=True, alias="isPositive")


class MatchStory(_Frozen):
    headline: str
    description: str


class MatchInsights(_Frozen):
    sport_type: str = Field(alias="sportType")
    is_doubles: bool = Field(default=False, alias="isDoubles")
    is_win: bool = Field(default=False, alias="isWin")
    total_points: int = Field(default=0, alias="totalPoints")
    points_won: int = Field(default=0, alias="pointsWon")
    point_win_pct: int = Field(default=0, alias="pointWinPct")
    serve: ServeInsights = Field(default_factory=ServeInsights)
    momentum: MomentumInsights = Field(default_factory=MomentumInsights)
    clutch: ClutchInsights = Field(default_factory=ClutchInsights)
    key_moments: List[KeyMoment] = Field(default_factory=list, alias="keyMoments")
    story: Optional[MatchStory] = None


# -----------------------------------------------------------------------------
# Request bodies
# -----------------------------------------------------------------------------
class PointsRequest(BaseModel):
    sport: str = "pickleball"
    events: List[ScoreEvent] = Field(default_factory=list)
    boundaries: Optional[List[MatchBoundary]] = None

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class InsightsRequest(BaseModel):
    sport: str = "pickleball"
    is_doubles: bool = Field(default=False, alias="isDoubles")
    is_win: Optional[bool] = Field(default=None, alias="isWin")
    events: List[ScoreEvent] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")
