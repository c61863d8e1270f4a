from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from fixture_scores.models import CLUB_WIDE, Game, OfficialScoreEntry, Perspective


class _CamelRequest(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class GameScoreRequest(_CamelRequest):
    game: Game
    official_scores: list[OfficialScoreEntry] = Field(default_factory=list)
    perspective: Perspective = CLUB_WIDE
    club_team_ids: list[int] = Field(default_factory=list)


class TeamGamesRequest(_CamelRequest):
    games: list[Game]
    team_id: int
    official_scores: dict[int, list[OfficialScoreEntry]] = Field(default_factory=dict)
    club_team_ids: list[int] = Field(default_factory=list)
    opponent_names: dict[int, str] = Field(default_factory=dict)

    @field_validator("official_scores", mode="before")
    @classmethod
    def fill_game_ids(cls, value):
        # Batch entries may omit gameId; the map key supplies it.
        if not isinstance(value, dict):
            return value
        filled = {}
        for game_id, records in value.items():
            if isinstance(records, list):
                records = [
                    dict(record, gameId=game_id)
                    if isinstance(record, dict) and "gameId" not in record and "game_id" not in record
                    else record
                    for record in records
                ]
            filled[game_id] = records
        return filled

    @field_validator("official_scores")
    @classmethod
    def check_game_ids(cls, value: dict[int, list[OfficialScoreEntry]]):
        for game_id, entries in value.items():
            for entry in entries:
                if entry.game_id != game_id:
                    raise ValueError(
                        f"score entry for game {entry.game_id} filed under game {game_id}"
                    )
        return value


class TallyIn(_CamelRequest):
    team_id: int
    goals_for: int = Field(ge=0)
    goals_against: int = Field(ge=0)


class ReconcileRequest(_CamelRequest):
    home: TallyIn
    away: TallyIn
    strategy: Optional[str] = None


class QuarterScoreOut(BaseModel):
    quarter: int
    our_score: int
    their_score: int

    class Config:
        from_attributes = True


class GameScoreOut(BaseModel):
    our_score: int
    their_score: int
    result: str
    quarter_breakdown: list[QuarterScoreOut]
    has_valid_score: bool
    score_source: str
    is_inter_club: bool
    our_team_id: int
    their_team_id: int
    resolution: str

    class Config:
        from_attributes = True


class GameScoreResponse(BaseModel):
    game_id: int
    score: GameScoreOut
    display: str


class DisplayResponse(BaseModel):
    game_id: int
    display: str
    result: str


class WinRateOut(BaseModel):
    wins: int
    losses: int
    draws: int
    total_games: int
    win_rate: float

    class Config:
        from_attributes = True


class QuarterAverageOut(BaseModel):
    quarter: int
    games: int
    average_our_score: float
    average_their_score: float

    class Config:
        from_attributes = True


class OpponentRecordOut(BaseModel):
    opponent_id: int
    opponent_name: Optional[str]
    games: int
    wins: int
    losses: int
    draws: int
    goals_for: int
    goals_against: int
    goal_difference: int
    win_rate: float

    class Config:
        from_attributes = True


class ReconcileResponse(BaseModel):
    home_score: int
    away_score: int
    method: str
    is_valid: bool
    home_discrepancy: int
    away_discrepancy: int
    warning: Optional[str] = None
