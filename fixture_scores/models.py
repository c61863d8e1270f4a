"""Internal data contract for fixtures and official score entries."""

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

CLUB_WIDE = "club-wide"

Perspective = Union[int, Literal["club-wide"]]


class Game(BaseModel):
    """
    One fixture as delivered by the data-fetch layer.

    The embedded ``status_team_goals`` / ``status_opponent_goals`` pair is
    always home-relative. Null means "not recorded"; it is never zero.
    """

    # Required fields
    id: int
    status_is_completed: bool
    home_team_id: Optional[int] = None

    # Optional fields
    away_team_id: Optional[int] = None
    status_id: Optional[int] = None
    status_name: Optional[str] = None
    home_team_name: Optional[str] = None
    away_team_name: Optional[str] = None
    status_team_goals: Optional[int] = None
    status_opponent_goals: Optional[int] = None
    is_bye: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class OfficialScoreEntry(BaseModel):
    """One team's goal count for one quarter of one game."""

    game_id: int
    team_id: int
    quarter: int = Field(ge=1, le=4)
    score: int = Field(ge=0)
    id: Optional[int] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
