from __future__ import annotations

from typing import Iterable, Optional, Sequence

from fixture_scores.models import CLUB_WIDE, Game, OfficialScoreEntry, Perspective
from fixture_scores.scoring.engine import GameScoreResult, calculate_game_score
from fixture_scores.scoring.perspective import is_club_wide
from fixture_scores.settings import ScoreSettings, get_settings

BYE_LABEL = "BYE"


def format_score(
    game: Game,
    result: GameScoreResult,
    perspective: Perspective,
    settings: Optional[ScoreSettings] = None,
) -> str:
    """Render an already computed result.

    Team views read ours-theirs. Club-wide views read home-away, so the pair is
    flipped back when "ours" resolved to the away side.
    """
    settings = settings or get_settings()
    if result.result == "bye":
        return BYE_LABEL
    if result.result == "upcoming" or not result.has_valid_score:
        return settings.no_score_placeholder

    if is_club_wide(perspective):
        home_id = game.home_team_id or 0
        away_id = game.away_team_id or 0
        if result.our_team_id == away_id and result.our_team_id != home_id:
            return f"{result.their_score}-{result.our_score}"
    return f"{result.our_score}-{result.their_score}"


def get_display_score(
    game: Game,
    official_scores: Optional[Sequence[OfficialScoreEntry]] = None,
    perspective: Perspective = CLUB_WIDE,
    club_team_ids: Optional[Iterable[int]] = None,
    *,
    settings: Optional[ScoreSettings] = None,
) -> str:
    result = calculate_game_score(
        game, official_scores, perspective, club_team_ids, settings=settings
    )
    return format_score(game, result, perspective, settings)
