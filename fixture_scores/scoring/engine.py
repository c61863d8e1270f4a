"""
Score & result computation for a single fixture.

Sources are tried in strict priority order and the first valid one wins:

1. bye          - no opponent, never a real score
2. upcoming     - incomplete games never expose provisional numbers
3. official     - per-quarter, per-team entries covering both sides
4. status       - the embedded home-relative summary pair
5. unknown      - nothing usable

Every function here is pure: no I/O, no caching, no mutation of inputs.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Iterable, Literal, Optional, Sequence

from fixture_scores.models import CLUB_WIDE, Game, OfficialScoreEntry, Perspective
from fixture_scores.scoring.perspective import PerspectiveResolution, resolve_perspective
from fixture_scores.settings import ScoreSettings, get_settings

logger = logging.getLogger(__name__)

ResultCategory = Literal["win", "loss", "draw", "bye", "upcoming", "unknown", "inter-club"]
ScoreSource = Literal["official", "status", "none"]


@dataclass(frozen=True)
class QuarterScore:
    quarter: int
    our_score: int
    their_score: int


@dataclass(frozen=True)
class GameScoreResult:
    our_score: int
    their_score: int
    result: ResultCategory
    quarter_breakdown: tuple[QuarterScore, ...]
    has_valid_score: bool
    score_source: ScoreSource
    is_inter_club: bool
    our_team_id: int
    their_team_id: int
    resolution: str


@dataclass(frozen=True)
class _Extracted:
    our_score: int
    their_score: int
    quarter_breakdown: tuple[QuarterScore, ...]
    source: ScoreSource


def is_bye_game(game: Game, settings: Optional[ScoreSettings] = None) -> bool:
    settings = settings or get_settings()
    status_name = (game.status_name or "").strip().lower()
    return (
        game.is_bye
        or game.away_team_id is None
        or (game.status_id is not None and game.status_id == settings.bye_status_id)
        or status_name == settings.bye_status_name
    )


def is_abandoned_game(game: Game, settings: Optional[ScoreSettings] = None) -> bool:
    settings = settings or get_settings()
    return (game.status_name or "").strip().lower() == settings.abandoned_status_name


def classify_result(our_score: int, their_score: int, is_inter_club: bool = False) -> ResultCategory:
    if is_inter_club:
        return "inter-club"
    if our_score > their_score:
        return "win"
    if our_score < their_score:
        return "loss"
    return "draw"


def _terminal(result: ResultCategory, resolution: PerspectiveResolution) -> GameScoreResult:
    return GameScoreResult(
        our_score=0,
        their_score=0,
        result=result,
        quarter_breakdown=(),
        has_valid_score=False,
        score_source="none",
        is_inter_club=resolution.is_inter_club,
        our_team_id=resolution.our_team_id,
        their_team_id=resolution.their_team_id,
        resolution=resolution.kind,
    )


def _from_official_scores(
    game: Game,
    official_scores: Sequence[OfficialScoreEntry],
    resolution: PerspectiveResolution,
) -> Optional[_Extracted]:
    if not official_scores:
        return None

    ours = resolution.our_team_id
    theirs = resolution.their_team_id
    teams_seen = {entry.team_id for entry in official_scores}
    if ours not in teams_seen or theirs not in teams_seen:
        logger.debug(
            "Partial official scores for game id=%s: teams=%s expected=%s,%s",
            game.id,
            sorted(teams_seen),
            ours,
            theirs,
            extra={"game_id": game.id, "source": "official"},
        )
        return None

    # Duplicate (quarter, team) entries are summed, not deduplicated.
    by_quarter: dict[int, dict[int, int]] = defaultdict(lambda: defaultdict(int))
    for entry in official_scores:
        by_quarter[entry.quarter][entry.team_id] += entry.score

    breakdown = tuple(
        QuarterScore(
            quarter=quarter,
            our_score=by_quarter[quarter].get(ours, 0),
            their_score=by_quarter[quarter].get(theirs, 0),
        )
        for quarter in sorted(by_quarter)
    )
    return _Extracted(
        our_score=sum(q.our_score for q in breakdown),
        their_score=sum(q.their_score for q in breakdown),
        quarter_breakdown=breakdown,
        source="official",
    )


def _from_status_scores(game: Game, resolution: PerspectiveResolution) -> Optional[_Extracted]:
    team_goals = game.status_team_goals
    opponent_goals = game.status_opponent_goals
    if team_goals is None or opponent_goals is None:
        return None
    if team_goals < 0 or opponent_goals < 0:
        return None

    home_id = game.home_team_id or 0
    away_id = game.away_team_id or 0
    if resolution.our_team_id == home_id:
        ours, theirs = team_goals, opponent_goals
    elif resolution.our_team_id == away_id:
        ours, theirs = opponent_goals, team_goals
    else:
        return None
    return _Extracted(our_score=ours, their_score=theirs, quarter_breakdown=(), source="status")


def calculate_game_score(
    game: Game,
    official_scores: Optional[Sequence[OfficialScoreEntry]] = None,
    perspective: Perspective = CLUB_WIDE,
    club_team_ids: Optional[Iterable[int]] = None,
    *,
    settings: Optional[ScoreSettings] = None,
) -> GameScoreResult:
    """Return the oriented score, breakdown and result category for one game."""

    resolution = resolve_perspective(game, perspective, club_team_ids)

    if is_bye_game(game, settings):
        return _terminal("bye", replace(resolution, is_inter_club=False))

    if not game.status_is_completed:
        return _terminal("upcoming", resolution)

    extracted = _from_official_scores(game, official_scores or (), resolution)
    if extracted is None:
        extracted = _from_status_scores(game, resolution)
    if extracted is None:
        return _terminal("unknown", resolution)

    return GameScoreResult(
        our_score=extracted.our_score,
        their_score=extracted.their_score,
        result=classify_result(extracted.our_score, extracted.their_score, resolution.is_inter_club),
        quarter_breakdown=extracted.quarter_breakdown,
        has_valid_score=True,
        score_source=extracted.source,
        is_inter_club=resolution.is_inter_club,
        our_team_id=resolution.our_team_id,
        their_team_id=resolution.their_team_id,
        resolution=resolution.kind,
    )


def get_game_result(
    game: Game,
    official_scores: Optional[Sequence[OfficialScoreEntry]] = None,
    perspective: Perspective = CLUB_WIDE,
    club_team_ids: Optional[Iterable[int]] = None,
    *,
    settings: Optional[ScoreSettings] = None,
) -> ResultCategory:
    return calculate_game_score(
        game, official_scores, perspective, club_team_ids, settings=settings
    ).result
