"""Multi-game summaries built on top of ``calculate_game_score``.

Nothing here re-derives a score; every number comes from the engine with the
team as perspective.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from fixture_scores.models import Game, OfficialScoreEntry
from fixture_scores.scoring.engine import (
    GameScoreResult,
    calculate_game_score,
    is_abandoned_game,
    is_bye_game,
)
from fixture_scores.settings import ScoreSettings

QUARTERS = (1, 2, 3, 4)

ScoresByGame = Mapping[int, Sequence[OfficialScoreEntry]]


@dataclass(frozen=True)
class WinRateResult:
    wins: int
    losses: int
    draws: int
    total_games: int
    win_rate: float


@dataclass(frozen=True)
class QuarterAverage:
    quarter: int
    games: int
    average_our_score: float
    average_their_score: float


@dataclass
class OpponentRecord:
    opponent_id: int
    opponent_name: Optional[str] = None
    games: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    goals_for: int = 0
    goals_against: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    @property
    def win_rate(self) -> float:
        return _percentage(self.wins, self.games)


def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def _team_results(
    games: Iterable[Game],
    team_id: int,
    official_scores_by_game_id: Optional[ScoresByGame],
    club_team_ids: Optional[Iterable[int]],
    settings: Optional[ScoreSettings],
) -> list[tuple[Game, GameScoreResult]]:
    """Valid engine results for completed games involving the team.

    Byes and abandoned games never enter a record.
    """
    scores_map = official_scores_by_game_id or {}
    club = frozenset(club_team_ids or ())
    results: list[tuple[Game, GameScoreResult]] = []
    for game in games:
        if not game.status_is_completed:
            continue
        if team_id not in (game.home_team_id, game.away_team_id):
            continue
        if is_bye_game(game, settings) or is_abandoned_game(game, settings):
            continue
        scores = calculate_game_score(
            game, scores_map.get(game.id) or (), team_id, club, settings=settings
        )
        # Games with no derivable score are left out of every denominator.
        if scores.has_valid_score:
            results.append((game, scores))
    return results


def calculate_win_rate(
    games: Iterable[Game],
    team_id: int,
    official_scores_by_game_id: Optional[ScoresByGame] = None,
    club_team_ids: Optional[Iterable[int]] = None,
    *,
    settings: Optional[ScoreSettings] = None,
) -> WinRateResult:
    wins = losses = draws = 0
    counted = _team_results(games, team_id, official_scores_by_game_id, club_team_ids, settings)
    for _game, scores in counted:
        if scores.our_score > scores.their_score:
            wins += 1
        elif scores.our_score < scores.their_score:
            losses += 1
        else:
            draws += 1

    return WinRateResult(
        wins=wins,
        losses=losses,
        draws=draws,
        total_games=len(counted),
        win_rate=_percentage(wins, len(counted)),
    )


def calculate_quarter_averages(
    games: Iterable[Game],
    team_id: int,
    official_scores_by_game_id: Optional[ScoresByGame] = None,
    club_team_ids: Optional[Iterable[int]] = None,
    *,
    settings: Optional[ScoreSettings] = None,
) -> list[QuarterAverage]:
    """Average goals for/against per quarter over officially scored games.

    Status-sourced results carry no quarter detail and are skipped.
    """
    totals = {quarter: [0, 0, 0] for quarter in QUARTERS}
    counted = _team_results(games, team_id, official_scores_by_game_id, club_team_ids, settings)
    for _game, scores in counted:
        if scores.score_source != "official":
            continue
        for quarter_score in scores.quarter_breakdown:
            bucket = totals.get(quarter_score.quarter)
            if bucket is None:
                continue
            bucket[0] += 1
            bucket[1] += quarter_score.our_score
            bucket[2] += quarter_score.their_score

    averages: list[QuarterAverage] = []
    for quarter in QUARTERS:
        played, ours, theirs = totals[quarter]
        averages.append(
            QuarterAverage(
                quarter=quarter,
                games=played,
                average_our_score=ours / played if played else 0.0,
                average_their_score=theirs / played if played else 0.0,
            )
        )
    return averages


def _opponent_name(game: Game, opponent_id: int, names: Mapping[int, str]) -> Optional[str]:
    if opponent_id in names:
        return names[opponent_id]
    if opponent_id == game.home_team_id:
        return game.home_team_name
    return game.away_team_name


def calculate_opponent_records(
    games: Iterable[Game],
    team_id: int,
    official_scores_by_game_id: Optional[ScoresByGame] = None,
    club_team_ids: Optional[Iterable[int]] = None,
    opponent_names: Optional[Mapping[int, str]] = None,
    *,
    settings: Optional[ScoreSettings] = None,
) -> list[OpponentRecord]:
    """Head-to-head record against every opponent the team has a score for."""
    names = opponent_names or {}
    records: dict[int, OpponentRecord] = {}
    counted = _team_results(games, team_id, official_scores_by_game_id, club_team_ids, settings)
    for game, scores in counted:
        opponent_id = scores.their_team_id
        record = records.get(opponent_id)
        if record is None:
            record = OpponentRecord(
                opponent_id=opponent_id,
                opponent_name=_opponent_name(game, opponent_id, names),
            )
            records[opponent_id] = record

        record.games += 1
        record.goals_for += scores.our_score
        record.goals_against += scores.their_score
        if scores.our_score > scores.their_score:
            record.wins += 1
        elif scores.our_score < scores.their_score:
            record.losses += 1
        else:
            record.draws += 1

    return sorted(records.values(), key=lambda r: (-r.games, r.opponent_id))
