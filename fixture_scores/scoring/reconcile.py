"""Cross-check the two sides' own tallies for an inter-club fixture.

When both teams belong to the club, each records goals for and against from
its own bench. Home "for" must equal away "against" and vice versa.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from fixture_scores.settings import RECONCILE_STRATEGIES, get_settings


@dataclass(frozen=True)
class TeamTally:
    team_id: int
    goals_for: int
    goals_against: int


@dataclass(frozen=True)
class ScoreMismatch:
    home: TeamTally
    away: TeamTally
    home_discrepancy: int
    away_discrepancy: int

    @property
    def is_valid(self) -> bool:
        return self.home_discrepancy == 0 and self.away_discrepancy == 0


@dataclass(frozen=True)
class ReconciledScore:
    home_score: int
    away_score: int
    method: str


def validate_inter_club_scores(home: TeamTally, away: TeamTally) -> ScoreMismatch:
    return ScoreMismatch(
        home=home,
        away=away,
        home_discrepancy=home.goals_for - away.goals_against,
        away_discrepancy=away.goals_for - home.goals_against,
    )


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def get_reconciled_score(
    home: TeamTally,
    away: TeamTally,
    strategy: Optional[str] = None,
) -> ReconciledScore:
    strategy = strategy or get_settings().reconcile_strategy
    if strategy not in RECONCILE_STRATEGIES:
        raise ValueError(
            f"Unsupported reconcile strategy: {strategy}. Supported: {', '.join(RECONCILE_STRATEGIES)}"
        )

    if validate_inter_club_scores(home, away).is_valid:
        return ReconciledScore(home.goals_for, away.goals_for, "exact-match")

    if strategy == "home-priority":
        return ReconciledScore(home.goals_for, home.goals_against, "home-team-priority")
    if strategy == "away-priority":
        return ReconciledScore(away.goals_against, away.goals_for, "away-team-priority")
    if strategy == "higher":
        return ReconciledScore(
            max(home.goals_for, away.goals_against),
            max(away.goals_for, home.goals_against),
            "higher-value",
        )
    if strategy == "lower":
        return ReconciledScore(
            min(home.goals_for, away.goals_against),
            min(away.goals_for, home.goals_against),
            "lower-value",
        )
    return ReconciledScore(
        _round_half_up((home.goals_for + away.goals_against) / 2),
        _round_half_up((away.goals_for + home.goals_against) / 2),
        "averaged",
    )


def score_discrepancy_warning(mismatch: ScoreMismatch) -> Optional[str]:
    if mismatch.is_valid:
        return None
    return (
        "Score mismatch detected: "
        f"Home team discrepancy: {mismatch.home_discrepancy}, "
        f"Away team discrepancy: {mismatch.away_discrepancy}"
    )
