"""Decide which side of a fixture is "ours" for a given viewer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Literal

from fixture_scores.models import CLUB_WIDE, Game, Perspective

logger = logging.getLogger(__name__)

ResolutionKind = Literal["matched", "fallback"]


@dataclass(frozen=True)
class PerspectiveResolution:
    """Outcome of orienting a fixture.

    ``kind == "fallback"`` means the home/away order was assumed because the
    viewer could not be located in the fixture; "ours" is then only a guess.
    """

    kind: ResolutionKind
    our_team_id: int
    their_team_id: int
    is_inter_club: bool = False

    @property
    def is_fallback(self) -> bool:
        return self.kind == "fallback"


def is_club_wide(perspective: Perspective) -> bool:
    return perspective == CLUB_WIDE


def resolve_perspective(
    game: Game,
    perspective: Perspective,
    club_team_ids: Iterable[int] | None = None,
) -> PerspectiveResolution:
    club = frozenset(club_team_ids or ())
    home_id = game.home_team_id or 0
    away_id = game.away_team_id or 0
    inter_club = bool(club) and home_id in club and away_id in club

    if not is_club_wide(perspective):
        if home_id == perspective:
            return PerspectiveResolution("matched", home_id, away_id, inter_club)
        if away_id == perspective:
            return PerspectiveResolution("matched", away_id, home_id, inter_club)
        logger.debug(
            "Team %s not in game id=%s (home=%s away=%s); using home/away order",
            perspective,
            game.id,
            home_id,
            away_id,
            extra={"game_id": game.id, "team_id": perspective},
        )
        return PerspectiveResolution("fallback", home_id, away_id, inter_club)

    if inter_club:
        return PerspectiveResolution("matched", home_id, away_id, True)
    if home_id in club:
        return PerspectiveResolution("matched", home_id, away_id)
    if away_id in club:
        return PerspectiveResolution("matched", away_id, home_id)
    return PerspectiveResolution("fallback", home_id, away_id)
