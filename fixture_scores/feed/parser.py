"""Parser for club API game and official-score payloads."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from fixture_scores.models import Game, OfficialScoreEntry

logger = logging.getLogger(__name__)


def _safe_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _records(payload: Any, key: str) -> list:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        inner = payload.get(key, payload.get("data"))
        if isinstance(inner, list):
            return inner
    return []


def parse_games(payload: Any) -> list[Game]:
    """Parse a game list (bare list or ``{"games": [...]}``) into Game records.

    Records that fail validation are skipped, never coerced.
    """
    games: list[Game] = []
    seen_ids: set[int] = set()
    for record in _records(payload, "games"):
        if not isinstance(record, dict):
            continue
        try:
            game = Game.model_validate(record)
        except ValidationError as exc:
            logger.warning("Skipping invalid game record id=%s: %s", record.get("id"), exc.error_count())
            continue
        if game.id in seen_ids:
            continue
        seen_ids.add(game.id)
        games.append(game)
    return games


def parse_official_scores(game_id: int, records: Any) -> list[OfficialScoreEntry]:
    entries: list[OfficialScoreEntry] = []
    if not isinstance(records, list):
        return entries
    for record in records:
        if not isinstance(record, dict):
            continue
        data = dict(record)
        if "gameId" not in data and "game_id" not in data:
            data["gameId"] = game_id
        try:
            entry = OfficialScoreEntry.model_validate(data)
        except ValidationError as exc:
            logger.warning(
                "Skipping invalid score entry game_id=%s: %s", game_id, exc.error_count()
            )
            continue
        if entry.game_id != game_id:
            logger.warning(
                "Skipping score entry for game_id=%s filed under game_id=%s",
                entry.game_id,
                game_id,
            )
            continue
        entries.append(entry)
    return entries


def parse_score_batch(payload: Any) -> dict[int, list[OfficialScoreEntry]]:
    """Parse ``{gameId: [entry, ...]}`` as returned by the batch scores endpoint."""
    if not isinstance(payload, dict):
        return {}
    scores: dict[int, list[OfficialScoreEntry]] = {}
    for raw_game_id, records in payload.items():
        game_id = _safe_int(raw_game_id)
        if game_id is None:
            continue
        scores[game_id] = parse_official_scores(game_id, records)
    return scores
