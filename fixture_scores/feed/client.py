from __future__ import annotations

import json
import logging
import time
from typing import Any, Iterable, Optional

import requests

from fixture_scores.feed.parser import parse_games, parse_score_batch
from fixture_scores.models import Game, OfficialScoreEntry
from fixture_scores.settings import ScoreSettings, get_settings

logger = logging.getLogger(__name__)

MAX_ERROR_SNIPPET = 500
DEFAULT_USER_AGENT = "fixture-scores/1.0"


class FeedClientError(RuntimeError):
    pass


def _truncate(value: str, limit: int = MAX_ERROR_SNIPPET) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + "...<truncated>"


def _request_json(
    method: str,
    path: str,
    settings: ScoreSettings,
    *,
    body: Optional[dict[str, Any]] = None,
) -> Any:
    url = f"{settings.feed_base_url}{path}"
    headers = {
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": "application/json",
    }
    response = None
    last_exception: requests.RequestException | None = None
    for attempt in range(1, settings.feed_max_attempts + 1):
        try:
            response = requests.request(
                method,
                url,
                headers=headers,
                json=body,
                timeout=(settings.feed_connect_timeout_seconds, settings.feed_read_timeout_seconds),
            )
            break
        except requests.Timeout as exc:
            last_exception = exc
            logger.warning("Feed timeout %s %s attempt=%s", method, url, attempt)
            if attempt == settings.feed_max_attempts:
                break
            time.sleep(attempt)
        except requests.RequestException as exc:
            raise FeedClientError(f"Feed request failed: {exc}") from exc

    if response is None:
        assert last_exception is not None
        raise FeedClientError(
            f"Feed request {method} {url} failed after retries due to timeout. "
            f"Last error: {last_exception}"
        ) from last_exception

    if response.status_code >= 400:
        logger.error(
            "Feed non-2xx status=%s url=%s body=%s",
            response.status_code,
            url,
            _truncate(response.text),
        )
        raise FeedClientError(
            f"Feed API error {response.status_code}: {_truncate(response.text)}"
        )
    try:
        return response.json()
    except ValueError as exc:
        raise FeedClientError(
            "Feed returned non-JSON response: " + _truncate(response.text)
        ) from exc


def fetch_club_games(club_id: int, settings: Optional[ScoreSettings] = None) -> list[Game]:
    settings = settings or get_settings()
    payload = _request_json("GET", f"/api/clubs/{club_id}/games", settings)
    games = parse_games(payload)
    logger.info("Fetched %s games for club_id=%s", len(games), club_id)
    return games


def fetch_official_scores(
    club_id: int,
    game_ids: Iterable[int],
    settings: Optional[ScoreSettings] = None,
) -> dict[int, list[OfficialScoreEntry]]:
    """Batch-fetch official score entries keyed by game id.

    Games missing from the response map to an empty list.
    """
    settings = settings or get_settings()
    ids = sorted({game_id for game_id in game_ids if game_id > 0})
    if not ids:
        return {}
    payload = _request_json(
        "POST",
        f"/api/clubs/{club_id}/games/scores/batch",
        settings,
        body={"gameIds": ids},
    )
    if not isinstance(payload, dict):
        raise FeedClientError(
            "Feed batch scores response was not an object: "
            + _truncate(json.dumps(payload, ensure_ascii=False))
        )
    scores = parse_score_batch(payload)
    logger.info(
        "Fetched official scores for %s/%s games club_id=%s",
        sum(1 for game_id in ids if scores.get(game_id)),
        len(ids),
        club_id,
    )
    return {game_id: scores.get(game_id, []) for game_id in ids}
