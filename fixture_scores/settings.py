from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)
_SETTINGS: ScoreSettings | None = None

RECONCILE_STRATEGIES = ("home-priority", "away-priority", "higher", "lower", "average")


@dataclass(frozen=True)
class ScoreSettings:
    bye_status_id: int
    bye_status_name: str
    abandoned_status_name: str
    no_score_placeholder: str
    reconcile_strategy: str
    feed_base_url: str
    feed_connect_timeout_seconds: int
    feed_read_timeout_seconds: int
    feed_max_attempts: int
    log_level: str


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer. Using default %s.", name, raw, default)
        return default


def _env_str(name: str, default: str) -> str:
    value = (os.getenv(name) or "").strip()
    return value or default


def _reconcile_strategy() -> str:
    strategy = _env_str("RECONCILE_STRATEGY", "home-priority").lower()
    if strategy not in RECONCILE_STRATEGIES:
        logger.warning(
            "Unsupported RECONCILE_STRATEGY=%s. Supported: %s. Using home-priority.",
            strategy,
            ", ".join(RECONCILE_STRATEGIES),
        )
        return "home-priority"
    return strategy


def load_settings() -> ScoreSettings:
    """Read settings from the environment without touching the cache."""
    return ScoreSettings(
        bye_status_id=_env_int("BYE_STATUS_ID", 6),
        bye_status_name=_env_str("BYE_STATUS_NAME", "bye").lower(),
        abandoned_status_name=_env_str("ABANDONED_STATUS_NAME", "abandoned").lower(),
        no_score_placeholder=_env_str("NO_SCORE_PLACEHOLDER", "—"),
        reconcile_strategy=_reconcile_strategy(),
        feed_base_url=_env_str("FEED_BASE_URL", "http://localhost:5000").rstrip("/"),
        feed_connect_timeout_seconds=_env_int("FEED_CONNECT_TIMEOUT_SECONDS", 10),
        feed_read_timeout_seconds=_env_int("FEED_READ_TIMEOUT_SECONDS", 30),
        feed_max_attempts=max(1, _env_int("FEED_MAX_ATTEMPTS", 3)),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
    )


def get_settings() -> ScoreSettings:
    global _SETTINGS
    if _SETTINGS is not None:
        return _SETTINGS
    _SETTINGS = load_settings()
    return _SETTINGS


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _SETTINGS
    _SETTINGS = None
