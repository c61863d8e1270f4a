"""Recent scoring activity kept in memory and served at /api/logs.

Every ``fixture_scores.*`` logger propagates to the package logger, so one
handler there sees the engine, feed, settings and API alike. Score logs pass
their identifiers through ``extra=`` and those land in each entry's context.
"""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Optional

from fixture_scores.settings import get_settings

PACKAGE_LOGGER = "fixture_scores"
CONTEXT_FIELDS = ("game_id", "team_id", "perspective", "result", "source")


def level_number(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


class ActivityLog(logging.Handler):
    """Keeps the newest *capacity* records as plain dicts."""

    def __init__(self, capacity: int = 200) -> None:
        super().__init__(level=logging.DEBUG)
        self.setFormatter(logging.Formatter("%(message)s"))
        self._records: deque[tuple[int, dict]] = deque(maxlen=capacity)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                    timespec="seconds"
                ),
                "level": record.levelname,
                "logger": record.name,
                "message": self.format(record),
                "context": {
                    field: getattr(record, field)
                    for field in CONTEXT_FIELDS
                    if hasattr(record, field)
                },
            }
        except Exception:
            self.handleError(record)
            return
        self._records.append((record.levelno, entry))

    def entries(
        self,
        limit: int = 100,
        *,
        min_level: Optional[str] = None,
        logger_prefix: Optional[str] = None,
    ) -> list[dict]:
        """Newest first, filtered by minimum level and logger name prefix."""
        threshold = level_number(min_level) if min_level else logging.NOTSET
        selected: list[dict] = []
        for levelno, entry in reversed(self._records):
            if len(selected) >= limit:
                break
            if levelno < threshold:
                continue
            if logger_prefix and not entry["logger"].startswith(logger_prefix):
                continue
            selected.append(entry)
        return selected

    def clear(self) -> None:
        self._records.clear()


_activity_log: ActivityLog | None = None


def get_activity_log() -> ActivityLog:
    global _activity_log
    if _activity_log is None:
        _activity_log = ActivityLog()
    return _activity_log


def install_activity_log() -> ActivityLog:
    """Attach the activity log to the package logger and apply LOG_LEVEL."""
    activity_log = get_activity_log()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if activity_log not in package_logger.handlers:
        package_logger.addHandler(activity_log)

    # Attached first so warnings raised while reading settings are kept.
    configured = get_settings().log_level
    try:
        package_logger.setLevel(level_number(configured))
    except ValueError:
        package_logger.warning("LOG_LEVEL=%s is not a log level. Using INFO.", configured)
        package_logger.setLevel(logging.INFO)
    return activity_log
