"""CLI entrypoint for a team's win-rate and head-to-head summary."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from fixture_scores.feed.client import FeedClientError, fetch_club_games, fetch_official_scores
from fixture_scores.feed.parser import parse_games, parse_score_batch
from fixture_scores.models import Game, OfficialScoreEntry
from fixture_scores.scoring.aggregates import calculate_opponent_records, calculate_win_rate
from fixture_scores.settings import get_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute a team's win-rate from a JSON export or the club API.",
    )

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        "--file",
        type=str,
        help='JSON file shaped {"games": [...], "officialScores": {gameId: [...]}}.',
    )
    source_group.add_argument(
        "--club",
        type=int,
        help="Club id to fetch games and official scores for (uses FEED_BASE_URL).",
    )

    parser.add_argument("--team", type=int, required=True, help="Team id to report on.")
    parser.add_argument(
        "--club-teams",
        type=str,
        default="",
        help="Comma-separated team ids belonging to the club (marks inter-club games).",
    )
    parser.add_argument(
        "--opponents",
        action="store_true",
        help="Also print the head-to-head table per opponent.",
    )
    return parser.parse_args(argv)


def _parse_team_ids(raw: str) -> list[int]:
    ids: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            raise SystemExit(f"Invalid team id in --club-teams: {part}")
    return ids


def _load_file(path: str) -> tuple[list[Game], dict[int, list[OfficialScoreEntry]]]:
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SystemExit(f"Could not read {path}: {exc}")
    if not isinstance(payload, dict):
        raise SystemExit(f"{path} must contain a JSON object")
    games = parse_games(payload.get("games") or [])
    scores = parse_score_batch(payload.get("officialScores") or {})
    return games, scores


def _load_feed(club_id: int) -> tuple[list[Game], dict[int, list[OfficialScoreEntry]]]:
    try:
        games = fetch_club_games(club_id)
        scores = fetch_official_scores(club_id, [game.id for game in games])
    except FeedClientError as exc:
        raise SystemExit(str(exc))
    return games, scores


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    args = _parse_args(argv)
    club_team_ids = _parse_team_ids(args.club_teams)
    if args.file:
        games, scores = _load_file(args.file)
    else:
        games, scores = _load_feed(args.club)

    logging.info("Loaded games=%s scored_games=%s team=%s", len(games), len(scores), args.team)
    result = calculate_win_rate(games, args.team, scores, club_team_ids)
    print(
        f"Team {args.team}: {result.wins}W {result.losses}L {result.draws}D "
        f"from {result.total_games} games, win rate {result.win_rate:.1f}%"
    )

    if args.opponents:
        for record in calculate_opponent_records(games, args.team, scores, club_team_ids):
            name = record.opponent_name or f"Team {record.opponent_id}"
            print(
                f"  vs {name}: {record.games}P {record.wins}W {record.losses}L {record.draws}D "
                f"{record.goals_for}-{record.goals_against} ({record.win_rate:.1f}%)"
            )


if __name__ == "__main__":
    main()
