from __future__ import annotations

import unittest
from dataclasses import replace

from fixture_scores.models import CLUB_WIDE, Game, OfficialScoreEntry
from fixture_scores.scoring.aggregates import (
    calculate_opponent_records,
    calculate_quarter_averages,
    calculate_win_rate,
)
from fixture_scores.scoring.display import get_display_score
from fixture_scores.settings import load_settings


def _game(game_id: int, home: int | None, away: int | None, **overrides) -> Game:
    return Game(
        id=game_id,
        status_is_completed=overrides.pop("completed", True),
        home_team_id=home,
        away_team_id=away,
        **overrides,
    )


def _scores(game_id: int, home: int, away: int, per_quarter: list[tuple[int, int]]):
    entries = []
    for quarter, (home_score, away_score) in enumerate(per_quarter, start=1):
        entries.append(OfficialScoreEntry(game_id=game_id, team_id=home, quarter=quarter, score=home_score))
        entries.append(OfficialScoreEntry(game_id=game_id, team_id=away, quarter=quarter, score=away_score))
    return entries


class DisplayScoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.game = _game(1, 10, 20)
        self.scores = _scores(1, 10, 20, [(5, 4), (6, 3)])

    def test_team_perspective_reads_ours_first(self) -> None:
        self.assertEqual("11-7", get_display_score(self.game, self.scores, 10))
        self.assertEqual("7-11", get_display_score(self.game, self.scores, 20))

    def test_club_wide_reads_home_away_even_when_ours_is_away(self) -> None:
        self.assertEqual("11-7", get_display_score(self.game, self.scores, CLUB_WIDE, [20]))
        self.assertEqual("11-7", get_display_score(self.game, self.scores, CLUB_WIDE, [10]))
        self.assertEqual("11-7", get_display_score(self.game, self.scores, CLUB_WIDE))

    def test_bye_and_missing_scores(self) -> None:
        bye = _game(2, 10, None)
        upcoming = _game(3, 10, 20, completed=False)

        self.assertEqual("BYE", get_display_score(bye, [], 10))
        self.assertEqual("—", get_display_score(upcoming, [], 10))
        self.assertEqual("—", get_display_score(self.game, [], 10))

    def test_zero_zero_is_displayed_not_hidden(self) -> None:
        game = _game(4, 10, 20, status_team_goals=0, status_opponent_goals=0)

        self.assertEqual("0-0", get_display_score(game, [], 10))

    def test_placeholder_comes_from_settings(self) -> None:
        settings = replace(load_settings(), no_score_placeholder="n/a")

        self.assertEqual("n/a", get_display_score(self.game, [], 10, settings=settings))


class WinRateTests(unittest.TestCase):
    def test_games_without_derivable_score_are_excluded_from_denominator(self) -> None:
        games = [
            _game(1, 10, 20),
            _game(2, 30, 10),
            _game(3, 10, 40, status_team_goals=8, status_opponent_goals=8),
            _game(4, 10, 50),
            _game(5, 60, 10),
        ]
        scores = {
            1: _scores(1, 10, 20, [(5, 1)]),
            2: _scores(2, 30, 10, [(9, 2)]),
            # game 4 only has entries for one side
            4: [OfficialScoreEntry(game_id=4, team_id=10, quarter=1, score=12)],
        }

        result = calculate_win_rate(games, 10, scores)

        self.assertEqual(3, result.total_games)
        self.assertEqual((1, 1, 1), (result.wins, result.losses, result.draws))
        self.assertAlmostEqual(100 / 3, result.win_rate)

    def test_byes_upcoming_and_other_teams_are_filtered(self) -> None:
        games = [
            _game(1, 10, None, status_team_goals=5, status_opponent_goals=0),
            _game(2, 10, 20, completed=False, status_team_goals=5, status_opponent_goals=0),
            _game(3, 30, 40, status_team_goals=5, status_opponent_goals=0),
            _game(4, 20, 10, status_team_goals=1, status_opponent_goals=5),
        ]

        result = calculate_win_rate(games, 10)

        self.assertEqual(1, result.total_games)
        self.assertEqual(1, result.wins)
        self.assertEqual(100.0, result.win_rate)

    def test_no_counted_games_gives_zero_rate(self) -> None:
        result = calculate_win_rate([], 10)

        self.assertEqual(0, result.total_games)
        self.assertEqual(0.0, result.win_rate)

    def test_inter_club_game_still_counts_numerically(self) -> None:
        games = [_game(1, 10, 20, status_team_goals=3, status_opponent_goals=9)]

        result = calculate_win_rate(games, 20, {}, [10, 20])

        self.assertEqual((1, 0, 0), (result.wins, result.losses, result.draws))


class QuarterAverageTests(unittest.TestCase):
    def test_averages_only_use_officially_scored_games(self) -> None:
        games = [
            _game(1, 10, 20),
            _game(2, 30, 10),
            _game(3, 10, 40, status_team_goals=50, status_opponent_goals=0),
        ]
        scores = {
            1: _scores(1, 10, 20, [(4, 2), (6, 6)]),
            2: _scores(2, 30, 10, [(1, 8)]),
        }

        averages = calculate_quarter_averages(games, 10, scores)

        self.assertEqual([1, 2, 3, 4], [a.quarter for a in averages])
        q1, q2, q3, _q4 = averages
        self.assertEqual(2, q1.games)
        self.assertEqual(6.0, q1.average_our_score)
        self.assertEqual(1.5, q1.average_their_score)
        self.assertEqual(1, q2.games)
        self.assertEqual(6.0, q2.average_their_score)
        self.assertEqual(0, q3.games)
        self.assertEqual(0.0, q3.average_our_score)


class AbandonedGameTests(unittest.TestCase):
    def setUp(self) -> None:
        self.games = [
            _game(1, 10, 20, status_name="Abandoned"),
            _game(2, 10, 30),
        ]
        self.scores = {
            1: _scores(1, 10, 20, [(2, 9)]),
            2: _scores(2, 10, 30, [(6, 1)]),
        }

    def test_abandoned_game_is_left_out_of_win_rate(self) -> None:
        result = calculate_win_rate(self.games, 10, self.scores)

        self.assertEqual((1, 0, 0), (result.wins, result.losses, result.draws))
        self.assertEqual(1, result.total_games)
        self.assertEqual(100.0, result.win_rate)

    def test_abandoned_game_is_left_out_of_quarter_averages(self) -> None:
        q1 = calculate_quarter_averages(self.games, 10, self.scores)[0]

        self.assertEqual(1, q1.games)
        self.assertEqual(6.0, q1.average_our_score)
        self.assertEqual(1.0, q1.average_their_score)

    def test_abandoned_game_is_left_out_of_opponent_records(self) -> None:
        records = calculate_opponent_records(self.games, 10, self.scores)

        self.assertEqual([30], [r.opponent_id for r in records])

    def test_abandoned_status_name_comes_from_settings(self) -> None:
        settings = replace(load_settings(), abandoned_status_name="called off")
        games = [_game(1, 10, 20, status_name="Called Off"), _game(2, 10, 30, status_name="abandoned")]

        result = calculate_win_rate(games, 10, self.scores, settings=settings)

        self.assertEqual(1, result.total_games)
        self.assertEqual(1, result.wins)


class OpponentRecordTests(unittest.TestCase):
    def test_groups_results_by_opponent(self) -> None:
        games = [
            _game(1, 10, 20, away_team_name="Rovers"),
            _game(2, 20, 10, status_team_goals=4, status_opponent_goals=4, home_team_name="Rovers"),
            _game(3, 10, 30, status_team_goals=2, status_opponent_goals=7),
            _game(4, 10, 20, completed=False),
        ]
        scores = {1: _scores(1, 10, 20, [(10, 3)])}

        records = calculate_opponent_records(games, 10, scores, opponent_names={30: "City"})

        self.assertEqual([20, 30], [r.opponent_id for r in records])
        rovers, city = records
        self.assertEqual("Rovers", rovers.opponent_name)
        self.assertEqual((2, 1, 0, 1), (rovers.games, rovers.wins, rovers.losses, rovers.draws))
        self.assertEqual((14, 7, 7), (rovers.goals_for, rovers.goals_against, rovers.goal_difference))
        self.assertEqual(50.0, rovers.win_rate)
        self.assertEqual("City", city.opponent_name)
        self.assertEqual(1, city.losses)
        self.assertEqual(0.0, city.win_rate)


if __name__ == "__main__":
    unittest.main()
