from __future__ import annotations

import unittest

from fixture_scores.models import CLUB_WIDE, Game
from fixture_scores.scoring.perspective import resolve_perspective


class ResolvePerspectiveTests(unittest.TestCase):
    def setUp(self) -> None:
        self.game = Game(id=7, status_is_completed=True, home_team_id=1, away_team_id=2)

    def test_team_perspective_matches_away_side(self) -> None:
        resolution = resolve_perspective(self.game, 2)

        self.assertEqual("matched", resolution.kind)
        self.assertEqual((2, 1), (resolution.our_team_id, resolution.their_team_id))
        self.assertFalse(resolution.is_fallback)

    def test_team_perspective_outside_fixture_falls_back_to_home_away(self) -> None:
        resolution = resolve_perspective(self.game, 3)

        self.assertTrue(resolution.is_fallback)
        self.assertEqual((1, 2), (resolution.our_team_id, resolution.their_team_id))

    def test_club_wide_with_both_sides_owned_is_inter_club(self) -> None:
        resolution = resolve_perspective(self.game, CLUB_WIDE, [1, 2, 5])

        self.assertEqual("matched", resolution.kind)
        self.assertTrue(resolution.is_inter_club)
        self.assertEqual((1, 2), (resolution.our_team_id, resolution.their_team_id))

    def test_club_wide_with_home_owned(self) -> None:
        resolution = resolve_perspective(self.game, CLUB_WIDE, {1})

        self.assertEqual((1, 2), (resolution.our_team_id, resolution.their_team_id))
        self.assertFalse(resolution.is_inter_club)
        self.assertEqual("matched", resolution.kind)

    def test_club_wide_without_registry_falls_back(self) -> None:
        for club in (None, [], [8, 9]):
            with self.subTest(club=club):
                resolution = resolve_perspective(self.game, CLUB_WIDE, club)

                self.assertEqual("fallback", resolution.kind)
                self.assertEqual((1, 2), (resolution.our_team_id, resolution.their_team_id))

    def test_null_side_resolves_to_zero(self) -> None:
        game = Game(id=8, status_is_completed=True, home_team_id=1, away_team_id=None)

        resolution = resolve_perspective(game, 1)

        self.assertEqual((1, 0), (resolution.our_team_id, resolution.their_team_id))

    def test_team_perspective_also_flags_inter_club(self) -> None:
        resolution = resolve_perspective(self.game, 1, [1, 2])

        self.assertTrue(resolution.is_inter_club)


if __name__ == "__main__":
    unittest.main()
