#!/usr/bin/env python
"""
Tests for bot-versus-bot matches and symmetric series.
"""
import random
import unittest

from rich.console import Console

from connect4_ai.core.constants import Cell
from connect4_ai.core.game import Game
from connect4_ai.bots import RandomBot, SmartRandomBot
from connect4_ai.arena import (
    MatchRecord, SeatingResult, SeriesResult,
    main, parse_args, play_match, print_series, run_series
)


class TestPlayMatch(unittest.TestCase):
    """Test case for single matches."""

    def test_match_replays_to_same_result(self):
        record = play_match(RandomBot(random_seed=1), RandomBot(random_seed=2))

        self.assertGreaterEqual(record.length, 7)
        self.assertLessEqual(record.length, 42)

        replay = Game.from_moves(record.moves)
        self.assertTrue(replay.game_over)
        self.assertEqual(replay.winner, record.winner)

    def test_pipeline_bot_beats_random_bot(self):
        wins = 0
        for seed in range(10):
            record = play_match(SmartRandomBot(random_seed=seed), RandomBot(random_seed=100 + seed))
            if record.winner == Cell.YELLOW:
                wins += 1
        self.assertGreaterEqual(wins, 6)

    def test_match_record_defaults(self):
        record = MatchRecord(winner=None)
        self.assertTrue(record.is_draw)
        self.assertEqual(record.trapped_turns, {Cell.YELLOW: 0, Cell.RED: 0})


class TestSeries(unittest.TestCase):
    """Test case for symmetric series."""

    def test_series_counts(self):
        result = run_series(RandomBot(random_seed=3), SmartRandomBot(random_seed=4), 4, show_progress=False)

        self.assertEqual(result.a_first.games, 4)
        self.assertEqual(result.b_first.games, 4)
        self.assertEqual(result.a_total_wins + result.b_total_wins + result.total_draws, 8)
        self.assertEqual(result.a_first.first, "random")
        self.assertEqual(result.b_first.first, "smart-random")

    def test_games_must_be_positive(self):
        with self.assertRaises(ValueError):
            run_series(RandomBot(), RandomBot(), 0)

    def test_symmetry_gap(self):
        a_first = SeatingResult(first="a", second="b", wins=6, losses=3, draws=1)
        b_first = SeatingResult(first="b", second="a", wins=5, losses=4, draws=1)
        result = SeriesResult(bot_a="a", bot_b="b", a_first=a_first, b_first=b_first)

        self.assertAlmostEqual(result.a_win_rate_first, 0.6)
        self.assertAlmostEqual(result.a_win_rate_second, 0.4)
        self.assertAlmostEqual(result.a_loss_rate_second, 0.5)
        self.assertAlmostEqual(result.symmetry_gap(), 10.0)
        self.assertTrue(result.is_symmetric(15.0))
        self.assertFalse(result.is_symmetric(5.0))
        self.assertEqual(result.a_total_wins, 10)
        self.assertEqual(result.b_total_wins, 8)
        self.assertEqual(result.total_draws, 2)

    def test_first_move_advantage_does_not_count_as_gap(self):
        # The first mover wins every game in both seatings
        a_first = SeatingResult(first="a", second="b", wins=10)
        b_first = SeatingResult(first="b", second="a", wins=10)
        result = SeriesResult(bot_a="a", bot_b="b", a_first=a_first, b_first=b_first)

        self.assertAlmostEqual(result.a_win_rate_first, 1.0)
        self.assertAlmostEqual(result.a_win_rate_second, 0.0)
        self.assertAlmostEqual(result.symmetry_gap(), 0.0)
        self.assertTrue(result.is_symmetric(0.0))

    def test_random_self_play_is_roughly_symmetric(self):
        result = run_series(RandomBot(random_seed=10), RandomBot(random_seed=20), 200, show_progress=False)
        self.assertTrue(result.is_symmetric(20.0), result.to_dict())

    def test_print_series(self):
        result = run_series(RandomBot(random_seed=5), RandomBot(random_seed=6), 2, show_progress=False)
        console = Console(record=True, width=120)
        print_series(result, 10.0, console=console)
        text = console.export_text()
        self.assertIn("Seat-swap gap", text)
        self.assertIn("random", text)


class TestArenaCLI(unittest.TestCase):
    """Test case for argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        self.assertEqual(args.bot1, "offensive-mixed")
        self.assertEqual(args.bot2, "defensive")
        self.assertEqual(args.games, 20)

    def test_unknown_bot_rejected(self):
        with self.assertRaises(SystemExit):
            parse_args(["--bot1", "perfect"])

    def test_seed_leaves_global_random_state_alone(self):
        state = random.getstate()
        main(["--bot1", "random", "--bot2", "random", "--games", "2", "--seed", "3"])
        self.assertEqual(random.getstate(), state)


if __name__ == "__main__":
    unittest.main()
