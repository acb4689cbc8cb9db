#!/usr/bin/env python
"""
Tests for the move-selection pipeline and the bot strategies.
"""
import unittest

from connect4_ai.core.constants import Cell
from connect4_ai.core.game import Game
from connect4_ai.bots import (
    BOT_REGISTRY, BalancedBot, BotStrategy, DefensiveBot, MinimaxBot, MoveDecision,
    RandomBot, SelectionStage, SmartRandomBot, StrategyWeights,
    available_bots, create_bot
)
from connect4_ai.bots.heuristic import score_features
from connect4_ai.analysis.evaluation import move_features
from connect4_ai.mcts import MCTSConfig, MonteCarloBot

from test_analysis import FORK_ROWS, TRAPPED_ROWS, UNSAFE_COLUMN_ROWS, WIN_AND_BLOCK_ROWS


def make_bot(name, seed=7):
    """Create a registered bot with a small search budget."""
    if name == "monte-carlo":
        config = MCTSConfig(simulations=60, min_simulations=20, time_limit=1.0, random_seed=seed)
        return MonteCarloBot(config=config)
    return create_bot(name, random_seed=seed)


class UnsafeBot(BotStrategy):
    """Always asks for column 3, whatever the pipeline offers."""
    name = "unsafe"

    def select_from_safe_columns(self, game, candidate_columns):
        return 3


class TestPipeline(unittest.TestCase):
    """Test case for the four pipeline stages."""

    def test_immediate_win(self):
        game = Game.from_rows(["_YYY___"], current_player=Cell.YELLOW)
        decision = SmartRandomBot(random_seed=1).select_move(game)

        self.assertEqual(decision.stage, SelectionStage.IMMEDIATE_WIN)
        self.assertIn(decision.column, [0, 4])
        self.assertEqual(decision.candidates, [0, 4])
        self.assertFalse(decision.trapped)

    def test_forced_block(self):
        game = Game.from_rows(["RRR____"], current_player=Cell.YELLOW)
        decision = BalancedBot(random_seed=1).select_move(game)

        self.assertEqual(decision.stage, SelectionStage.FORCED_BLOCK)
        self.assertEqual(decision.column, 3)

    def test_win_beats_block(self):
        game = Game.from_rows(WIN_AND_BLOCK_ROWS)
        self.assertEqual(game.current_player, Cell.YELLOW)

        for name in available_bots():
            if name == "random":
                continue
            decision = make_bot(name).select_move(game)
            self.assertEqual(decision.stage, SelectionStage.IMMEDIATE_WIN, name)
            self.assertEqual(decision.column, 4, name)

    def test_strategy_stage_only_sees_safe_columns(self):
        game = Game.from_rows(UNSAFE_COLUMN_ROWS, current_player=Cell.YELLOW)

        for name in available_bots():
            if name == "random":
                continue
            decision = make_bot(name).select_move(game)
            self.assertEqual(decision.stage, SelectionStage.STRATEGY, name)
            self.assertEqual(decision.candidates, [0, 1, 2, 4, 5, 6], name)
            self.assertIn(decision.column, decision.candidates, name)
            self.assertFalse(decision.trapped, name)

    def test_trapped_fallback(self):
        game = Game.from_rows(TRAPPED_ROWS, current_player=Cell.YELLOW)

        for name in available_bots():
            if name == "random":
                continue
            decision = make_bot(name).select_move(game)
            self.assertEqual(decision.stage, SelectionStage.TRAP_AVOIDANCE, name)
            self.assertTrue(decision.trapped, name)
            self.assertEqual(decision.column, 4, name)
            self.assertTrue(decision.analysis.trapped, name)

    def test_no_moves(self):
        game = Game.from_moves([0, 1, 0, 1, 0, 1, 0])
        decision = DefensiveBot().select_move(game)

        self.assertIsNone(decision.column)
        self.assertEqual(decision.stage, SelectionStage.NO_MOVES)
        with self.assertRaises(ValueError):
            DefensiveBot().get_move(game)

    def test_strategy_outside_candidates_is_rejected(self):
        game = Game.from_rows(UNSAFE_COLUMN_ROWS, current_player=Cell.YELLOW)
        with self.assertRaises(ValueError):
            UnsafeBot().select_move(game)

    def test_pipeline_does_not_mutate_game(self):
        game = Game.from_rows(UNSAFE_COLUMN_ROWS, current_player=Cell.YELLOW)
        rows_before = game.board.to_rows()
        make_bot("defensive-mixed").select_move(game)
        make_bot("monte-carlo").select_move(game)
        self.assertEqual(game.board.to_rows(), rows_before)
        self.assertEqual(game.move_history, [])


class TestStrategies(unittest.TestCase):
    """Test case for the individual strategies."""

    def test_registry(self):
        self.assertEqual(
            set(available_bots()),
            {"random", "smart-random", "offensive-mixed", "defensive-mixed",
             "defensive", "balanced", "minimax", "monte-carlo"},
        )
        for name, bot_class in BOT_REGISTRY.items():
            self.assertEqual(bot_class.name, name)

    def test_unknown_bot(self):
        with self.assertRaises(KeyError):
            create_bot("perfect")

    def test_empty_candidates_fall_back_to_legal_moves(self):
        game = Game.from_moves([3, 3])
        for name in available_bots():
            column = make_bot(name).select_from_safe_columns(game, [])
            self.assertIn(column, game.get_valid_moves(), name)

    def test_single_candidate(self):
        game = Game()
        for name in available_bots():
            self.assertEqual(make_bot(name).select_from_safe_columns(game, [5]), 5, name)

    def test_random_bot_ignores_pipeline(self):
        game = Game.from_rows(["_YYY___"], current_player=Cell.YELLOW)
        decision = RandomBot(random_seed=3).select_move(game)
        self.assertEqual(decision.stage, SelectionStage.STRATEGY)
        self.assertEqual(decision.candidates, game.get_valid_moves())

    def test_seeded_bots_are_reproducible(self):
        game = Game.from_moves([3, 2, 4])
        first = [make_bot("smart-random", seed=5).get_move(game) for _ in range(3)]
        second = [make_bot("smart-random", seed=5).get_move(game) for _ in range(3)]
        self.assertEqual(first, second)

    def test_heuristic_scores_recorded(self):
        game = Game.from_moves([3, 3])
        bot = make_bot("offensive-mixed")
        column = bot.get_move(game)
        self.assertEqual(set(bot.last_scores), set(bot.last_decision.candidates))
        self.assertEqual(column, max(bot.last_scores, key=bot.last_scores.get))

    def test_register_with_game(self):
        game = Game()
        SmartRandomBot(random_seed=1).register_with_game(game, Cell.YELLOW)
        make_bot("defensive").register_with_game(game, Cell.RED)

        state = game.run_game()
        self.assertTrue(state.game_over)

    def test_get_info(self):
        info = make_bot("defensive").get_info()
        self.assertEqual(info["name"], "defensive")
        self.assertEqual(info["type"], "heuristic")
        self.assertEqual(info["weights"]["offensive"], 0.0)


class TestMinimaxBot(unittest.TestCase):
    """Test case for the alpha-beta strategy."""

    def test_finds_double_threat(self):
        game = Game.from_rows(["_YY____"], current_player=Cell.YELLOW)
        bot = MinimaxBot(depth=3)

        decision = bot.select_move(game)
        self.assertEqual(decision.stage, SelectionStage.STRATEGY)
        self.assertEqual(decision.column, 3)
        self.assertGreater(bot.last_values[3], 1000000)
        self.assertEqual(game.board.to_rows()[-1], ".YY....")

    def test_difficulty_sets_depth(self):
        self.assertEqual(MinimaxBot().depth, 3)
        self.assertEqual(MinimaxBot(difficulty="expert").depth, 7)
        self.assertEqual(MinimaxBot(depth=2, difficulty="easy").depth, 2)

    def test_invalid_settings(self):
        with self.assertRaises(ValueError):
            MinimaxBot(difficulty="impossible")
        with self.assertRaises(ValueError):
            MinimaxBot(depth=0)

    def test_get_info(self):
        info = create_bot("minimax", random_seed=1).get_info()
        self.assertEqual(info["type"], "search")
        self.assertEqual(info["depth"], 3)


class TestStrategyWeights(unittest.TestCase):
    """Test case for StrategyWeights."""

    def test_default_weights_construct(self):
        weights = StrategyWeights()
        self.assertEqual(weights.defensive, 1.0)
        self.assertEqual(StrategyWeights.balanced(), weights)
        self.assertEqual(StrategyWeights.from_dict({"center": 2.0}).defensive, 1.0)
        self.assertEqual(create_bot("balanced").weights, weights)
        self.assertEqual(BalancedBot().weights.defensive, 1.0)

    def test_negative_weight_rejected(self):
        with self.assertRaises(ValueError):
            StrategyWeights(defensive=-1.0)

    def test_presets(self):
        offensive = StrategyWeights.offensive_mixed()
        defensive = StrategyWeights.defensive_mixed()
        self.assertEqual(offensive.offensive, 2 * offensive.defensive)
        self.assertEqual(defensive.defensive, 2 * defensive.offensive)
        self.assertEqual(StrategyWeights.defensive_only().offensive, 0.0)

    def test_dict_round_trip(self):
        weights = StrategyWeights.defensive_only()
        self.assertEqual(StrategyWeights.from_dict(weights.to_dict()), weights)
        self.assertEqual(StrategyWeights.from_dict({"center": 2.0, "unknown": 1}).center, 2.0)

    def test_zero_weights_score_zero(self):
        game = Game.from_moves([3, 2])
        features = move_features(game, 3)
        names = StrategyWeights().to_dict()
        zero = StrategyWeights.from_dict({name: 0.0 for name in names})
        self.assertEqual(score_features(features, zero), 0.0)

    def test_lookahead_penalty_dominates(self):
        game = Game.from_rows(UNSAFE_COLUMN_ROWS, current_player=Cell.YELLOW)
        weights = StrategyWeights.balanced()
        losing = score_features(move_features(game, 3), weights)
        quiet = score_features(move_features(game, 4), weights)
        self.assertLess(losing, quiet)

    def test_fork_penalty_lowers_score(self):
        game = Game.from_rows(FORK_ROWS, current_player=Cell.YELLOW)
        for weights in (StrategyWeights.balanced(), StrategyWeights.defensive_only()):
            allows_fork = score_features(move_features(game, 6), weights)
            caps_line = score_features(move_features(game, 4), weights)
            self.assertLess(allows_fork, caps_line)

    def test_move_decision_defaults(self):
        decision = MoveDecision(column=3, stage=SelectionStage.STRATEGY)
        self.assertEqual(decision.candidates, [])
        self.assertFalse(decision.trapped)


if __name__ == "__main__":
    unittest.main()
