#!/usr/bin/env python
"""
Tests for the Connect Four board and game state machine.

Covers move application, win and draw detection, structured failures,
exact undo, side-effect-free simulation and event notifications.
"""
import unittest

import numpy as np

from connect4_ai.core.board import Board
from connect4_ai.core.constants import Cell, COLS, ROWS, opponent_of
from connect4_ai.core.game import (
    Game, GameEvent, GameResult, FailureReason, MoveOutcome
)


# A full board without any four in a row (rows alternate between two patterns)
DRAW_ROWS = [
    "YYRRYYR",
    "RRYYRRY",
    "YYRRYYR",
    "RRYYRRY",
    "YYRRYYR",
    "RRYYRRY",
]


class TestBoard(unittest.TestCase):
    """Test case for the Board."""

    def test_empty_board(self):
        board = Board()
        self.assertEqual(board.grid.shape, (ROWS, COLS))
        self.assertEqual(board.piece_count(), 0)
        self.assertEqual(board.valid_moves(), list(range(COLS)))
        self.assertEqual(board.drop_row(3), ROWS - 1)

    def test_place_and_remove(self):
        board = Board()
        self.assertEqual(board.place(2, Cell.YELLOW), 5)
        self.assertEqual(board.place(2, Cell.RED), 4)
        self.assertEqual(board.cell(5, 2), Cell.YELLOW)
        self.assertEqual(board.cell(4, 2), Cell.RED)

        self.assertEqual(board.remove(2), Cell.RED)
        self.assertEqual(board.cell(4, 2), Cell.EMPTY)
        self.assertEqual(board.heights[2], 1)

    def test_place_into_full_column_raises(self):
        board = Board()
        for i in range(ROWS):
            board.place(0, Cell.YELLOW if i % 2 == 0 else Cell.RED)
        self.assertFalse(board.is_valid_move(0))
        self.assertEqual(board.drop_row(0), -1)
        with self.assertRaises(ValueError):
            board.place(0, Cell.YELLOW)

    def test_from_rows_fills_from_bottom(self):
        board = Board.from_rows(["_YR____"])
        self.assertEqual(board.cell(5, 1), Cell.YELLOW)
        self.assertEqual(board.cell(5, 2), Cell.RED)
        self.assertEqual(board.heights, [0, 1, 1, 0, 0, 0, 0])

    def test_floating_piece_rejected(self):
        with self.assertRaises(ValueError):
            Board.from_rows(["Y______", "_______"])

    def test_copy_is_independent(self):
        board = Board.from_rows(["YR_____"])
        copy = board.copy()
        copy.place(3, Cell.YELLOW)
        self.assertEqual(board.cell(5, 3), Cell.EMPTY)
        self.assertNotEqual(board, copy)

    def test_to_rows_round_trip(self):
        board = Board.from_rows(DRAW_ROWS)
        self.assertEqual(Board.from_rows(board.to_rows()), board)
        self.assertTrue(board.is_full())


class TestGameMoves(unittest.TestCase):
    """Test case for make_move and its failures."""

    def setUp(self):
        self.game = Game()

    def test_initial_state(self):
        self.assertEqual(self.game.current_player, Cell.YELLOW)
        self.assertFalse(self.game.game_over)
        self.assertIsNone(self.game.winner)
        self.assertEqual(self.game.winning_cells, [])
        self.assertEqual(self.game.get_valid_moves(), list(range(COLS)))
        self.assertEqual(self.game.get_result(), GameResult.IN_PROGRESS)

    def test_move_lands_on_lowest_free_row(self):
        first = self.game.make_move(3)
        second = self.game.make_move(3)

        self.assertTrue(first.success)
        self.assertEqual((first.row, first.column, first.player), (5, 3, Cell.YELLOW))
        self.assertEqual(first.outcome, MoveOutcome.CONTINUE)
        self.assertEqual((second.row, second.player), (4, Cell.RED))
        self.assertEqual(self.game.current_player, Cell.YELLOW)

    def test_invalid_column(self):
        for column in (-1, COLS, 3.5, "3", True):
            result = self.game.make_move(column)
            self.assertFalse(result.success)
            self.assertEqual(result.reason, FailureReason.INVALID_COLUMN)
        self.assertEqual(self.game.move_count, 0)
        self.assertEqual(self.game.current_player, Cell.YELLOW)

    def test_numpy_integer_column_accepted(self):
        result = self.game.make_move(np.int64(2))
        self.assertTrue(result.success)
        self.assertEqual(result.column, 2)

    def test_column_full(self):
        game = Game.from_moves([0] * ROWS)
        result = game.make_move(0)

        self.assertFalse(result.success)
        self.assertEqual(result.reason, FailureReason.COLUMN_FULL)
        self.assertNotIn(0, game.get_valid_moves())
        self.assertEqual(game.move_count, ROWS)

    def test_heights_match_history(self):
        game = Game.from_moves([3, 3, 4, 2, 3, 6])
        for column in range(COLS):
            recorded = sum(1 for move in game.move_history if move.column == column)
            self.assertEqual(game.board.heights[column], recorded)
            filled = [game.board.cell(row, column) != Cell.EMPTY for row in range(ROWS)]
            # Occupied cells are contiguous from the bottom
            self.assertEqual(filled, [False] * (ROWS - recorded) + [True] * recorded)


class TestWinDetection(unittest.TestCase):
    """Test case for win and draw detection."""

    def test_horizontal_win(self):
        game = Game.from_moves([0, 0, 1, 1, 2, 2])
        result = game.make_move(3)

        self.assertEqual(result.outcome, MoveOutcome.WIN)
        self.assertEqual(list(result.winning_cells), [(5, 0), (5, 1), (5, 2), (5, 3)])
        self.assertTrue(game.game_over)
        self.assertEqual(game.winner, Cell.YELLOW)
        self.assertEqual(game.winning_cells, [(5, 0), (5, 1), (5, 2), (5, 3)])
        self.assertEqual(game.get_result(), GameResult.WINNER)

    def test_vertical_win(self):
        game = Game.from_moves([0, 1, 0, 1, 0, 1, 0])
        self.assertEqual(game.winner, Cell.YELLOW)
        self.assertEqual(sorted(game.winning_cells), [(2, 0), (3, 0), (4, 0), (5, 0)])

    def test_diagonal_win(self):
        game = Game.from_moves([0, 1, 1, 2, 2, 3, 2, 3, 6, 3, 3])
        self.assertEqual(game.winner, Cell.YELLOW)
        self.assertEqual(game.winning_cells, [(2, 3), (3, 2), (4, 1), (5, 0)])

    def test_run_longer_than_four_is_recorded_whole(self):
        game = Game.from_moves([0, 6, 1, 6, 4, 0, 5, 0, 2, 1, 3])
        self.assertEqual(game.winner, Cell.YELLOW)
        self.assertEqual(game.winning_cells, [(5, col) for col in range(6)])

    def test_no_moves_after_game_over(self):
        game = Game.from_moves([0, 1, 0, 1, 0, 1, 0])
        self.assertEqual(game.get_valid_moves(), [])

        result = game.make_move(4)
        self.assertFalse(result.success)
        self.assertEqual(result.reason, FailureReason.GAME_ALREADY_OVER)

    def test_draw_on_full_board(self):
        rows = list(DRAW_ROWS)
        rows[0] = "_" + rows[0][1:]
        game = Game.from_rows(rows, current_player=Cell.YELLOW)
        self.assertFalse(game.game_over)

        result = game.make_move(0)
        self.assertEqual(result.outcome, MoveOutcome.DRAW)
        self.assertTrue(game.game_over)
        self.assertIsNone(game.winner)
        self.assertEqual(game.winning_cells, [])
        self.assertEqual(game.get_result(), GameResult.DRAW)

    def test_from_rows_detects_existing_win(self):
        game = Game.from_rows(["YYYYRRR"])
        self.assertTrue(game.game_over)
        self.assertEqual(game.winner, Cell.YELLOW)
        self.assertEqual(len(game.winning_cells), 4)


class TestUndo(unittest.TestCase):
    """Test case for undo_move."""

    def test_undo_on_empty_history(self):
        result = Game().undo_move()
        self.assertFalse(result.success)
        self.assertEqual(result.reason, FailureReason.NO_MOVE_TO_UNDO)

    def test_undo_restores_previous_state(self):
        game = Game.from_moves([3, 3, 4])
        rows_before = game.board.to_rows()
        player_before = game.current_player
        history_before = list(game.move_history)

        game.make_move(5)
        result = game.undo_move()

        self.assertTrue(result.success)
        self.assertEqual(result.move.column, 5)
        self.assertEqual(game.board.to_rows(), rows_before)
        self.assertEqual(game.current_player, player_before)
        self.assertEqual(game.move_history, history_before)
        self.assertEqual(game.board.heights[5], 0)

    def test_undo_winning_move(self):
        game = Game.from_moves([0, 0, 1, 1, 2, 2])
        rows_before = game.board.to_rows()
        game.make_move(3)
        game.undo_move()

        self.assertFalse(game.game_over)
        self.assertIsNone(game.winner)
        self.assertEqual(game.winning_cells, [])
        self.assertEqual(game.current_player, Cell.YELLOW)
        self.assertEqual(game.board.to_rows(), rows_before)
        self.assertEqual(game.get_valid_moves(), list(range(COLS)))

    def test_undo_everything_returns_to_empty_board(self):
        moves = [3, 2, 4, 4, 1, 0]
        game = Game.from_moves(moves)
        for _ in moves:
            self.assertTrue(game.undo_move().success)
        self.assertEqual(game.board, Board())
        self.assertEqual(game.current_player, Cell.YELLOW)
        self.assertFalse(game.can_undo())


class TestSimulation(unittest.TestCase):
    """Test case for simulate_move and clone."""

    def test_simulate_move_does_not_mutate(self):
        game = Game.from_moves([3, 3])
        events = []
        game.on(GameEvent.MOVE_MADE, events.append)
        rows_before = game.board.to_rows()

        result = game.simulate_move(3)

        self.assertEqual((result.row, result.column, result.player), (3, 3, Cell.YELLOW))
        self.assertEqual(result.board.cell(3, 3), Cell.YELLOW)
        self.assertEqual(game.board.to_rows(), rows_before)
        self.assertEqual(game.move_count, 2)
        self.assertEqual(events, [])

    def test_simulate_for_other_player(self):
        game = Game.from_rows(["RRR____"], current_player=Cell.YELLOW)
        result = game.simulate_move(3, Cell.RED)
        self.assertTrue(result.would_win)
        self.assertEqual(result.player, Cell.RED)
        self.assertFalse(game.game_over)

    def test_simulate_illegal_column(self):
        game = Game.from_moves([0] * ROWS)
        self.assertIsNone(game.simulate_move(0))
        self.assertIsNone(game.simulate_move(COLS))

    def test_simulate_non_integral_column(self):
        game = Game()
        self.assertIsNone(game.simulate_move(3.0))
        self.assertIsNone(game.simulate_move("3"))
        self.assertIsNone(game.simulate_move(True))
        self.assertIsNone(game.simulate_move(-1))
        self.assertEqual(game.simulate_move(3).row, ROWS - 1)

    def test_clone_is_independent(self):
        game = Game.from_moves([3, 4])
        events = []
        game.on(GameEvent.MOVE_MADE, events.append)

        clone = game.clone()
        clone.make_move(2)

        self.assertEqual(game.move_count, 2)
        self.assertEqual(clone.move_count, 3)
        self.assertEqual(events, [])


class TestEvents(unittest.TestCase):
    """Test case for game event notifications."""

    def setUp(self):
        self.game = Game()
        self.events = []
        for event in GameEvent:
            self.game.on(event, lambda payload, event=event: self.events.append((event, payload)))

    def names(self):
        return [event for event, _ in self.events]

    def test_move_events(self):
        self.game.make_move(3)
        self.assertEqual(self.names(), [GameEvent.MOVE_MADE, GameEvent.PLAYER_CHANGED])
        self.assertEqual(self.events[0][1]["column"], 3)
        self.assertEqual(self.events[1][1]["current_player"], Cell.RED)

    def test_win_event(self):
        for column in [0, 0, 1, 1, 2, 2]:
            self.game.make_move(column)
        self.events.clear()

        self.game.make_move(3)
        self.assertEqual(self.names(), [GameEvent.MOVE_MADE, GameEvent.GAME_WON])
        self.assertEqual(self.events[1][1]["winner"], Cell.YELLOW)

    def test_draw_event(self):
        rows = list(DRAW_ROWS)
        rows[0] = "_" + rows[0][1:]
        game = Game.from_rows(rows, current_player=Cell.YELLOW)
        seen = []
        game.on(GameEvent.GAME_DRAW, seen.append)
        game.make_move(0)
        self.assertEqual(len(seen), 1)

    def test_undo_and_reset_events(self):
        self.game.make_move(3)
        self.events.clear()

        self.game.undo_move()
        self.assertEqual(self.names(), [GameEvent.MOVE_UNDONE, GameEvent.PLAYER_CHANGED])

        self.events.clear()
        self.game.reset()
        self.assertEqual(self.names(), [GameEvent.GAME_RESET, GameEvent.PLAYER_CHANGED])

    def test_failures_emit_nothing(self):
        self.game.make_move(-1)
        self.game.undo_move()
        self.assertEqual(self.events, [])

    def test_off_unsubscribes(self):
        seen = []
        self.game.on("move-made", seen.append)
        self.game.off(GameEvent.MOVE_MADE, seen.append)
        self.game.make_move(0)
        self.assertEqual(seen, [])


class TestAgents(unittest.TestCase):
    """Test case for agent registration and game flow."""

    def test_run_game_with_registered_agents(self):
        game = Game()
        game.register_agent(Cell.YELLOW, lambda g: g.get_valid_moves()[0])
        game.register_agent(Cell.RED, lambda g: g.get_valid_moves()[-1])

        state = game.run_game()

        self.assertTrue(state.game_over)
        stats = game.get_statistics()
        self.assertEqual(stats["moves"], len(state.move_history))
        self.assertEqual(stats["result"], state.result.name)

    def test_step_without_agent_raises(self):
        with self.assertRaises(ValueError):
            Game().step()

    def test_opponent_of(self):
        self.assertEqual(opponent_of(Cell.YELLOW), Cell.RED)
        self.assertEqual(opponent_of(Cell.RED), Cell.YELLOW)
        with self.assertRaises(ValueError):
            opponent_of(Cell.EMPTY)


if __name__ == "__main__":
    unittest.main()
