"""
Game state and flow management for Connect Four.

This module defines the core game mechanics, including:
- GameState: Complete representation of a game's state
- Game: The authoritative state machine (make, undo, simulate, reset)
- Result types returned by the mutating operations
- Event notifications for external collaborators (renderers, sound, etc.)

Only Game.make_move, Game.undo_move and Game.reset ever mutate the live
state. Everything else, including all AI look-ahead, works on copies.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union
import numbers
import time
from collections import defaultdict

from connect4_ai.core.board import Board, Coordinate
from connect4_ai.core.constants import (
    Cell, COLS, PLAYERS, PLAYER_NAMES, opponent_of
)


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()
    DRAW = auto()


class MoveOutcome(Enum):
    """What a successful move led to."""
    CONTINUE = auto()
    WIN = auto()
    DRAW = auto()


class FailureReason(Enum):
    """Why a mutating operation was refused."""
    INVALID_COLUMN = auto()
    COLUMN_FULL = auto()
    GAME_ALREADY_OVER = auto()
    NO_MOVE_TO_UNDO = auto()


class GameEvent(str, Enum):
    """Notifications emitted by a Game."""
    MOVE_MADE = "move-made"
    GAME_WON = "game-won"
    GAME_DRAW = "game-draw"
    PLAYER_CHANGED = "player-changed"
    MOVE_UNDONE = "move-undone"
    GAME_RESET = "game-reset"


@dataclass(frozen=True)
class Move:
    """A single placed piece."""
    row: int
    column: int
    player: Cell


@dataclass(frozen=True)
class MoveResult:
    """Result of a successful make_move."""
    row: int
    column: int
    player: Cell
    outcome: MoveOutcome
    winning_cells: Tuple[Coordinate, ...] = ()

    success = True


@dataclass(frozen=True)
class UndoResult:
    """Result of a successful undo_move."""
    move: Move
    current_player: Cell

    success = True


@dataclass(frozen=True)
class MoveFailure:
    """Structured failure of make_move or undo_move."""
    reason: FailureReason
    message: str

    success = False

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class SimulationResult:
    """A hypothetical move played on a copy of the board."""
    board: Board
    row: int
    column: int
    player: Cell
    would_win: bool


@dataclass
class GameState:
    """
    Complete representation of a Connect Four game state.

    ``winning_cells`` holds the exact connected run once the game has been
    won and is empty otherwise.
    """
    board: Board = field(default_factory=Board)
    current_player: Cell = Cell.YELLOW
    game_over: bool = False
    winner: Optional[Cell] = None
    winning_cells: List[Coordinate] = field(default_factory=list)
    move_history: List[Move] = field(default_factory=list)

    # Statistics
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def result(self) -> GameResult:
        """Get the result of the game so far."""
        if not self.game_over:
            return GameResult.IN_PROGRESS
        return GameResult.WINNER if self.winner is not None else GameResult.DRAW

    @property
    def move_count(self) -> int:
        """Number of pieces on the board."""
        return self.board.piece_count()

    def get_valid_moves(self) -> List[int]:
        """Get legal columns; a finished game has none."""
        if self.game_over:
            return []
        return self.board.valid_moves()

    def clone(self) -> 'GameState':
        """
        Create a deep copy of the game state.

        Returns:
            Copy of the game state
        """
        return GameState(
            board=self.board.copy(),
            current_player=self.current_player,
            game_over=self.game_over,
            winner=self.winner,
            winning_cells=list(self.winning_cells),
            move_history=list(self.move_history),
            start_time=self.start_time,
            end_time=self.end_time,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the game state to a plain dictionary.

        Returns:
            Dictionary representation of the game state
        """
        return {
            "board": self.board.to_rows(),
            "current_player": self.current_player.name,
            "game_over": self.game_over,
            "winner": self.winner.name if self.winner is not None else None,
            "winning_cells": [list(cell) for cell in self.winning_cells],
            "moves": [move.column for move in self.move_history],
        }


EventCallback = Callable[[Dict[str, Any]], None]
AgentCallback = Callable[['Game'], int]


def _is_column_index(column: Any) -> bool:
    """True for an integral column number inside the board."""
    if isinstance(column, bool) or not isinstance(column, numbers.Integral):
        return False
    return 0 <= column < COLS


class Game:
    """
    The authoritative Connect Four state machine.

    The Game owns its board exclusively. ``make_move`` and ``undo_move`` are
    the only operations that change it after construction; ``simulate_move``
    and ``clone`` give callers independent copies to experiment on.
    """

    def __init__(self, starting_player: Cell = Cell.YELLOW, state: Optional[GameState] = None):
        """
        Initialize a new game.

        Args:
            starting_player: Player who moves first
            state: Optional prepared state to adopt instead of an empty board
        """
        if starting_player not in PLAYERS:
            raise ValueError(f"{starting_player!r} cannot start a game")

        self.starting_player = starting_player
        self.state = state if state is not None else GameState(current_player=starting_player)

        self.listeners: Dict[GameEvent, List[EventCallback]] = defaultdict(list)
        self.agent_callbacks: Dict[Cell, AgentCallback] = {}

    # ------------------------------------------------------------------
    # Construction helpers

    @classmethod
    def from_moves(cls, columns: Sequence[int], starting_player: Cell = Cell.YELLOW) -> 'Game':
        """
        Replay a sequence of columns from an empty board.

        Args:
            columns: Columns played in order
            starting_player: Player who moved first

        Returns:
            Game positioned after the last move

        Raises:
            ValueError: If any move in the sequence is refused
        """
        game = cls(starting_player=starting_player)
        for index, column in enumerate(columns):
            result = game.make_move(column)
            if not result.success:
                raise ValueError(f"Move {index} (column {column}) refused: {result.message}")
        return game

    @classmethod
    def from_rows(cls, rows: Sequence[str], current_player: Optional[Cell] = None) -> 'Game':
        """
        Set up a position from text rows (see Board.from_rows).

        The pieces are placed as a setup position without move history, so
        undo is not available until new moves are made. If the side to move
        is not given, YELLOW moves when both sides have the same number of
        pieces and RED otherwise. A position that already contains a winning
        run, or a full board, is marked as finished.

        Args:
            rows: Text rows, top row first
            current_player: Side to move

        Returns:
            Game object
        """
        board = Board.from_rows(rows)
        if current_player is None:
            yellow = len(list(board.cells_of(Cell.YELLOW)))
            red = len(list(board.cells_of(Cell.RED)))
            current_player = Cell.YELLOW if yellow == red else Cell.RED

        state = GameState(board=board, current_player=current_player)
        for player in PLAYERS:
            for row, col in board.cells_of(player):
                line = board.winning_line(row, col)
                if line:
                    state.game_over = True
                    state.winner = player
                    state.winning_cells = line
                    break
            if state.game_over:
                break
        if not state.game_over and board.is_full():
            state.game_over = True

        return cls(starting_player=current_player, state=state)

    # ------------------------------------------------------------------
    # Events

    def on(self, event: Union[GameEvent, str], callback: EventCallback) -> None:
        """
        Subscribe to a game event.

        Args:
            event: Event to listen for
            callback: Function called with the event payload
        """
        self.listeners[GameEvent(event)].append(callback)

    def off(self, event: Union[GameEvent, str], callback: EventCallback) -> None:
        """Unsubscribe a previously registered callback."""
        callbacks = self.listeners.get(GameEvent(event), [])
        if callback in callbacks:
            callbacks.remove(callback)

    def _emit(self, event: GameEvent, payload: Dict[str, Any]) -> None:
        for callback in list(self.listeners.get(event, [])):
            callback(payload)

    # ------------------------------------------------------------------
    # Queries

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def current_player(self) -> Cell:
        return self.state.current_player

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    @property
    def winner(self) -> Optional[Cell]:
        return self.state.winner

    @property
    def winning_cells(self) -> List[Coordinate]:
        return self.state.winning_cells

    @property
    def move_history(self) -> List[Move]:
        return self.state.move_history

    @property
    def move_count(self) -> int:
        return self.state.move_count

    def get_valid_moves(self) -> List[int]:
        """
        Get the columns that can currently be played.

        Returns:
            Ascending list of legal columns (empty once the game is over)
        """
        return self.state.get_valid_moves()

    def can_undo(self) -> bool:
        """Check whether there is a move to undo."""
        return bool(self.state.move_history)

    def get_result(self) -> GameResult:
        return self.state.result

    # ------------------------------------------------------------------
    # Mutations

    def make_move(self, column: int) -> Union[MoveResult, MoveFailure]:
        """
        Drop a piece for the current player.

        Args:
            column: Column to play

        Returns:
            MoveResult on success, MoveFailure otherwise
        """
        state = self.state
        if state.game_over:
            return MoveFailure(FailureReason.GAME_ALREADY_OVER, "The game is already over")
        if not _is_column_index(column):
            return MoveFailure(FailureReason.INVALID_COLUMN, f"Column {column!r} is out of range 0-{COLS - 1}")
        column = int(column)
        if not state.board.is_valid_move(column):
            return MoveFailure(FailureReason.COLUMN_FULL, f"Column {column} is full")

        player = state.current_player
        row = state.board.place(column, player)
        move = Move(row=row, column=column, player=player)
        state.move_history.append(move)

        line = state.board.winning_line(row, column)
        if line:
            state.game_over = True
            state.winner = player
            state.winning_cells = line
            state.end_time = time.time()
            outcome = MoveOutcome.WIN
        elif state.board.is_full():
            state.game_over = True
            state.end_time = time.time()
            outcome = MoveOutcome.DRAW
        else:
            state.current_player = opponent_of(player)
            outcome = MoveOutcome.CONTINUE

        result = MoveResult(
            row=row,
            column=column,
            player=player,
            outcome=outcome,
            winning_cells=tuple(line),
        )

        self._emit(GameEvent.MOVE_MADE, {
            "row": row,
            "column": column,
            "player": player,
            "outcome": outcome,
            "move_number": len(state.move_history),
        })
        if outcome is MoveOutcome.WIN:
            self._emit(GameEvent.GAME_WON, {"winner": player, "winning_cells": list(line)})
        elif outcome is MoveOutcome.DRAW:
            self._emit(GameEvent.GAME_DRAW, {"move_number": len(state.move_history)})
        else:
            self._emit(GameEvent.PLAYER_CHANGED, {"current_player": state.current_player})

        return result

    def undo_move(self) -> Union[UndoResult, MoveFailure]:
        """
        Take back the last move.

        Restores the cell, the side to move and the game-over flags to the
        values they had before that move.

        Returns:
            UndoResult on success, MoveFailure if there is nothing to undo
        """
        state = self.state
        if not state.move_history:
            return MoveFailure(FailureReason.NO_MOVE_TO_UNDO, "There is no move to undo")

        move = state.move_history.pop()
        state.board.remove(move.column)

        # A move is only accepted while the game is running
        state.game_over = False
        state.winner = None
        state.winning_cells = []
        state.end_time = None

        player_changed = state.current_player != move.player
        state.current_player = move.player

        self._emit(GameEvent.MOVE_UNDONE, {
            "row": move.row,
            "column": move.column,
            "player": move.player,
            "move_number": len(state.move_history),
        })
        if player_changed:
            self._emit(GameEvent.PLAYER_CHANGED, {"current_player": state.current_player})

        return UndoResult(move=move, current_player=state.current_player)

    def reset(self) -> GameState:
        """
        Replace the state with a fresh game.

        Returns:
            New game state
        """
        self.state = GameState(current_player=self.starting_player)
        self._emit(GameEvent.GAME_RESET, {"current_player": self.state.current_player})
        self._emit(GameEvent.PLAYER_CHANGED, {"current_player": self.state.current_player})
        return self.state

    # ------------------------------------------------------------------
    # Pure simulation

    def simulate_move(self, column: int, player: Optional[Cell] = None) -> Optional[SimulationResult]:
        """
        Play a hypothetical move on a copy of the board.

        The live state is never touched, not even transiently.

        Args:
            column: Column to play
            player: Player to move as (defaults to the current player)

        Returns:
            SimulationResult, or None if the column cannot be played
        """
        if self.state.game_over or not _is_column_index(column):
            return None
        column = int(column)
        if not self.state.board.is_valid_move(column):
            return None

        mover = self.state.current_player if player is None else player
        board = self.state.board.copy()
        row = board.place(column, mover)
        return SimulationResult(
            board=board,
            row=row,
            column=column,
            player=mover,
            would_win=board.is_winning_cell(row, column),
        )

    def clone(self) -> 'Game':
        """
        Create an independent copy of the game.

        The copy has no listeners and no registered agents, so playing moves
        on it never notifies anyone.

        Returns:
            Copy of the game
        """
        return Game(starting_player=self.starting_player, state=self.state.clone())

    # ------------------------------------------------------------------
    # Agents

    def register_agent(self, player: Cell, agent_callback: AgentCallback) -> None:
        """
        Register an AI agent for a player.

        The callback receives the game and returns the column to play.

        Args:
            player: Player the agent moves for
            agent_callback: Function that selects a column
        """
        self.agent_callbacks[player] = agent_callback

    def step(self, column: Optional[int] = None) -> Tuple[GameState, bool]:
        """
        Advance the game by one move.

        If no column is given, the agent registered for the current player
        chooses one.

        Args:
            column: Optional column to play

        Returns:
            Tuple of (game state, whether the game is over)
        """
        if self.state.game_over:
            return self.state, True

        if column is None and self.current_player in self.agent_callbacks:
            column = self.agent_callbacks[self.current_player](self)

        if column is None:
            raise ValueError("No column provided and no agent registered for the current player")

        result = self.make_move(column)
        if not result.success:
            raise ValueError(f"Invalid move: {result.message}")

        return self.state, self.state.game_over

    def run_game(self) -> GameState:
        """
        Play the game to the end with the registered agents.

        Returns:
            Final game state
        """
        for player in PLAYERS:
            if player not in self.agent_callbacks:
                raise ValueError(f"No agent registered for {PLAYER_NAMES[player]}")

        while not self.state.game_over:
            self.step()

        return self.state

    # ------------------------------------------------------------------
    # Reporting

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the game.

        Returns:
            Dictionary of game statistics
        """
        state = self.state
        end = state.end_time if state.end_time is not None else time.time()
        stats: Dict[str, Any] = {
            "moves": len(state.move_history),
            "pieces": state.move_count,
            "duration": end - state.start_time,
            "result": state.result.name,
        }
        for player in PLAYERS:
            stats[f"{player.name.lower()}_moves"] = sum(
                1 for move in state.move_history if move.player == player
            )
        if state.winner is not None:
            stats["winner"] = state.winner.name
            stats["winning_cells"] = list(state.winning_cells)
        return stats

    def __str__(self) -> str:
        """
        Return a human-readable representation of the game.

        Returns:
            String representation
        """
        result = str(self.state.board) + "\n"
        if self.state.game_over:
            if self.state.winner is not None:
                result += f"Winner: {PLAYER_NAMES[self.state.winner]}\n"
            else:
                result += "Result: Draw\n"
        else:
            result += f"To move: {PLAYER_NAMES[self.state.current_player]}\n"
        return result
