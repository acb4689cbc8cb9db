"""
Connect Four Core Package

This package contains the core game logic, including:
- Board representation and win-line scanning
- Game state, move history and undo
- Result and failure types of the mutating operations
- Game events
- Constants and enums

All core components can be imported directly from this package.
"""

# Board
from connect4_ai.core.board import Board, Coordinate

# Game and game state
from connect4_ai.core.game import (
    Game, GameState, GameResult, GameEvent,
    Move, MoveResult, MoveOutcome, UndoResult,
    MoveFailure, FailureReason, SimulationResult
)

# Constants
from connect4_ai.core.constants import (
    Cell, PLAYERS, ROWS, COLS, CONNECT, CENTER_COL,
    opponent_of
)

__all__ = [
    # Board
    'Board', 'Coordinate',
    
    # Game
    'Game', 'GameState', 'GameResult', 'GameEvent',
    'Move', 'MoveResult', 'MoveOutcome', 'UndoResult',
    'MoveFailure', 'FailureReason', 'SimulationResult',
    
    # Constants
    'Cell', 'PLAYERS', 'ROWS', 'COLS', 'CONNECT', 'CENTER_COL',
    'opponent_of'
]
