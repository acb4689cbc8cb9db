"""
Constants for the Connect Four game.

This module defines the board geometry, cell states and scan directions used
throughout the engine, along with a few defaults for the AI strategies.
"""
from enum import IntEnum
from typing import Final, List, Tuple


class Cell(IntEnum):
    """State of a single board cell. YELLOW always moves first."""
    EMPTY = 0
    YELLOW = 1
    RED = 2


# Players in seating order
PLAYERS: Final[Tuple[Cell, Cell]] = (Cell.YELLOW, Cell.RED)

# Board geometry
ROWS: Final[int] = 6
COLS: Final[int] = 7
CONNECT: Final[int] = 4  # Pieces in a row needed to win
TOTAL_CELLS: Final[int] = ROWS * COLS
CENTER_COL: Final[int] = COLS // 2
BOTTOM_ROW: Final[int] = ROWS - 1  # Row 0 is the top of the board

# Axis directions as (d_row, d_col): horizontal, vertical, diagonal \, diagonal /
DIRECTIONS: Final[List[Tuple[int, int]]] = [
    (0, 1),
    (1, 0),
    (1, 1),
    (1, -1),
]

# Display names and symbols (for pretty printing)
PLAYER_NAMES: Final[dict] = {
    Cell.YELLOW: "Yellow",
    Cell.RED: "Red",
}

CELL_SYMBOLS: Final[dict] = {
    Cell.EMPTY: ".",
    Cell.YELLOW: "Y",
    Cell.RED: "R",
}

# AI and simulation settings
DEFAULT_SIMULATIONS: Final[int] = 1000
DEFAULT_MIN_SIMULATIONS: Final[int] = 200
DEFAULT_EXPLORATION: Final[float] = 1.41  # UCB1 exploration parameter (sqrt(2))
DEFAULT_TIME_LIMIT: Final[float] = 2.0  # Seconds of thinking time per move
MAX_ROLLOUT_DEPTH: Final[int] = TOTAL_CELLS


def opponent_of(player: Cell) -> Cell:
    """Return the other player."""
    if player == Cell.YELLOW:
        return Cell.RED
    if player == Cell.RED:
        return Cell.YELLOW
    raise ValueError(f"{player!r} is not a player")
