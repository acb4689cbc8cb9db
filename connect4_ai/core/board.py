"""
Board representation for Connect Four.

The Board stores the 6x7 grid as a numpy array (row 0 is the top row) together
with per-column piece counts, so the lowest free row of a column is known
without scanning. It knows nothing about turns or game flow; that is the job
of the Game in game.py.
"""
from __future__ import annotations
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from connect4_ai.core.constants import (
    Cell, ROWS, COLS, CONNECT, TOTAL_CELLS, DIRECTIONS, CELL_SYMBOLS
)


Coordinate = Tuple[int, int]


class Board:
    """
    A Connect Four grid with gravity.

    Invariant: in every column the occupied cells are contiguous from the
    bottom row upward, and ``heights[col]`` equals the number of pieces in
    that column.
    """

    def __init__(self, grid: Optional[np.ndarray] = None):
        """
        Initialize a board.

        Args:
            grid: Optional (ROWS, COLS) array of cell values to start from.
                  The array is copied and checked for floating pieces.
        """
        if grid is None:
            self.grid = np.zeros((ROWS, COLS), dtype=np.int8)
            self.heights = [0] * COLS
            return

        grid = np.asarray(grid, dtype=np.int8)
        if grid.shape != (ROWS, COLS):
            raise ValueError(f"Board grid must have shape ({ROWS}, {COLS}), got {grid.shape}")

        self.grid = grid.copy()
        self.heights = []
        for col in range(COLS):
            column = self.grid[::-1, col]
            height = int(np.count_nonzero(column))
            if height and np.count_nonzero(column[:height]) != height:
                raise ValueError(f"Column {col} has a floating piece")
            self.heights.append(height)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> 'Board':
        """
        Build a board from text rows, top row first.

        Each row is a string of COLS symbols: 'Y' for yellow, 'R' for red and
        '.' (or '_' / space) for an empty cell. Fewer than ROWS rows may be
        given; missing rows are treated as empty rows at the top.

        Args:
            rows: Text rows

        Returns:
            Board object
        """
        if len(rows) > ROWS:
            raise ValueError(f"At most {ROWS} rows allowed")

        symbols = {"Y": Cell.YELLOW, "R": Cell.RED, ".": Cell.EMPTY, "_": Cell.EMPTY, " ": Cell.EMPTY}
        grid = np.zeros((ROWS, COLS), dtype=np.int8)
        offset = ROWS - len(rows)
        for i, text in enumerate(rows):
            if len(text) != COLS:
                raise ValueError(f"Row {i} must have {COLS} cells: {text!r}")
            for col, symbol in enumerate(text.upper()):
                if symbol not in symbols:
                    raise ValueError(f"Unknown cell symbol {symbol!r}")
                grid[offset + i, col] = symbols[symbol]
        return cls(grid)

    def cell(self, row: int, col: int) -> Cell:
        """Get the state of a cell."""
        return Cell(int(self.grid[row, col]))

    def in_bounds(self, row: int, col: int) -> bool:
        """Check whether a coordinate lies on the board."""
        return 0 <= row < ROWS and 0 <= col < COLS

    def drop_row(self, col: int) -> int:
        """
        Get the row a piece dropped into a column would land on.

        Returns:
            Row index, or -1 if the column is full or out of range
        """
        if not 0 <= col < COLS or self.heights[col] >= ROWS:
            return -1
        return ROWS - 1 - self.heights[col]

    def is_valid_move(self, col: int) -> bool:
        """Check whether a piece can be dropped into a column."""
        return 0 <= col < COLS and self.heights[col] < ROWS

    def valid_moves(self) -> List[int]:
        """Get all non-full columns in ascending order."""
        return [col for col in range(COLS) if self.heights[col] < ROWS]

    def place(self, col: int, player: Cell) -> int:
        """
        Drop a piece into a column.

        Args:
            col: Column index
            player: Player whose piece is dropped

        Returns:
            Row the piece landed on

        Raises:
            ValueError: If the column is full or out of range
        """
        row = self.drop_row(col)
        if row < 0:
            raise ValueError(f"Cannot place a piece in column {col}")
        self.grid[row, col] = player
        self.heights[col] += 1
        return row

    def remove(self, col: int) -> Cell:
        """
        Remove the top piece of a column (inverse of place).

        Returns:
            The player whose piece was removed
        """
        if not 0 <= col < COLS or self.heights[col] == 0:
            raise ValueError(f"Column {col} has no piece to remove")
        row = ROWS - self.heights[col]
        player = Cell(int(self.grid[row, col]))
        self.grid[row, col] = Cell.EMPTY
        self.heights[col] -= 1
        return player

    def winning_line(self, row: int, col: int) -> List[Coordinate]:
        """
        Find the connected run through a cell, if it wins.

        Walks outward from (row, col) in both signs along each axis and
        collects contiguous cells of the same player. The first axis with a
        run of CONNECT or more cells is returned, ordered from one end to
        the other.

        Args:
            row: Row of the placed piece
            col: Column of the placed piece

        Returns:
            Coordinates of the winning run, or an empty list
        """
        player = self.grid[row, col]
        if player == Cell.EMPTY:
            return []

        grid = self.grid
        for d_row, d_col in DIRECTIONS:
            backward = []
            r, c = row - d_row, col - d_col
            while 0 <= r < ROWS and 0 <= c < COLS and grid[r, c] == player:
                backward.append((r, c))
                r -= d_row
                c -= d_col

            forward = []
            r, c = row + d_row, col + d_col
            while 0 <= r < ROWS and 0 <= c < COLS and grid[r, c] == player:
                forward.append((r, c))
                r += d_row
                c += d_col

            if len(backward) + len(forward) + 1 >= CONNECT:
                return backward[::-1] + [(row, col)] + forward

        return []

    def is_winning_cell(self, row: int, col: int) -> bool:
        """Check whether the piece at (row, col) completes a winning run."""
        return bool(self.winning_line(row, col))

    def piece_count(self) -> int:
        """Get the total number of pieces on the board."""
        return sum(self.heights)

    def is_full(self) -> bool:
        """Check whether every cell is occupied."""
        return self.piece_count() >= TOTAL_CELLS

    def copy(self) -> 'Board':
        """
        Create an independent copy of the board.

        Returns:
            Copy of the board
        """
        board = Board.__new__(Board)
        board.grid = self.grid.copy()
        board.heights = list(self.heights)
        return board

    def to_rows(self) -> List[str]:
        """Render the board as text rows, top row first."""
        return [
            "".join(CELL_SYMBOLS[Cell(int(value))] for value in self.grid[row])
            for row in range(ROWS)
        ]

    def cells_of(self, player: Cell) -> Iterable[Coordinate]:
        """Iterate over the coordinates occupied by a player."""
        rows, cols = np.nonzero(self.grid == player)
        return zip(rows.tolist(), cols.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.grid, other.grid))

    def __hash__(self) -> int:
        return hash(self.grid.tobytes())

    def __str__(self) -> str:
        lines = [" ".join(row) for row in self.to_rows()]
        lines.append(" ".join(str(col) for col in range(COLS)))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board({self.to_rows()!r})"
