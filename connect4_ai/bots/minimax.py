"""
Depth-limited alpha-beta search.

MinimaxBot looks a fixed number of plies ahead from each safe column and
scores the leaves with analysis.evaluation.score_position. The search is
bounded by its depth, so it is a strong opponent rather than a solver.
"""
from typing import Any, Dict, List, Optional

from connect4_ai.core.board import Board
from connect4_ai.core.constants import Cell, CENTER_COL, opponent_of
from connect4_ai.core.game import Game
from connect4_ai.analysis.evaluation import score_position
from connect4_ai.bots.base import BotStrategy


WIN_SCORE = 1000000

# Search depth in plies per difficulty
DIFFICULTY_DEPTHS: Dict[str, int] = {
    "easy": 1,
    "medium": 3,
    "hard": 5,
    "expert": 7,
}


def center_first(columns: List[int]) -> List[int]:
    """Order columns from the centre outwards for better pruning."""
    return sorted(columns, key=lambda column: (abs(column - CENTER_COL), column))


def alpha_beta(
    board: Board,
    depth: int,
    alpha: float,
    beta: float,
    maximizing: bool,
    player: Cell
) -> float:
    """
    Minimax value of ``board`` for ``player`` with alpha-beta pruning.

    The board is modified in place and restored before returning. A win
    found sooner scores higher than a later one.

    Args:
        board: Position after the last move
        depth: Remaining plies
        alpha: Best value the maximizer can force
        beta: Best value the minimizer can force
        maximizing: Whether ``player`` is to move
        player: Player the value is for

    Returns:
        Position value
    """
    moves = board.valid_moves()
    if not moves:
        return 0
    if depth == 0:
        return score_position(board, player)

    mover = player if maximizing else opponent_of(player)
    best = float("-inf") if maximizing else float("inf")

    for column in center_first(moves):
        row = board.place(column, mover)
        if board.is_winning_cell(row, column):
            value = (WIN_SCORE + depth) if maximizing else -(WIN_SCORE + depth)
        else:
            value = alpha_beta(board, depth - 1, alpha, beta, not maximizing, player)
        board.remove(column)

        if maximizing:
            best = max(best, value)
            alpha = max(alpha, value)
        else:
            best = min(best, value)
            beta = min(beta, value)
        if beta <= alpha:
            break

    return best


class MinimaxBot(BotStrategy):
    """
    Pipeline bot searching the safe columns with alpha-beta minimax.
    """

    name = "minimax"
    description = "Depth-limited alpha-beta search"

    def __init__(
        self,
        depth: Optional[int] = None,
        difficulty: str = "medium",
        random_seed: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Initialize the bot.

        Args:
            depth: Search depth in plies (overrides ``difficulty``)
            difficulty: One of DIFFICULTY_DEPTHS
            random_seed: Seed for the bot's random generator
            verbose: Whether to print column values
        """
        super().__init__(random_seed=random_seed, verbose=verbose)
        if depth is None:
            if difficulty not in DIFFICULTY_DEPTHS:
                raise ValueError(f"Unknown difficulty '{difficulty}', choose from: {', '.join(DIFFICULTY_DEPTHS)}")
            depth = DIFFICULTY_DEPTHS[difficulty]
        if depth < 1:
            raise ValueError("depth must be at least 1")
        self.depth = depth
        self.last_values: Dict[int, float] = {}

    def select_from_safe_columns(self, game: Game, candidate_columns: List[int]) -> int:
        candidates = self.candidates_or_valid(game, candidate_columns)
        if len(candidates) == 1:
            self.last_values = {candidates[0]: 0.0}
            return candidates[0]

        player = game.current_player
        board = game.board.copy()
        values: Dict[int, float] = {}
        best_column = candidates[0]
        best_value = float("-inf")
        alpha = float("-inf")

        for column in center_first(candidates):
            row = board.place(column, player)
            if board.is_winning_cell(row, column):
                value = float(WIN_SCORE + self.depth)
            else:
                value = alpha_beta(board, self.depth - 1, alpha, float("inf"), False, player)
            board.remove(column)

            values[column] = value
            if value > best_value:
                best_value = value
                best_column = column
            alpha = max(alpha, value)

        self.last_values = values
        if self.verbose:
            print(f"{self.name} values: " + ", ".join(f"{col}={value:.0f}" for col, value in values.items()))
        return best_column

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info.update({"type": "search", "depth": self.depth})
        return info
