"""
Base class for Connect Four bot strategies.

Every bot runs the same move-selection pipeline (see pipeline.py); a
strategy only decides how to pick among the columns the pipeline leaves it.
"""
import random
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from connect4_ai.core.constants import Cell
from connect4_ai.core.game import Game
from connect4_ai.analysis.evaluation import rank_by_threats
from connect4_ai.bots.pipeline import MoveDecision, MovePipeline, SelectionStage


class BotStrategy(ABC):
    """
    Abstract base class for all bot strategies.

    Subclasses implement ``select_from_safe_columns``. It must return one of
    the candidate columns it is given and must not mutate the game.
    """

    name = "base"
    description = "Base strategy class"

    def __init__(self, random_seed: Optional[int] = None, verbose: bool = False):
        """
        Initialize the strategy.

        Args:
            random_seed: Seed for the strategy's own random generator
            verbose: Whether to print decision details
        """
        self.rng = random.Random(random_seed)
        self.verbose = verbose
        self.last_decision: Optional[MoveDecision] = None

    @abstractmethod
    def select_from_safe_columns(self, game: Game, candidate_columns: List[int]) -> int:
        """
        Pick one column from the candidates left by the pipeline.

        Args:
            game: Current game (read only)
            candidate_columns: Columns to choose from; an empty list means
                               "any legal column"

        Returns:
            Selected column
        """
        pass

    def break_tie(self, game: Game, columns: List[int], stage: SelectionStage) -> int:
        """
        Choose between several winning or blocking columns.

        The default prefers the column that leaves the most follow-up threats,
        then the one closest to the centre.
        """
        return rank_by_threats(game, columns)[0]

    def select_when_trapped(self, game: Game, ordered_columns: List[int]) -> int:
        """
        Choose a move when every legal column loses.

        ``ordered_columns`` is sorted least bad first (fewest opponent
        winning replies, then centre proximity), and the default takes the
        first one.
        """
        return ordered_columns[0]

    def candidates_or_valid(self, game: Game, candidate_columns: List[int]) -> List[int]:
        """Fall back to every legal column when no candidates were given."""
        if candidate_columns:
            return list(candidate_columns)
        return game.get_valid_moves()

    def select_move(self, game: Game) -> MoveDecision:
        """
        Run the full pipeline for the side to move.

        Args:
            game: Current game

        Returns:
            MoveDecision
        """
        decision = MovePipeline(self).decide(game)
        self.last_decision = decision
        if self.verbose:
            self._print_decision(game, decision)
        return decision

    def get_move(self, game: Game) -> int:
        """
        Get the column to play.

        Raises:
            ValueError: If there is no legal move
        """
        decision = self.select_move(game)
        if decision.column is None:
            raise ValueError("No legal moves available")
        return decision.column

    def get_move_callback(self) -> Callable[[Game], int]:
        """
        Get a callback function for selecting moves.

        This is useful for registering the bot with a Game object.
        """
        return self.get_move

    def register_with_game(self, game: Game, player: Cell) -> None:
        """
        Register this bot with a game.

        Args:
            game: Game object
            player: Player the bot moves for
        """
        game.register_agent(player, self.get_move_callback())

    def _print_decision(self, game: Game, decision: MoveDecision) -> None:
        trapped = " (trapped)" if decision.trapped else ""
        print(f"{self.name}: column {decision.column} via {decision.stage.name}{trapped}, "
              f"candidates {decision.candidates}")

    def get_info(self) -> Dict[str, Any]:
        """
        Get strategy metadata.

        Returns:
            Dictionary describing the strategy
        """
        return {
            "name": self.name,
            "description": self.description,
            "type": "base",
        }

    def __str__(self) -> str:
        return self.name
