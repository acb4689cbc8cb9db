"""
Baseline bots.

RandomBot ignores the pipeline entirely and is the yardstick for matches.
SmartRandomBot wins, blocks and avoids traps like every pipeline bot, then
plays a uniformly random safe column.
"""
from typing import Any, Dict, List

from connect4_ai.core.game import Game
from connect4_ai.bots.base import BotStrategy
from connect4_ai.bots.pipeline import MoveDecision, SelectionStage


class RandomBot(BotStrategy):
    """Bot that plays a uniformly random legal column."""

    name = "random"
    description = "Uniformly random legal moves"

    def select_from_safe_columns(self, game: Game, candidate_columns: List[int]) -> int:
        return self.rng.choice(self.candidates_or_valid(game, candidate_columns))

    def select_move(self, game: Game) -> MoveDecision:
        valid_moves = game.get_valid_moves()
        if not valid_moves:
            decision = MoveDecision(column=None, stage=SelectionStage.NO_MOVES)
        else:
            decision = MoveDecision(
                column=self.rng.choice(valid_moves),
                stage=SelectionStage.STRATEGY,
                candidates=valid_moves,
            )
        self.last_decision = decision
        return decision

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["type"] = "random"
        return info


class SmartRandomBot(BotStrategy):
    """Pipeline bot choosing uniformly among the columns it leaves."""

    name = "smart-random"
    description = "Wins, blocks and avoids traps, otherwise random"

    def break_tie(self, game: Game, columns: List[int], stage: SelectionStage) -> int:
        return self.rng.choice(columns)

    def select_from_safe_columns(self, game: Game, candidate_columns: List[int]) -> int:
        return self.rng.choice(self.candidates_or_valid(game, candidate_columns))

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["type"] = "random"
        return info
