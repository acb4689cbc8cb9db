"""
Move-selection pipeline shared by every bot.

Each turn the pipeline narrows the legal columns in a fixed order and stops
at the first stage that applies:

1. Immediate win: take a winning column
2. Forced block: occupy the column the opponent would win in
3. Trap avoidance: drop columns that hand the opponent a winning reply
4. Strategy: the active strategy picks from what is left

If stage 3 leaves nothing (a trapped position) the candidate set falls back
to all legal columns, ordered least bad first, and the decision is flagged
as trapped.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, List, Optional

from connect4_ai.core.game import Game
from connect4_ai.analysis.threats import ThreatAnalyzer, ThreatAnalysisResult
from connect4_ai.analysis.evaluation import rank_least_bad

if TYPE_CHECKING:
    from connect4_ai.bots.base import BotStrategy


class SelectionStage(Enum):
    """Pipeline stage that produced a decision."""
    IMMEDIATE_WIN = auto()
    FORCED_BLOCK = auto()
    TRAP_AVOIDANCE = auto()
    STRATEGY = auto()
    NO_MOVES = auto()


@dataclass(frozen=True)
class MoveDecision:
    """
    Outcome of one pass through the pipeline.

    Attributes:
        column: Chosen column (None only when there is no legal move)
        stage: Stage that decided the move
        candidates: Columns the deciding stage chose from
        trapped: True when every legal move allows an immediate loss
        analysis: Threat picture the decision was based on
    """
    column: Optional[int]
    stage: SelectionStage
    candidates: List[int] = field(default_factory=list)
    trapped: bool = False
    analysis: Optional[ThreatAnalysisResult] = None


class MovePipeline:
    """Strict-priority move selection delegating the final choice to a strategy."""

    def __init__(self, strategy: 'BotStrategy'):
        """
        Initialize the pipeline.

        Args:
            strategy: Strategy used for tie-breaks and the final stage
        """
        self.strategy = strategy

    def decide(self, game: Game) -> MoveDecision:
        """
        Run the pipeline for the side to move.

        Args:
            game: Current game (read only)

        Returns:
            MoveDecision
        """
        valid_moves = game.get_valid_moves()
        if not valid_moves:
            return MoveDecision(column=None, stage=SelectionStage.NO_MOVES)

        analyzer = ThreatAnalyzer(game)
        mover = game.current_player

        # Stage 1: the mover acts first, so a win beats any block
        wins = analyzer.winning_moves(mover)
        if wins:
            column = self._checked(wins, self.strategy.break_tie(game, wins, SelectionStage.IMMEDIATE_WIN))
            return MoveDecision(column=column, stage=SelectionStage.IMMEDIATE_WIN, candidates=wins)

        # Stage 2
        blocks = analyzer.blocking_moves(mover)
        if blocks:
            column = self._checked(blocks, self.strategy.break_tie(game, blocks, SelectionStage.FORCED_BLOCK))
            return MoveDecision(column=column, stage=SelectionStage.FORCED_BLOCK, candidates=blocks)

        # Stage 3
        safe = analyzer.safe_columns(mover)
        analysis = ThreatAnalysisResult(
            player=mover,
            winning_moves=wins,
            blocking_moves=blocks,
            safe_columns=safe,
            valid_moves=valid_moves,
        )
        if not safe:
            ordered = rank_least_bad(game, valid_moves, mover)
            column = self._checked(ordered, self.strategy.select_when_trapped(game, ordered))
            return MoveDecision(
                column=column,
                stage=SelectionStage.TRAP_AVOIDANCE,
                candidates=ordered,
                trapped=True,
                analysis=analysis,
            )

        # Stage 4
        column = self._checked(safe, self.strategy.select_from_safe_columns(game, list(safe)))
        return MoveDecision(
            column=column,
            stage=SelectionStage.STRATEGY,
            candidates=safe,
            analysis=analysis,
        )

    def _checked(self, candidates: List[int], column: int) -> int:
        if column not in candidates:
            raise ValueError(
                f"{self.strategy.name} returned column {column}, expected one of {candidates}"
            )
        return column
