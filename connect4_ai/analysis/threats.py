"""
Threat and opportunity analysis for Connect Four.

The ThreatAnalyzer answers the questions every move decision starts with:
which columns win right now, which columns must be blocked, and which
columns can be played without handing the opponent an immediate win. It
also produces player assistance hints; what a player is allowed to see is
passed in with each call as AssistanceSettings.

All queries are pure reads built on Game.simulate_move.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional

from connect4_ai.core.constants import Cell, opponent_of
from connect4_ai.core.game import Game
from connect4_ai.analysis.evaluation import (
    allows_immediate_loss, count_threats, hypothetical, winning_columns
)


@dataclass(frozen=True)
class ThreatAnalysisResult:
    """
    Threat picture of one position for one player.

    Transient: recomputed every turn, never stored with the game.
    """
    player: Cell
    winning_moves: List[int] = field(default_factory=list)
    blocking_moves: List[int] = field(default_factory=list)
    safe_columns: List[int] = field(default_factory=list)
    valid_moves: List[int] = field(default_factory=list)

    @property
    def trapped(self) -> bool:
        """True when every legal move lets the opponent win."""
        return bool(self.valid_moves) and not self.safe_columns

    @property
    def unsafe_columns(self) -> List[int]:
        """Legal columns that hand the opponent an immediate win."""
        return [col for col in self.valid_moves if col not in self.safe_columns]


@dataclass(frozen=True)
class AssistanceSettings:
    """
    What a single player may be shown.

    Attributes:
        winning_moves: Show the player's own immediate wins
        threats: Show opponent wins that must be blocked
        blocked_columns: Show columns that would hand the opponent a win
    """
    winning_moves: bool = False
    threats: bool = False
    blocked_columns: bool = False

    @classmethod
    def full(cls) -> 'AssistanceSettings':
        return cls(winning_moves=True, threats=True, blocked_columns=True)

    @classmethod
    def from_level(cls, level: int) -> 'AssistanceSettings':
        """
        Build settings from a cumulative help level.

        Level 0 shows wins, level 1 adds threats, level 2 adds blocked
        columns. A negative level disables assistance.
        """
        return cls(winning_moves=level >= 0, threats=level >= 1, blocked_columns=level >= 2)

    @property
    def enabled(self) -> bool:
        return self.winning_moves or self.threats or self.blocked_columns


class HintKind(Enum):
    """Kinds of assistance hints."""
    WIN = auto()
    BLOCK = auto()
    AVOID = auto()


@dataclass(frozen=True)
class Hint:
    """A single hint for the player to move."""
    kind: HintKind
    columns: List[int]
    message: str


class ThreatAnalyzer:
    """
    One-ply look-ahead analysis of a game position.

    The analyzer reads the game it is given and never mutates it.
    """

    def __init__(self, game: Game):
        """
        Initialize the analyzer.

        Args:
            game: Game to analyze
        """
        self.game = game

    def winning_moves(self, player: Optional[Cell] = None) -> List[int]:
        """
        Columns where ``player`` wins immediately.

        Args:
            player: Player to analyze for (defaults to the side to move)

        Returns:
            Ascending list of columns
        """
        player = self.game.current_player if player is None else player
        return winning_columns(self.game, player)

    def blocking_moves(self, player: Optional[Cell] = None) -> List[int]:
        """
        Columns ``player`` must occupy to stop the opponent winning next ply.

        Args:
            player: Player to analyze for (defaults to the side to move)

        Returns:
            Ascending list of columns
        """
        player = self.game.current_player if player is None else player
        return winning_columns(self.game, opponent_of(player))

    def safe_columns(self, player: Optional[Cell] = None) -> List[int]:
        """
        Legal columns after which the opponent has no immediate win.

        Winning columns are always safe. An empty result means the player is
        trapped; that is a normal game state, not an error.

        Args:
            player: Player to analyze for (defaults to the side to move)

        Returns:
            Ascending list of columns
        """
        player = self.game.current_player if player is None else player
        wins = set(self.winning_moves(player))
        return [
            column for column in self.game.get_valid_moves()
            if column in wins or not allows_immediate_loss(self.game, column, player)
        ]

    def fork_moves(self, player: Optional[Cell] = None) -> List[int]:
        """
        Columns after which ``player`` threatens to win in two places at once.

        Args:
            player: Player to analyze for (defaults to the side to move)

        Returns:
            Ascending list of columns
        """
        player = self.game.current_player if player is None else player
        forks = []
        for column in self.game.get_valid_moves():
            after = hypothetical(self.game, column, player)
            if after is None or after.game_over:
                continue
            if count_threats(after, player) >= 2:
                forks.append(column)
        return forks

    def analyze(self, player: Optional[Cell] = None) -> ThreatAnalysisResult:
        """
        Compute the full threat picture for a player.

        Args:
            player: Player to analyze for (defaults to the side to move)

        Returns:
            ThreatAnalysisResult
        """
        player = self.game.current_player if player is None else player
        return ThreatAnalysisResult(
            player=player,
            winning_moves=self.winning_moves(player),
            blocking_moves=self.blocking_moves(player),
            safe_columns=self.safe_columns(player),
            valid_moves=self.game.get_valid_moves(),
        )

    def hints(self, player: Optional[Cell], settings: AssistanceSettings) -> List[Hint]:
        """
        Produce the assistance hints a player is allowed to see.

        Args:
            player: Player to produce hints for (defaults to the side to move)
            settings: Capabilities enabled for that player

        Returns:
            List of hints, most urgent first
        """
        if not settings.enabled:
            return []

        analysis = self.analyze(player)
        hints = []
        if settings.winning_moves and analysis.winning_moves:
            hints.append(Hint(
                kind=HintKind.WIN,
                columns=analysis.winning_moves,
                message=f"You can win in column {_columns_text(analysis.winning_moves)}",
            ))
        if settings.threats and analysis.blocking_moves:
            hints.append(Hint(
                kind=HintKind.BLOCK,
                columns=analysis.blocking_moves,
                message=f"Block your opponent in column {_columns_text(analysis.blocking_moves)}",
            ))
        if settings.blocked_columns and analysis.unsafe_columns:
            hints.append(Hint(
                kind=HintKind.AVOID,
                columns=analysis.unsafe_columns,
                message=f"Avoid column {_columns_text(analysis.unsafe_columns)}",
            ))
        return hints

    def to_dict(self, player: Optional[Cell] = None) -> Dict[str, object]:
        """Threat picture as a plain dictionary (for debugging output)."""
        analysis = self.analyze(player)
        return {
            "player": analysis.player.name,
            "winning_moves": analysis.winning_moves,
            "blocking_moves": analysis.blocking_moves,
            "safe_columns": analysis.safe_columns,
            "trapped": analysis.trapped,
        }


def _columns_text(columns: List[int]) -> str:
    return ", ".join(str(column) for column in columns)
