"""
Connect Four AI - a move-decision engine for Connect Four.

This package provides the game rules, a threat analyzer, a strict-priority
move-selection pipeline and a family of bots ranging from random play to a
Monte Carlo search.
"""

__version__ = "0.1.0"
__author__ = "Connect Four AI Team"

# Make key components available at package level
from connect4_ai.core.constants import Cell
from connect4_ai.core.board import Board
from connect4_ai.core.game import Game, GameState, GameEvent
from connect4_ai.analysis.threats import ThreatAnalyzer
from connect4_ai.bots import BotStrategy, MoveDecision, create_bot, available_bots
from connect4_ai.mcts import MonteCarloBot, MCTSConfig

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

# Default configuration
DEFAULT_CONFIG = {
    "rows": 6,
    "columns": 7,
    "connect": 4,
    "starting_player": "yellow"
}
