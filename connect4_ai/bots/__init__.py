"""
Bot strategies for Connect Four.

Every bot runs the same move-selection pipeline:

1. Immediate win
2. Forced block
3. Trap avoidance (drop columns that allow an immediate loss)
4. Strategy choice among the remaining columns

Strategies differ only in the last step (and in how they break ties in the
first two).
"""

from connect4_ai.bots.pipeline import MovePipeline, MoveDecision, SelectionStage
from connect4_ai.bots.base import BotStrategy
from connect4_ai.bots.heuristic import (
    StrategyWeights, WeightedStrategy,
    OffensiveMixedBot, DefensiveMixedBot, DefensiveBot, BalancedBot
)
from connect4_ai.bots.simple import RandomBot, SmartRandomBot
from connect4_ai.bots.minimax import MinimaxBot
from connect4_ai.bots.factory import BOT_REGISTRY, available_bots, create_bot

__all__ = [
    'MovePipeline', 'MoveDecision', 'SelectionStage',
    'BotStrategy',
    'StrategyWeights', 'WeightedStrategy',
    'OffensiveMixedBot', 'DefensiveMixedBot', 'DefensiveBot', 'BalancedBot',
    'RandomBot', 'SmartRandomBot',
    'MinimaxBot',
    'BOT_REGISTRY', 'available_bots', 'create_bot'
]
