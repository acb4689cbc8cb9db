"""
Registry of the named bot strategies.
"""
from typing import Any, Dict, List, Type

from connect4_ai.bots.base import BotStrategy
from connect4_ai.bots.simple import RandomBot, SmartRandomBot
from connect4_ai.bots.heuristic import (
    BalancedBot, DefensiveBot, DefensiveMixedBot, OffensiveMixedBot
)
from connect4_ai.bots.minimax import MinimaxBot
from connect4_ai.mcts.agent import MonteCarloBot


BOT_REGISTRY: Dict[str, Type[BotStrategy]] = {
    bot_class.name: bot_class
    for bot_class in (
        RandomBot,
        SmartRandomBot,
        OffensiveMixedBot,
        DefensiveMixedBot,
        DefensiveBot,
        BalancedBot,
        MinimaxBot,
        MonteCarloBot,
    )
}


def available_bots() -> List[str]:
    """Names accepted by create_bot, in registry order."""
    return list(BOT_REGISTRY)


def create_bot(name: str, **kwargs: Any) -> BotStrategy:
    """
    Create a bot by name.

    Args:
        name: Registered strategy name (e.g. "defensive", "monte-carlo")
        **kwargs: Passed to the strategy constructor

    Returns:
        New bot instance

    Raises:
        KeyError: If no strategy is registered under ``name``
    """
    try:
        bot_class = BOT_REGISTRY[name]
    except KeyError:
        raise KeyError(f"Unknown bot '{name}', choose from: {', '.join(BOT_REGISTRY)}") from None
    return bot_class(**kwargs)
