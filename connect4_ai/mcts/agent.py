"""
Monte Carlo bot for Connect Four.

This module provides the MonteCarloBot strategy, which runs the shared
move-selection pipeline and then chooses among the remaining safe columns
with a UCB1 Monte Carlo search. The bot keeps statistics about its most
recent search and a history of all searches.
"""
from typing import Dict, List, Optional, Tuple, Any

from connect4_ai.core.constants import DEFAULT_MIN_SIMULATIONS
from connect4_ai.core.game import Game
from connect4_ai.bots.base import BotStrategy
from connect4_ai.mcts.config import MCTSConfig
from connect4_ai.mcts.search import monte_carlo_search


class MonteCarloBot(BotStrategy):
    """
    Monte Carlo strategy for playing Connect Four.

    Immediate wins, forced blocks and trap avoidance are handled by the
    pipeline; the search only ranks the columns that survive those stages.
    """

    name = "monte-carlo"
    description = "UCB1 Monte Carlo rollouts over the safe columns"

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        random_seed: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Initialize a Monte Carlo bot.
        
        Args:
            config: Search configuration parameters
            random_seed: Seed for rollouts (defaults to config.random_seed)
            verbose: Whether to print detailed information after each search
        """
        self.config = config or MCTSConfig()
        if random_seed is None:
            random_seed = self.config.random_seed
        super().__init__(random_seed=random_seed, verbose=verbose)
        
        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}
        
        # History of all searched columns and their statistics
        self.action_history: List[Tuple[int, Dict[str, Any]]] = []

    def select_from_safe_columns(self, game: Game, candidate_columns: List[int]) -> int:
        column, stats = monte_carlo_search(game, candidate_columns, self.config, self.rng)
        
        self.last_stats = stats
        self.action_history.append((column, stats))
        
        if self.verbose:
            self._print_search_info(column, stats)
        
        return column

    def _print_search_info(self, column: int, stats: Dict[str, Any]) -> None:
        """
        Print information about the search.
        
        Args:
            column: Selected column
            stats: Search statistics
        """
        print(f"\n{self.name} selected column {column}")
        if stats.get("forced_move"):
            print("Only one candidate, no rollouts run")
            return
        if stats.get("used_fallback"):
            print("No candidates given, picked a random legal column")
            return
        
        stopped = " (time limit)" if stats["stopped_early"] else ""
        print(f"Rollouts: {stats['rollouts']}/{stats['target_rollouts']}{stopped}")
        print(f"Time: {stats['time_elapsed']:.3f}s ({stats['rollouts_per_second']:.1f} rollouts/s)")
        print(f"Average rollout length: {stats['average_rollout_steps']:.1f}")
        
        print("\nColumns:")
        columns_by_visits = sorted(
            stats["column_visits"].items(),
            key=lambda x: x[1],
            reverse=True
        )
        for col, visits in columns_by_visits:
            average = stats["column_scores"][col]
            adjusted = stats["column_confidence"][col]
            print(f"  {col}: {visits} visits, {average:+.3f} average, {adjusted:+.3f} adjusted")

    def get_last_statistics(self) -> Dict[str, Any]:
        """
        Get statistics from the most recent search.
        
        Returns:
            Dictionary of search statistics
        """
        return self.last_stats

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["type"] = "monte-carlo"
        info["config"] = self.config.to_dict()
        info["searches"] = len(self.action_history)
        return info

    def __str__(self) -> str:
        return f"{self.name} ({self.config.simulations} rollouts, {self.config.time_limit}s)"


class MonteCarloBotFactory:
    """
    Factory for creating Monte Carlo bots with different strengths.
    """

    @staticmethod
    def create_fast(random_seed: Optional[int] = None) -> MonteCarloBot:
        """
        Create a fast bot with fewer rollouts.
        
        Returns:
            MonteCarloBot
        """
        return MonteCarloBot(config=MCTSConfig.fast(), random_seed=random_seed)

    @staticmethod
    def create_standard(random_seed: Optional[int] = None) -> MonteCarloBot:
        """
        Create a bot with the default budget.
        
        Returns:
            MonteCarloBot
        """
        return MonteCarloBot(config=MCTSConfig.default(), random_seed=random_seed)

    @staticmethod
    def create_strong(random_seed: Optional[int] = None) -> MonteCarloBot:
        """
        Create a stronger, slower bot.
        
        Returns:
            MonteCarloBot
        """
        return MonteCarloBot(config=MCTSConfig.strong(), random_seed=random_seed)

    @staticmethod
    def create_custom(
        simulations: int = 1000,
        exploration_weight: float = 1.41,
        time_limit: Optional[float] = 2.0,
        random_seed: Optional[int] = None,
        verbose: bool = False
    ) -> MonteCarloBot:
        """
        Create a bot with custom parameters.
        
        Args:
            simulations: Base number of rollouts per decision
            exploration_weight: UCB1 exploration parameter
            time_limit: Wall-clock limit in seconds
            random_seed: Seed for rollouts
            verbose: Whether to print search details
            
        Returns:
            MonteCarloBot
        """
        config = MCTSConfig(
            simulations=simulations,
            min_simulations=min(DEFAULT_MIN_SIMULATIONS, simulations),
            exploration_weight=exploration_weight,
            time_limit=time_limit,
        )
        return MonteCarloBot(config=config, random_seed=random_seed, verbose=verbose)
