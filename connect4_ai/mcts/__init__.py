"""
Monte Carlo search for Connect Four.

The Monte Carlo bot treats each decision as a bandit over the safe columns:

1. Selection: try every candidate once, then pick by UCB1.
2. Rollout: play the candidate on a cloned game, then random moves until the
   game ends.
3. Update: add the reward (+1 win, -1 loss, 0 draw) to the candidate.

The rollout budget grows with the game phase and the number of legal
columns, and a wall-clock limit stops the search once a minimum number of
rollouts has been run.
"""

from connect4_ai.mcts.config import MCTSConfig
from connect4_ai.mcts.stats import CandidateStats, SearchScratch
from connect4_ai.mcts.search import (
    monte_carlo_search,
    adaptive_simulation_count,
    select_candidate,
    run_rollout,
    choose_final
)
from connect4_ai.mcts.agent import MonteCarloBot, MonteCarloBotFactory

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    simulations=1000,         # Base rollouts per decision
    min_simulations=200,      # Rollouts run before the time limit applies
    exploration_weight=1.41,  # UCB1 exploration parameter (sqrt(2))
    max_depth=42,             # Maximum random moves per rollout
    time_limit=2.0            # Wall-clock limit in seconds
)

__all__ = [
    'MonteCarloBot',
    'MonteCarloBotFactory',
    'MCTSConfig',
    'CandidateStats',
    'SearchScratch',
    'monte_carlo_search',
    'adaptive_simulation_count',
    'select_candidate',
    'run_rollout',
    'choose_final',
    'DEFAULT_CONFIG'
]
