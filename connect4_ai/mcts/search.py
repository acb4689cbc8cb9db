"""
Monte Carlo search over candidate columns.

Each decision is a multi-armed bandit over the candidate columns:
1. Selection: pick a candidate with UCB1 (unvisited candidates first)
2. Rollout: play the candidate on a cloned game, then uniformly random
   moves until the game ends or the depth limit is reached
3. Update: add the reward (+1 win, -1 loss, 0 draw, from the point of view
   of the side to move) to the candidate's statistics

The number of rollouts adapts to the game phase and to the number of legal
columns, and a wall-clock limit stops the loop once the minimum number of
rollouts has been run. Time is only checked between rollouts.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import time
import random

from connect4_ai.core.constants import TOTAL_CELLS
from connect4_ai.core.game import Game
from connect4_ai.mcts.config import MCTSConfig
from connect4_ai.mcts.stats import SearchScratch


def phase_multiplier(game: Game, config: MCTSConfig) -> float:
    """
    Budget multiplier for the current game phase.

    Args:
        game: Current game
        config: Search configuration

    Returns:
        Multiplier for the board fill ratio
    """
    progress = game.move_count / TOTAL_CELLS
    for bound, multiplier in config.phase_multipliers:
        if progress < bound:
            return multiplier
    return config.phase_multipliers[-1][1]


def adaptive_simulation_count(game: Game, config: MCTSConfig) -> int:
    """
    Number of rollouts to run for this decision.

    The base count is scaled by the phase multiplier and by a complexity
    multiplier proportional to the number of legal columns, then clamped to
    [min_simulations, 2 * simulations].

    Args:
        game: Current game
        config: Search configuration

    Returns:
        Target rollout count
    """
    complexity = min(len(game.get_valid_moves()) / config.complexity_divisor, config.max_complexity)
    count = int(config.simulations * phase_multiplier(game, config) * complexity)
    return max(config.min_simulations, min(count, 2 * config.simulations))


def select_candidate(scratch: SearchScratch, exploration_weight: float) -> int:
    """
    Choose the next candidate to roll out.

    Unvisited candidates are taken first, in candidate order; after that the
    candidate with the highest UCB1 score wins.

    Args:
        scratch: Statistics of the current decision
        exploration_weight: UCB1 exploration constant

    Returns:
        Column to roll out
    """
    unvisited = scratch.unvisited()
    if unvisited:
        return unvisited[0]

    total = scratch.total_visits
    return max(scratch, key=lambda entry: entry.ucb_score(total, exploration_weight)).column


def run_rollout(
    game: Game,
    column: int,
    config: MCTSConfig,
    rng: random.Random
) -> Tuple[float, int]:
    """
    Play one random game starting with ``column``.

    Works on a clone; ``game`` is never modified.

    Args:
        game: Position to start from
        column: First move of the rollout
        config: Search configuration
        rng: Random generator for the playout

    Returns:
        Tuple of (reward for the side to move in ``game``, random moves played)
    """
    mover = game.current_player
    sim = game.clone()
    if not sim.make_move(column).success:
        return config.DRAW_REWARD, 0

    steps = 0
    while not sim.game_over and steps < config.max_depth:
        valid_moves = sim.board.valid_moves()
        if not valid_moves:
            break
        sim.make_move(rng.choice(valid_moves))
        steps += 1

    if sim.winner is None:
        return config.DRAW_REWARD, steps
    if sim.winner == mover:
        return config.WIN_REWARD, steps
    return config.LOSS_REWARD, steps


def choose_final(scratch: SearchScratch, config: MCTSConfig) -> int:
    """
    Pick the candidate with the best confidence-adjusted average.

    Ties keep candidate order.
    """
    best = max(
        scratch,
        key=lambda entry: entry.confidence_score(config.confidence_visits, config.confidence_bonus),
    )
    return best.column


def monte_carlo_search(
    game: Game,
    candidates: Sequence[int],
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None,
    clock: Callable[[], float] = time.perf_counter
) -> Tuple[int, Dict[str, Any]]:
    """
    Run the Monte Carlo search and return the chosen column.

    Args:
        game: Current game (read only)
        candidates: Columns to choose from; empty means any legal column
        config: Search configuration
        rng: Random generator (defaults to one seeded from config.random_seed)
        clock: Time source in seconds

    Returns:
        Tuple of (chosen column, search statistics)
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random(config.random_seed)

    start_time = clock()
    stats: Dict[str, Any] = {
        "rollouts": 0,
        "target_rollouts": 0,
        "stopped_early": False,
        "forced_move": False,
        "used_fallback": False,
        "total_rollout_steps": 0,
        "max_rollout_steps": 0,
    }

    columns: List[int] = list(candidates)
    if not columns:
        valid_moves = game.get_valid_moves()
        if not valid_moves:
            raise ValueError("No legal moves available")
        stats["used_fallback"] = True
        stats["time_elapsed"] = clock() - start_time
        return rng.choice(valid_moves), stats

    if len(columns) == 1:
        stats["forced_move"] = True
        stats["time_elapsed"] = clock() - start_time
        return columns[0], stats

    scratch = SearchScratch(columns)
    target = adaptive_simulation_count(game, config)
    stats["target_rollouts"] = target

    while stats["rollouts"] < target:
        if (
            config.time_limit is not None
            and stats["rollouts"] >= config.min_simulations
            and clock() - start_time > config.time_limit
        ):
            stats["stopped_early"] = True
            break

        column = select_candidate(scratch, config.exploration_weight)
        reward, steps = run_rollout(game, column, config, rng)
        scratch.record(column, reward)

        stats["rollouts"] += 1
        stats["total_rollout_steps"] += steps
        stats["max_rollout_steps"] = max(stats["max_rollout_steps"], steps)

    best_column = choose_final(scratch, config)

    stats["time_elapsed"] = clock() - start_time
    stats["rollouts_per_second"] = stats["rollouts"] / max(0.001, stats["time_elapsed"])
    stats["average_rollout_steps"] = stats["total_rollout_steps"] / max(1, stats["rollouts"])
    stats["column_visits"] = {entry.column: entry.visits for entry in scratch}
    stats["column_scores"] = {entry.column: entry.average for entry in scratch}
    stats["column_confidence"] = {
        entry.column: entry.confidence_score(config.confidence_visits, config.confidence_bonus)
        for entry in scratch
    }

    return best_column, stats
