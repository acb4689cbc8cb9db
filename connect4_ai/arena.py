#!/usr/bin/env python
"""
Bot-versus-bot matches.

A series plays the same pairing from both seats: bot A moving first against
bot B, then bot B moving first against bot A. Comparing how often the first
mover wins in each seating cancels the first-move advantage, so a remaining
gap comes from the bots themselves.

Example usage:
    # 50 games per seating between two heuristic bots
    connect4-arena --bot1 offensive-mixed --bot2 defensive --games 50

    # Quick Monte Carlo check with a small rollout budget
    connect4-arena --bot1 monte-carlo --bot2 smart-random --games 10 --simulations 200
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import argparse
import sys

import numpy as np
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from connect4_ai.core.constants import Cell, PLAYER_NAMES
from connect4_ai.core.game import Game
from connect4_ai.bots.base import BotStrategy
from connect4_ai.bots.factory import available_bots, create_bot
from connect4_ai.mcts.config import MCTSConfig


@dataclass
class MatchRecord:
    """
    Outcome of a single game.

    Attributes:
        winner: Winning player, or None for a draw
        moves: Columns played, in order
        trapped_turns: Turns on which the mover had no safe column
    """
    winner: Optional[Cell]
    moves: List[int] = field(default_factory=list)
    trapped_turns: Dict[Cell, int] = field(default_factory=lambda: {Cell.YELLOW: 0, Cell.RED: 0})

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    @property
    def length(self) -> int:
        return len(self.moves)


@dataclass
class SeatingResult:
    """Results of one bot moving first for a number of games."""
    first: str
    second: str
    wins: int = 0
    losses: int = 0
    draws: int = 0
    game_lengths: List[int] = field(default_factory=list)

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.draws

    @property
    def win_rate(self) -> float:
        """Win rate of the first-moving bot."""
        if self.games == 0:
            return 0.0
        return self.wins / self.games

    @property
    def average_length(self) -> float:
        if not self.game_lengths:
            return 0.0
        return float(np.mean(self.game_lengths))

    def record(self, match: MatchRecord) -> None:
        if match.winner is None:
            self.draws += 1
        elif match.winner == Cell.YELLOW:
            self.wins += 1
        else:
            self.losses += 1
        self.game_lengths.append(match.length)


@dataclass
class SeriesResult:
    """
    Results of a symmetric series between bot A and bot B.

    ``a_first`` holds A moving first against B, ``b_first`` holds B moving
    first against A. Wins and losses are always from the first mover's view.
    """
    bot_a: str
    bot_b: str
    a_first: SeatingResult
    b_first: SeatingResult

    @property
    def a_win_rate_first(self) -> float:
        return self.a_first.win_rate

    @property
    def a_win_rate_second(self) -> float:
        """A's win rate while moving second."""
        if self.b_first.games == 0:
            return 0.0
        return self.b_first.losses / self.b_first.games

    @property
    def a_loss_rate_second(self) -> float:
        """A's loss rate while moving second."""
        return self.b_first.win_rate

    @property
    def a_total_wins(self) -> int:
        return self.a_first.wins + self.b_first.losses

    @property
    def b_total_wins(self) -> int:
        return self.a_first.losses + self.b_first.wins

    @property
    def total_draws(self) -> int:
        return self.a_first.draws + self.b_first.draws

    def symmetry_gap(self) -> float:
        """
        Difference between A's wins as first mover and A's losses as
        second mover.

        Both rates belong to the first mover of their seating, so the
        first-move advantage cancels out.

        Returns:
            Absolute difference in percentage points
        """
        return abs(self.a_win_rate_first - self.a_loss_rate_second) * 100.0

    def is_symmetric(self, tolerance: float = 15.0) -> bool:
        """True when the seat-swap gap is within ``tolerance`` percentage points."""
        return self.symmetry_gap() <= tolerance

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bot_a": self.bot_a,
            "bot_b": self.bot_b,
            "a_wins": self.a_total_wins,
            "b_wins": self.b_total_wins,
            "draws": self.total_draws,
            "a_win_rate_first": self.a_win_rate_first,
            "a_win_rate_second": self.a_win_rate_second,
            "a_loss_rate_second": self.a_loss_rate_second,
            "symmetry_gap": self.symmetry_gap(),
        }


def play_match(yellow_bot: BotStrategy, red_bot: BotStrategy, verbose: bool = False) -> MatchRecord:
    """
    Play one game between two bots.

    Args:
        yellow_bot: Bot moving first
        red_bot: Bot moving second
        verbose: Whether to print the board after every move

    Returns:
        MatchRecord

    Raises:
        RuntimeError: If the live game refuses a bot's move
    """
    game = Game()
    bots = {Cell.YELLOW: yellow_bot, Cell.RED: red_bot}
    record = MatchRecord(winner=None)

    while not game.game_over:
        mover = game.current_player
        decision = bots[mover].select_move(game)
        if decision.trapped:
            record.trapped_turns[mover] += 1

        result = game.make_move(decision.column)
        if not result.success:
            raise RuntimeError(f"{bots[mover].name} made an illegal move: {result.message}")
        record.moves.append(decision.column)

        if verbose:
            print(f"{PLAYER_NAMES[mover]} ({bots[mover].name}) -> column {decision.column} "
                  f"[{decision.stage.name}]")
            print(game.board)
            print()

    record.winner = game.winner
    return record


def play_seating(
    first: BotStrategy,
    second: BotStrategy,
    games: int,
    show_progress: bool = True
) -> SeatingResult:
    """
    Play ``games`` games with ``first`` always moving first.

    Returns:
        SeatingResult
    """
    seating = SeatingResult(first=first.name, second=second.name)
    for _ in tqdm(range(games), desc=f"{first.name} vs {second.name}", disable=not show_progress):
        seating.record(play_match(first, second))
    return seating


def run_series(
    bot_a: BotStrategy,
    bot_b: BotStrategy,
    games: int,
    show_progress: bool = True
) -> SeriesResult:
    """
    Run a symmetric series: ``games`` games per seating.

    Args:
        bot_a: First bot
        bot_b: Second bot
        games: Games to play in each seating
        show_progress: Whether to show tqdm progress bars

    Returns:
        SeriesResult
    """
    if games <= 0:
        raise ValueError("games must be positive")

    a_first = play_seating(bot_a, bot_b, games, show_progress)
    b_first = play_seating(bot_b, bot_a, games, show_progress)
    return SeriesResult(bot_a=bot_a.name, bot_b=bot_b.name, a_first=a_first, b_first=b_first)


def print_series(result: SeriesResult, tolerance: float, console: Optional[Console] = None) -> None:
    """Print a series summary as a rich table."""
    console = console or Console()

    table = Table(title=f"{result.bot_a} vs {result.bot_b}")
    table.add_column("First mover")
    table.add_column("Second mover")
    table.add_column("First wins", justify="right")
    table.add_column("Second wins", justify="right")
    table.add_column("Draws", justify="right")
    table.add_column("First win rate", justify="right")
    table.add_column("Avg moves", justify="right")

    for seating in (result.a_first, result.b_first):
        table.add_row(
            seating.first,
            seating.second,
            str(seating.wins),
            str(seating.losses),
            str(seating.draws),
            f"{seating.win_rate:.1%}",
            f"{seating.average_length:.1f}",
        )

    console.print(table)
    console.print(f"{result.bot_a}: {result.a_total_wins} wins, "
                  f"{result.bot_b}: {result.b_total_wins} wins, {result.total_draws} draws")

    gap = result.symmetry_gap()
    status = "[green]symmetric[/green]" if result.is_symmetric(tolerance) else "[red]seat-dependent[/red]"
    console.print(f"Seat-swap gap for {result.bot_a}: {gap:.1f} points ({status}, tolerance {tolerance:.1f})")


def build_bot(name: str, args: argparse.Namespace, seed: Optional[int]) -> BotStrategy:
    """Create a bot from command-line arguments."""
    if name == "monte-carlo":
        config = MCTSConfig(
            simulations=args.simulations,
            min_simulations=min(args.simulations, MCTSConfig().min_simulations),
            time_limit=args.time_limit,
            random_seed=seed,
        )
        return create_bot(name, config=config, verbose=args.verbose)
    return create_bot(name, random_seed=seed, verbose=args.verbose)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the arena."""
    parser = argparse.ArgumentParser(description="Play Connect Four bots against each other")

    # Bots
    parser.add_argument("--bot1", type=str, default="offensive-mixed",
                        choices=available_bots(),
                        help="First bot (A)")
    parser.add_argument("--bot2", type=str, default="defensive",
                        choices=available_bots(),
                        help="Second bot (B)")

    # Series configuration
    parser.add_argument("--games", type=int, default=20,
                        help="Games per seating")
    parser.add_argument("--tolerance", type=float, default=15.0,
                        help="Allowed seat-swap gap in percentage points")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducibility")

    # Monte Carlo configuration
    parser.add_argument("--simulations", type=int, default=1000,
                        help="Base rollouts per move (for monte-carlo)")
    parser.add_argument("--time-limit", type=float, default=2.0,
                        help="Seconds per move (for monte-carlo)")

    parser.add_argument("--show-game", action="store_true",
                        help="Play a single game and print every move")
    parser.add_argument("--verbose", action="store_true",
                        help="Print every decision")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main function."""
    args = parse_args(argv)

    if args.seed is not None:
        seed_a, seed_b = args.seed, args.seed + 1
    else:
        seed_a = seed_b = None

    bot_a = build_bot(args.bot1, args, seed_a)
    bot_b = build_bot(args.bot2, args, seed_b)

    try:
        if args.show_game:
            match = play_match(bot_a, bot_b, verbose=True)
            winner = "Draw" if match.winner is None else PLAYER_NAMES[match.winner]
            print(f"Result: {winner} after {match.length} moves")
            return

        result = run_series(bot_a, bot_b, args.games)
    except KeyboardInterrupt:
        print("\nSeries interrupted by user.")
        sys.exit(0)

    print_series(result, args.tolerance)


if __name__ == "__main__":
    main()
