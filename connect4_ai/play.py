#!/usr/bin/env python
"""
Interactive Connect Four in the terminal.

Play against any registered bot, or watch two bots play each other.

Example usage:
    # Play against the defensive bot
    connect4-play --opponent defensive

    # Play second against the Monte Carlo bot, with every hint enabled
    connect4-play --opponent monte-carlo --second --help-level 2

    # Watch two bots
    connect4-play --watch --opponent offensive-mixed --bot2 defensive-mixed
"""
from typing import List, Optional, Set
import argparse
import os
import sys
import time

from connect4_ai.core.board import Coordinate
from connect4_ai.core.constants import Cell, COLS, ROWS, PLAYER_NAMES
from connect4_ai.core.game import Game, GameEvent
from connect4_ai.analysis.threats import AssistanceSettings, HintKind, ThreatAnalyzer
from connect4_ai.bots.base import BotStrategy
from connect4_ai.bots.factory import available_bots, create_bot
from connect4_ai.mcts.config import MCTSConfig


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    YELLOW = "\033[93m"
    DIM = "\033[90m"

    @staticmethod
    def piece(cell: Cell) -> str:
        """Get the coloured symbol for a cell."""
        if cell == Cell.YELLOW:
            return Colors.YELLOW + "●" + Colors.RESET
        elif cell == Cell.RED:
            return Colors.RED + "●" + Colors.RESET
        else:
            return Colors.DIM + "·" + Colors.RESET

    @staticmethod
    def player(player: Cell) -> str:
        color = Colors.YELLOW if player == Cell.YELLOW else Colors.RED
        return Colors.BOLD + color + PLAYER_NAMES[player] + Colors.RESET


def render_board(game: Game, highlight: Optional[Set[Coordinate]] = None) -> str:
    """
    Render the board with ANSI colours.

    Args:
        game: Game to render
        highlight: Cells to mark (e.g. the winning line)

    Returns:
        Multi-line string
    """
    highlight = highlight or set()
    lines = [" " + " ".join(str(col) for col in range(COLS))]
    for row in range(ROWS):
        cells = []
        for col in range(COLS):
            symbol = Colors.piece(game.board.cell(row, col))
            if (row, col) in highlight:
                symbol = Colors.GREEN + Colors.BOLD + "●" + Colors.RESET
            cells.append(symbol)
        lines.append("|" + " ".join(cells) + "|")
    lines.append("+" + "-" * (2 * COLS - 1) + "+")
    return "\n".join(lines)


def display_game(game: Game, title: str, clear: bool = True) -> None:
    """Display the current game."""
    if clear:
        os.system('cls' if os.name == 'nt' else 'clear')

    print(Colors.BOLD + Colors.CYAN + f"=== {title} ===" + Colors.RESET)
    print(f"Move: {game.move_count}")
    print()
    print(render_board(game, set(game.winning_cells)))
    print()


def show_hints(game: Game, settings: AssistanceSettings) -> None:
    """Print the hints the player to move is allowed to see."""
    hints = ThreatAnalyzer(game).hints(game.current_player, settings)
    if not hints:
        print("No hints for this position.")
        return
    for hint in hints:
        color = {
            HintKind.WIN: Colors.GREEN,
            HintKind.BLOCK: Colors.YELLOW,
            HintKind.AVOID: Colors.RED,
        }[hint.kind]
        print(color + hint.message + Colors.RESET)


def read_human_move(game: Game, settings: AssistanceSettings) -> Optional[int]:
    """
    Ask the human for a column.

    Returns:
        Column to play, or None after an undo request
    """
    while True:
        choice = input(f"{Colors.player(game.current_player)}, choose a column "
                       f"(0-{COLS - 1}, 'h' hints, 'u' undo, 'q' quit): ").strip().lower()

        if choice in ("q", "quit"):
            raise KeyboardInterrupt
        if choice in ("h", "hint"):
            show_hints(game, settings)
            continue
        if choice in ("u", "undo"):
            return None

        try:
            column = int(choice)
        except ValueError:
            print("Please enter a column number.")
            continue

        if column not in game.get_valid_moves():
            print(f"Column {column} cannot be played.")
            continue
        return column


def undo_turn(game: Game, human: Cell) -> None:
    """Take back moves until it is the human's turn again."""
    if not game.can_undo():
        print("Nothing to undo.")
        return
    game.undo_move()
    while game.current_player != human and game.can_undo():
        game.undo_move()


def announce_result(game: Game, names: dict) -> None:
    print(Colors.BOLD + Colors.CYAN + "=== GAME OVER ===" + Colors.RESET)
    if game.winner is None:
        print(Colors.BOLD + "It's a draw!" + Colors.RESET)
    else:
        print(f"{Colors.player(game.winner)} ({names[game.winner]}) wins!")

    stats = game.get_statistics()
    print(f"Moves: {stats['moves']}, duration: {stats['duration']:.1f}s")


def play_human(bot: BotStrategy, human: Cell, settings: AssistanceSettings, debug: bool = False) -> None:
    """Play one game between the human and a bot."""
    game = Game()
    names = {human: "You", Cell.YELLOW if human == Cell.RED else Cell.RED: bot.name}
    if debug:
        game.on(GameEvent.MOVE_MADE, lambda payload: print(f"[event] {payload}"))

    while not game.game_over:
        display_game(game, f"CONNECT FOUR vs {bot.name}", clear=not debug)

        if game.current_player == human:
            column = read_human_move(game, settings)
            if column is None:
                undo_turn(game, human)
                continue
        else:
            print(f"{bot.name} is thinking...")
            decision = bot.select_move(game)
            column = decision.column
            if debug:
                print(f"{bot.name} chose {column} via {decision.stage.name}")
                time.sleep(1.0)

        game.make_move(column)

    display_game(game, f"CONNECT FOUR vs {bot.name}", clear=not debug)
    announce_result(game, names)


def watch_bots(yellow_bot: BotStrategy, red_bot: BotStrategy, delay: float) -> None:
    """Watch two bots play each other."""
    game = Game()
    bots = {Cell.YELLOW: yellow_bot, Cell.RED: red_bot}
    names = {player: bot.name for player, bot in bots.items()}
    title = f"{yellow_bot.name} vs {red_bot.name}"

    while not game.game_over:
        display_game(game, title)
        bot = bots[game.current_player]
        print(f"{Colors.player(game.current_player)} ({bot.name}) is thinking...")
        decision = bot.select_move(game)
        game.make_move(decision.column)
        time.sleep(delay)

    display_game(game, title)
    announce_result(game, names)


def build_bot(name: str, args: argparse.Namespace) -> BotStrategy:
    """Create a bot from command-line arguments."""
    if name == "monte-carlo":
        config = MCTSConfig(
            simulations=args.simulations,
            min_simulations=min(args.simulations, MCTSConfig().min_simulations),
            time_limit=args.time_limit,
            random_seed=args.seed,
        )
        return create_bot(name, config=config, verbose=args.debug)
    return create_bot(name, random_seed=args.seed, verbose=args.debug)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for game configuration."""
    parser = argparse.ArgumentParser(description="Play Connect Four against AI bots")

    # Opponent configuration
    parser.add_argument("--opponent", type=str, default="defensive-mixed",
                        choices=available_bots(),
                        help="Bot to play against (or the first bot with --watch)")
    parser.add_argument("--bot2", type=str, default="defensive",
                        choices=available_bots(),
                        help="Second bot for --watch")

    # Monte Carlo configuration
    parser.add_argument("--simulations", type=int, default=1000,
                        help="Base rollouts per move (for monte-carlo)")
    parser.add_argument("--time-limit", type=float, default=2.0,
                        help="Seconds per move (for monte-carlo)")

    # Game configuration
    parser.add_argument("--second", action="store_true",
                        help="Human player moves second")
    parser.add_argument("--help-level", type=int, default=-1,
                        help="Hints: -1 none, 0 wins, 1 adds threats, 2 adds columns to avoid")
    parser.add_argument("--watch", action="store_true",
                        help="Watch two bots instead of playing")
    parser.add_argument("--delay", type=float, default=0.5,
                        help="Delay between moves when watching (seconds)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducibility")
    parser.add_argument("--debug", action="store_true",
                        help="Show debug information")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main function."""
    args = parse_args(argv)

    # Set up colored output for Windows
    if os.name == 'nt':
        os.system('color')

    print(Colors.BOLD + Colors.CYAN + "Welcome to Connect Four!" + Colors.RESET)

    try:
        while True:
            if args.watch:
                watch_bots(build_bot(args.opponent, args), build_bot(args.bot2, args), args.delay)
            else:
                human = Cell.RED if args.second else Cell.YELLOW
                settings = AssistanceSettings.from_level(args.help_level)
                play_human(build_bot(args.opponent, args), human, settings, debug=args.debug)

            again = input("\nPlay again? (y/n): ").strip().lower()
            if again not in ("y", "yes"):
                print("Thanks for playing!")
                break
    except (KeyboardInterrupt, EOFError):
        print("\nGame interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main()
