"""
Shared position evaluation utilities.

Every strategy and the threat analyzer score positions with the helpers in
this module, so there is exactly one implementation of:

1. Formation counting: a 4-cell sliding window per direction per cell
   (all 69 windows of the board, evaluated at once with numpy)
2. Threat counting: columns where a piece would win on the next ply
3. Simulate-and-score: the features of one candidate move, computed on
   hypothetical games obtained through Game.simulate_move
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from connect4_ai.core.board import Board
from connect4_ai.core.constants import (
    Cell, ROWS, COLS, CONNECT, CENTER_COL, BOTTOM_ROW, DIRECTIONS, opponent_of
)
from connect4_ai.core.game import Game, GameState


def _build_windows() -> Tuple[np.ndarray, np.ndarray]:
    """Row and column index arrays of every 4-cell line on the board."""
    rows, cols = [], []
    for row in range(ROWS):
        for col in range(COLS):
            for d_row, d_col in DIRECTIONS:
                end_row = row + d_row * (CONNECT - 1)
                end_col = col + d_col * (CONNECT - 1)
                if 0 <= end_row < ROWS and 0 <= end_col < COLS:
                    rows.append([row + d_row * i for i in range(CONNECT)])
                    cols.append([col + d_col * i for i in range(CONNECT)])
    return np.array(rows, dtype=np.intp), np.array(cols, dtype=np.intp)


WINDOW_ROWS, WINDOW_COLS = _build_windows()


def window_counts(board: Board, player: Cell) -> Tuple[np.ndarray, np.ndarray]:
    """
    Count a player's pieces and the empty cells in every window.

    Args:
        board: Board to scan
        player: Player whose pieces are counted

    Returns:
        Tuple of (own pieces per window, empty cells per window)
    """
    cells = board.grid[WINDOW_ROWS, WINDOW_COLS]
    own = np.count_nonzero(cells == player, axis=1)
    empty = np.count_nonzero(cells == Cell.EMPTY, axis=1)
    return own, empty


def count_formations(board: Board, player: Cell, length: int) -> int:
    """
    Count the open k-in-a-row formations of a player.

    A formation of length k is a 4-cell window holding exactly k of the
    player's pieces with every other cell still empty, i.e. a line the
    player can still complete.

    Args:
        board: Board to scan
        player: Player to count for
        length: Number of pieces in the window (1-4)

    Returns:
        Number of formations
    """
    if not 1 <= length <= CONNECT:
        raise ValueError(f"length must be between 1 and {CONNECT}")
    own, empty = window_counts(board, player)
    return int(np.count_nonzero((own == length) & (empty == CONNECT - length)))


def formation_profile(board: Board, player: Cell) -> Dict[int, int]:
    """Count 2- and 3-in-a-row formations in one scan."""
    own, empty = window_counts(board, player)
    open_windows = own + empty == CONNECT
    return {
        2: int(np.count_nonzero(open_windows & (own == 2))),
        3: int(np.count_nonzero(open_windows & (own == 3))),
    }


# Window points for static evaluation, indexed by pieces in an open window
OWN_WINDOW_POINTS = (0, 0, 10, 50, 100000)
OPPONENT_WINDOW_POINTS = (0, 0, 5, 80, 100000)
CENTER_PIECE_POINTS = 3


def score_position(board: Board, player: Cell) -> int:
    """
    Static evaluation of a board from ``player``'s point of view.

    Open windows score by how full they are, with the opponent's threes
    weighted above the player's own. Each piece in the centre column is
    worth a few points.

    Args:
        board: Board to score
        player: Player the score is for

    Returns:
        Score (higher is better for ``player``)
    """
    opponent = opponent_of(player)
    score = 0
    for who, points, sign in ((player, OWN_WINDOW_POINTS, 1), (opponent, OPPONENT_WINDOW_POINTS, -1)):
        own, empty = window_counts(board, who)
        open_counts = own[own + empty == CONNECT]
        score += sign * int(np.sum(np.take(points, open_counts)))

    center = board.grid[:, CENTER_COL]
    score += CENTER_PIECE_POINTS * int(np.count_nonzero(center == player))
    score -= CENTER_PIECE_POINTS * int(np.count_nonzero(center == opponent))
    return score


def hypothetical(game: Game, column: int, player: Optional[Cell] = None) -> Optional[Game]:
    """
    Get the game that would follow a move, without touching ``game``.

    The returned game is built from Game.simulate_move's board copy; the
    opponent of the mover is to move next.

    Args:
        game: Current game
        column: Column to play
        player: Player to move as (defaults to the side to move)

    Returns:
        Independent Game, or None if the column cannot be played
    """
    result = game.simulate_move(column, player)
    if result is None:
        return None

    state = GameState(board=result.board, current_player=opponent_of(result.player))
    if result.would_win:
        state.game_over = True
        state.winner = result.player
        state.winning_cells = result.board.winning_line(result.row, column)
    elif result.board.is_full():
        state.game_over = True
    return Game(starting_player=state.current_player, state=state)


def winning_columns(game: Game, player: Cell) -> List[int]:
    """
    Get the columns where ``player`` would win immediately.

    One simulation per legal column. A finished game has none.

    Args:
        game: Game to analyze
        player: Player to test moves for

    Returns:
        Ascending list of winning columns
    """
    wins = []
    for column in game.get_valid_moves():
        result = game.simulate_move(column, player)
        if result is not None and result.would_win:
            wins.append(column)
    return wins


def count_threats(game: Game, player: Cell) -> int:
    """Number of columns where ``player`` would win next ply."""
    return len(winning_columns(game, player))


def allows_immediate_loss(game: Game, column: int, player: Optional[Cell] = None) -> bool:
    """
    Check whether playing ``column`` hands the opponent a winning reply.

    A move that wins on the spot never allows a loss.
    """
    after = hypothetical(game, column, player)
    if after is None or after.game_over:
        return False
    return bool(winning_columns(after, after.current_player))


def count_safe_replies(game: Game, player: Cell) -> int:
    """
    Count the moves ``player`` could make that leave the other side without
    an immediate win.

    Args:
        game: Game to analyze
        player: Player whose replies are counted

    Returns:
        Number of safe replies
    """
    return sum(
        1 for column in game.get_valid_moves()
        if not allows_immediate_loss(game, column, player)
    )


def center_bonus(column: int) -> int:
    """Centre proximity: 3 for the centre column down to 0 at the edges."""
    return max(0, 3 - abs(column - CENTER_COL))


def key_position_bonus(row: int, column: int) -> int:
    """Bonus for occupying central columns and the two bottom rows."""
    score = 0
    if abs(column - CENTER_COL) <= 1:
        score += 3
    if row >= BOTTOM_ROW - 1:
        score += 2
    return score


@dataclass(frozen=True)
class PositionBaseline:
    """Features of the position before any candidate move is played."""
    player: Cell
    opponent: Cell
    own_threats: int
    own_twos: int
    own_threes: int
    opponent_threats: int
    opponent_twos: int
    opponent_threes: int
    opponent_safe_replies: int


def position_baseline(game: Game, player: Optional[Cell] = None) -> PositionBaseline:
    """
    Measure the position once so every candidate can be compared against it.

    Args:
        game: Current game
        player: Mover (defaults to the side to move)

    Returns:
        PositionBaseline
    """
    mover = game.current_player if player is None else player
    opponent = opponent_of(mover)
    own = formation_profile(game.board, mover)
    theirs = formation_profile(game.board, opponent)
    return PositionBaseline(
        player=mover,
        opponent=opponent,
        own_threats=count_threats(game, mover),
        own_twos=own[2],
        own_threes=own[3],
        opponent_threats=count_threats(game, opponent),
        opponent_twos=theirs[2],
        opponent_threes=theirs[3],
        opponent_safe_replies=count_safe_replies(game, opponent),
    )


@dataclass(frozen=True)
class MoveFeatures:
    """
    Everything the heuristic strategies know about one candidate move.

    Offensive and defensive counts are deltas against the baseline;
    look-ahead fields describe the opponent's best reply two plies ahead.
    """
    column: int
    row: int
    wins: bool
    threats_created: int
    twos_created: int
    threes_created: int
    threats_blocked: int
    twos_disrupted: int
    threes_disrupted: int
    center: int
    key_position: int
    restriction: int
    opponent_wins_next: bool
    opponent_fork: bool
    opponent_max_threats: int

    @property
    def lookahead_danger(self) -> int:
        """Severity of the opponent's best reply (0 = harmless)."""
        if self.opponent_wins_next:
            return 10
        if self.opponent_fork:
            return 5
        return self.opponent_max_threats


def _best_reply(after: Game, player: Cell) -> Tuple[bool, bool, int]:
    """
    Look at every opponent reply in ``after`` (opponent to move).

    Returns:
        Tuple of (a reply wins outright, a reply creates an unanswerable
        double threat, most threats any reply creates)
    """
    opponent = after.current_player
    wins_next = False
    fork = False
    max_threats = 0
    for reply in after.get_valid_moves():
        following = hypothetical(after, reply)
        if following is None:
            continue
        if following.winner == opponent:
            wins_next = True
            continue
        if following.game_over:
            continue
        threats = count_threats(following, opponent)
        max_threats = max(max_threats, threats)
        # We would win first if we still had a threat of our own
        if threats >= 2 and not winning_columns(following, player):
            fork = True
    return wins_next, fork, max_threats


def move_features(
    game: Game,
    column: int,
    baseline: Optional[PositionBaseline] = None
) -> Optional[MoveFeatures]:
    """
    Simulate a candidate move and measure it.

    Args:
        game: Current game (the side to move is the mover)
        column: Candidate column
        baseline: Pre-computed baseline for this position

    Returns:
        MoveFeatures, or None if the column cannot be played
    """
    if baseline is None:
        baseline = position_baseline(game)

    player, opponent = baseline.player, baseline.opponent
    result = game.simulate_move(column, player)
    if result is None:
        return None
    after = hypothetical(game, column, player)

    own = formation_profile(result.board, player)
    theirs = formation_profile(result.board, opponent)

    if after.game_over:
        threats_after = 0
        opponent_threats_after = 0
        safe_replies_after = 0
        wins_next, fork, max_threats = False, False, 0
    else:
        threats_after = count_threats(after, player)
        opponent_threats_after = count_threats(after, opponent)
        safe_replies_after = count_safe_replies(after, opponent)
        wins_next, fork, max_threats = _best_reply(after, player)

    return MoveFeatures(
        column=column,
        row=result.row,
        wins=result.would_win,
        threats_created=max(0, threats_after - baseline.own_threats),
        twos_created=own[2] - baseline.own_twos,
        threes_created=own[3] - baseline.own_threes,
        threats_blocked=baseline.opponent_threats - opponent_threats_after,
        twos_disrupted=baseline.opponent_twos - theirs[2],
        threes_disrupted=baseline.opponent_threes - theirs[3],
        center=center_bonus(column),
        key_position=key_position_bonus(result.row, column),
        restriction=baseline.opponent_safe_replies - safe_replies_after,
        opponent_wins_next=wins_next,
        opponent_fork=fork,
        opponent_max_threats=max_threats,
    )


def rank_by_threats(game: Game, columns: Sequence[int], player: Optional[Cell] = None) -> List[int]:
    """
    Order columns by additional threats created, then centre proximity.

    Used as the default tie-break between several winning or blocking moves.
    """
    mover = game.current_player if player is None else player

    def key(column: int) -> Tuple[int, int, int]:
        after = hypothetical(game, column, mover)
        threats = count_threats(after, mover) if after is not None and not after.game_over else 0
        return (-threats, abs(column - CENTER_COL), column)

    return sorted(columns, key=key)


def rank_least_bad(game: Game, columns: Sequence[int], player: Optional[Cell] = None) -> List[int]:
    """
    Order columns for a trapped position.

    Fewest opponent winning replies first, then centre proximity, then the
    lower column index.
    """
    mover = game.current_player if player is None else player
    opponent = opponent_of(mover)

    def key(column: int) -> Tuple[int, int, int]:
        after = hypothetical(game, column, mover)
        replies = 0 if after is None or after.game_over else count_threats(after, opponent)
        return (replies, abs(column - CENTER_COL), column)

    return sorted(columns, key=key)
