"""
Pattern-based heuristic scoring of moves.

The score of a point rewards extending the mover's own runs and cutting the
opponent's, with a small bonus toward the center of the board.
"""
from typing import List, Optional, Sequence

from gomoku_ai.core.board import Board
from gomoku_ai.core.constants import (
    DIRECTIONS, Player, Move,
    FOUR_SCORE, FOUR_BLOCK_SCORE, THREE_SCORE, THREE_BLOCK_SCORE,
    TWO_SCORE, TWO_BLOCK_SCORE, CENTER_BONUS
)


def _run_score(own: int, opponent: int) -> int:
    score = 0
    if own >= 4:
        score += FOUR_SCORE
    elif own == 3:
        score += THREE_SCORE
    elif own == 2:
        score += TWO_SCORE

    if opponent >= 4:
        score += FOUR_BLOCK_SCORE
    elif opponent == 3:
        score += THREE_BLOCK_SCORE
    elif opponent == 2:
        score += TWO_BLOCK_SCORE
    return score


def center_bonus(board: Board, row: int, col: int) -> int:
    """Bonus decaying with Manhattan distance from the board center."""
    center_row, center_col = board.center
    distance = abs(row - center_row) + abs(col - center_col)
    return max(0, CENTER_BONUS - distance)


def score(board: Board, row: int, col: int, player: int) -> int:
    """
    Score the point (row, col) as a move for `player`.

    Along each axis, the stones adjacent to the point (the point itself is
    not counted) are tallied for both sides:

    ======  ==========  ===============
    run     own stones  opponent stones
    ======  ==========  ===============
    >= 4    10000       5000
    3       100         50
    2       10          5
    ======  ==========  ===============

    Args:
        board: Current board
        row: Row of the point
        col: Column of the point
        player: Player considering the move

    Returns:
        Integer score; higher is better for `player`
    """
    player = Player(player)
    opponent = player.opponent
    total = 0
    for dr, dc in DIRECTIONS:
        own = (board.count_direction(row, col, dr, dc, player)
               + board.count_direction(row, col, -dr, -dc, player))
        theirs = (board.count_direction(row, col, dr, dc, opponent)
                  + board.count_direction(row, col, -dr, -dc, opponent))
        total += _run_score(own, theirs)
    return total + center_bonus(board, row, col)


def rank_moves(
    board: Board,
    moves: Sequence[Move],
    player: int,
    limit: Optional[int] = None,
) -> List[Move]:
    """
    Sort moves by descending score for `player`.

    The sort is stable, so equal scores keep their input order.

    Args:
        board: Current board
        moves: Moves to rank
        player: Player to score for
        limit: Optional number of top moves to keep

    Returns:
        Ranked list of moves
    """
    ranked = sorted(moves, key=lambda move: -score(board, move[0], move[1], player))
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def best_move(board: Board, moves: Sequence[Move], player: int) -> Optional[Move]:
    """Highest-scoring move, first on ties; None for no moves."""
    best = None
    best_score = None
    for move in moves:
        value = score(board, move[0], move[1], player)
        if best_score is None or value > best_score:
            best, best_score = move, value
    return best
