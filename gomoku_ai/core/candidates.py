"""
Candidate move generation.

Only empty cells close to existing stones are considered, which keeps the
branching factor small enough for search.
"""
from typing import List, Optional

import numpy as np

from gomoku_ai.core.board import Board
from gomoku_ai.core.constants import (
    EMPTY, Move, DEFAULT_PRUNING_RADIUS, DEFAULT_CANDIDATE_CAP
)


def candidates(
    board: Board,
    radius: int = DEFAULT_PRUNING_RADIUS,
    cap: Optional[int] = DEFAULT_CANDIDATE_CAP,
) -> List[Move]:
    """
    Enumerate candidate moves for the side to move.

    - Empty board: exactly the center cell.
    - Otherwise: every empty cell within Chebyshev distance `radius` of any
      stone, in row-major order.
    - If no empty cell lies within `radius` of a stone but the board is not
      full, every empty cell is a candidate.
    - The result is truncated to its first `cap` moves (row-major); a cap
      of None keeps them all.

    Args:
        board: Board to generate moves for
        radius: Chebyshev pruning radius
        cap: Maximum number of moves to return, or None for no limit

    Returns:
        List of (row, col) moves; empty only when the board is full
    """
    if not board.has_stones():
        return [board.center]

    empty = board.cells == EMPTY
    near = np.zeros_like(empty)
    for row, col in np.argwhere(~empty):
        near[max(0, row - radius):row + radius + 1,
             max(0, col - radius):col + radius + 1] = True
    mask = near & empty

    if not mask.any():
        mask = empty

    moves = [(int(r), int(c)) for r, c in np.argwhere(mask)]
    if cap is not None and len(moves) > cap:
        moves = moves[:cap]
    return moves
