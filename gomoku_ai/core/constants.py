"""
Constants for the Gomoku engine.

This module defines the players, board geometry, default engine limits and
the tiered pattern scores used by the heuristic evaluator.
"""
from enum import IntEnum
from typing import Final, List, Tuple


# Cell value for an empty intersection
EMPTY: Final[int] = 0


class Player(IntEnum):
    """The two sides. Values double as the cell values stored on the board."""
    BLACK = 1   # Moves first
    WHITE = -1

    @property
    def opponent(self) -> 'Player':
        """The other side."""
        return Player(-self.value)

    @property
    def symbol(self) -> str:
        """Single-character symbol for plain-text boards."""
        return PLAYER_SYMBOLS[self]


# Symbols for terminal display
PLAYER_SYMBOLS: Final = {
    Player.BLACK: "X",
    Player.WHITE: "O",
}
EMPTY_SYMBOL: Final[str] = "."

# A move is a 0-indexed (row, col) pair
Move = Tuple[int, int]

# The four line axes: horizontal, vertical, diagonal, anti-diagonal
DIRECTIONS: Final[List[Tuple[int, int]]] = [
    (0, 1),
    (1, 0),
    (1, 1),
    (1, -1),
]

# Board defaults
DEFAULT_BOARD_SIZE: Final[int] = 13
DEFAULT_WIN_LENGTH: Final[int] = 5

# Candidate generation
DEFAULT_PRUNING_RADIUS: Final[int] = 1
DEFAULT_CANDIDATE_CAP: Final[int] = 25

# Search defaults
DEFAULT_ITERATIONS: Final[int] = 200
DEFAULT_EXPLORATION_CONSTANT: Final[float] = 1.4
DEFAULT_PLAYOUT_HORIZON: Final[int] = 8
DEFAULT_EXPANSION_WIDTH: Final[int] = 5
DEFAULT_RANDOM_MOVE_PROB: Final[float] = 0.7
DEFAULT_PLAYOUT_TOP_K: Final[int] = 5

# Evaluator tiers, per axis: (own run, opponent run) -> score
FOUR_SCORE: Final[int] = 10000
FOUR_BLOCK_SCORE: Final[int] = 5000
THREE_SCORE: Final[int] = 100
THREE_BLOCK_SCORE: Final[int] = 50
TWO_SCORE: Final[int] = 10
TWO_BLOCK_SCORE: Final[int] = 5

# Center-proximity bonus is max(0, CENTER_BONUS - manhattan distance)
CENTER_BONUS: Final[int] = 5

# Moves scoring at or above this are treated as offensive threats
DEFAULT_THREAT_THRESHOLD: Final[int] = THREE_SCORE

# Reasons reported by the move arbiter
REASON_WIN: Final[str] = "win"
REASON_BLOCK: Final[str] = "block"
REASON_CRITICAL_BLOCK: Final[str] = "critical-block"
REASON_SEARCH: Final[str] = "search"
REASON_FALLBACK: Final[str] = "fallback"
REASON_NO_MOVES: Final[str] = "no-moves"
