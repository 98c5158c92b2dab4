"""
Board representation and win detection for Gomoku.

The board is an N x N numpy array of int8 cell values (EMPTY, Player.BLACK,
Player.WHITE). `has_five` is the single source of truth for deciding whether
a stone completes a winning line.
"""
from __future__ import annotations
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from gomoku_ai.core.constants import (
    EMPTY, EMPTY_SYMBOL, PLAYER_SYMBOLS, DIRECTIONS, Player, Move,
    DEFAULT_BOARD_SIZE, DEFAULT_WIN_LENGTH
)
from gomoku_ai.core.errors import InvalidMoveError


class Board:
    """
    A square Gomoku board.

    The number of stones on the board is tracked in `move_count` and always
    equals the number of non-empty cells.
    """

    def __init__(
        self,
        size: int = DEFAULT_BOARD_SIZE,
        win_length: int = DEFAULT_WIN_LENGTH,
        cells: Optional[np.ndarray] = None,
    ):
        """
        Initialize a board.

        Args:
            size: Number of rows (and columns)
            win_length: Number of stones in a row needed to win
            cells: Optional initial cell values; copied, and its shape
                   overrides `size`
        """
        if cells is None:
            self.cells = np.zeros((size, size), dtype=np.int8)
        else:
            self.cells = np.array(cells, dtype=np.int8)
            if self.cells.ndim != 2 or self.cells.shape[0] != self.cells.shape[1]:
                raise ValueError("Board cells must be a square 2-D array")
        self.size = int(self.cells.shape[0])
        self.win_length = win_length
        self.move_count = int(np.count_nonzero(self.cells))

    @classmethod
    def from_strings(cls, rows: Sequence[str], win_length: int = DEFAULT_WIN_LENGTH) -> 'Board':
        """
        Build a board from text rows, e.g. ``["..X..", ".O...", ...]``.

        'X' is black, 'O' is white, anything else is empty. Whitespace inside
        a row is ignored.

        Args:
            rows: One string per board row
            win_length: Number of stones in a row needed to win

        Returns:
            New Board
        """
        symbols = {symbol: int(player) for player, symbol in PLAYER_SYMBOLS.items()}
        grid = [[symbols.get(ch, EMPTY) for ch in row if not ch.isspace()] for row in rows]
        return cls(win_length=win_length, cells=np.array(grid, dtype=np.int8))

    @classmethod
    def from_moves(
        cls,
        moves: Iterable[Tuple[int, int, int]],
        size: int = DEFAULT_BOARD_SIZE,
        win_length: int = DEFAULT_WIN_LENGTH,
    ) -> 'Board':
        """Build a board from (row, col, player) triples."""
        board = cls(size=size, win_length=win_length)
        for row, col, player in moves:
            board.place_stone(row, col, player)
        return board

    @property
    def center(self) -> Move:
        """The center cell, (N // 2, N // 2)."""
        return (self.size // 2, self.size // 2)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def get(self, row: int, col: int) -> int:
        """Get the value of a cell."""
        return int(self.cells[row, col])

    def is_empty(self, row: int, col: int) -> bool:
        return self.cells[row, col] == EMPTY

    def has_stones(self) -> bool:
        return self.move_count > 0

    def is_full(self) -> bool:
        return self.move_count >= self.size * self.size

    def empty_cells(self) -> List[Move]:
        """All empty cells in row-major order."""
        return [(int(r), int(c)) for r, c in np.argwhere(self.cells == EMPTY)]

    def occupied_cells(self) -> List[Move]:
        """All occupied cells in row-major order."""
        return [(int(r), int(c)) for r, c in np.argwhere(self.cells != EMPTY)]

    def place_stone(self, row: int, col: int, player: int) -> None:
        """
        Place a stone in place.

        Args:
            row: Row index
            col: Column index
            player: Player placing the stone

        Raises:
            InvalidMoveError: If the cell is out of range or occupied
        """
        if not self.in_bounds(row, col):
            raise InvalidMoveError(row, col, "out of range")
        if self.cells[row, col] != EMPTY:
            raise InvalidMoveError(row, col, "cell is occupied")
        self.cells[row, col] = int(Player(player))
        self.move_count += 1

    def remove_stone(self, row: int, col: int) -> None:
        """Undo a `place_stone` on the given cell."""
        if self.cells[row, col] == EMPTY:
            raise InvalidMoveError(row, col, "cell is already empty")
        self.cells[row, col] = EMPTY
        self.move_count -= 1

    def count_direction(self, row: int, col: int, dr: int, dc: int, player: int) -> int:
        """
        Count contiguous `player` stones starting next to (row, col).

        The point itself is not counted; the walk goes in the (dr, dc)
        direction only.
        """
        count = 0
        r, c = row + dr, col + dc
        while 0 <= r < self.size and 0 <= c < self.size and self.cells[r, c] == player:
            count += 1
            r += dr
            c += dc
        return count

    def line_length(self, row: int, col: int, dr: int, dc: int, player: int) -> int:
        """Length of the `player` run through (row, col) along one axis, point included."""
        return (1 + self.count_direction(row, col, dr, dc, player)
                + self.count_direction(row, col, -dr, -dc, player))

    def has_five(self, row: int, col: int, player: int) -> bool:
        """
        Check whether a `player` stone at (row, col) completes a winning line.

        The point is counted as belonging to `player` whatever it currently
        holds, so this works both after placing a stone and for a
        hypothetical one.
        """
        for dr, dc in DIRECTIONS:
            if self.line_length(row, col, dr, dc, player) >= self.win_length:
                return True
        return False

    def copy(self) -> 'Board':
        """Snapshot of this board; later changes to either do not affect the other."""
        return Board(win_length=self.win_length, cells=self.cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.win_length == other.win_length and np.array_equal(self.cells, other.cells)

    def __str__(self) -> str:
        header = "   " + " ".join(f"{c % 10}" for c in range(self.size))
        lines = [header]
        for r in range(self.size):
            cells = []
            for c in range(self.size):
                value = self.get(r, c)
                cells.append(EMPTY_SYMBOL if value == EMPTY else PLAYER_SYMBOLS[Player(value)])
            lines.append(f"{r:2d} " + " ".join(cells))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board(size={self.size}, win_length={self.win_length}, stones={self.move_count})"


def has_five(board: Board, row: int, col: int, player: int) -> bool:
    """Check whether a `player` stone at (row, col) completes a winning line."""
    return board.has_five(row, col, player)


def creates_win(board: Board, row: int, col: int, player: int) -> bool:
    """Check whether `player` wins by playing the empty cell (row, col)."""
    return board.is_empty(row, col) and board.has_five(row, col, player)


def apply_move(board: Board, row: int, col: int, player: int) -> Board:
    """
    Return a new board with `player`'s stone at (row, col).

    The input board is left untouched.

    Raises:
        InvalidMoveError: If the cell is out of range or occupied
    """
    new_board = board.copy()
    new_board.place_stone(row, col, player)
    return new_board
