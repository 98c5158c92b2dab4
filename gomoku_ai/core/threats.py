"""
Tactical threat analysis.

Forced moves are found in strict priority order:

1. Immediate win: a move that completes five for the player.
2. Immediate block: a move that would complete five for the opponent.
3. Critical block: a cell where an opponent stone would create two or more
   separate winning cells at once, which cannot both be blocked later.

Every finder returns the first qualifying cell in row-major order.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Set

from gomoku_ai.core.board import Board
from gomoku_ai.core.candidates import candidates
from gomoku_ai.core.constants import (
    DIRECTIONS, EMPTY, Player, Move, DEFAULT_THREAT_THRESHOLD
)
from gomoku_ai.core.evaluator import score


def _adjacent_moves(board: Board) -> List[Move]:
    # A cell that completes a line always touches one of its stones, so the
    # uncapped radius-1 set is enough and never loses a win to truncation.
    return candidates(board, radius=1, cap=None)


def winning_moves(board: Board, player: int) -> List[Move]:
    """All empty cells where `player` completes five, row-major."""
    return [
        (row, col) for row, col in _adjacent_moves(board)
        if board.has_five(row, col, player)
    ]


def find_winning_move(board: Board, player: int) -> Optional[Move]:
    """First move that wins immediately for `player`, or None."""
    for row, col in _adjacent_moves(board):
        if board.has_five(row, col, player):
            return (row, col)
    return None


def find_blocking_move(board: Board, player: int) -> Optional[Move]:
    """First cell `player` must occupy to stop an immediate opponent win, or None."""
    return find_winning_move(board, Player(player).opponent)


def _count_continuations(
    scratch: Board,
    move: Move,
    attacker: Player,
    existing: Set[Move],
    enough: int = 2,
) -> int:
    """
    Count winning cells for `attacker` after it plays `move` on `scratch`.

    Cells that already won before `move` are passed in as `existing`. A new
    winning cell must share a line with `move`, separated from it only by
    attacker stones, so only the first empty cell in each direction is
    checked. Counting stops at `enough`.
    """
    row, col = move
    found = set(existing)
    found.discard(move)
    if len(found) >= enough:
        return len(found)

    scratch.place_stone(row, col, attacker)
    try:
        for dr, dc in DIRECTIONS:
            for sign in (1, -1):
                r, c = row + sign * dr, col + sign * dc
                while scratch.in_bounds(r, c) and scratch.cells[r, c] == attacker:
                    r += sign * dr
                    c += sign * dc
                if not scratch.in_bounds(r, c) or scratch.cells[r, c] != EMPTY:
                    continue
                if (r, c) not in found and scratch.has_five(r, c, attacker):
                    found.add((r, c))
                    if len(found) >= enough:
                        return len(found)
    finally:
        scratch.remove_stone(row, col)
    return len(found)


def _iter_critical_blocks(board: Board, player: int) -> Iterator[Move]:
    attacker = Player(player).opponent
    existing = set(winning_moves(board, attacker))
    scratch = board.copy()
    for move in board.empty_cells():
        if _count_continuations(scratch, move, attacker, existing) >= 2:
            yield move


def find_critical_block(board: Board, player: int) -> Optional[Move]:
    """
    First cell where the opponent would create a double threat, or None.

    Every empty cell is tried in row-major order: an opponent stone is
    placed there and the opponent's winning replies are counted. The cell
    qualifies once two distinct winning replies exist.

    Args:
        board: Current board
        player: Defending player

    Returns:
        The cell `player` should occupy, or None
    """
    return next(_iter_critical_blocks(board, player), None)


def find_critical_blocks(board: Board, player: int) -> List[Move]:
    """All cells where the opponent would create a double threat, row-major."""
    return list(_iter_critical_blocks(board, player))


def find_threat_moves(
    board: Board,
    player: int,
    threshold: int = DEFAULT_THREAT_THRESHOLD,
    moves: Optional[Sequence[Move]] = None,
) -> List[Move]:
    """
    Offensive moves: those scoring at or above `threshold` for `player`.

    Args:
        board: Current board
        player: Attacking player
        threshold: Minimum evaluator score
        moves: Moves to filter (defaults to `candidates(board)`)

    Returns:
        Qualifying moves in their input order
    """
    if moves is None:
        moves = candidates(board)
    return [move for move in moves if score(board, move[0], move[1], player) >= threshold]


@dataclass
class ThreatReport:
    """
    Summary of the tactical situation from one player's point of view.

    `fork_moves` are cells where `player` would create a double threat;
    `critical_blocks` are cells where the opponent would, so `player` has
    to take them first.
    """
    player: Player
    own_threats: int = 0
    opponent_threats: int = 0
    winning_move: Optional[Move] = None
    blocking_move: Optional[Move] = None
    fork_moves: List[Move] = field(default_factory=list)
    critical_blocks: List[Move] = field(default_factory=list)

    def __str__(self) -> str:
        forks = _format_moves(self.fork_moves)
        critical = _format_moves(self.critical_blocks)
        return (f"{self.player.name} threats: {self.own_threats}\n"
                f"{self.player.opponent.name} threats: {self.opponent_threats}\n"
                f"{self.player.name} forking moves: {forks}\n"
                f"{self.player.opponent.name} forks to block: {critical}")


def _format_moves(moves: Sequence[Move]) -> str:
    return ", ".join(f"({r},{c})" for r, c in moves) or "None"


def analyze_position(
    board: Board,
    player: int,
    threshold: int = DEFAULT_THREAT_THRESHOLD,
) -> ThreatReport:
    """
    Build a threat report for `player`.

    Args:
        board: Current board
        player: Player to report for
        threshold: Evaluator score counted as a threat

    Returns:
        ThreatReport
    """
    player = Player(player)
    return ThreatReport(
        player=player,
        own_threats=len(find_threat_moves(board, player, threshold)),
        opponent_threats=len(find_threat_moves(board, player.opponent, threshold)),
        winning_move=find_winning_move(board, player),
        blocking_move=find_blocking_move(board, player),
        fork_moves=find_critical_blocks(board, player.opponent),
        critical_blocks=find_critical_blocks(board, player),
    )
