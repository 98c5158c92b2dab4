"""
Tests for the heuristic evaluator, threat analysis and the move arbiter.
"""
import random

import pytest

import gomoku_ai.mcts.agent as agent_module
from gomoku_ai.core.board import Board
from gomoku_ai.core.constants import Player
from gomoku_ai.core.errors import DegenerateConfigError
from gomoku_ai.core.evaluator import score, rank_moves, best_move
from gomoku_ai.core.threats import (
    find_winning_move, find_blocking_move, find_critical_block,
    find_critical_blocks, find_threat_moves, winning_moves, analyze_position
)
from gomoku_ai.mcts.agent import compute_move, select_move
from gomoku_ai.mcts.config import MCTSConfig


@pytest.fixture
def config():
    return MCTSConfig(iterations=30, seed=7)


@pytest.fixture
def closed_four():
    """Black four on row 6 with only (6, 3) left open."""
    return Board.from_moves(
        [(6, c, Player.BLACK) for c in range(4, 8)] + [(6, 8, Player.WHITE), (9, 9, Player.WHITE)]
    )


@pytest.fixture
def fork_board():
    """
    Two closed black threes meeting at (5, 6).

    A black stone on (5, 6) makes a vertical four that only (6, 6) completes
    and a horizontal four that only (5, 5) completes.
    """
    return Board.from_moves([
        (2, 6, Player.BLACK), (3, 6, Player.BLACK), (4, 6, Player.BLACK), (1, 6, Player.WHITE),
        (5, 7, Player.BLACK), (5, 8, Player.BLACK), (5, 9, Player.BLACK), (5, 10, Player.WHITE),
    ])


def test_score_on_empty_board_is_center_bonus():
    board = Board()
    assert score(board, 6, 6, Player.BLACK) == 5
    assert score(board, 6, 8, Player.BLACK) == 3
    assert score(board, 0, 0, Player.BLACK) == 0


def test_score_tiers():
    two = Board.from_moves([(6, 4, Player.BLACK), (6, 5, Player.BLACK)])
    assert score(two, 6, 6, Player.BLACK) == 10 + 5
    assert score(two, 6, 6, Player.WHITE) == 5 + 5

    three = Board.from_moves([(6, c, Player.BLACK) for c in range(3, 6)])
    assert score(three, 6, 6, Player.BLACK) == 100 + 5
    assert score(three, 6, 6, Player.WHITE) == 50 + 5

    four = Board.from_moves([(6, c, Player.BLACK) for c in range(2, 6)])
    assert score(four, 6, 6, Player.BLACK) == 10000 + 5
    assert score(four, 6, 6, Player.WHITE) == 5000 + 5


def test_score_counts_both_sides_of_the_point():
    board = Board.from_moves([(6, 5, Player.BLACK), (6, 7, Player.BLACK)])
    assert score(board, 6, 6, Player.BLACK) == 10 + 5


def test_rank_moves_is_stable():
    board = Board.from_moves([(6, c, Player.BLACK) for c in range(3, 6)])
    moves = [(0, 0), (12, 12), (6, 6), (6, 2)]
    ranked = rank_moves(board, moves, Player.BLACK)
    assert ranked[0] == (6, 6)
    assert ranked[-2:] == [(0, 0), (12, 12)]
    assert rank_moves(board, moves, Player.BLACK, limit=1) == [(6, 6)]
    assert best_move(board, moves, Player.BLACK) == (6, 6)
    assert best_move(board, [], Player.BLACK) is None


def test_find_winning_and_blocking_moves(closed_four):
    assert find_winning_move(closed_four, Player.BLACK) == (6, 3)
    assert find_blocking_move(closed_four, Player.WHITE) == (6, 3)
    assert find_winning_move(closed_four, Player.WHITE) is None
    assert find_blocking_move(closed_four, Player.BLACK) is None


def test_winning_move_is_first_in_row_major_order():
    board = Board.from_moves([(6, c, Player.BLACK) for c in range(4, 8)])
    assert winning_moves(board, Player.BLACK) == [(6, 3), (6, 8)]
    assert find_winning_move(board, Player.BLACK) == (6, 3)


def test_find_critical_block(fork_board):
    assert find_winning_move(fork_board, Player.BLACK) is None
    assert find_blocking_move(fork_board, Player.WHITE) is None
    assert find_critical_block(fork_board, Player.WHITE) == (5, 6)
    assert find_critical_blocks(fork_board, Player.WHITE) == [(5, 6)]
    assert find_critical_block(fork_board, Player.BLACK) is None


def test_open_three_has_two_critical_cells():
    board = Board.from_moves([(6, c, Player.BLACK) for c in range(4, 7)])
    assert find_critical_blocks(board, Player.WHITE) == [(6, 3), (6, 7)]
    assert find_critical_block(board, Player.WHITE) == (6, 3)


def test_find_threat_moves_uses_threshold():
    board = Board.from_moves([(6, c, Player.BLACK) for c in range(4, 7)])
    threats = find_threat_moves(board, Player.BLACK, threshold=100)
    assert threats == [(6, 3), (6, 7)]
    assert find_threat_moves(board, Player.WHITE, threshold=100) == []


def test_analyze_position(fork_board):
    report = analyze_position(fork_board, Player.WHITE)
    assert report.player == Player.WHITE
    assert report.critical_blocks == [(5, 6)]
    assert report.fork_moves == []
    assert report.winning_move is None
    assert report.blocking_move is None
    assert report.opponent_threats > 0
    assert "WHITE forking moves: None" in str(report)
    assert "BLACK forks to block: (5,6)" in str(report)


def test_analyze_position_lists_own_forks(fork_board):
    report = analyze_position(fork_board, Player.BLACK)
    assert report.fork_moves == [(5, 6)]
    assert report.critical_blocks == []
    assert report.own_threats > 0
    assert "BLACK forking moves: (5,6)" in str(report)
    assert "WHITE forks to block: None" in str(report)


def test_compute_move_takes_win(closed_four, config):
    assert compute_move(closed_four, Player.BLACK, config) == ((6, 3), "win")


def test_compute_move_blocks(closed_four, config):
    assert compute_move(closed_four, Player.WHITE, config) == ((6, 3), "block")


def test_win_takes_priority_over_block(config):
    board = Board.from_moves(
        [(2, c, Player.BLACK) for c in range(1, 5)] + [(2, 5, Player.WHITE)]
        + [(8, c, Player.WHITE) for c in range(1, 5)] + [(8, 5, Player.BLACK)]
    )
    assert compute_move(board, Player.WHITE, config) == ((8, 0), "win")
    assert compute_move(board, Player.BLACK, config) == ((2, 0), "win")


def test_compute_move_critical_block_skips_search(fork_board, config, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("search should not run")

    monkeypatch.setattr(agent_module, "mcts_search", fail)
    assert compute_move(fork_board, Player.WHITE, config) == ((5, 6), "critical-block")


def test_compute_move_does_not_modify_board(fork_board, config):
    snapshot = fork_board.copy()
    compute_move(fork_board, Player.BLACK, config)
    assert fork_board == snapshot
    assert fork_board.move_count == snapshot.move_count


def test_search_is_limited_to_threat_moves(config):
    board = Board.from_moves([
        (6, 5, Player.BLACK), (6, 6, Player.BLACK), (6, 7, Player.BLACK),
        (5, 6, Player.WHITE), (7, 6, Player.WHITE), (6, 8, Player.WHITE),
    ])
    # No forced move for black: its three is closed on the right
    decision = select_move(board, Player.BLACK, config)
    assert decision.reason == "search"
    assert decision.move in find_threat_moves(board, Player.BLACK, config.threat_threshold)


def test_end_to_end_reply_to_center_opening():
    board = Board.from_moves([(6, 6, Player.BLACK)])
    config = MCTSConfig(iterations=50, seed=3)
    move, reason = compute_move(board, Player.WHITE, config)

    assert reason == "search"
    assert board.is_empty(*move)
    assert max(abs(move[0] - 6), abs(move[1] - 6)) <= config.pruning_radius


def test_compute_move_is_reproducible():
    board = Board.from_moves([(6, 6, Player.BLACK), (7, 7, Player.WHITE), (6, 7, Player.BLACK)])
    config = MCTSConfig(iterations=60, seed=11)
    assert compute_move(board, Player.WHITE, config) == compute_move(board, Player.WHITE, config)
    assert (compute_move(board, Player.WHITE, config, random.Random(5))
            == compute_move(board, Player.WHITE, config, random.Random(5)))


def test_compute_move_on_full_board():
    board = Board(size=3, win_length=3)
    for i, (row, col) in enumerate(board.empty_cells()):
        board.place_stone(row, col, Player.BLACK if i % 2 == 0 else Player.WHITE)
    config = MCTSConfig(board_size=3, win_length=3, iterations=5)
    assert compute_move(board, Player.BLACK, config) == (None, "no-moves")


def test_compute_move_on_larger_board():
    board = Board.from_moves([(7, 7, Player.BLACK), (7, 8, Player.WHITE)], size=15)
    move, reason = compute_move(board, Player.BLACK, MCTSConfig(board_size=15, iterations=20, seed=1))
    assert reason == "search"
    assert board.in_bounds(*move)


def test_compute_move_rejects_mismatched_config():
    board = Board(size=15)
    with pytest.raises(DegenerateConfigError):
        compute_move(board, Player.BLACK, MCTSConfig(board_size=13))


def test_fallback_when_search_returns_nothing(monkeypatch, config):
    monkeypatch.setattr(agent_module, "mcts_search", lambda *args, **kwargs: (None, {}))
    board = Board.from_moves([(6, 6, Player.BLACK)])
    move, reason = compute_move(board, Player.WHITE, config)
    assert reason == "fallback"
    assert board.is_empty(*move)
