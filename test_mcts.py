"""
Tests for the MCTS engine and its configuration.
"""
import math
import random

import pytest

from gomoku_ai.core.board import Board
from gomoku_ai.core.candidates import candidates
from gomoku_ai.core.constants import Player
from gomoku_ai.core.evaluator import rank_moves
from gomoku_ai.core.errors import DegenerateConfigError
from gomoku_ai.mcts.config import MCTSConfig
from gomoku_ai.mcts.node import SearchNode, SearchTree
from gomoku_ai.mcts.search import (
    mcts_search, run_search, simulate_game, backpropagate,
    get_principal_variation, get_action_statistics, simulation_policy
)


@pytest.fixture
def opening():
    return Board.from_moves([(6, 6, Player.BLACK), (6, 7, Player.WHITE), (7, 6, Player.BLACK)])


@pytest.mark.parametrize("iterations", [1, 7, 40])
def test_root_visits_equal_iterations(opening, iterations):
    config = MCTSConfig(iterations=iterations, seed=0)
    tree, stats = run_search(opening, Player.WHITE, candidates(opening), config, random.Random(0))

    assert tree.root.visits == iterations
    assert stats["iterations"] == iterations


def test_path_lengths_sum_to_total_visits(opening):
    config = MCTSConfig(iterations=60, seed=0)
    tree, stats = run_search(opening, Player.WHITE, candidates(opening), config, random.Random(0))

    assert stats["total_path_length"] == sum(node.visits for node in tree.nodes)
    assert stats["node_count"] == len(tree)


def test_tree_structure_is_consistent(opening):
    config = MCTSConfig(iterations=60, seed=0)
    tree, _ = run_search(opening, Player.WHITE, candidates(opening), config, random.Random(0))

    for index, node in enumerate(tree.nodes):
        for child_index in node.children:
            child = tree[child_index]
            assert child.parent == index
            assert child.to_move == node.to_move.opponent
            assert child.depth == node.depth + 1
            assert child.board.move_count == node.board.move_count + 1
        # Each visit to a child also passed through its parent
        assert node.visits >= sum(tree[c].visits for c in node.children)


def test_root_moves_limited_to_candidate_set(opening):
    allowed = [(5, 5), (8, 8), (7, 7)]
    config = MCTSConfig(iterations=30, seed=0)
    move, stats = mcts_search(opening, Player.WHITE, allowed, config)

    assert move in allowed
    assert set(stats["action_visits"]) <= set(allowed)


def test_empty_candidate_set_returns_none(opening):
    move, stats = mcts_search(opening, Player.WHITE, [], MCTSConfig(iterations=10))
    assert move is None
    assert stats["iterations"] == 0


def test_search_is_reproducible(opening):
    config = MCTSConfig(iterations=80, seed=42)
    moves = candidates(opening)
    first, first_stats = mcts_search(opening, Player.WHITE, moves, config, random.Random(42))
    second, second_stats = mcts_search(opening, Player.WHITE, moves, config, random.Random(42))

    assert first == second
    assert first_stats["action_visits"] == second_stats["action_visits"]


def test_search_does_not_modify_board(opening):
    snapshot = opening.copy()
    mcts_search(opening, Player.WHITE, candidates(opening), MCTSConfig(iterations=20, seed=1))
    assert opening == snapshot


def test_winning_child_is_terminal_and_preferred():
    board = Board.from_moves(
        [(6, c, Player.BLACK) for c in range(4, 8)] + [(6, 8, Player.WHITE), (9, 9, Player.WHITE)]
    )
    config = MCTSConfig(iterations=100, seed=5)
    tree, _ = run_search(board, Player.BLACK, [(0, 0), (6, 3)], config, random.Random(5))

    winning = [node for node in tree.children(SearchTree.ROOT) if node.move == (6, 3)][0]
    assert winning.is_terminal()
    assert winning.winner == Player.BLACK
    assert winning.children == []
    # Stored for white (to move), so every visit is a loss for that side
    assert winning.total_reward == 0.0
    assert tree.best_move() == (6, 3)


def test_simulate_terminal_node_skips_playout():
    board = Board.from_moves([(6, c, Player.BLACK) for c in range(4, 8)])
    config = MCTSConfig(iterations=1)
    tree = SearchTree(board, Player.BLACK, [(6, 3)], config)
    child = tree.expand(SearchTree.ROOT)

    assert simulate_game(tree, child, random.Random(0)) == (Player.BLACK, 0)


def test_playout_takes_immediate_win():
    # White to move with a four of its own; the first playout ply must win
    board = Board.from_moves([(3, c, Player.WHITE) for c in range(2, 6)] + [(3, 6, Player.BLACK)])
    config = MCTSConfig(iterations=1, random_move_prob=1.0)
    tree = SearchTree(board, Player.WHITE, candidates(board), config)

    winner, steps = simulate_game(tree, SearchTree.ROOT, random.Random(0))
    assert winner == Player.WHITE
    assert steps == 1


def test_playout_respects_horizon():
    board = Board.from_moves([(6, 6, Player.BLACK)])
    config = MCTSConfig(iterations=1, playout_horizon=2)
    tree = SearchTree(board, Player.WHITE, candidates(board), config)

    winner, steps = simulate_game(tree, SearchTree.ROOT, random.Random(0))
    assert winner is None
    assert steps == 2


def test_greedy_playout_move_is_weighted_among_top_k():
    board = Board.from_moves([(6, 6, Player.BLACK)])
    moves = candidates(board)
    config = MCTSConfig(iterations=1, random_move_prob=0.0, playout_top_k=5)
    top = rank_moves(board, moves, Player.WHITE, limit=5)

    chosen = [simulation_policy(board, Player.WHITE, moves, config, random.Random(seed))
              for seed in range(200)]

    assert set(chosen) <= set(top)
    assert len(set(chosen)) > 1
    # Weights halve down the ranking, so the best move is drawn most often
    assert max(set(chosen), key=chosen.count) == top[0]


def test_greedy_playout_with_top_one_is_argmax():
    board = Board.from_moves([(6, c, Player.BLACK) for c in range(3, 6)])
    moves = candidates(board)
    config = MCTSConfig(iterations=1, random_move_prob=0.0, playout_top_k=1)

    for seed in range(20):
        assert simulation_policy(board, Player.BLACK, moves, config, random.Random(seed)) == (6, 6)


def test_backpropagation_reward_is_relative_to_player_to_move():
    board = Board.from_moves([(6, 6, Player.BLACK)])
    tree = SearchTree(board, Player.WHITE, candidates(board), MCTSConfig(iterations=1))
    child = tree.expand(SearchTree.ROOT)

    assert backpropagate(tree, child, Player.WHITE) == 2
    assert tree.root.total_reward == 1.0     # white to move at the root
    assert tree[child].total_reward == 0.0   # black to move at the child

    backpropagate(tree, child, None)
    assert tree.root.total_reward == 1.5
    assert tree[child].total_reward == 0.5
    assert tree.root.visits == tree[child].visits == 2


def test_expansion_prefers_best_scored_move_in_window():
    board = Board.from_moves([(6, c, Player.BLACK) for c in range(3, 6)])
    config = MCTSConfig(iterations=1, expansion_width=3)
    tree = SearchTree(board, Player.BLACK, [(0, 0), (6, 6), (12, 12), (6, 2)], config)

    first = tree.expand(SearchTree.ROOT)
    assert tree[first].move == (6, 6)
    second = tree.expand(SearchTree.ROOT)
    # (6, 2) is now inside the window and outscores the corners
    assert tree[second].move == (6, 2)
    assert tree.root.untried_moves == [(0, 0), (12, 12)]


def test_selection_visits_unvisited_children_first():
    board = Board.from_moves([(6, 6, Player.BLACK)])
    tree = SearchTree(board, Player.WHITE, candidates(board), MCTSConfig(iterations=1))
    first = tree.expand(SearchTree.ROOT)
    second = tree.expand(SearchTree.ROOT)
    backpropagate(tree, first, Player.WHITE)

    assert tree.select_child(SearchTree.ROOT) == second


def test_best_move_uses_visits_then_win_rate_then_move():
    board = Board.from_moves([(6, 6, Player.BLACK)])
    tree = SearchTree(board, Player.WHITE, [(5, 5), (5, 6), (5, 7)], MCTSConfig(iterations=1))
    children = [tree.expand(SearchTree.ROOT) for _ in range(3)]
    by_move = {tree[c].move: tree[c] for c in children}

    by_move[(5, 5)].visits, by_move[(5, 5)].total_reward = 4, 2.0
    by_move[(5, 6)].visits, by_move[(5, 6)].total_reward = 6, 3.0
    by_move[(5, 7)].visits, by_move[(5, 7)].total_reward = 6, 1.0
    assert tree.best_move() == (5, 7)   # lower child reward = better for white

    by_move[(5, 6)].total_reward = 1.0
    assert tree.best_move() == (5, 6)   # full tie, smallest move wins


def test_ucb_score():
    board = Board.from_moves([(6, 6, Player.BLACK)])
    tree = SearchTree(board, Player.WHITE, [(5, 5)], MCTSConfig(iterations=1, exploration_constant=1.4))
    child = tree.expand(SearchTree.ROOT)
    assert tree.ucb_score(SearchTree.ROOT, child) == float("inf")

    tree.root.visits = 10
    tree[child].visits = 4
    tree[child].total_reward = 1.0
    expected = 0.75 + 1.4 * math.sqrt(math.log(10) / 4)
    assert tree.ucb_score(SearchTree.ROOT, child) == pytest.approx(expected)


def test_statistics_helpers(opening):
    config = MCTSConfig(iterations=40, seed=2)
    tree, _ = run_search(opening, Player.WHITE, candidates(opening), config, random.Random(2))

    variation = get_principal_variation(tree, max_depth=3)
    assert 1 <= len(variation) <= 3
    most_visited = max(tree.children(SearchTree.ROOT), key=lambda node: node.visits)
    assert variation[0][0] == most_visited.move

    stats = get_action_statistics(tree)
    assert len(stats) == len(tree.root.children)
    # The root is expanded on the first iteration, so every visit reaches a child
    assert sum(entry["visits"] for entry in stats.values()) == tree.root.visits
    assert all(0.0 <= entry["value"] <= 1.0 for entry in stats.values())


def test_search_node_defaults():
    node = SearchNode(board=Board(), to_move=Player.BLACK)
    assert node.win_rate == 0.0
    assert not node.is_fully_expanded()
    assert not node.is_terminal()
    assert node.reward_for(None) == 0.5


@pytest.mark.parametrize("kwargs", [
    {"iterations": 0},
    {"iterations": -5},
    {"board_size": 4},
    {"board_size": 9, "win_length": 10},
    {"win_length": 1},
    {"pruning_radius": 0},
    {"candidate_cap": 0},
    {"playout_horizon": 0},
    {"expansion_width": 0},
    {"random_move_prob": 1.5},
    {"exploration_constant": -1.0},
    {"playout_top_k": 0},
])
def test_degenerate_config_rejected(kwargs):
    with pytest.raises(DegenerateConfigError):
        MCTSConfig(**kwargs)


def test_degenerate_config_is_a_value_error():
    with pytest.raises(ValueError):
        MCTSConfig(iterations=0)


def test_config_dict_round_trip():
    config = MCTSConfig(iterations=123, board_size=15, seed=9)
    data = config.to_dict()
    assert data["iterations"] == 123
    assert data["exploration_constant"] == 1.4
    assert MCTSConfig.from_dict(dict(data, unknown_key=1)) == config


def test_config_presets():
    assert MCTSConfig.default() == MCTSConfig()
    assert MCTSConfig.fast().iterations < MCTSConfig.default().iterations < MCTSConfig.deep().iterations
    assert "iterations=200" in str(MCTSConfig())
