"""
Monte Carlo Tree Search (MCTS) algorithm for Gomoku.

This module implements the core MCTS algorithm with the four standard phases:
1. Selection: Traverse the tree with UCB1 to find a promising node
2. Expansion: Create one new child, ordered by the heuristic evaluator
3. Simulation: Run a short playout to estimate the node's value
4. Backpropagation: Update statistics up the tree

The search runs a fixed number of iterations and draws all randomness from
an injected random.Random, so equal seeds give equal moves.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging
import random
import time

from gomoku_ai.core.board import Board
from gomoku_ai.core.candidates import candidates
from gomoku_ai.core.constants import Player, Move
from gomoku_ai.core.evaluator import rank_moves
from gomoku_ai.mcts.config import MCTSConfig
from gomoku_ai.mcts.node import SearchTree

logger = logging.getLogger(__name__)


def run_search(
    board: Board,
    player: Player,
    candidate_moves: Sequence[Move],
    config: MCTSConfig,
    rng: random.Random,
) -> Tuple[SearchTree, Dict[str, Any]]:
    """
    Build a search tree by running `config.iterations` iterations.

    Args:
        board: Current board (not modified)
        player: Player to move
        candidate_moves: Moves the root may choose from
        config: Engine configuration
        rng: Random source for playouts

    Returns:
        Tuple of (search tree, search statistics)
    """
    tree = SearchTree(board, player, list(candidate_moves), config)

    stats: Dict[str, Any] = {
        "iterations": 0,
        "total_simulation_steps": 0,
        "total_path_length": 0,
    }

    if not candidate_moves:
        return tree, stats

    start_time = time.time()
    for _ in range(config.iterations):
        # 1. Selection & Expansion
        selected = select_node(tree)

        # 2. Simulation
        winner, steps = simulate_game(tree, selected, rng)

        # 3. Backpropagation
        path_length = backpropagate(tree, selected, winner)

        stats["iterations"] += 1
        stats["total_simulation_steps"] += steps
        stats["total_path_length"] += path_length

    stats["time_elapsed"] = time.time() - start_time
    stats["node_count"] = count_nodes(tree)
    stats["max_tree_depth"] = tree.max_depth()
    stats["average_simulation_steps"] = stats["total_simulation_steps"] / max(1, stats["iterations"])
    return tree, stats


def mcts_search(
    board: Board,
    player: Player,
    candidate_moves: Sequence[Move],
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[Optional[Move], Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the most promising move.

    Args:
        board: Current board
        player: Player to move
        candidate_moves: Moves to choose among
        config: Engine configuration (defaults to MCTSConfig())
        rng: Random source (defaults to random.Random(config.seed))

    Returns:
        Tuple of (best move or None when there are no candidates,
        search statistics)
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random(config.seed)

    tree, stats = run_search(board, Player(player), candidate_moves, config, rng)
    move = tree.best_move()

    stats["action_visits"] = {}
    stats["action_values"] = {}
    for child in tree.children(SearchTree.ROOT):
        stats["action_visits"][child.move] = child.visits
        stats["action_values"][child.move] = 1.0 - child.win_rate

    logger.debug(
        "MCTS for %s: %d iterations, %d nodes, best move %s",
        Player(player).name, stats["iterations"], stats.get("node_count", 1), move
    )
    return move, stats


def select_node(tree: SearchTree) -> int:
    """
    Select a node for simulation.

    Descends from the root with UCB1 while nodes are fully expanded and not
    terminal, then expands the node reached if it still has untried moves.

    Args:
        tree: Search tree

    Returns:
        Index of the node to simulate from
    """
    current = SearchTree.ROOT
    while tree[current].is_fully_expanded() and not tree[current].is_terminal():
        current = tree.select_child(current)

    expanded = expand_node(tree, current)
    if expanded is not None:
        return expanded
    return current


def expand_node(tree: SearchTree, index: int) -> Optional[int]:
    """
    Expand a node by adding a child.

    Returns:
        Index of the new child, or None if expansion is not possible
    """
    return tree.expand(index)


def simulation_policy(
    board: Board,
    player: Player,
    moves: List[Move],
    config: MCTSConfig,
    rng: random.Random,
) -> Move:
    """
    Choose a playout move.

    With probability `random_move_prob` the move is uniformly random.
    Otherwise the `playout_top_k` best-scored moves for `player` are drawn
    from with weights 2^K, 2^(K-1), ..., 2, best first.
    """
    if rng.random() < config.random_move_prob:
        return rng.choice(moves)
    top = rank_moves(board, moves, player, limit=config.playout_top_k)
    weights = [2 ** (len(top) - i) for i in range(len(top))]
    return rng.choices(top, weights=weights)[0]


def simulate_game(
    tree: SearchTree,
    index: int,
    rng: random.Random,
) -> Tuple[Optional[Player], int]:
    """
    Run a bounded playout from a node.

    Each ply takes an immediate win if one exists, otherwise follows the
    simulation policy. The playout ends in a win when a move completes five
    and in a draw when no candidates remain or the horizon is reached.

    Args:
        tree: Search tree
        index: Node to simulate from
        rng: Random source

    Returns:
        Tuple of (winner or None for a draw, number of plies played)
    """
    node = tree[index]
    if node.is_terminal():
        return node.winner, 0

    config = tree.config
    board = node.board.copy()
    player = node.to_move

    for step in range(config.playout_horizon):
        moves = candidates(board, radius=config.pruning_radius, cap=config.candidate_cap)
        if not moves:
            return None, step

        move = None
        for row, col in moves:
            if board.has_five(row, col, player):
                move = (row, col)
                break
        if move is None:
            move = simulation_policy(board, player, moves, config, rng)

        board.place_stone(move[0], move[1], player)
        if board.has_five(move[0], move[1], player):
            return player, step + 1

        player = player.opponent

    return None, config.playout_horizon


def backpropagate(tree: SearchTree, index: int, winner: Optional[Player]) -> int:
    """
    Update statistics from a node up to the root.

    Every node on the path gains one visit and a reward relative to its own
    player to move: 1.0 for a win, 0.5 for a draw, 0.0 for a loss.

    Returns:
        Number of nodes updated
    """
    path = tree.path_to_root(index)
    for node_index in path:
        tree[node_index].update(winner)
    return len(path)


def count_nodes(tree: SearchTree) -> int:
    """Total number of nodes in the tree."""
    return len(tree)


def get_principal_variation(tree: SearchTree, max_depth: int = 10) -> List[Tuple[Move, float]]:
    """
    Get the principal variation (most visited path) from the root.

    This is useful for analysis and debugging.

    Args:
        tree: Search tree
        max_depth: Maximum depth to follow

    Returns:
        List of (move, value) pairs, value being the win rate of the player
        who made the move
    """
    result = []
    current = SearchTree.ROOT
    depth = 0

    while tree[current].children and depth < max_depth:
        current = max(tree[current].children, key=lambda child: tree[child].visits)
        node = tree[current]
        result.append((node.move, 1.0 - node.win_rate))
        depth += 1

    return result


def get_action_statistics(tree: SearchTree) -> Dict[Move, Dict[str, float]]:
    """
    Get statistics for all moves from the root.

    Args:
        tree: Search tree

    Returns:
        Dictionary mapping moves to visits, reward, value and UCB score
    """
    result = {}
    for child_index in tree.root.children:
        child = tree[child_index]
        result[child.move] = {
            "visits": child.visits,
            "reward": child.total_reward,
            "value": 1.0 - child.win_rate if child.visits else 0.0,
            "exploration": tree.ucb_score(SearchTree.ROOT, child_index),
        }
    return result
