"""
Monte Carlo Tree Search (MCTS) move selection for Gomoku.

The search only runs when the tactical layer finds no forced move. Each
iteration goes through:

1. Selection: Starting from the root, select children with UCB1 while nodes
   are fully expanded.
2. Expansion: Add one child, choosing the best-scored of the first few
   untried moves.
3. Simulation: Play a short playout that takes immediate wins and otherwise
   mixes random moves with a weighted pick among the best-scored few.
4. Backpropagation: Update visit counts and rewards up to the root.

The final move is the most visited root child.
"""

from gomoku_ai.mcts.node import SearchNode, SearchTree
from gomoku_ai.mcts.agent import (
    MCTSAgent, MCTSAgentFactory, MoveDecision, compute_move, select_move
)
from gomoku_ai.mcts.search import (
    mcts_search,
    run_search,
    select_node,
    expand_node,
    simulate_game,
    backpropagate
)
from gomoku_ai.mcts.config import MCTSConfig

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'MoveDecision',
    'SearchNode',
    'SearchTree',
    'MCTSConfig',
    'compute_move',
    'select_move',
    'mcts_search',
    'run_search',
    'select_node',
    'expand_node',
    'simulate_game',
    'backpropagate'
]
