"""
Monte Carlo Tree Search nodes for Gomoku.

Nodes live in a SearchTree arena and refer to each other by index: a node
stores its parent's index and its children's indices, never references.
Each node owns a snapshot of its board, so no two nodes share mutable
state. The whole tree belongs to one search and is dropped with it.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import math

from gomoku_ai.core.board import Board
from gomoku_ai.core.candidates import candidates
from gomoku_ai.core.constants import Player, Move
from gomoku_ai.core.evaluator import score
from gomoku_ai.mcts.config import MCTSConfig


@dataclass
class SearchNode:
    """
    A node in the search tree.

    `total_reward` is measured from the point of view of `to_move`, the
    player whose turn it is at this node.
    """
    board: Board
    to_move: Player
    parent: Optional[int] = None
    move: Optional[Move] = None
    depth: int = 0
    untried_moves: List[Move] = field(default_factory=list)
    children: List[int] = field(default_factory=list)
    visits: int = 0
    total_reward: float = 0.0
    terminal: bool = False
    winner: Optional[Player] = None

    def is_terminal(self) -> bool:
        return self.terminal

    def is_fully_expanded(self) -> bool:
        """Expanded: every move tried and at least one child exists."""
        return not self.untried_moves and bool(self.children)

    @property
    def win_rate(self) -> float:
        """Average reward for `to_move`; 0.0 before the first visit."""
        if self.visits == 0:
            return 0.0
        return self.total_reward / self.visits

    def reward_for(self, winner: Optional[Player]) -> float:
        """Reward for this node's player given a playout winner (None = draw)."""
        if winner is None:
            return 0.5
        return 1.0 if winner == self.to_move else 0.0

    def update(self, winner: Optional[Player]) -> None:
        """Record one simulation result passing through this node."""
        self.visits += 1
        self.total_reward += self.reward_for(winner)

    def __str__(self) -> str:
        return (f"SearchNode(move={self.move}, to_move={self.to_move.name}, "
                f"visits={self.visits}, reward={self.total_reward:.2f}, "
                f"children={len(self.children)}, untried={len(self.untried_moves)})")


class SearchTree:
    """
    Arena of search nodes addressed by index.

    Index 0 is the root.
    """

    ROOT = 0

    def __init__(self, board: Board, to_move: Player, root_moves: List[Move], config: MCTSConfig):
        """
        Create a tree holding only the root.

        Args:
            board: Position to search from (copied)
            to_move: Player to move at the root
            root_moves: Moves the root may expand
            config: Engine configuration
        """
        self.config = config
        self.nodes: List[SearchNode] = []
        self._add_node(SearchNode(
            board=board.copy(),
            to_move=Player(to_move),
            untried_moves=list(root_moves),
        ))

    def _add_node(self, node: SearchNode) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    @property
    def root(self) -> SearchNode:
        return self.nodes[self.ROOT]

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> SearchNode:
        return self.nodes[index]

    def children(self, index: int) -> List[SearchNode]:
        return [self.nodes[child] for child in self.nodes[index].children]

    def path_to_root(self, index: int) -> List[int]:
        """Indices from `index` up to the root, inclusive."""
        path = []
        current: Optional[int] = index
        while current is not None:
            path.append(current)
            current = self.nodes[current].parent
        return path

    def ucb_score(self, parent_index: int, child_index: int) -> float:
        """
        Calculate the UCB1 score of a child from its parent's point of view.

        UCB1 = win_rate + C * sqrt(ln(parent_visits) / child_visits)

        The child stores rewards for its own player to move, so the parent's
        win rate is the complement of the child's.
        """
        parent = self.nodes[parent_index]
        child = self.nodes[child_index]

        if child.visits == 0:
            return float('inf')

        exploitation = 1.0 - child.win_rate
        exploration = math.sqrt(math.log(parent.visits) / child.visits)
        return exploitation + self.config.exploration_constant * exploration

    def select_child(self, index: int) -> int:
        """
        Select the child of `index` with the highest UCB1 score.

        Unvisited children are taken first, in creation order.
        """
        node = self.nodes[index]
        if not node.children:
            raise ValueError("Cannot select child from node with no children")

        for child in node.children:
            if self.nodes[child].visits == 0:
                return child
        return max(node.children, key=lambda child: self.ucb_score(index, child))

    def expand(self, index: int) -> Optional[int]:
        """
        Add one child to the node at `index`.

        The first `expansion_width` untried moves are scored for the side to
        move and the best one (first on ties) is played on a copy of the
        board. A child whose move completes five is terminal with the mover
        as winner; a child with no moves left is a terminal draw.

        Returns:
            Index of the new child, or None if the node cannot be expanded
        """
        node = self.nodes[index]
        if node.terminal or not node.untried_moves:
            return None

        window = node.untried_moves[:self.config.expansion_width]
        best_position = 0
        best_score = None
        for position, (row, col) in enumerate(window):
            value = score(node.board, row, col, node.to_move)
            if best_score is None or value > best_score:
                best_position, best_score = position, value
        move = node.untried_moves.pop(best_position)

        board = node.board.copy()
        board.place_stone(move[0], move[1], node.to_move)

        child = SearchNode(
            board=board,
            to_move=node.to_move.opponent,
            parent=index,
            move=move,
            depth=node.depth + 1,
        )
        if board.has_five(move[0], move[1], node.to_move):
            child.terminal = True
            child.winner = node.to_move
        else:
            child.untried_moves = candidates(
                board,
                radius=self.config.pruning_radius,
                cap=self.config.candidate_cap,
            )
            if not child.untried_moves:
                child.terminal = True

        child_index = self._add_node(child)
        node.children.append(child_index)
        return child_index

    def best_move(self) -> Optional[Move]:
        """
        Get the best root move by visit count (robust child).

        Ties are broken by the root player's win rate, then by the smallest
        move.

        Returns:
            The best move, or None if the root has no children
        """
        children = self.children(self.ROOT)
        if not children:
            return None

        best = min(children, key=lambda c: (-c.visits, c.win_rate, c.move))
        return best.move

    def max_depth(self) -> int:
        return max(node.depth for node in self.nodes)
