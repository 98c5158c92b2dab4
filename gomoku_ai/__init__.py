"""
Gomoku AI - A five-in-a-row move engine with tactical analysis and MCTS.

Front-ends only need two calls: `apply_move` to place a stone and
`compute_move` to ask the engine for its next move.
"""

__version__ = "0.1.0"
__author__ = "Gomoku AI Team"

# Make key components available at package level
from gomoku_ai.core.board import Board, apply_move, has_five
from gomoku_ai.core.constants import Player
from gomoku_ai.core.errors import InvalidMoveError, DegenerateConfigError
from gomoku_ai.core.game import Game, GameState, GameResult
from gomoku_ai.mcts.agent import MCTSAgent, compute_move
from gomoku_ai.mcts.config import MCTSConfig

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

__all__ = [
    'Board', 'apply_move', 'has_five',
    'Player',
    'InvalidMoveError', 'DegenerateConfigError',
    'Game', 'GameState', 'GameResult',
    'MCTSAgent', 'compute_move',
    'MCTSConfig',
]
