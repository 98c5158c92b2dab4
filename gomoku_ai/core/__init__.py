"""
Gomoku AI Core Package

This package contains the rules and tactical layer of the engine:
- Board representation and five-in-a-row detection
- Candidate move generation
- Heuristic move scoring
- Threat analysis (wins, blocks, double-threat blocks)
- Game state and turn flow
"""

# Board
from gomoku_ai.core.board import Board, has_five, creates_win, apply_move

# Move generation and scoring
from gomoku_ai.core.candidates import candidates
from gomoku_ai.core.evaluator import score, rank_moves, best_move

# Threats
from gomoku_ai.core.threats import (
    ThreatReport,
    find_winning_move, find_blocking_move,
    find_critical_block, find_critical_blocks,
    find_threat_moves, winning_moves, analyze_position
)

# Game
from gomoku_ai.core.game import Game, GameState, GameResult, create_game

# Constants and errors
from gomoku_ai.core.constants import EMPTY, Player, Move
from gomoku_ai.core.errors import GomokuError, InvalidMoveError, DegenerateConfigError

__all__ = [
    # Board
    'Board', 'has_five', 'creates_win', 'apply_move',

    # Moves
    'candidates', 'score', 'rank_moves', 'best_move',

    # Threats
    'ThreatReport',
    'find_winning_move', 'find_blocking_move',
    'find_critical_block', 'find_critical_blocks',
    'find_threat_moves', 'winning_moves', 'analyze_position',

    # Game
    'Game', 'GameState', 'GameResult', 'create_game',

    # Constants and errors
    'EMPTY', 'Player', 'Move',
    'GomokuError', 'InvalidMoveError', 'DegenerateConfigError',
]
