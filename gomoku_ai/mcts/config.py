"""
Configuration for the Gomoku engine.

This module defines the parameters shared by the tactical layer and the
Monte Carlo Tree Search: board geometry, candidate pruning, search budget,
playout policy and the random seed.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from gomoku_ai.core.constants import (
    DEFAULT_BOARD_SIZE, DEFAULT_WIN_LENGTH, DEFAULT_PRUNING_RADIUS,
    DEFAULT_CANDIDATE_CAP, DEFAULT_ITERATIONS, DEFAULT_EXPLORATION_CONSTANT,
    DEFAULT_PLAYOUT_HORIZON, DEFAULT_EXPANSION_WIDTH, DEFAULT_RANDOM_MOVE_PROB,
    DEFAULT_PLAYOUT_TOP_K, DEFAULT_THREAT_THRESHOLD
)
from gomoku_ai.core.errors import DegenerateConfigError


@dataclass
class MCTSConfig:
    """
    Configuration parameters for move selection.

    Every field is validated on construction, so a config that exists can
    always be searched with.
    """
    # Search budget
    iterations: int = DEFAULT_ITERATIONS
    """Number of MCTS iterations per move decision"""

    exploration_constant: float = DEFAULT_EXPLORATION_CONSTANT
    """UCB1 exploration parameter C"""

    # Board geometry
    board_size: int = DEFAULT_BOARD_SIZE
    """Rows and columns of the board"""

    win_length: int = DEFAULT_WIN_LENGTH
    """Stones in a row needed to win"""

    # Candidate generation
    pruning_radius: int = DEFAULT_PRUNING_RADIUS
    """Chebyshev distance from existing stones for candidate moves"""

    candidate_cap: Optional[int] = DEFAULT_CANDIDATE_CAP
    """Maximum candidates per position (None = unlimited)"""

    # Expansion and playouts
    expansion_width: int = DEFAULT_EXPANSION_WIDTH
    """How many untried moves are scored when expanding a node"""

    playout_horizon: int = DEFAULT_PLAYOUT_HORIZON
    """Maximum plies per simulation"""

    random_move_prob: float = DEFAULT_RANDOM_MOVE_PROB
    """Chance of a uniformly random playout move (otherwise weighted top-K)"""

    playout_top_k: int = DEFAULT_PLAYOUT_TOP_K
    """Number of best-scored moves the weighted playout choice draws from"""

    # Arbiter
    threat_threshold: int = DEFAULT_THREAT_THRESHOLD
    """Evaluator score at which a move counts as an offensive threat"""

    seed: Optional[int] = None
    """Seed for the search's random source (None = nondeterministic)"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.iterations <= 0:
            raise DegenerateConfigError("iterations must be positive")

        if self.exploration_constant < 0:
            raise DegenerateConfigError("exploration_constant must be non-negative")

        if self.win_length < 2:
            raise DegenerateConfigError("win_length must be at least 2")

        if self.board_size < self.win_length:
            raise DegenerateConfigError("board_size must be at least win_length")

        if self.pruning_radius < 1:
            raise DegenerateConfigError("pruning_radius must be at least 1")

        if self.candidate_cap is not None and self.candidate_cap <= 0:
            raise DegenerateConfigError("candidate_cap must be positive or None")

        if self.expansion_width <= 0:
            raise DegenerateConfigError("expansion_width must be positive")

        if self.playout_horizon <= 0:
            raise DegenerateConfigError("playout_horizon must be positive")

        if not 0.0 <= self.random_move_prob <= 1.0:
            raise DegenerateConfigError("random_move_prob must be between 0 and 1")

        if self.playout_top_k <= 0:
            raise DegenerateConfigError("playout_top_k must be positive")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer iterations).

        Returns:
            Fast MCTSConfig object
        """
        return cls(iterations=50, playout_horizon=6)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(
            iterations=800,
            exploration_constant=1.2,  # Slightly less exploration
            pruning_radius=2,
            playout_horizon=20,
        )

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Unknown keys are ignored.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        valid_names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config_dict.items() if k in valid_names})

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = ", ".join(f"{name}={value}" for name, value in self.to_dict().items())
        return f"MCTSConfig({params})"
