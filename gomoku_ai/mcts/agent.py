"""
Move selection for Gomoku.

`compute_move` is the engine's top-level policy: forced tactical moves are
taken first, and only when none exists does it fall back to Monte Carlo Tree
Search. `MCTSAgent` wraps it as a ready-to-use AI player that keeps
statistics about its decisions.
"""
from dataclasses import replace
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple
import logging
import random
import time

from gomoku_ai.core.board import Board
from gomoku_ai.core.candidates import candidates
from gomoku_ai.core.constants import (
    Player, Move, DEFAULT_BOARD_SIZE, DEFAULT_WIN_LENGTH,
    REASON_WIN, REASON_BLOCK, REASON_CRITICAL_BLOCK, REASON_SEARCH,
    REASON_FALLBACK, REASON_NO_MOVES
)
from gomoku_ai.core.errors import DegenerateConfigError
from gomoku_ai.core.evaluator import best_move
from gomoku_ai.core.game import Game, GameState
from gomoku_ai.core.threats import (
    find_winning_move, find_blocking_move, find_critical_block, find_threat_moves
)
from gomoku_ai.mcts.config import MCTSConfig
from gomoku_ai.mcts.search import mcts_search

logger = logging.getLogger(__name__)


class MoveDecision(NamedTuple):
    """A chosen move, why it was chosen, and search statistics if any."""
    move: Optional[Move]
    reason: str
    stats: Dict[str, Any]


def _resolve_config(board: Board, config: Optional[MCTSConfig]) -> MCTSConfig:
    if config is None:
        return MCTSConfig(board_size=board.size, win_length=board.win_length)
    if config.board_size != board.size or config.win_length != board.win_length:
        raise DegenerateConfigError(
            f"config is for a {config.board_size}x{config.board_size} board with "
            f"win_length={config.win_length}, got {board.size}x{board.size} with "
            f"win_length={board.win_length}"
        )
    return config


def select_move(
    board: Board,
    player: Player,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None,
) -> MoveDecision:
    """
    Choose a move for `player`.

    Checked in order:
    1. A move that wins immediately ("win")
    2. A move that stops an immediate opponent win ("block")
    3. A move that stops an opponent double threat ("critical-block")
    4. MCTS over the offensive-threat candidates if there are any, else over
       all candidates ("search")

    The board is not modified.

    Args:
        board: Current board
        player: Player to move
        config: Engine configuration (defaults to one matching the board)
        rng: Random source for the search (defaults to random.Random(config.seed))

    Returns:
        MoveDecision with the move (None only when the board is full)
    """
    config = _resolve_config(board, config)
    player = Player(player)

    if board.is_full():
        return MoveDecision(None, REASON_NO_MOVES, {})

    move = find_winning_move(board, player)
    if move is not None:
        logger.debug("%s wins at %s", player.name, move)
        return MoveDecision(move, REASON_WIN, {})

    move = find_blocking_move(board, player)
    if move is not None:
        logger.debug("%s blocks an immediate win at %s", player.name, move)
        return MoveDecision(move, REASON_BLOCK, {})

    move = find_critical_block(board, player)
    if move is not None:
        logger.debug("%s blocks a double threat at %s", player.name, move)
        return MoveDecision(move, REASON_CRITICAL_BLOCK, {})

    moves = candidates(board, radius=config.pruning_radius, cap=config.candidate_cap)
    threats = find_threat_moves(board, player, config.threat_threshold, moves)
    if threats:
        logger.debug("%s narrows search to %d threat moves", player.name, len(threats))
        moves = threats

    if rng is None:
        rng = random.Random(config.seed)
    move, stats = mcts_search(board, player, moves, config, rng)
    if move is not None:
        return MoveDecision(move, REASON_SEARCH, stats)

    # Should not happen for a non-full board; keep the game going regardless
    move = best_move(board, moves, player)
    if move is None:
        move = board.empty_cells()[0]
    logger.warning("Search returned no move for %s, falling back to %s", player.name, move)
    return MoveDecision(move, REASON_FALLBACK, stats)


def compute_move(
    board: Board,
    player: Player,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[Optional[Move], str]:
    """
    Compute the next move for `player`.

    Args:
        board: Current board (not modified)
        player: Player to move
        config: Engine configuration
        rng: Optional random source for the search

    Returns:
        Tuple of (move, reason); reason is one of "win", "block",
        "critical-block", "search", "fallback", or "no-moves" with a None
        move on a full board
    """
    decision = select_move(board, player, config, rng)
    return decision.move, decision.reason


class MCTSAgent:
    """
    Gomoku AI player built on `select_move`.

    Each agent owns its random source, so agents in different sessions never
    share state.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: Engine configuration
            name: Name of the agent
            verbose: Whether to print information about each decision
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose
        self.rng = random.Random(self.config.seed)

        # Statistics from the most recent decision
        self.last_stats: Dict[str, Any] = {}
        self.last_reason: Optional[str] = None

        # History of all moves and why they were played
        self.move_history: List[Tuple[Optional[Move], str]] = []

    def select_action(self, state: GameState, player: Player) -> Optional[Move]:
        """
        Select a move for `player` in `state`.

        Args:
            state: Current game state
            player: Player making the decision

        Returns:
            Selected move, or None when the board is full
        """
        if state.current_player != player:
            raise ValueError(f"Not {Player(player).name}'s turn")

        start_time = time.time()
        decision = select_move(state.board, player, self.config, self.rng)
        stats = dict(decision.stats)
        stats["total_time"] = time.time() - start_time

        self.last_stats = stats
        self.last_reason = decision.reason
        self.move_history.append((decision.move, decision.reason))

        if self.verbose:
            self._print_search_info(decision.move, decision.reason, stats)

        return decision.move

    def _print_search_info(self, move: Optional[Move], reason: str, stats: Dict[str, Any]) -> None:
        print(f"\n{self.name} selected: {move} ({reason})")
        print(f"Time: {stats['total_time']:.3f}s")
        if reason != REASON_SEARCH:
            return

        print(f"Iterations: {stats['iterations']}")
        print(f"Nodes: {stats['node_count']}")
        print(f"Max tree depth: {stats['max_tree_depth']}")

        print("\nTop moves:")
        moves_by_visits = sorted(stats['action_visits'].items(), key=lambda x: x[1], reverse=True)
        for i, (candidate, visits) in enumerate(moves_by_visits[:5]):
            value = stats['action_values'].get(candidate, 0.0)
            print(f"{i+1}. {candidate} - {visits} visits, {value:.3f} value")

    def get_action_callback(self) -> Callable[[GameState, Player], Optional[Move]]:
        """
        Get a callback for `Game.register_agent`.

        Returns:
            Callback taking a game state and player and returning a move
        """
        return lambda state, player: self.select_action(state, player)

    def register_with_game(self, game: Game, player: Player) -> None:
        game.register_agent(player, self.get_action_callback())

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.last_reason = None
        self.move_history = []

    def __str__(self) -> str:
        return f"{self.name} (MCTS, {self.config.iterations} iterations)"


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents of different strengths.

    Every agent is built for the given board geometry, so it can drive a
    `Game` with the same `board_size` and `win_length`.
    """

    @staticmethod
    def create_fast(
        board_size: int = DEFAULT_BOARD_SIZE,
        seed: Optional[int] = None,
        win_length: int = DEFAULT_WIN_LENGTH,
    ) -> MCTSAgent:
        config = replace(MCTSConfig.fast(), board_size=board_size, win_length=win_length, seed=seed)
        return MCTSAgent(config=config, name="Fast MCTS")

    @staticmethod
    def create_standard(
        board_size: int = DEFAULT_BOARD_SIZE,
        seed: Optional[int] = None,
        win_length: int = DEFAULT_WIN_LENGTH,
    ) -> MCTSAgent:
        config = MCTSConfig(board_size=board_size, win_length=win_length, seed=seed)
        return MCTSAgent(config=config, name="Standard MCTS")

    @staticmethod
    def create_strong(
        board_size: int = DEFAULT_BOARD_SIZE,
        seed: Optional[int] = None,
        win_length: int = DEFAULT_WIN_LENGTH,
    ) -> MCTSAgent:
        config = replace(MCTSConfig.deep(), board_size=board_size, win_length=win_length, seed=seed)
        return MCTSAgent(config=config, name="Strong MCTS")

    @staticmethod
    def create_custom(
        iterations: int = 200,
        board_size: int = DEFAULT_BOARD_SIZE,
        exploration_constant: float = 1.4,
        playout_horizon: int = 8,
        seed: Optional[int] = None,
        name: str = "Custom MCTS",
        win_length: int = DEFAULT_WIN_LENGTH,
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            iterations: Number of MCTS iterations
            board_size: Rows and columns of the board
            exploration_constant: UCB1 exploration parameter
            playout_horizon: Maximum plies per playout
            seed: Random seed
            name: Name of the agent
            win_length: Stones in a row needed to win

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            iterations=iterations,
            board_size=board_size,
            win_length=win_length,
            exploration_constant=exploration_constant,
            playout_horizon=playout_horizon,
            seed=seed,
        )
        return MCTSAgent(config=config, name=name)
