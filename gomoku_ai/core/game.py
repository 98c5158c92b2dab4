"""
Game state and flow management for Gomoku.

This module defines:
- GameState: board, side to move, last move, result and history
- Game: manager for turn flow with pluggable agent callbacks
- create_game: convenience constructor

The engine itself never mutates a GameState; front-ends apply the move it
returns through `GameState.apply_move` or `Game.step`.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Tuple
import time

from gomoku_ai.core.board import Board
from gomoku_ai.core.candidates import candidates
from gomoku_ai.core.constants import (
    Player, Move, DEFAULT_BOARD_SIZE, DEFAULT_WIN_LENGTH,
    DEFAULT_PRUNING_RADIUS, DEFAULT_CANDIDATE_CAP
)
from gomoku_ai.core.errors import InvalidMoveError


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()
    DRAW = auto()


@dataclass
class GameState:
    """
    Complete representation of a Gomoku game at one point in time.

    `last_move`, when set, always holds a stone of the player who is not to
    move.
    """
    board: Board = field(default_factory=Board)
    current_player: Player = Player.BLACK
    last_move: Optional[Move] = None
    result: GameResult = GameResult.IN_PROGRESS
    winner: Optional[Player] = None
    move_history: List[Tuple[Player, Move]] = field(default_factory=list)

    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def move_count(self) -> int:
        """Number of stones on the board."""
        return self.board.move_count

    @property
    def game_over(self) -> bool:
        return self.result != GameResult.IN_PROGRESS

    def get_valid_moves(
        self,
        radius: int = DEFAULT_PRUNING_RADIUS,
        cap: Optional[int] = DEFAULT_CANDIDATE_CAP,
    ) -> List[Move]:
        """
        Get candidate moves for the player to move.

        Returns:
            List of moves, empty when the game is over
        """
        if self.game_over:
            return []
        return candidates(self.board, radius=radius, cap=cap)

    def apply_move(self, row: int, col: int) -> None:
        """
        Play a stone for the current player and advance the turn.

        Detects a win through the board's five-in-a-row check and a draw
        when the board fills up.

        Args:
            row: Row index
            col: Column index

        Raises:
            InvalidMoveError: If the game is over or the cell is not playable
        """
        if self.game_over:
            raise InvalidMoveError(row, col, "game is over")

        player = self.current_player
        self.board.place_stone(row, col, player)
        self.last_move = (row, col)
        self.move_history.append((player, (row, col)))

        if self.board.has_five(row, col, player):
            self._end_game(GameResult.WINNER, player)
        elif self.board.is_full():
            self._end_game(GameResult.DRAW)

        self.next_turn()

    def declare_draw(self) -> None:
        """End the game as a draw (no legal continuation)."""
        if not self.game_over:
            self._end_game(GameResult.DRAW)

    def _end_game(self, result: GameResult, winner: Optional[Player] = None) -> None:
        self.result = result
        self.winner = winner
        self.end_time = time.time()

    def next_turn(self) -> Player:
        """
        Hand the move to the other player.

        Returns:
            The new current player
        """
        self.current_player = self.current_player.opponent
        return self.current_player

    def clone(self) -> 'GameState':
        """Deep copy of this state."""
        return GameState(
            board=self.board.copy(),
            current_player=self.current_player,
            last_move=self.last_move,
            result=self.result,
            winner=self.winner,
            move_history=list(self.move_history),
            start_time=self.start_time,
            end_time=self.end_time,
        )


AgentCallback = Callable[[GameState, Player], Optional[Move]]


class Game:
    """
    Manager for Gomoku game flow.

    Handles setup, turn management and agent callbacks for AI players.
    Players without a callback are driven by passing moves to `step`.
    """

    def __init__(
        self,
        board_size: int = DEFAULT_BOARD_SIZE,
        win_length: int = DEFAULT_WIN_LENGTH,
        player_names: Optional[Dict[Player, str]] = None,
    ):
        """
        Initialize a new game.

        Args:
            board_size: Number of rows and columns
            win_length: Stones in a row needed to win
            player_names: Optional display names keyed by player
        """
        if board_size < win_length:
            raise ValueError("board_size must be at least win_length")

        self.board_size = board_size
        self.win_length = win_length
        self.player_names = {
            Player.BLACK: "Black",
            Player.WHITE: "White",
        }
        if player_names:
            self.player_names.update(player_names)

        self.state = self._setup_game()
        self.agent_callbacks: Dict[Player, AgentCallback] = {}

    def _setup_game(self) -> GameState:
        return GameState(board=Board(size=self.board_size, win_length=self.win_length))

    def reset(self) -> GameState:
        """
        Reset the game to an empty board with black to move.

        Returns:
            New game state
        """
        self.state = self._setup_game()
        return self.state

    def register_agent(self, player: Player, agent_callback: AgentCallback) -> None:
        """
        Register an AI agent for a player.

        The callback takes the game state and the player and returns a move,
        or None when it has no move to offer.
        """
        self.agent_callbacks[Player(player)] = agent_callback

    def play_center_opening(self) -> GameState:
        """Open the game with a black stone on the center cell."""
        if self.state.move_count:
            raise ValueError("The opening can only be played on an empty board")
        self.state.apply_move(*self.state.board.center)
        return self.state

    def step(self, move: Optional[Move] = None) -> Tuple[GameState, bool]:
        """
        Advance the game by one move.

        If no move is given, the current player's registered agent is asked
        for one. An agent answering None on a board with no empty cells ends
        the game as a draw.

        Args:
            move: Optional move to apply

        Returns:
            Tuple of (game state, whether the game is over)
        """
        if self.state.game_over:
            return self.state, True

        current_player = self.state.current_player
        if move is None and current_player in self.agent_callbacks:
            move = self.agent_callbacks[current_player](self.state, current_player)

        if move is None:
            if current_player in self.agent_callbacks or self.state.board.is_full():
                self.state.declare_draw()
                return self.state, True
            raise ValueError("No move provided and no agent callback registered for current player")

        self.state.apply_move(*move)
        return self.state, self.state.game_over

    def run_game(self, max_moves: Optional[int] = None) -> GameState:
        """
        Run the game until it ends or `max_moves` stones are on the board.

        Requires an agent callback for both players.

        Returns:
            Final game state
        """
        for player in Player:
            if player not in self.agent_callbacks:
                raise ValueError(f"No agent callback registered for {player.name}")

        limit = max_moves if max_moves is not None else self.board_size * self.board_size
        while not self.state.game_over and self.state.move_count < limit:
            self.step()
        return self.state

    def get_winner(self) -> Optional[Player]:
        if not self.state.game_over:
            return None
        return self.state.winner

    def get_game_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the game.

        Returns:
            Dictionary of game statistics
        """
        stats: Dict[str, Any] = {}
        end_time = self.state.end_time if self.state.end_time else time.time()
        stats["duration"] = end_time - self.state.start_time
        stats["moves"] = self.state.move_count
        stats["board_size"] = self.board_size
        stats["result"] = self.state.result.name

        if self.state.winner is not None:
            stats["winner"] = self.state.winner.name
            stats["winner_name"] = self.player_names[self.state.winner]

        for player in Player:
            stats[f"{player.name.lower()}_moves"] = sum(
                1 for mover, _ in self.state.move_history if mover == player
            )
        return stats

    def __str__(self) -> str:
        state = self.state
        result = f"Gomoku {self.board_size}x{self.board_size} (Moves: {state.move_count})\n"
        result += str(state.board) + "\n"
        if state.last_move is not None:
            result += f"Last move: {state.last_move}\n"

        if state.result == GameResult.WINNER:
            result += f"Winner: {self.player_names[state.winner]}\n"
        elif state.result == GameResult.DRAW:
            result += "Result: Draw\n"
        else:
            name = self.player_names[state.current_player]
            result += f"To move: {name} ({state.current_player.symbol})\n"
        return result


def create_game(
    board_size: int = DEFAULT_BOARD_SIZE,
    win_length: int = DEFAULT_WIN_LENGTH,
    player_names: Optional[Dict[Player, str]] = None,
) -> Game:
    """
    Create a new Gomoku game.

    Returns:
        Game object
    """
    return Game(board_size=board_size, win_length=win_length, player_names=player_names)
