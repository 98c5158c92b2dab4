#!/usr/bin/env python
"""
Interactive Gomoku in the terminal against the MCTS engine.

This script is a thin front-end: it reads coordinates from the keyboard,
applies them through the game state and asks the engine for replies.

Example usage:
    # Play black (first) against the default engine
    python play_game.py

    # Play white against a stronger engine on a 15x15 board
    python play_game.py --white --iterations 800 --board-size 15
"""
import os
import sys
import argparse
import logging
from typing import Optional

from gomoku_ai.core.constants import Player, Move
from gomoku_ai.core.errors import InvalidMoveError
from gomoku_ai.core.game import Game, GameResult
from gomoku_ai.core.threats import analyze_position
from gomoku_ai.mcts.agent import MCTSAgent
from gomoku_ai.mcts.config import MCTSConfig


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    YELLOW = "\033[93m"

    @staticmethod
    def player_color(player: Player) -> str:
        """Get ANSI color code for a player's stones."""
        if player == Player.BLACK:
            return Colors.CYAN
        return Colors.YELLOW


def parse_args():
    """Parse command-line arguments for game configuration."""
    parser = argparse.ArgumentParser(description="Play Gomoku against the MCTS engine")

    parser.add_argument("--white", action="store_true",
                        help="Play white (the engine opens in the center)")
    parser.add_argument("--board-size", type=int, default=13,
                        help="Rows and columns of the board")
    parser.add_argument("--iterations", type=int, default=200,
                        help="Number of MCTS iterations per engine move")
    parser.add_argument("--radius", type=int, default=1,
                        help="Candidate pruning radius")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for the engine")
    parser.add_argument("--show-threats", action="store_true",
                        help="Show threat analysis before each of your moves")
    parser.add_argument("--debug", action="store_true",
                        help="Show engine debug logging and search statistics")

    return parser.parse_args()


def display_board(game: Game) -> None:
    """Print the board with the last move highlighted."""
    state = game.state
    board = state.board
    print("\n   " + " ".join(f"{c % 10}" for c in range(board.size)))
    for r in range(board.size):
        cells = []
        for c in range(board.size):
            value = board.get(r, c)
            if value == 0:
                cells.append(".")
                continue
            player = Player(value)
            symbol = Colors.player_color(player) + player.symbol + Colors.RESET
            if state.last_move == (r, c):
                symbol = Colors.BOLD + symbol
            cells.append(symbol)
        print(f"{r:2d} " + " ".join(cells))
    print(f"\nMove: {state.move_count}")


def get_human_move(game: Game) -> Optional[Move]:
    """Read a 'row col' pair from the keyboard. Returns None to quit."""
    board = game.state.board
    while True:
        text = input("\nYour move (row col, or q to quit): ").strip().lower()
        if text in ("q", "quit", "exit"):
            return None
        parts = text.replace(",", " ").split()
        if len(parts) != 2:
            print("Please enter two numbers, e.g. '6 7'.")
            continue
        try:
            row, col = int(parts[0]), int(parts[1])
        except ValueError:
            print("Invalid input. Please enter numbers.")
            continue
        if not board.in_bounds(row, col):
            print(f"Coordinates must be between 0 and {board.size - 1}.")
            continue
        if not board.is_empty(row, col):
            print("That cell is already taken.")
            continue
        return (row, col)


def play_game(args) -> None:
    """Play one game against the engine."""
    config = MCTSConfig(
        iterations=args.iterations,
        board_size=args.board_size,
        pruning_radius=args.radius,
        seed=args.seed,
    )
    engine = MCTSAgent(config=config, name="MCTS AI", verbose=args.debug)

    human = Player.WHITE if args.white else Player.BLACK
    ai = human.opponent
    game = Game(board_size=args.board_size, player_names={human: "You", ai: engine.name})
    engine.register_with_game(game, ai)

    if ai == Player.BLACK:
        game.play_center_opening()
        print("AI opened in the center.")

    game_over = False
    while not game_over:
        display_board(game)

        if game.state.current_player == human:
            if args.show_threats:
                print("\nThreat analysis:")
                print(analyze_position(game.state.board, human))
            move = get_human_move(game)
            if move is None:
                print("Game abandoned.")
                return
            try:
                _, game_over = game.step(move)
            except InvalidMoveError as e:
                print(e)
        else:
            print(f"\n{engine.name} is thinking...")
            _, game_over = game.step()
            print(f"{engine.name} played {game.state.last_move} ({engine.last_reason})")

    display_board(game)
    print("\n" + Colors.BOLD + Colors.YELLOW + "=== GAME OVER ===" + Colors.RESET)
    if game.state.result == GameResult.WINNER:
        if game.state.winner == human:
            print(Colors.BOLD + Colors.GREEN + "You win!" + Colors.RESET)
        else:
            print(Colors.BOLD + Colors.RED + f"{engine.name} wins!" + Colors.RESET)
    else:
        print(Colors.BOLD + Colors.YELLOW + "It's a draw!" + Colors.RESET)

    stats = game.get_game_statistics()
    print("\nGame Statistics:")
    print(f"  Total moves: {stats['moves']}")
    print(f"  Duration: {stats['duration']:.1f}s")


def main():
    """Main function."""
    args = parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING,
                        format="%(name)s %(levelname)s: %(message)s")

    # Set up colored output for Windows
    if os.name == 'nt':
        os.system('color')

    print(Colors.BOLD + Colors.YELLOW + "Welcome to Gomoku!" + Colors.RESET)
    print("Get five stones in a row to win.")

    try:
        play_game(args)
    except KeyboardInterrupt:
        print("\nGame interrupted by user.")
        sys.exit(0)

    while True:
        play_again = input("\nPlay again? (y/n): ").lower()
        if play_again in ['y', 'yes']:
            play_game(args)
        elif play_again in ['n', 'no']:
            print("Thanks for playing!")
            break
        else:
            print("Please enter 'y' or 'n'.")


if __name__ == "__main__":
    main()
