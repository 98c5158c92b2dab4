#!/usr/bin/env python
"""
Watch MCTS engines play Gomoku against each other.

With --games 1 (the default) a single game is shown move by move. With more
games the boards are not printed; a progress bar runs instead and a summary
of results and decision reasons is printed at the end.

Example usage:
    # Watch one game between two standard engines
    python demo_game.py

    # Play 20 games between a fast and a strong engine
    python demo_game.py --black fast --white strong --games 20 --seed 1
"""
import sys
import time
import argparse
import logging
from collections import Counter
from typing import Dict, List, Optional

import numpy as np
from tqdm import tqdm

from gomoku_ai.core.constants import Player
from gomoku_ai.core.game import Game
from gomoku_ai.mcts.agent import MCTSAgent, MCTSAgentFactory


def parse_args():
    """Parse command-line arguments for the demo."""
    parser = argparse.ArgumentParser(description="Demonstrate Gomoku engines playing each other")

    parser.add_argument("--black", type=str, default="standard",
                        choices=["fast", "standard", "strong"],
                        help="Engine strength for black")
    parser.add_argument("--white", type=str, default="standard",
                        choices=["fast", "standard", "strong"],
                        help="Engine strength for white")
    parser.add_argument("--board-size", type=int, default=13,
                        help="Rows and columns of the board")
    parser.add_argument("--games", type=int, default=1,
                        help="Number of games to play")
    parser.add_argument("--delay", type=float, default=0.0,
                        help="Delay between moves in seconds (single game only)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed")
    parser.add_argument("--verbose", action="store_true",
                        help="Print search statistics for every move")

    return parser.parse_args()


def create_agent(strength: str, board_size: int, seed: Optional[int], name: str) -> MCTSAgent:
    """Create an engine of the given strength."""
    if strength == "fast":
        agent = MCTSAgentFactory.create_fast(board_size=board_size, seed=seed)
    elif strength == "strong":
        agent = MCTSAgentFactory.create_strong(board_size=board_size, seed=seed)
    else:
        agent = MCTSAgentFactory.create_standard(board_size=board_size, seed=seed)
    agent.name = name
    return agent


def run_game(agents: Dict[Player, MCTSAgent], board_size: int, show: bool, delay: float) -> Game:
    """Play a single game between the two agents."""
    game = Game(board_size=board_size,
                player_names={player: agent.name for player, agent in agents.items()})
    for player, agent in agents.items():
        agent.register_with_game(game, player)

    game_over = False
    while not game_over:
        player = game.state.current_player
        _, game_over = game.step()
        if show:
            agent = agents[player]
            print(f"\n{agent.name} played {game.state.last_move} ({agent.last_reason})")
            print(game.state.board)
            time.sleep(delay)
    return game


def run_demo(args) -> None:
    """Run one or more games and report the results."""
    seed = args.seed
    agents = {
        Player.BLACK: create_agent(args.black, args.board_size, seed, f"{args.black.capitalize()} Black"),
        Player.WHITE: create_agent(args.white, args.board_size,
                                   None if seed is None else seed + 1,
                                   f"{args.white.capitalize()} White"),
    }
    for agent in agents.values():
        agent.verbose = args.verbose

    print(f"Running demo: {agents[Player.BLACK]} vs {agents[Player.WHITE]}")

    show = args.games == 1
    results: Counter = Counter()
    game_lengths: List[int] = []
    durations: List[float] = []

    for _ in tqdm(range(args.games), desc="Games", disable=show):
        game = run_game(agents, args.board_size, show, args.delay)
        stats = game.get_game_statistics()
        results[stats.get("winner", "DRAW")] += 1
        game_lengths.append(stats["moves"])
        durations.append(stats["duration"])

    if show:
        print(f"\n{game}")

    reasons: Counter = Counter()
    for agent in agents.values():
        reasons.update(reason for _, reason in agent.move_history)

    print("\nResults:")
    for player in Player:
        print(f"  {agents[player].name}: {results[player.name]} wins")
    print(f"  Draws: {results['DRAW']}")
    print(f"\nMoves per game: {np.mean(game_lengths):.1f} (min {np.min(game_lengths)}, max {np.max(game_lengths)})")
    print(f"Seconds per game: {np.mean(durations):.2f}")
    print("\nDecision reasons:")
    for reason, count in reasons.most_common():
        print(f"  {reason}: {count}")


def main():
    """Main function."""
    args = parse_args()
    logging.basicConfig(level=logging.WARNING, format="%(name)s %(levelname)s: %(message)s")

    try:
        run_demo(args)
    except KeyboardInterrupt:
        print("\nDemo interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main()
