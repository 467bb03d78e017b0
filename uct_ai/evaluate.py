#!/usr/bin/env python
"""
Evaluate the UCT agent against a random baseline.

Example usage:
    # 50 games of tic-tac-toe, 200 iterations per move
    uct-evaluate --game tictactoe --games 50 --iterations 200

    # 3-player Nim, UCT against two random agents
    uct-evaluate --game nim --players 3 --games 30 --seconds 0.05
"""
import argparse
import json
import logging
from typing import List, Optional

from uct_ai.arena import RandomAgent, evaluate_agents
from uct_ai.core.nim import Nim
from uct_ai.core.tic_tac_toe import TicTacToe
from uct_ai.mcts.agent import UCTAgent
from uct_ai.mcts.config import UCTConfig

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Evaluate UCT against random play")

    parser.add_argument("--game", type=str, default="tictactoe",
                        choices=["tictactoe", "nim"],
                        help="Game to play")
    parser.add_argument("--players", type=int, default=2,
                        help="Number of players (Nim only)")
    parser.add_argument("--heaps", type=int, nargs="+", default=[3, 4, 5],
                        help="Starting heap sizes (Nim only)")
    parser.add_argument("--games", type=int, default=20,
                        help="Number of games to play")
    parser.add_argument("--seconds", type=float, default=-1.0,
                        help="UCT thinking time per move (<= 0 = no limit)")
    parser.add_argument("--iterations", type=int, default=500,
                        help="UCT iterations per move (< 0 = no limit)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed")
    parser.add_argument("--no-rotate", action="store_true",
                        help="Keep the UCT agent in the first seat")
    parser.add_argument("--output", type=str, default=None,
                        help="Write the results to this JSON file")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug logging")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main function."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.game == "nim":
        game = Nim(heaps=args.heaps, num_players=args.players)
    else:
        game = TicTacToe()

    config = UCTConfig(max_seconds=args.seconds, max_iterations=args.iterations, seed=args.seed)
    agents = [UCTAgent(config=config, name="UCT Agent")]
    for i in range(1, game.num_players):
        seed = None if args.seed is None else args.seed + i
        agents.append(RandomAgent(name=f"Random Agent {i}", seed=seed))

    logger.info("Evaluating %s vs %d random agent(s) on %s over %d games",
                agents[0], game.num_players - 1, game, args.games)

    results = evaluate_agents(game, agents, num_games=args.games, rotate=not args.no_rotate)

    print(f"\nResults after {results['games']} games ({results['draws']} draws):")
    for entry in results["agents"]:
        print(f"  {entry['name']}: {entry['wins']} wins "
              f"({entry['win_rate']:.1%}), mean utility {entry['mean_utility']:+.3f}")

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(results, f, indent=2)
        logger.info("Results written to %s", args.output)


if __name__ == "__main__":
    main()
