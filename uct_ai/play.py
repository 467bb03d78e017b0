#!/usr/bin/env python
"""
Interactive command-line interface for playing against the UCT agent.

Example usage:
    # Play tic-tac-toe against UCT with one second per move
    uct-play --game tictactoe --seconds 1

    # Play three-player Nim against two UCT agents, moving first
    uct-play --game nim --players 3 --heaps 3 4 5 --first

    # Watch UCT play against a random agent
    uct-play --game tictactoe --watch --opponent random
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from uct_ai.arena import RandomAgent
from uct_ai.core.game import Game, GameResult, GameState, Move
from uct_ai.core.nim import Nim, NimMove
from uct_ai.core.tic_tac_toe import TicTacToe
from uct_ai.mcts.agent import UCTAgent
from uct_ai.mcts.config import UCTConfig


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    YELLOW = "\033[93m"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Play board games against a UCT agent")

    parser.add_argument("--game", type=str, default="tictactoe",
                        choices=["tictactoe", "nim"],
                        help="Game to play")
    parser.add_argument("--players", type=int, default=2,
                        help="Number of players (Nim only)")
    parser.add_argument("--heaps", type=int, nargs="+", default=[3, 4, 5],
                        help="Starting heap sizes (Nim only)")
    parser.add_argument("--misere", action="store_true",
                        help="Taking the last object loses (Nim only)")
    parser.add_argument("--opponent", type=str, default="uct",
                        choices=["uct", "random"],
                        help="Type of opponent")
    parser.add_argument("--seconds", type=float, default=1.0,
                        help="UCT thinking time per move (<= 0 = no limit)")
    parser.add_argument("--iterations", type=int, default=-1,
                        help="UCT iterations per move (< 0 = no limit)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed")
    parser.add_argument("--first", action="store_true",
                        help="Move first (as player 1)")
    parser.add_argument("--watch", action="store_true",
                        help="Watch a UCT agent (player 1) play the chosen opponents")
    parser.add_argument("--verbose", action="store_true",
                        help="Print search statistics after every UCT move")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug logging")

    return parser.parse_args(argv)


def create_game(args: argparse.Namespace) -> Game:
    if args.game == "nim":
        return Nim(heaps=args.heaps, num_players=args.players, misere=args.misere)
    return TicTacToe()


def create_opponent(args: argparse.Namespace, index: int = 0):
    """Create an AI opponent from the command line arguments."""
    if args.opponent == "random":
        seed = None if args.seed is None else args.seed + index
        return RandomAgent(name=f"Random Agent {index + 1}", seed=seed)
    return create_uct_agent(args, index)


def create_uct_agent(args: argparse.Namespace, index: int = 0) -> UCTAgent:
    seed = None if args.seed is None else args.seed + index
    config = UCTConfig(
        max_seconds=args.seconds,
        max_iterations=args.iterations,
        seed=seed,
    )
    return UCTAgent(config=config, name=f"UCT Agent {index + 1}", verbose=args.verbose)


def display_game_state(game: Game, state: GameState) -> None:
    print("\n" + "=" * 40)
    print(f"{game.name}")
    print("=" * 40)
    print(state)
    if not state.is_terminal():
        print(f"\nPlayer {state.mover()} to move")


def parse_move(game: Game, text: str) -> Move:
    """
    Parse a move typed by a human.

    Tic-tac-toe moves are cell numbers 1-9; Nim moves are "heap count".
    """
    parts = text.split()
    if isinstance(game, Nim):
        if len(parts) != 2:
            raise ValueError("Enter a heap number and a count, e.g. '0 2'")
        return NimMove(int(parts[0]), int(parts[1]))
    if len(parts) != 1:
        raise ValueError("Enter a cell number between 1 and 9")
    return int(parts[0]) - 1


def get_human_action(game: Game, state: GameState) -> Move:
    """Prompt until the human enters a legal move."""
    legal = state.legal_moves()
    while True:
        text = input("\nYour move: ").strip()
        try:
            move = parse_move(game, text)
        except ValueError as e:
            print(f"Invalid input: {e}")
            continue
        if move not in legal:
            print("Illegal move. Please try again.")
            continue
        return move


def play_game(args: argparse.Namespace) -> GameState:
    """Play one game against (or watch) AI agents."""
    game = create_game(args)

    human_player = None
    if not args.watch:
        human_player = 1 if args.first else game.num_players

    # One AI per seat; the human seat is left empty. When watching, player 1
    # is always a UCT agent and the other seats get the chosen opponent.
    seats = {}
    for player in range(1, game.num_players + 1):
        if player == human_player:
            continue
        if args.watch and player == 1:
            seats[player] = create_uct_agent(args, 0)
        else:
            seats[player] = create_opponent(args, player - 1)

    for player, agent in seats.items():
        print(f"Player {player}: {agent.name}")

    state = game.initial_state()
    while not state.is_terminal():
        display_game_state(game, state)

        player = state.mover()
        if player == human_player:
            move = get_human_action(game, state)
        else:
            print(f"\n{seats[player].name} is thinking...")
            move = seats[player].select_action(game, state)
            print(f"{seats[player].name} plays {move}")

        state = state.apply(move)

    display_game_state(game, state)
    print("\n" + Colors.BOLD + Colors.YELLOW + "=== GAME OVER ===" + Colors.RESET)

    if state.result == GameResult.WINNER:
        if state.winner == human_player:
            print(Colors.BOLD + Colors.GREEN + "You win!" + Colors.RESET)
        else:
            print(Colors.BOLD + Colors.RED + f"{seats[state.winner].name} wins!" + Colors.RESET)
    else:
        print(Colors.BOLD + Colors.YELLOW + "It's a draw!" + Colors.RESET)

    return state


def main(argv: Optional[List[str]] = None) -> None:
    """Main function."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    # Set up colored output for Windows
    if os.name == 'nt':
        os.system('color')

    print(Colors.BOLD + Colors.CYAN + "Welcome to UCT AI!" + Colors.RESET)

    try:
        play_game(args)
    except KeyboardInterrupt:
        print("\nGame interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main()
