"""
Playing games between agents.

This module provides a random baseline agent and helpers to play single
matches or whole series between agents, seating one agent per player.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

import numpy as np
from tqdm import tqdm

from uct_ai.core.game import Game, GameResult, GameState, Move

logger = logging.getLogger(__name__)


class RandomAgent:
    """
    Agent that selects moves uniformly at random.

    This agent serves as a baseline for comparison with search agents.
    """

    def __init__(self, name: str = "Random Agent", seed: Optional[int] = None):
        """
        Initialize the random agent.

        Args:
            name: Name of the agent
            seed: Optional random seed
        """
        self.name = name
        self.rng = np.random.default_rng(seed)

    def select_action(self, game: Game, state: GameState) -> Move:
        """
        Select a random legal move.

        Args:
            game: Game being played
            state: Current game state

        Returns:
            Randomly selected move
        """
        moves = state.legal_moves()
        if not moves:
            raise ValueError(f"No legal moves for player {state.mover()}")
        return moves[int(self.rng.integers(len(moves)))]

    def __str__(self) -> str:
        return self.name


def play_match(
    game: Game,
    agents: Sequence[Any],
    state: Optional[GameState] = None
) -> Tuple[GameState, List[Move]]:
    """
    Play one game to the end.

    Args:
        game: Game to play
        agents: One agent per player; agents[i] plays player i + 1
        state: Starting position (defaults to the game's initial state)

    Returns:
        Tuple of (terminal state, moves played)
    """
    if len(agents) != game.num_players:
        raise ValueError(f"Expected {game.num_players} agents, got {len(agents)}")

    if state is None:
        state = game.initial_state()

    moves = []
    while not state.is_terminal():
        agent = agents[state.mover() - 1]
        move = agent.select_action(game, state)
        state = state.apply(move)
        moves.append(move)

    logger.debug("Match finished after %d moves: %s", len(moves), state.result.name)
    return state, moves


def evaluate_agents(
    game: Game,
    agents: Sequence[Any],
    num_games: int = 20,
    rotate: bool = True,
    show_progress: bool = True
) -> Dict[str, Any]:
    """
    Play a series of games and tally the results per agent.

    Args:
        game: Game to play
        agents: One agent per player
        num_games: Number of games to play
        rotate: Whether to rotate seats between games so every agent moves
            first equally often
        show_progress: Whether to display a progress bar

    Returns:
        Dictionary with per-agent wins and mean utility, and the draw count
    """
    num_agents = len(agents)
    wins = [0] * num_agents
    utility_sums = np.zeros(num_agents, dtype=np.float64)
    draws = 0

    pbar = tqdm(total=num_games, desc="Evaluating", disable=not show_progress)

    for game_index in range(num_games):
        offset = game_index % num_agents if rotate else 0
        # Seat agent k as player ((k + offset) % n) + 1
        seating = [agents[(seat - offset) % num_agents] for seat in range(num_agents)]

        final_state, _ = play_match(game, seating)
        utils = final_state.utilities()

        for k in range(num_agents):
            player = (k + offset) % num_agents + 1
            utility_sums[k] += utils[player]
            if final_state.winner == player:
                wins[k] += 1

        if final_state.result == GameResult.DRAW:
            draws += 1

        pbar.update(1)
        pbar.set_postfix(draws=draws, wins=wins)

    pbar.close()

    names = [getattr(agent, "name", str(agent)) for agent in agents]
    return {
        "games": num_games,
        "draws": draws,
        "agents": [
            {
                "name": names[k],
                "wins": wins[k],
                "win_rate": wins[k] / max(1, num_games),
                "mean_utility": float(utility_sums[k] / max(1, num_games)),
            }
            for k in range(num_agents)
        ],
    }
