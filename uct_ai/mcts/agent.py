"""
UCT agent.

This module provides the UCTAgent class, a ready-to-use player that runs
UCT search for every decision. The agent owns the random streams of its
searches, a cooperative interrupt flag the host can raise, and statistics
about its recent searches.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple
import json
import logging
import threading

import numpy as np

from uct_ai.core.game import Game, GameState, Move
from uct_ai.errors import UnsupportedGameKind
from uct_ai.mcts.config import UCTConfig
from uct_ai.mcts.node import SearchTree
from uct_ai.mcts.search import (
    get_action_statistics, get_principal_variation, uct_search
)

logger = logging.getLogger(__name__)


def supports_game(game: Game) -> bool:
    """
    Check whether UCT search can play a game.

    Args:
        game: Game to check

    Returns:
        False for stochastic or simultaneous-move games, True otherwise
    """
    return not game.is_stochastic and game.is_alternating_move


def check_game_supported(game: Game) -> None:
    """
    Raise if UCT search cannot play a game.

    Args:
        game: Game to check

    Raises:
        UnsupportedGameKind: If the game is stochastic or not alternating-move
    """
    if game.is_stochastic:
        raise UnsupportedGameKind(
            "UCT search does not support games with chance events",
            context={"game": game.name},
        )
    if not game.is_alternating_move:
        raise UnsupportedGameKind(
            "UCT search only supports alternating-move games",
            context={"game": game.name},
        )


class UCTAgent:
    """
    UCT agent for playing deterministic, alternating-move games.

    Every decision builds a fresh tree; nothing is reused between moves.
    """

    def __init__(
        self,
        config: Optional[UCTConfig] = None,
        name: str = "UCT Agent",
        verbose: bool = False
    ):
        """
        Initialize a UCT agent.

        Args:
            config: Search configuration
            name: Name of the agent
            verbose: Whether to print a summary after every search
        """
        self.config = config or UCTConfig()
        self.name = name
        self.verbose = verbose

        # Each search draws from its own stream spawned from this sequence
        self._seed_sequence = np.random.SeedSequence(self.config.seed)

        # Raised by the host to stop a search before its next iteration
        self._interrupt = threading.Event()

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all moves and their statistics
        self.action_history: List[Tuple[Move, Dict[str, Any]]] = []

        # Tree of the last search, only kept when config.keep_tree is set
        self.last_tree: Optional[SearchTree] = None

    def supports_game(self, game: Game) -> bool:
        return supports_game(game)

    @property
    def wants_interrupt(self) -> bool:
        """Whether the host asked the current search to stop."""
        return self._interrupt.is_set()

    @wants_interrupt.setter
    def wants_interrupt(self, value: bool) -> None:
        if value:
            self._interrupt.set()
        else:
            self._interrupt.clear()

    def interrupt(self) -> None:
        """Ask the running search to stop before its next iteration."""
        self._interrupt.set()

    def clear_interrupt(self) -> None:
        """Reset the interrupt flag so later searches run normally."""
        self._interrupt.clear()

    def new_rng(self) -> np.random.Generator:
        """
        Create the random generator for the next search.

        Returns:
            Generator on a stream independent from all previous ones
        """
        return np.random.default_rng(self._seed_sequence.spawn(1)[0])

    def select_action(
        self,
        game: Game,
        state: GameState,
        max_seconds: Optional[float] = None,
        max_iterations: Optional[int] = None
    ) -> Move:
        """
        Select a move using UCT search.

        Args:
            game: Game being played
            state: Current game state
            max_seconds: Time budget (<= 0 = no limit, None = from config)
            max_iterations: Iteration budget (< 0 = no limit, None = from config)

        Returns:
            Selected move

        Raises:
            UnsupportedGameKind: If the game cannot be searched
            EmptyTreeError: If the state is terminal or the search was
                interrupted before its first iteration
        """
        check_game_supported(game)

        if max_seconds is None:
            max_seconds = self.config.max_seconds
        if max_iterations is None:
            max_iterations = self.config.max_iterations

        if state.is_terminal():
            logger.warning("%s asked to move in a finished game", self.name)

        result = uct_search(
            game,
            state,
            max_seconds=max_seconds,
            max_iterations=max_iterations,
            rng=self.new_rng(),
            interrupt=self._interrupt,
        )

        self.last_stats = result.stats
        self.action_history.append((result.move, result.stats))
        self.last_tree = result.tree if self.config.keep_tree else None

        if self.verbose:
            self._print_search_info(result.move, result.stats)

        return result.move

    def _print_search_info(self, move: Move, stats: Dict[str, Any]) -> None:
        """
        Print information about the search.

        Args:
            move: Selected move
            stats: Search statistics
        """
        print(f"\n{self.name} selected: {move}")
        print(f"Iterations: {stats['iterations']} ({stats['stop_reason'].lower()})")
        print(f"Time: {stats['time_elapsed']:.3f}s ({stats['iterations_per_second']:.1f} it/s)")
        print(f"Nodes: {stats['node_count']}")
        print(f"Max depth: {stats['max_depth']}")

        # Print top moves by visit count
        print("\nTop moves:")
        moves_by_visits = sorted(
            stats['action_visits'].items(),
            key=lambda x: x[1],
            reverse=True
        )
        for i, (move_str, visits) in enumerate(moves_by_visits[:5]):
            value = stats['action_values'].get(move_str, 0.0)
            print(f"{i+1}. {move_str} - {visits} visits, {value:+.3f} value")

    def get_action_callback(self, game: Game) -> Callable[[GameState], Move]:
        """
        Get a callback that selects moves in `game`.

        Returns:
            Callback taking a game state and returning a move
        """
        return lambda state: self.select_action(game, state)

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def get_principal_variation(self) -> List[Tuple[Move, float]]:
        """
        Get the principal variation of the last kept tree.

        Returns:
            List of (move, value) pairs, empty if no tree was kept
        """
        if self.last_tree is None:
            return []
        return get_principal_variation(self.last_tree)

    def get_action_statistics(self) -> Dict[str, Dict[str, float]]:
        """
        Get root move statistics of the last kept tree.

        Returns:
            Dictionary mapping move strings to statistics
        """
        if self.last_tree is None:
            return {}
        return get_action_statistics(self.last_tree)

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []
        self.last_tree = None

    def save_statistics(self, filename: str) -> None:
        """
        Save statistics to a JSON file.

        Args:
            filename: Name of the file to save to
        """
        history = []
        for move, stats in self.action_history:
            history.append({
                "move": str(move),
                "stats": {k: v for k, v in stats.items() if not isinstance(v, dict)}
            })

        data = {
            "agent_name": self.name,
            "config": self.config.to_dict(),
            "history": history,
            "total_actions": len(self.action_history)
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def __str__(self) -> str:
        budget = []
        if self.config.time_bounded:
            budget.append(f"{self.config.max_seconds}s")
        if self.config.iteration_bounded:
            budget.append(f"{self.config.max_iterations} iterations")
        return f"{self.name} (UCT, {', '.join(budget)})"


class UCTAgentFactory:
    """Factory for creating UCT agents with different budgets."""

    @staticmethod
    def create_fast() -> UCTAgent:
        return UCTAgent(config=UCTConfig.fast(), name="Fast UCT")

    @staticmethod
    def create_standard() -> UCTAgent:
        return UCTAgent(config=UCTConfig.default(), name="Standard UCT")

    @staticmethod
    def create_strong() -> UCTAgent:
        return UCTAgent(config=UCTConfig.strong(), name="Strong UCT")

    @staticmethod
    def create_custom(
        max_seconds: float = -1.0,
        max_iterations: int = 1000,
        seed: Optional[int] = None,
        name: str = "Custom UCT"
    ) -> UCTAgent:
        """
        Create a custom UCT agent.

        Args:
            max_seconds: Time budget per move (<= 0 = no limit)
            max_iterations: Iteration budget per move (< 0 = no limit)
            seed: Optional random seed
            name: Name of the agent

        Returns:
            UCTAgent
        """
        config = UCTConfig(
            max_seconds=max_seconds,
            max_iterations=max_iterations,
            seed=seed
        )
        return UCTAgent(config=config, name=name)
