"""
Game and game-state abstraction used by the search.

This module defines the narrow interface the UCT search consumes:
- GameState: an immutable-from-the-search's-view snapshot of a position
- Game: static description of a game (player count, capabilities)
- Helpers that turn finishing ranks into utilities in [-1, +1]

Concrete games (tic-tac-toe, Nim) live in sibling modules and implement
these abstract classes. Players are numbered 1..num_players.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, List, Optional, Sequence
import copy

import numpy as np

from uct_ai.core.constants import (
    DRAW_UTILITY, FIRST_PLAYER, MAX_UTILITY, MIN_UTILITY
)


# Moves are opaque to the search: anything the game can apply
Move = Any


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()  # A single player has the best utility
    DRAW = auto()  # Two or more players share the best utility


class GameState(ABC):
    """
    Snapshot of a game position.

    Implementations must be safe to share between search nodes: `apply`
    returns a new state and never mutates the receiver.
    """

    @property
    @abstractmethod
    def num_players(self) -> int:
        """Number of players in the game."""

    @abstractmethod
    def is_terminal(self) -> bool:
        """Return True if the game is over."""

    @abstractmethod
    def legal_moves(self) -> List[Move]:
        """
        Enumerate the legal moves for the player to act.

        The order is stable for a given state; it only affects which move a
        seeded random generator picks, not correctness.

        Returns:
            List of legal moves (empty for terminal states)
        """

    @abstractmethod
    def apply(self, move: Move) -> 'GameState':
        """
        Apply a move and return the resulting state.

        Args:
            move: One of the moves returned by `legal_moves`

        Returns:
            New game state; the receiver is left untouched
        """

    @abstractmethod
    def mover(self) -> int:
        """
        Get the player to act.

        Only meaningful while the state is not terminal.

        Returns:
            Player index in 1..num_players
        """

    @abstractmethod
    def utilities(self) -> np.ndarray:
        """
        Get the utility of a terminal state for every player.

        Returns:
            Float vector of length num_players + 1; index 0 is unused and
            index p holds player p's utility in [-1, +1]
        """

    def random_playout(self, rng: np.random.Generator) -> 'GameState':
        """
        Play uniformly random legal moves until the game ends.

        Games are assumed to be finite, so this always terminates.

        Args:
            rng: Random generator driving the move choices

        Returns:
            Terminal game state
        """
        state = self
        while not state.is_terminal():
            moves = state.legal_moves()
            state = state.apply(moves[int(rng.integers(len(moves)))])
        return state

    def clone(self) -> 'GameState':
        """
        Create an independent copy of this state.

        Returns:
            Copied game state
        """
        return copy.deepcopy(self)

    @property
    def result(self) -> GameResult:
        """Outcome of the game, derived from the utilities."""
        if not self.is_terminal():
            return GameResult.IN_PROGRESS
        if self.winner is None:
            return GameResult.DRAW
        return GameResult.WINNER

    @property
    def winner(self) -> Optional[int]:
        """Player with the unique best utility, or None (draw or ongoing)."""
        if not self.is_terminal():
            return None
        utils = self.utilities()[FIRST_PLAYER:]
        best = utils.max()
        leaders = np.flatnonzero(utils == best)
        if len(leaders) != 1:
            return None
        return int(leaders[0]) + FIRST_PLAYER


class Game(ABC):
    """
    Static description of a game.

    The search only needs the player count, the capability flags and a way
    to create the initial state.
    """
    name: str = "game"

    @property
    @abstractmethod
    def num_players(self) -> int:
        """Number of players in the game."""

    @property
    def is_stochastic(self) -> bool:
        """Whether the game contains chance events."""
        return False

    @property
    def is_alternating_move(self) -> bool:
        """Whether exactly one player acts in every non-terminal state."""
        return True

    @abstractmethod
    def initial_state(self) -> GameState:
        """
        Create the starting position.

        Returns:
            Initial game state
        """

    def __str__(self) -> str:
        return f"{self.name} ({self.num_players} players)"


def rank_to_utility(rank: float, num_players: int) -> float:
    """
    Convert a finishing rank into a utility.

    Rank 1 maps to +1 and rank num_players maps to -1, linearly in between;
    shared ranks may be fractional (the average of the tied positions).
    In a single-player game rank 1 is a win (+1) and anything else a loss.

    Args:
        rank: Finishing rank, 1 is best
        num_players: Number of players in the game

    Returns:
        Utility in [-1, +1]
    """
    if num_players == 1:
        return MAX_UTILITY if rank <= 1 else MIN_UTILITY
    return MAX_UTILITY - (rank - 1.0) * (2.0 / (num_players - 1))


def utilities_from_ranks(ranks: Sequence[float]) -> np.ndarray:
    """
    Build a utility vector from per-player ranks.

    Args:
        ranks: Finishing rank of players 1..n, in player order

    Returns:
        Utility vector of length n + 1 with index 0 unused
    """
    num_players = len(ranks)
    utils = np.full(num_players + 1, DRAW_UTILITY, dtype=np.float64)
    for player, rank in enumerate(ranks, start=FIRST_PLAYER):
        utils[player] = rank_to_utility(rank, num_players)
    return utils
