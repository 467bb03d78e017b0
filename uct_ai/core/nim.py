"""
Multi-player Nim.

Players take turns removing one or more objects from a single heap. In the
normal variant the player who takes the last object wins; in the misere
variant that player loses. With more than two players the winner takes
rank 1 and everyone else shares the remaining ranks.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from uct_ai.core.constants import DEFAULT_NIM_HEAPS, FIRST_PLAYER, MAX_PLAYERS
from uct_ai.core.game import Game, GameState, utilities_from_ranks
from uct_ai.errors import InvalidMoveError


class NimMove(NamedTuple):
    """Remove `count` objects from heap number `heap`."""
    heap: int
    count: int

    def __str__(self) -> str:
        return f"take {self.count} from heap {self.heap}"


@dataclass(frozen=True)
class NimState(GameState):
    """
    Immutable Nim position.

    Attributes:
        heaps: Objects left in each heap
        players: Number of players
        to_move: Player whose turn it is
        last_mover: Player who made the previous move (None at the start)
        misere: Whether taking the last object loses
    """
    heaps: Tuple[int, ...] = DEFAULT_NIM_HEAPS
    players: int = 2
    to_move: int = FIRST_PLAYER
    last_mover: Optional[int] = None
    misere: bool = False

    @property
    def num_players(self) -> int:
        return self.players

    def is_terminal(self) -> bool:
        return not any(self.heaps)

    def legal_moves(self) -> List[NimMove]:
        return [
            NimMove(heap, count)
            for heap, size in enumerate(self.heaps)
            for count in range(1, size + 1)
        ]

    def apply(self, move: NimMove) -> 'NimState':
        heap, count = move
        if not 0 <= heap < len(self.heaps) or not 1 <= count <= self.heaps[heap]:
            raise InvalidMoveError("Cannot take from heap", context={"move": move})

        heaps = list(self.heaps)
        heaps[heap] -= count
        return replace(
            self,
            heaps=tuple(heaps),
            to_move=self.to_move % self.players + 1,
            last_mover=self.to_move,
        )

    def mover(self) -> int:
        return self.to_move

    def utilities(self) -> np.ndarray:
        if self.last_mover is None:
            # Started with empty heaps: nobody did anything
            return utilities_from_ranks([1.0] * self.players)

        if self.misere:
            # Whoever emptied the board loses, the others share first place
            winners = [p for p in range(1, self.players + 1) if p != self.last_mover]
        else:
            winners = [self.last_mover]

        losers = self.players - len(winners)
        win_rank = (1 + len(winners)) / 2.0
        lose_rank = len(winners) + (1 + losers) / 2.0
        ranks = [
            win_rank if p in winners else lose_rank
            for p in range(1, self.players + 1)
        ]
        return utilities_from_ranks(ranks)

    def clone(self) -> 'NimState':
        return replace(self)

    def __str__(self) -> str:
        heaps = " ".join(f"[{i}]:{'|' * size or '-'}" for i, size in enumerate(self.heaps))
        return f"{heaps}  (player {self.to_move} to move)"


class Nim(Game):
    """Nim for two or more players."""

    def __init__(
        self,
        heaps: Sequence[int] = DEFAULT_NIM_HEAPS,
        num_players: int = 2,
        misere: bool = False
    ):
        """
        Initialize a Nim game.

        Args:
            heaps: Starting size of each heap
            num_players: Number of players (2-8)
            misere: Whether taking the last object loses
        """
        if not 2 <= num_players <= MAX_PLAYERS:
            raise ValueError(f"Number of players must be between 2 and {MAX_PLAYERS}")
        if any(size < 0 for size in heaps):
            raise ValueError("Heap sizes must be non-negative")

        self.heaps = tuple(heaps)
        self.players = num_players
        self.misere = misere
        self.name = "Misere Nim" if misere else "Nim"

    @property
    def num_players(self) -> int:
        return self.players

    def initial_state(self) -> NimState:
        return NimState(heaps=self.heaps, players=self.players, misere=self.misere)
