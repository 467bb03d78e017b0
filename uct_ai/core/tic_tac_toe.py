"""
Tic-tac-toe on a 3x3 board.

Player 1 plays X and moves first, player 2 plays O. A move is the index
(0-8, row-major) of an empty cell. The winner scores +1 and the loser -1;
a full board without a line is a draw worth 0 to both.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

import numpy as np

from uct_ai.core.constants import (
    CELL_SYMBOLS, DRAW_UTILITY, EMPTY_CELL, FIRST_PLAYER, MAX_UTILITY,
    MIN_UTILITY, TIC_TAC_TOE_CELLS, TIC_TAC_TOE_LINES, TIC_TAC_TOE_SIZE
)
from uct_ai.core.game import Game, GameState
from uct_ai.errors import InvalidMoveError


@dataclass(frozen=True)
class TicTacToeState(GameState):
    """
    Immutable tic-tac-toe position.

    Attributes:
        board: Cell owners in row-major order (0 = empty, 1 = X, 2 = O)
        to_move: Player whose turn it is
    """
    board: Tuple[int, ...] = field(default=(EMPTY_CELL,) * TIC_TAC_TOE_CELLS)
    to_move: int = FIRST_PLAYER

    def __post_init__(self):
        if len(self.board) != TIC_TAC_TOE_CELLS:
            raise ValueError(f"board must have {TIC_TAC_TOE_CELLS} cells")

    @property
    def num_players(self) -> int:
        return 2

    @property
    def line_owner(self) -> Optional[int]:
        """Player owning a complete line, if any."""
        for a, b, c in TIC_TAC_TOE_LINES:
            owner = self.board[a]
            if owner != EMPTY_CELL and owner == self.board[b] == self.board[c]:
                return owner
        return None

    def is_terminal(self) -> bool:
        return self.line_owner is not None or EMPTY_CELL not in self.board

    def legal_moves(self) -> List[int]:
        if self.is_terminal():
            return []
        return [i for i, cell in enumerate(self.board) if cell == EMPTY_CELL]

    def apply(self, move: int) -> 'TicTacToeState':
        if self.is_terminal():
            raise InvalidMoveError("Game is already over", context={"move": move})
        if not 0 <= move < TIC_TAC_TOE_CELLS or self.board[move] != EMPTY_CELL:
            raise InvalidMoveError("Cell is not available", context={"move": move})

        board = list(self.board)
        board[move] = self.to_move
        return TicTacToeState(board=tuple(board), to_move=3 - self.to_move)

    def mover(self) -> int:
        return self.to_move

    def utilities(self) -> np.ndarray:
        utils = np.full(3, DRAW_UTILITY, dtype=np.float64)
        owner = self.line_owner
        if owner is not None:
            utils[owner] = MAX_UTILITY
            utils[3 - owner] = MIN_UTILITY
        return utils

    def clone(self) -> 'TicTacToeState':
        return replace(self)

    def __str__(self) -> str:
        rows = []
        for r in range(TIC_TAC_TOE_SIZE):
            cells = self.board[r * TIC_TAC_TOE_SIZE:(r + 1) * TIC_TAC_TOE_SIZE]
            rows.append(" ".join(CELL_SYMBOLS[c] for c in cells))
        return "\n".join(rows)


class TicTacToe(Game):
    """Two-player tic-tac-toe."""
    name = "Tic-tac-toe"

    @property
    def num_players(self) -> int:
        return 2

    def initial_state(self) -> TicTacToeState:
        return TicTacToeState()

    @staticmethod
    def from_string(layout: str, to_move: Optional[int] = None) -> TicTacToeState:
        """
        Build a position from a compact layout string.

        Args:
            layout: Nine characters from ".XO" (whitespace ignored)
            to_move: Player to act; inferred from the piece counts if omitted

        Returns:
            Tic-tac-toe state
        """
        cells = [c for c in layout if not c.isspace()]
        board = tuple(CELL_SYMBOLS.index(c.upper()) for c in cells)
        if to_move is None:
            to_move = FIRST_PLAYER if board.count(1) == board.count(2) else 2
        return TicTacToeState(board=board, to_move=to_move)
