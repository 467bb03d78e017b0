"""
Constants for the UCT AI games and search.

This module defines the constants shared by the bundled games and by the
search defaults, including player indexing, utility bounds and board layouts.
"""
from typing import Final, List, Tuple


# Players are numbered 1..num_players; index 0 of every utility vector is unused
FIRST_PLAYER: Final[int] = 1

# Per-playout utilities always lie in this range
MIN_UTILITY: Final[float] = -1.0
MAX_UTILITY: Final[float] = 1.0
DRAW_UTILITY: Final[float] = 0.0

# Upper player limit for the bundled games
MAX_PLAYERS: Final[int] = 8

# Tic-tac-toe
TIC_TAC_TOE_SIZE: Final[int] = 3
TIC_TAC_TOE_CELLS: Final[int] = TIC_TAC_TOE_SIZE * TIC_TAC_TOE_SIZE
EMPTY_CELL: Final[int] = 0
CELL_SYMBOLS: Final[Tuple[str, ...]] = (".", "X", "O")

# Every winning line as a triple of cell indices
TIC_TAC_TOE_LINES: Final[List[Tuple[int, int, int]]] = [
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
]

# Nim
DEFAULT_NIM_HEAPS: Final[Tuple[int, ...]] = (3, 4, 5)

# Search defaults
DEFAULT_MAX_SECONDS: Final[float] = 1.0
UNBOUNDED: Final[int] = -1
