"""
UCT AI Core Package

This package contains the game abstraction consumed by the search, including:
- The GameState / Game interface
- Rank-based utility helpers
- Bundled deterministic games (tic-tac-toe, Nim)
- Constants and enums

All core components can be imported directly from this package.
"""

# Game abstraction
from uct_ai.core.game import (
    Game, GameState, GameResult, Move,
    rank_to_utility, utilities_from_ranks
)

# Games
from uct_ai.core.tic_tac_toe import TicTacToe, TicTacToeState
from uct_ai.core.nim import Nim, NimMove, NimState

# Constants
from uct_ai.core.constants import (
    FIRST_PLAYER, MIN_UTILITY, MAX_UTILITY, DRAW_UTILITY
)

__all__ = [
    # Game
    'Game', 'GameState', 'GameResult', 'Move',
    'rank_to_utility', 'utilities_from_ranks',

    # Games
    'TicTacToe', 'TicTacToeState',
    'Nim', 'NimMove', 'NimState',

    # Constants
    'FIRST_PLAYER', 'MIN_UTILITY', 'MAX_UTILITY', 'DRAW_UTILITY'
]
