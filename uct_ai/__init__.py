"""
UCT AI - Monte Carlo Tree Search with UCB1 for deterministic board games.

This package provides a UCT search engine that chooses moves in deterministic,
alternating-move games with two or more players, a small game abstraction for
plugging games in, and a few bundled games to play with.
"""

__version__ = "0.1.0"
__author__ = "UCT AI Team"

# Make key components available at package level
from uct_ai.core.game import Game, GameState, GameResult
from uct_ai.mcts.agent import UCTAgent, supports_game
from uct_ai.mcts.config import UCTConfig
from uct_ai.mcts.search import uct_search
from uct_ai.errors import UCTError, UnsupportedGameKind, EmptyTreeError

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
