"""
UCT (Monte Carlo Tree Search with UCB1) implementation.

This package provides a UCT agent that can play any deterministic,
alternating-move game implementing the uct_ai.core interface, without any
training. Every iteration of the search works by:

1. Selection: Starting from the root node, descend through fully expanded
   nodes by UCB1 until reaching a terminal node or one with untried moves.
2. Expansion: Create one new child node from a randomly chosen untried move.
3. Simulation: From the new node, play uniformly random moves to the end.
4. Backpropagation: Add every player's utility to all nodes on the path.

The move finally played is the most visited child of the root.
"""

from uct_ai.mcts.node import SearchNode, SearchTree
from uct_ai.mcts.agent import (
    UCTAgent,
    UCTAgentFactory,
    supports_game,
    check_game_supported
)
from uct_ai.mcts.search import (
    uct_search,
    select_node,
    select_child,
    expand_node,
    simulate_game,
    backpropagate,
    final_move_selection,
    ucb1_score,
    make_rng,
    SearchResult,
    SearchStatus,
    StopReason
)
from uct_ai.mcts.config import UCTConfig

# Default configuration
DEFAULT_CONFIG = UCTConfig()

__all__ = [
    'UCTAgent',
    'UCTAgentFactory',
    'SearchNode',
    'SearchTree',
    'UCTConfig',
    'supports_game',
    'check_game_supported',
    'uct_search',
    'select_node',
    'select_child',
    'expand_node',
    'simulate_game',
    'backpropagate',
    'final_move_selection',
    'ucb1_score',
    'make_rng',
    'SearchResult',
    'SearchStatus',
    'StopReason',
    'DEFAULT_CONFIG'
]
