"""
UCT (Upper Confidence bounds applied to Trees) search.

This module implements the search with the four standard phases:
1. Selection: descend from the root by UCB1 through fully expanded nodes
2. Expansion: create exactly one new child from a random unexpanded move
3. Simulation: finish the game with uniformly random moves
4. Backpropagation: add the per-player utilities to every node on the path

After the budget runs out the "robust child" (most visited root child) is
played. Ties, both in UCB1 and in the final choice, are broken uniformly at
random in a single pass.

Only deterministic, alternating-move games are supported.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar
import logging
import math
import threading
import time

import numpy as np

from uct_ai.core.game import Game, GameState, Move
from uct_ai.errors import EmptyTreeError
from uct_ai.mcts.node import SearchNode, SearchTree

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SearchStatus(Enum):
    """Lifecycle of the iteration controller."""
    RUNNING = auto()
    DONE = auto()


class StopReason(Enum):
    """Why the iteration loop ended."""
    ITERATION_LIMIT = auto()
    TIME_LIMIT = auto()
    INTERRUPTED = auto()
    TERMINAL_ROOT = auto()


@dataclass
class SearchResult:
    """Outcome of one decision: the move to play, the tree and statistics."""
    move: Move
    tree: SearchTree
    stats: Dict[str, Any] = field(default_factory=dict)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create a random generator for one search.

    Args:
        seed: Optional seed for reproducible searches

    Returns:
        numpy random generator
    """
    return np.random.default_rng(seed)


def _reservoir_argmax(
    items: Iterable[T],
    key: Callable[[T], float],
    rng: np.random.Generator
) -> Optional[T]:
    """
    Pick the item with the highest key, breaking exact ties at random.

    Each key is computed once. The k-th item tying the current best replaces
    it with probability 1/k, which selects uniformly among all tied items
    without collecting them.

    Args:
        items: Candidates
        key: Scoring function
        rng: Random generator for tie-breaking

    Returns:
        Selected item, or None if there are no items
    """
    best_item = None
    best_value = -math.inf
    num_best_found = 0

    for item in items:
        value = key(item)
        if value > best_value:
            best_value = value
            best_item = item
            num_best_found = 1
        elif value == best_value:
            num_best_found += 1
            if rng.integers(num_best_found) == 0:
                best_item = item

    return best_item


def ucb1_score(child: SearchNode, parent_visits: int, mover: int) -> float:
    """
    Calculate the UCB1 score of a child from the acting player's view.

    UCB1 = score_sums[mover] / n + sqrt(2 * ln(max(1, N)) / n)

    Args:
        child: Child node, must have been visited at least once
        parent_visits: Visit count N of the parent
        mover: Player to act at the parent

    Returns:
        UCB1 score

    Raises:
        ValueError: If the child has never been visited
    """
    if child.visit_count == 0:
        raise ValueError(f"Cannot score unvisited node {child.index}")

    exploit = child.score_sums[mover] / child.visit_count
    explore = math.sqrt(2.0 * math.log(max(1, parent_visits)) / child.visit_count)
    return float(exploit + explore)


def select_child(tree: SearchTree, node: SearchNode, rng: np.random.Generator) -> SearchNode:
    """
    Select the child of a fully expanded node with the best UCB1 score.

    Args:
        tree: Search tree
        node: Fully expanded, non-terminal node
        rng: Random generator for tie-breaking

    Returns:
        Selected child node
    """
    if not node.children:
        raise ValueError("Cannot select child from node with no children")

    mover = node.state.mover()
    parent_visits = node.visit_count
    return _reservoir_argmax(
        tree.children_of(node),
        lambda child: ucb1_score(child, parent_visits, mover),
        rng,
    )


def expand_node(tree: SearchTree, node: SearchNode, rng: np.random.Generator) -> SearchNode:
    """
    Expand a node by turning one random unexpanded move into a child.

    Args:
        tree: Search tree
        node: Node with at least one unexpanded move
        rng: Random generator picking the move

    Returns:
        The new child node
    """
    move = node.unexpanded_moves.pop(int(rng.integers(len(node.unexpanded_moves))))
    state = node.state.clone().apply(move)
    return tree.add_node(state, parent=node, move=move)


def select_node(tree: SearchTree, rng: np.random.Generator) -> SearchNode:
    """
    Find the node to simulate from, expanding at most one node.

    Starting at the root: stop at a terminal node; expand and stop at a node
    with unexpanded moves; otherwise descend by UCB1, stopping at an
    unvisited child.

    Args:
        tree: Search tree
        rng: Random generator

    Returns:
        Node selected for simulation
    """
    current = tree.root
    while True:
        if current.is_terminal():
            return current

        if not current.is_fully_expanded():
            return expand_node(tree, current, rng)

        current = select_child(tree, current, rng)
        if current.visit_count == 0:
            return current


def simulate_game(node: SearchNode, rng: np.random.Generator) -> GameState:
    """
    Play the game out from a node with uniformly random moves.

    Args:
        node: Node to simulate from
        rng: Random generator for the playout

    Returns:
        Terminal game state (the node's own state if already terminal)
    """
    if node.is_terminal():
        return node.state

    return node.state.clone().random_playout(rng)


def backpropagate(tree: SearchTree, node: SearchNode, terminal_state: GameState) -> np.ndarray:
    """
    Update statistics from a node up to the root.

    Args:
        tree: Search tree
        node: Node the simulation started from
        terminal_state: Terminal state reached by the simulation

    Returns:
        The utility vector that was added along the path
    """
    utilities = terminal_state.utilities()
    for current in tree.path_to_root(node):
        current.visit_count += 1
        current.score_sums += utilities
    return utilities


def final_move_selection(tree: SearchTree, rng: np.random.Generator) -> Move:
    """
    Select the move to play using the "robust child" rule.

    The move leading to the most visited child of the root is returned,
    with ties broken uniformly at random.

    Args:
        tree: Search tree
        rng: Random generator for tie-breaking

    Returns:
        Selected move

    Raises:
        EmptyTreeError: If the root has no children
    """
    root = tree.root
    if not root.children:
        raise EmptyTreeError(
            "Root has no children, there is no move to select",
            context={"terminal": root.is_terminal(), "visits": root.visit_count},
        )

    best_child = _reservoir_argmax(
        tree.children_of(root), lambda child: child.visit_count, rng
    )
    return best_child.move_from_parent


def uct_search(
    game: Game,
    state: GameState,
    max_seconds: float = -1.0,
    max_iterations: int = -1,
    rng: Optional[np.random.Generator] = None,
    interrupt: Optional[threading.Event] = None,
    clock: Callable[[], float] = time.time,
) -> SearchResult:
    """
    Run UCT search from a state and choose a move.

    The loop keeps going while the iteration cap is not reached, the
    deadline has not passed and the interrupt is not set, checked in that
    order before every iteration. An iteration in progress always completes.

    Args:
        game: Game being played
        state: Current game state (the root of a fresh tree)
        max_seconds: Time budget in seconds (<= 0 = no limit)
        max_iterations: Iteration budget (< 0 = no limit)
        rng: Random generator (a fresh unseeded one if None)
        interrupt: Cooperative cancellation flag, polled between iterations
        clock: Time source in seconds

    Returns:
        SearchResult with the selected move, the tree and statistics

    Raises:
        EmptyTreeError: If the root state is terminal or no iteration ran
    """
    if rng is None:
        rng = make_rng()

    tree = SearchTree(state.clone(), num_players=game.num_players)
    root = tree.root

    start_time = clock()
    deadline = start_time + max_seconds if max_seconds > 0 else math.inf
    max_its = max_iterations if max_iterations >= 0 else math.inf

    num_iterations = 0
    status = SearchStatus.RUNNING
    stop_reason = StopReason.TERMINAL_ROOT if root.is_terminal() else None
    if stop_reason is not None:
        status = SearchStatus.DONE

    # Main loop
    while status is SearchStatus.RUNNING:
        if num_iterations >= max_its:
            stop_reason = StopReason.ITERATION_LIMIT
        elif clock() >= deadline:
            stop_reason = StopReason.TIME_LIMIT
        elif interrupt is not None and interrupt.is_set():
            stop_reason = StopReason.INTERRUPTED

        if stop_reason is not None:
            status = SearchStatus.DONE
            continue

        # 1-2. Selection & Expansion
        node = select_node(tree, rng)

        # 3. Simulation
        terminal_state = simulate_game(node, rng)

        # 4. Backpropagation
        backpropagate(tree, node, terminal_state)

        num_iterations += 1

    time_elapsed = clock() - start_time
    stats = _collect_statistics(tree, num_iterations, time_elapsed, stop_reason)
    logger.debug(
        "UCT search finished: %d iterations in %.3fs (%s), %d nodes",
        num_iterations, time_elapsed, stop_reason.name, len(tree),
    )

    move = final_move_selection(tree, rng)
    return SearchResult(move=move, tree=tree, stats=stats)


def _collect_statistics(
    tree: SearchTree,
    num_iterations: int,
    time_elapsed: float,
    stop_reason: StopReason
) -> Dict[str, Any]:
    action_stats = get_action_statistics(tree)
    return {
        "iterations": num_iterations,
        "time_elapsed": time_elapsed,
        "iterations_per_second": num_iterations / max(0.001, time_elapsed),
        "node_count": count_nodes(tree),
        "max_depth": tree.max_depth,
        "stop_reason": stop_reason.name,
        "action_visits": {a: s["visits"] for a, s in action_stats.items()},
        "action_values": {a: s["value"] for a, s in action_stats.items()},
    }


def count_nodes(tree: SearchTree) -> int:
    """
    Count the total number of nodes in the tree.

    Args:
        tree: Search tree

    Returns:
        Total number of nodes
    """
    return len(tree)


def get_principal_variation(tree: SearchTree, max_depth: int = 10) -> List[Tuple[Move, float]]:
    """
    Get the principal variation (most visited path) from the root.

    Ties are resolved towards the earliest child so the result is stable.

    Args:
        tree: Search tree
        max_depth: Maximum number of moves to return

    Returns:
        List of (move, value) pairs, where value is the mean utility of the
        player who made the move
    """
    result = []
    current = tree.root

    while current.children and len(result) < max_depth:
        mover = current.state.mover()
        best_child = max(tree.children_of(current), key=lambda c: c.visit_count)
        result.append((best_child.move_from_parent, best_child.mean_score(mover)))
        current = best_child

    return result


def get_action_statistics(tree: SearchTree) -> Dict[str, Dict[str, float]]:
    """
    Get statistics for every move tried at the root.

    Args:
        tree: Search tree

    Returns:
        Dictionary mapping move strings to visits, summed and mean utility
        of the root player, and the current UCB1 score
    """
    root = tree.root
    result = {}
    if not root.children:
        return result

    mover = root.state.mover()
    for child in tree.children_of(root):
        result[str(child.move_from_parent)] = {
            "visits": child.visit_count,
            "reward": float(child.score_sums[mover]),
            "value": child.mean_score(mover),
            "ucb": (ucb1_score(child, root.visit_count, mover)
                    if child.visit_count > 0 else math.inf),
        }

    return result
