"""
UCT search tree nodes.

This module defines the SearchNode class, which represents one position in
the search tree, and the SearchTree arena that owns every node of a single
decision. Nodes refer to their parent and children by arena index, so the
whole tree is released at once when the arena goes away.
"""
from __future__ import annotations
from typing import Iterator, List, Optional

import numpy as np

from uct_ai.core.game import GameState, Move


class SearchNode:
    """
    A node in the UCT search tree.

    Each node owns a snapshot of the game state and tracks statistics about
    the iterations that passed through it: a visit count and, for every
    player, the sum of that player's utilities.
    """

    def __init__(
        self,
        index: int,
        state: GameState,
        num_players: int,
        parent: Optional[int] = None,
        move_from_parent: Optional[Move] = None,
        depth: int = 0,
    ):
        """
        Initialize a search node.

        Args:
            index: Position of this node in the tree arena
            state: The game state this node represents (owned by the node)
            num_players: Number of players in the game
            parent: Arena index of the parent node (None for root)
            move_from_parent: The move that led to this state (None for root)
            depth: Distance from the root
        """
        self.index = index
        self.parent = parent
        self.move_from_parent = move_from_parent
        self.state = state
        self.depth = depth

        # Node statistics, index 0 of score_sums is unused
        self.visit_count = 0
        self.score_sums = np.zeros(num_players + 1, dtype=np.float64)

        # Arena indices of child nodes, in creation order
        self.children: List[int] = []

        # Every legal move starts out unexpanded
        self.unexpanded_moves: List[Move] = list(state.legal_moves())
        self.num_legal_moves = len(self.unexpanded_moves)

    def is_terminal(self) -> bool:
        """Check if this node represents a terminal game state."""
        return self.state.is_terminal()

    def is_fully_expanded(self) -> bool:
        """Check if every legal move already has a child node."""
        return not self.unexpanded_moves

    def is_expanded(self) -> bool:
        """Check if this node has been visited and may be compared by UCB1."""
        return self.visit_count >= 1

    def mean_score(self, player: int) -> float:
        """
        Average utility of `player` over the iterations through this node.

        Args:
            player: Player index

        Returns:
            Mean utility, or 0.0 for an unvisited node
        """
        if self.visit_count == 0:
            return 0.0
        return float(self.score_sums[player] / self.visit_count)

    def __str__(self) -> str:
        return (f"SearchNode(index={self.index}, "
                f"move={self.move_from_parent}, "
                f"visits={self.visit_count}, "
                f"children={len(self.children)}, "
                f"unexpanded={len(self.unexpanded_moves)})")


class SearchTree:
    """
    Arena owning all nodes of one search.

    The root is always at index 0. Nodes are only ever appended, so an index
    stays valid for the lifetime of the tree.
    """

    def __init__(self, root_state: GameState, num_players: Optional[int] = None):
        """
        Create a tree containing only the root.

        Args:
            root_state: State to search from
            num_players: Number of players (defaults to the state's count)
        """
        self.num_players = num_players if num_players is not None else root_state.num_players
        self.nodes: List[SearchNode] = []
        self.add_node(root_state)

    @property
    def root(self) -> SearchNode:
        return self.nodes[0]

    def add_node(
        self,
        state: GameState,
        parent: Optional[SearchNode] = None,
        move: Optional[Move] = None
    ) -> SearchNode:
        """
        Create a node and register it with its parent.

        This is the only place nodes are created.

        Args:
            state: Game state of the new node
            parent: Parent node (None for the root)
            move: Move leading from the parent to `state`

        Returns:
            The new node
        """
        node = SearchNode(
            index=len(self.nodes),
            state=state,
            num_players=self.num_players,
            parent=parent.index if parent is not None else None,
            move_from_parent=move,
            depth=parent.depth + 1 if parent is not None else 0,
        )
        self.nodes.append(node)
        if parent is not None:
            parent.children.append(node.index)
        return node

    def parent_of(self, node: SearchNode) -> Optional[SearchNode]:
        if node.parent is None:
            return None
        return self.nodes[node.parent]

    def children_of(self, node: SearchNode) -> List[SearchNode]:
        return [self.nodes[i] for i in node.children]

    def path_to_root(self, node: SearchNode) -> Iterator[SearchNode]:
        """
        Walk from `node` up to the root, both included.

        Args:
            node: Starting node

        Yields:
            Nodes from `node` to the root
        """
        current: Optional[SearchNode] = node
        while current is not None:
            yield current
            current = self.parent_of(current)

    @property
    def max_depth(self) -> int:
        """Depth of the deepest node."""
        return max(node.depth for node in self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[SearchNode]:
        return iter(self.nodes)
