"""
Error hierarchy for UCT AI.

All custom exceptions inherit from UCTError so callers can catch everything
raised by the search with a single except clause.

Usage:
    from uct_ai.errors import EmptyTreeError

    try:
        move = agent.select_action(game, state)
    except EmptyTreeError:
        # The game is already over, there is nothing to play
        ...
"""
from typing import Any, Dict, Optional

__all__ = [
    "UCTError",
    "UnsupportedGameKind",
    "EmptyTreeError",
    "InvalidMoveError",
    "ConfigurationError",
]


class UCTError(Exception):
    """
    Base exception for all UCT AI errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "UCT_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class UnsupportedGameKind(UCTError):
    """
    The game cannot be searched by plain UCT.

    Raised by the capability check for stochastic games (chance events)
    and for games whose players do not move strictly in turn.
    """
    code: str = "UNSUPPORTED_GAME"


class EmptyTreeError(UCTError):
    """
    The root of the search tree has no children.

    Raised by the final move selection when the root state was already
    terminal, or when no iteration ran at all. A finished game has no
    move to recommend, so callers must handle "game over" upstream.
    """
    code: str = "EMPTY_TREE"


class InvalidMoveError(UCTError):
    """A move that cannot be applied to the current state."""
    code: str = "INVALID_MOVE"


class ConfigurationError(UCTError, ValueError):
    """Invalid configuration."""
    code: str = "CONFIGURATION_ERROR"
