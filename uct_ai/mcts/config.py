"""
Configuration for UCT search.

This module defines the budget and reproducibility parameters of the search.
The exploration term of UCB1 is fixed (sqrt(2 ln N / n)) and is therefore not
configurable.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from uct_ai.core.constants import DEFAULT_MAX_SECONDS, UNBOUNDED
from uct_ai.errors import ConfigurationError


@dataclass
class UCTConfig:
    """
    Configuration parameters for UCT search.

    A budget is unbounded when `max_seconds <= 0` or `max_iterations < 0`;
    at least one of them must be bounded.
    """
    # Budget
    max_seconds: float = DEFAULT_MAX_SECONDS
    """Wall-clock budget per decision in seconds (<= 0 = no limit)"""

    max_iterations: int = UNBOUNDED
    """Iteration budget per decision (< 0 = no limit)"""

    # Reproducibility
    seed: Optional[int] = None
    """Seed for the agent's random streams (None = fresh entropy)"""

    # Analysis
    keep_tree: bool = False
    """Keep the last search tree on the agent for inspection"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if not self.time_bounded and not self.iteration_bounded:
            raise ConfigurationError(
                "at least one of max_seconds and max_iterations must be bounded",
                context={"max_seconds": self.max_seconds,
                         "max_iterations": self.max_iterations},
            )

        if self.seed is not None and self.seed < 0:
            raise ConfigurationError("seed must be non-negative or None")

    @property
    def time_bounded(self) -> bool:
        return self.max_seconds > 0

    @property
    def iteration_bounded(self) -> bool:
        return self.max_iterations >= 0

    @classmethod
    def default(cls) -> 'UCTConfig':
        """
        Get the default configuration.

        Returns:
            Default UCTConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'UCTConfig':
        """
        Get a configuration optimized for speed.

        Returns:
            Fast UCTConfig object
        """
        return cls(max_seconds=0.1, max_iterations=200)

    @classmethod
    def strong(cls) -> 'UCTConfig':
        """
        Get a configuration with a generous budget.

        Returns:
            Strong UCTConfig object
        """
        return cls(max_seconds=5.0, max_iterations=UNBOUNDED)

    @classmethod
    def iterations_only(cls, iterations: int, seed: Optional[int] = None) -> 'UCTConfig':
        """
        Get a configuration bounded only by an iteration count.

        Useful for reproducible runs, since the result does not depend on
        machine speed.

        Args:
            iterations: Number of iterations per decision
            seed: Optional random seed

        Returns:
            UCTConfig object
        """
        return cls(max_seconds=UNBOUNDED, max_iterations=iterations, seed=seed)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'UCTConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            UCTConfig object
        """
        # Filter out any keys that aren't valid parameters
        valid_names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in valid_names}
        return cls(**valid_params)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = ", ".join(f"{name}={value}" for name, value in self.to_dict().items())
        return f"UCTConfig({params})"
