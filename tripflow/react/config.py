"""Configuration for the ReAct agent loop."""

from dataclasses import dataclass
from typing import Optional

MAX_ITERATIONS_CEILING = 15


@dataclass
class ReActConfig:
    """
    Attributes:
        max_iterations: Hard cap on think/act/observe iterations (1-15)
        history_window: Number of recent steps shown in the reasoning prompt
        loop_threshold: Identical consecutive actions that count as a loop
        thought_truncate: Characters of each past thought kept in the prompt
        memory_window: Conversation messages shown in the reasoning prompt
    """

    max_iterations: int = 10
    history_window: int = 3
    loop_threshold: int = 3
    thought_truncate: int = 100
    memory_window: int = 6

    def __post_init__(self):
        if not 1 <= self.max_iterations <= MAX_ITERATIONS_CEILING:
            raise ValueError(
                f"max_iterations must be between 1 and {MAX_ITERATIONS_CEILING}, "
                f"got {self.max_iterations}"
            )
        if self.loop_threshold < 2:
            raise ValueError("loop_threshold must be at least 2")


DEFAULT_CONFIG = ReActConfig()


def get_config(
    max_iterations: Optional[int] = None,
    history_window: Optional[int] = None,
    loop_threshold: Optional[int] = None,
) -> ReActConfig:
    """Create a configuration with optional overrides."""
    return ReActConfig(
        max_iterations=max_iterations
        if max_iterations is not None
        else DEFAULT_CONFIG.max_iterations,
        history_window=history_window
        if history_window is not None
        else DEFAULT_CONFIG.history_window,
        loop_threshold=loop_threshold
        if loop_threshold is not None
        else DEFAULT_CONFIG.loop_threshold,
    )
