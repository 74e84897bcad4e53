"""
Termination rules for the ReAct loop.

Checked after every iteration, in this order: terminal action, itinerary
already produced, repeated action loop, iteration budget.
"""

from enum import Enum
from typing import Optional, Sequence

from tripflow.react.actions import FINISH


class TerminationReason(str, Enum):
    TERMINAL_ACTION = "terminal_action"
    ITINERARY_READY = "itinerary_ready"
    LOOP_DETECTED = "loop_detected"
    MAX_ITERATIONS = "max_iterations"


def detect_loop(actions: Sequence[str], threshold: int = 3) -> bool:
    """True iff the last `threshold` actions exist and are all identical."""
    if len(actions) < threshold:
        return False
    return len(set(actions[-threshold:])) == 1


def check_termination(
    last_action: str,
    has_itinerary: bool,
    actions: Sequence[str],
    iteration: int,
    max_iterations: int,
    loop_threshold: int = 3,
) -> Optional[TerminationReason]:
    """
    Args:
        last_action: Action taken in the iteration just completed
        has_itinerary: Whether the state now holds a non-empty itinerary
        actions: Every action recorded so far, oldest first
        iteration: 1-based number of the iteration just completed
        max_iterations: Iteration cap

    Returns:
        The first matching reason to stop, or None to keep going
    """
    if last_action == FINISH:
        return TerminationReason.TERMINAL_ACTION
    if has_itinerary:
        return TerminationReason.ITINERARY_READY
    if detect_loop(actions, loop_threshold):
        return TerminationReason.LOOP_DETECTED
    if iteration >= max_iterations:
        return TerminationReason.MAX_ITERATIONS
    return None
