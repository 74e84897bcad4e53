"""
Routing logic for the planning workflow.

Decides whether a reflected itinerary is finalized or regenerated.
"""

import logging
from typing import Literal

from tripflow.shared.schemas import PlanState


logger = logging.getLogger(__name__)


def route_after_reflection(
    state: PlanState, max_reflections: int = 3
) -> Literal["finalize", "regenerate"]:
    """
    Args:
        state: State after the reflect node
        max_reflections: Reflection passes allowed before giving up on approval

    Returns:
        "finalize" when approved or the cap is reached, "regenerate" otherwise
    """
    if state.approved:
        return "finalize"
    if state.reflection_count >= max_reflections:
        logger.warning(
            f"[session={state.session_id or 'unknown'}] [graph=planning] "
            f"Reflection cap ({max_reflections}) reached without approval, finalizing"
        )
        return "finalize"
    return "regenerate"
