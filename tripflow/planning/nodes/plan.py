"""Plan node: lays out the pipeline steps for the session."""

import logging
from typing import Any, Dict

from tripflow.planning.services import PlanningServices
from tripflow.shared.schemas import PlanState


logger = logging.getLogger(__name__)


async def plan_node(state: PlanState, services: PlanningServices) -> Dict[str, Any]:
    steps = [
        f"Search attractions in {state.location_context}",
        f"Validate attraction costs against the ${state.budget:.2f} budget",
        f"Generate a {state.duration_days}-day itinerary",
        "Geocode activity locations",
        "Review the itinerary for quality issues",
        "Finalize and save the plan",
    ]
    return {
        "plan_steps": steps,
        "execution": state.execution.advance("planning", 10, "Planning trip"),
    }
