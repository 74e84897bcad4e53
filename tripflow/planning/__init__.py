"""
Planning pipeline: plan, retrieve, budget, generate, reflect, finalize.

plan_trip() is the entry point: it validates the caller's request,
builds the initial PlanState and runs the compiled workflow.
"""

from typing import Any, Dict, Optional, Union

from tripflow.planning.generation import ItineraryGenerator
from tripflow.planning.graph.build import create_planning_graph
from tripflow.planning.graph.config import PlanningGraphConfig
from tripflow.planning.services import PlanningServices
from tripflow.shared.schemas import PlanRequest, PlanState


async def plan_trip(
    request: Union[PlanRequest, Dict[str, Any]],
    services: PlanningServices,
    config: Optional[PlanningGraphConfig] = None,
) -> PlanState:
    """
    Run the planning pipeline for a request.

    Raises:
        pydantic.ValidationError: If required parameters are missing or invalid
    """
    if not isinstance(request, PlanRequest):
        request = PlanRequest.model_validate(request)
    app = create_planning_graph(services, config)
    return await app.run(PlanState.from_request(request))


__all__ = [
    "ItineraryGenerator",
    "PlanningGraphConfig",
    "PlanningServices",
    "create_planning_graph",
    "plan_trip",
]
