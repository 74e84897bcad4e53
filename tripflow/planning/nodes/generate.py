"""
Itinerary generation node.

Generates day plans, then geocodes the new activity locations (one
concurrent batch, joined) and re-checks the budget against the
activities' estimated costs so reflection sees the plan as generated.
"""

import logging
from typing import Any, Dict

from tripflow.planning.services import PlanningServices
from tripflow.shared.contracts import all_activities
from tripflow.shared.schemas import PlanState


logger = logging.getLogger(__name__)


async def generate_itinerary_node(state: PlanState, services: PlanningServices) -> Dict[str, Any]:
    session_id = state.session_id or "unknown"
    _log = f"[session={session_id}] [graph=planning] [node=generate_itinerary] "

    attempt = state.reflection_count + 1
    logger.info(
        f"{_log}Entering node | attempt={attempt}, attractions={len(state.attractions)}, "
        f"revisions={len(state.revision_suggestions)}"
    )

    days = await services.generator.generate(state)
    if not days:
        message = "Itinerary generation returned no usable days"
        if state.itinerary:
            message += "; keeping previous draft"
        logger.warning(f"{_log}{message}")
        return {
            "execution": state.execution.advance(
                "itinerary_generation", 65, message
            ).with_error(f"generate_itinerary: {message}"),
        }

    update: Dict[str, Any] = {"itinerary": days}
    activities = all_activities(days)

    if services.config.enable_route_geocoding:
        keys = [
            loc for loc in dict.fromkeys(a.location for a in activities if a.location)
            if loc not in state.geo_data
        ]
        if keys:
            outcome = await services.registry.invoke(
                "geocode_location",
                {"locations": [f"{k}, {state.location_context}" for k in keys]},
            )
            if outcome.success:
                geo_data = dict(state.geo_data)
                geo_data.update(zip(keys, outcome.data))
                update["geo_data"] = geo_data
                logger.info(f"{_log}{outcome.observation}")

    budget = await services.registry.invoke(
        "validate_budget", {"items": activities, "budget": state.budget}
    )
    # No activities to price: drop the attraction-based check so reflection
    # does not score the previous draft's costs
    update["budget_check"] = budget.data if budget.success else None

    update["execution"] = state.execution.advance(
        "itinerary_generation",
        65,
        f"Generated {len(days)}-day itinerary with {len(activities)} activities",
    )
    return update
