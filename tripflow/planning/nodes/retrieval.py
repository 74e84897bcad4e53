"""
Knowledge retrieval node.

Searches attractions and geocodes the destination concurrently; both
calls are joined before the update is returned.
"""

import logging
from typing import Any, Dict

from tripflow.planning.services import PlanningServices
from tripflow.shared.schemas import PlanState


logger = logging.getLogger(__name__)


async def retrieve_knowledge_node(state: PlanState, services: PlanningServices) -> Dict[str, Any]:
    session_id = state.session_id or "unknown"
    _log = f"[session={session_id}] [graph=planning] [node=retrieve_knowledge] "

    max_results = max(state.duration_days * services.config.attractions_per_day, 1)
    search, geocode = await services.registry.invoke_all(
        [
            ("search_attractions", {"query": state.location_context, "max_results": max_results}),
            ("geocode_location", {"location": state.location_context}),
        ]
    )

    execution = state.execution.advance(
        "rag_retrieval", 30, f"Found {len(search.data or [])} attractions"
    )
    if not search.success:
        logger.warning(f"{_log}Attraction search failed: {search.error}")
        execution = execution.with_error(f"retrieve_knowledge: {search.error}")

    geo_data = dict(state.geo_data)
    if geocode.data:
        geo_data[state.destination] = geocode.data[0]

    logger.info(f"{_log}attractions={len(search.data or [])}, destination_geocoded={geocode.success}")
    return {
        "attractions": search.data or [],
        "geo_data": geo_data,
        "execution": execution,
    }
