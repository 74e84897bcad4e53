"""Itinerary generation exposed as a capability for the ReAct loop."""

import logging
from typing import Any, Dict

from tripflow.tools.base import Capability, CapabilityCategory, Outcome


logger = logging.getLogger(__name__)


class ItineraryGenerationCapability(Capability):
    """
    Wraps an itinerary generator (anything with async generate(state)
    returning a list of DayPlan). Expects params {"state": PlanState}.
    """

    name = "generate_itinerary"
    description = (
        "Generate the day-by-day itinerary from the gathered attractions and "
        "budget. Use once enough information has been collected."
    )
    category = CapabilityCategory.GENERATION
    parallelizable = False

    def __init__(self, generator):
        self.generator = generator

    async def _run(self, params: Dict[str, Any]) -> Outcome:
        state = params.get("state")
        if state is None:
            return Outcome.failure(self.name, "No plan state provided", data=[])

        days = await self.generator.generate(state)
        if not days:
            return Outcome.failure(self.name, "Generation produced no days", data=[])

        activity_count = sum(len(day.activities) for day in days)
        return Outcome.ok(
            self.name,
            days,
            f"Generated {len(days)}-day itinerary with {activity_count} activities",
        )
