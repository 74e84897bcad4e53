"""
Itinerary generation through the reasoning collaborator.

The model is asked for {"days": [...]} JSON using camelCase keys; the
parser accepts either camelCase or snake_case and a bare list of days.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from tripflow.planning.prompts import build_itinerary_prompt
from tripflow.shared.collaborators import ChatModel
from tripflow.shared.contracts import ActivityPlan, DayPlan
from tripflow.shared.parsing import ParseError, parse_json_response
from tripflow.shared.schemas import PlanState


logger = logging.getLogger(__name__)

_ACTIVITY_KEYS = {
    "startTime": "start_time",
    "durationMinutes": "duration_minutes",
    "estimatedCost": "estimated_cost",
}


def _activity(raw: Dict[str, Any]) -> Optional[ActivityPlan]:
    """A single activity, or None when the entry is malformed."""
    data = {_ACTIVITY_KEYS.get(k, k): v for k, v in raw.items()}
    try:
        return ActivityPlan.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Skipping malformed activity {raw!r}: {e}")
        return None


def parse_itinerary(raw_response: str) -> List[DayPlan]:
    """
    Parse generated itinerary JSON into day plans.

    Malformed activities are dropped individually; the rest of their day
    is kept.

    Raises:
        ParseError: If the response has no usable "days" array
    """
    value = parse_json_response(raw_response)
    days = value.get("days") if isinstance(value, dict) else value
    if not isinstance(days, list) or not days:
        raise ParseError("Response has no 'days' array")

    plans = []
    for index, raw_day in enumerate(days, start=1):
        if not isinstance(raw_day, dict):
            raise ParseError(f"Day entry {index} is not an object")
        activities = [
            _activity(a) for a in raw_day.get("activities") or [] if isinstance(a, dict)
        ]
        try:
            plans.append(
                DayPlan(
                    day_number=raw_day.get("dayNumber") or raw_day.get("day_number") or index,
                    theme=raw_day.get("theme") or "",
                    activities=[a for a in activities if a is not None],
                )
            )
        except ValidationError as e:
            raise ParseError(f"Invalid day {index}: {e}") from e
    return plans


class ItineraryGenerator:
    """Produces day plans for a plan state via the reasoning collaborator."""

    def __init__(self, chat: ChatModel, max_attractions_in_prompt: int = 20):
        self.chat = chat
        self.max_attractions_in_prompt = max_attractions_in_prompt

    async def generate(self, state: PlanState) -> List[DayPlan]:
        """
        Returns:
            Parsed day plans, or [] when the response is empty or malformed
        """
        prompt = build_itinerary_prompt(state, self.max_attractions_in_prompt)
        response = await self.chat.chat(prompt)
        try:
            days = parse_itinerary(response)
        except ParseError as e:
            logger.warning(
                f"[session={state.session_id or 'unknown'}] Itinerary generation "
                f"returned unusable output: {e}"
            )
            return []
        logger.info(
            f"[session={state.session_id or 'unknown'}] Generated {len(days)} day(s), "
            f"{sum(len(d.activities) for d in days)} activities"
        )
        return days
