"""
Plan validator.

Runs the rule-based checkers and an optional holistic critique from the
reasoning collaborator, then aggregates everything into a
ReflectionResult. approved is True iff no critical issue was found.
"""

import logging
import re
from typing import List, Optional

from tripflow.reflection.checkers import CHECKERS
from tripflow.shared.collaborators import ChatModel
from tripflow.shared.contracts import (
    IssueCategory,
    IssueSeverity,
    ReflectionResult,
    ValidationIssue,
)
from tripflow.shared.schemas import PlanState


logger = logging.getLogger(__name__)

_PASS_PATTERN = re.compile(r"\bpass\b", re.IGNORECASE)

HOLISTIC_PROMPT = """You are reviewing a {days}-day travel itinerary for {destination}.

{itinerary}

Check for logical flow, realistic pacing, good variety, and anything a
traveller would find impractical.
If the itinerary is good, respond with PASS.
Otherwise list the problems briefly."""


def render_itinerary(state: PlanState) -> str:
    lines = []
    for day in state.itinerary:
        lines.append(f"Day {day.day_number}: {day.theme}")
        for activity in day.activities:
            lines.append(
                f"  - {activity.start_time or '??:??'} {activity.name} "
                f"({activity.type.value}, {activity.duration_minutes or '?'} min, "
                f"${activity.estimated_cost:.2f}) @ {activity.location or 'unknown'}"
            )
    return "\n".join(lines)


class PlanValidator:
    """
    Scores an itinerary across structure, budget, timing, geography,
    diversity and (when a chat collaborator is given) overall quality.
    """

    def __init__(self, chat: Optional[ChatModel] = None):
        self.chat = chat

    async def holistic_review(self, state: PlanState) -> List[ValidationIssue]:
        if self.chat is None or not state.itinerary:
            return []

        prompt = HOLISTIC_PROMPT.format(
            days=len(state.itinerary),
            destination=state.destination,
            itinerary=render_itinerary(state),
        )
        response = (await self.chat.chat(prompt)).strip()
        if not response:
            logger.info("Holistic review unavailable, skipping")
            return []
        if _PASS_PATTERN.search(response):
            return []
        return [
            ValidationIssue(
                category=IssueCategory.QUALITY,
                severity=IssueSeverity.WARNING,
                message="LLM validation found issues",
                suggestion=response,
            )
        ]

    async def validate(self, state: PlanState) -> ReflectionResult:
        session_id = state.session_id or "unknown"
        _log = f"[session={session_id}] [validator] "

        issues: List[ValidationIssue] = []
        for checker in CHECKERS:
            found = checker(state)
            if found:
                logger.debug(f"{_log}{checker.__name__}: {len(found)} issue(s)")
            issues.extend(found)
        issues.extend(await self.holistic_review(state))

        result = ReflectionResult.from_issues(issues)
        logger.info(f"{_log}Validation complete | {result.summary()}")
        return result
