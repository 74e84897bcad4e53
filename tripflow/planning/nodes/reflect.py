"""Reflection node: scores the itinerary and records the verdict."""

import logging
from typing import Any, Dict

from tripflow.planning.services import PlanningServices
from tripflow.shared.schemas import PlanState


logger = logging.getLogger(__name__)


async def reflect_node(state: PlanState, services: PlanningServices) -> Dict[str, Any]:
    session_id = state.session_id or "unknown"
    _log = f"[session={session_id}] [graph=planning] [node=reflect] "

    result = await services.validator.validate(state)
    count = state.reflection_count + 1

    revision_suggestions = [
        f"{issue.message}: {issue.suggestion}" if issue.suggestion else issue.message
        for issue in result.critical_issues()
    ]
    for issue in result.issues:
        logger.debug(f"{_log}{issue.format()}")
    logger.info(f"{_log}Reflection {count} | {result.summary()}")

    return {
        "issues": result.issues,
        "approved": result.approved,
        "reflection_count": count,
        "revision_suggestions": revision_suggestions,
        "metadata": state.with_metadata(validation_result=result.model_dump(mode="json")),
        "execution": state.execution.advance(
            "reflection",
            80,
            "Itinerary approved" if result.approved
            else f"{result.critical_count} critical issue(s) found",
        ),
    }
