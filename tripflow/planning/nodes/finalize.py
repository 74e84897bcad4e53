"""
Finalize node.

Normalizes the itinerary (days renumbered 1..N, activities ordered by
start time, dates assigned from the start date) and hands the terminal
state to the repository when one is configured.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List

from tripflow.planning.services import PlanningServices
from tripflow.shared.contracts import DayPlan, IssueSeverity
from tripflow.shared.schemas import PlanState


logger = logging.getLogger(__name__)


def normalize_itinerary(state: PlanState) -> List[DayPlan]:
    ordered = sorted(state.itinerary, key=lambda day: day.day_number)
    days = []
    for number, day in enumerate(ordered, start=1):
        days.append(
            day.model_copy(
                update={
                    "day_number": number,
                    "date": state.start_date + timedelta(days=number - 1)
                    if state.start_date
                    else day.date,
                    "activities": day.ordered_activities(),
                }
            )
        )
    return days


async def finalize_node(state: PlanState, services: PlanningServices) -> Dict[str, Any]:
    session_id = state.session_id or "unknown"
    _log = f"[session={session_id}] [graph=planning] [node=finalize] "

    quality = {
        "approved": state.approved,
        "reflection_count": state.reflection_count,
        "reflection_cap_reached": not state.approved,
        "critical_issues": sum(1 for i in state.issues if i.severity == IssueSeverity.CRITICAL),
    }
    message = "Completed" if state.approved else "Completed without approval (best effort)"
    update: Dict[str, Any] = {
        "itinerary": normalize_itinerary(state),
        "metadata": state.with_metadata(quality=quality),
        "execution": state.execution.advance("completed", 100, message),
    }

    if services.repository is not None:
        final_state = state.merge(update)
        try:
            await services.repository.persist(final_state)
            logger.info(f"{_log}Plan persisted")
        except Exception as e:
            logger.exception(f"{_log}Persisting plan failed: {e}")
            update["execution"] = update["execution"].with_error(f"finalize: persist failed: {e}")

    logger.info(
        f"{_log}Pipeline complete | approved={state.approved}, "
        f"days={len(update['itinerary'])}, reflections={state.reflection_count} -> END"
    )
    return update
