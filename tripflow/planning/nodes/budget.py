"""Budget validation node over the retrieved attractions."""

import logging
from typing import Any, Dict

from tripflow.planning.services import PlanningServices
from tripflow.shared.schemas import PlanState


logger = logging.getLogger(__name__)


async def validate_budget_node(state: PlanState, services: PlanningServices) -> Dict[str, Any]:
    outcome = await services.registry.invoke(
        "validate_budget", {"items": state.attractions, "budget": state.budget}
    )
    update: Dict[str, Any] = {
        "execution": state.execution.advance("budget_validation", 40, outcome.observation),
    }
    if outcome.success:
        update["budget_check"] = outcome.data
    else:
        logger.info(
            f"[session={state.session_id or 'unknown'}] [graph=planning] "
            f"[node=validate_budget] Skipped: {outcome.error}"
        )
    return update
