"""
ReAct (reason/act/observe) planning agent.

A single-threaded controller that repeatedly asks the reasoning
collaborator for the next action, runs the matching capability, and
merges successful results into a fresh PlanState. The loop always stops:
on an explicit finish, once an itinerary exists, when the same action
repeats, or when the iteration cap is reached.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from tripflow.react.actions import (
    FINISH,
    GENERATE,
    GEOCODE,
    NEARBY,
    SEARCH,
    VALIDATE_BUDGET,
    parse_action,
    parse_thought,
)
from tripflow.react.config import ReActConfig, DEFAULT_CONFIG
from tripflow.react.prompts import build_reasoning_prompt
from tripflow.react.schemas import ReActStep
from tripflow.react.termination import TerminationReason, check_termination
from tripflow.shared.cache import SessionMemoryCache
from tripflow.shared.collaborators import ChatModel
from tripflow.shared.schemas import PlanState
from tripflow.tools.base import Outcome
from tripflow.tools.registry import CapabilityRegistry


logger = logging.getLogger(__name__)

ParamsResult = Tuple[Optional[Dict[str, Any]], Optional[str]]


# =============================================================================
# Action bindings: state -> capability params, outcome -> state update
# =============================================================================


def _search_params(state: PlanState) -> ParamsResult:
    if not state.destination:
        return None, "No destination to search"
    return {"query": state.location_context, "max_results": max(state.duration_days * 4, 1)}, None


def _budget_params(state: PlanState) -> ParamsResult:
    if not state.attractions:
        return None, "No attractions to validate. Search attractions first."
    return {"items": state.attractions, "budget": state.budget}, None


def _geocode_params(state: PlanState) -> ParamsResult:
    names = [a.location for day in state.itinerary for a in day.activities if a.location]
    if not names:
        names = [a.name for a in state.attractions]
    keys = [state.destination] + [n for n in dict.fromkeys(names) if n != state.destination]
    keys = [k for k in keys if k and k not in state.geo_data]
    if not keys:
        return None, "Nothing left to geocode"
    queries = [
        state.location_context if k == state.destination else f"{k}, {state.location_context}"
        for k in keys
    ]
    return {"locations": queries, "keys": keys}, None


def _nearby_params(state: PlanState) -> ParamsResult:
    origin = state.geo_data.get(state.destination)
    if origin is None or not origin.success:
        return None, "Destination not geocoded. Use geocode_location first."
    return {
        "latitude": origin.latitude,
        "longitude": origin.longitude,
        "category": "attraction",
    }, None


def _generate_params(state: PlanState) -> ParamsResult:
    return {"state": state}, None


def _merge_attractions(state, outcome, params):
    return {"attractions": outcome.data}


def _merge_budget(state, outcome, params):
    return {"budget_check": outcome.data}


def _merge_geo(state, outcome, params):
    geo = dict(state.geo_data)
    geo.update(zip(params["keys"], outcome.data))
    return {"geo_data": geo}


def _merge_nearby(state, outcome, params):
    return {"nearby_places": outcome.data}


def _merge_itinerary(state, outcome, params):
    return {"itinerary": outcome.data}


ACTIONS: Dict[str, Tuple[Callable[[PlanState], ParamsResult], Callable]] = {
    SEARCH: (_search_params, _merge_attractions),
    VALIDATE_BUDGET: (_budget_params, _merge_budget),
    GEOCODE: (_geocode_params, _merge_geo),
    NEARBY: (_nearby_params, _merge_nearby),
    GENERATE: (_generate_params, _merge_itinerary),
}


# =============================================================================
# Agent
# =============================================================================


class ReActAgent:
    """
    Args:
        chat: Reasoning collaborator
        registry: Capabilities the agent may call
        config: Loop bounds and prompt windows
        memory: Optional session memory cache for conversational context
    """

    def __init__(
        self,
        chat: ChatModel,
        registry: CapabilityRegistry,
        config: Optional[ReActConfig] = None,
        memory: Optional[SessionMemoryCache] = None,
    ):
        self.chat = chat
        self.registry = registry
        self.config = config or DEFAULT_CONFIG
        self.memory = memory

    def _menu(self) -> str:
        return "\n".join(
            f"- {c['name']}: {c['description']}"
            for c in self.registry.describe()
            if c["name"] in ACTIONS
        )

    async def _act(self, action: str, state: PlanState) -> Tuple[PlanState, Outcome]:
        """Run one action; a failed outcome leaves the state unchanged."""
        binding = ACTIONS.get(action)
        if binding is None:
            return state, Outcome.failure(action, f"Unknown action '{action}'")

        build_params, merge = binding
        params, error = build_params(state)
        if error:
            return state, Outcome.failure(action, error)

        outcome = await self.registry.invoke(action, params)
        if not outcome.success:
            return state, outcome

        try:
            return state.merge(merge(state, outcome, params)), outcome
        except ValidationError as e:
            logger.error(f"[action={action}] Result did not fit plan state: {e}")
            return state, Outcome.failure(action, "Result could not be merged into plan state")

    async def run(self, state: PlanState, session_id: Optional[str] = None) -> PlanState:
        """
        Drive the think/act/observe loop to termination.

        Returns:
            Final plan state with metadata["react_history"] holding every step
        """
        session_id = session_id or state.session_id or "unknown"
        _log = f"[session={session_id}] [agent=react] "
        cfg = self.config

        memory = self.memory.get_or_create(session_id) if self.memory else None
        if memory is not None:
            memory.add(
                "user",
                f"Plan a {state.duration_days}-day trip to {state.location_context} "
                f"with a budget of ${state.budget:.2f}"
                + (f" ({state.preferences})" if state.preferences else ""),
            )

        logger.info(
            f"{_log}Starting loop | destination={state.location_context}, "
            f"max_iterations={cfg.max_iterations}"
        )

        steps: List[ReActStep] = []
        actions: List[str] = []
        reason: Optional[TerminationReason] = None
        menu = self._menu()

        for iteration in range(1, cfg.max_iterations + 1):
            prompt = build_reasoning_prompt(
                state,
                steps,
                menu,
                window=cfg.history_window,
                truncate=cfg.thought_truncate,
                conversation=memory.recent(cfg.memory_window) if memory else None,
            )
            response = await self.chat.chat(prompt)
            thought = parse_thought(response)
            action = parse_action(response)

            if action == FINISH:
                observation, success = "Planning finished", True
            else:
                state, outcome = await self._act(action, state)
                observation, success = outcome.observation, outcome.success

            steps.append(
                ReActStep(
                    iteration=iteration,
                    thought=thought,
                    action=action,
                    observation=observation,
                    success=success,
                )
            )
            actions.append(action)
            logger.info(
                f"{_log}Iteration {iteration} | action={action}, success={success} "
                f"| {observation[:120]}"
            )

            reason = check_termination(
                last_action=action,
                has_itinerary=bool(state.itinerary),
                actions=actions,
                iteration=iteration,
                max_iterations=cfg.max_iterations,
                loop_threshold=cfg.loop_threshold,
            )
            if reason is not None:
                break

        if reason == TerminationReason.LOOP_DETECTED:
            logger.warning(f"{_log}Loop detected on action '{actions[-1]}', stopping")
        logger.info(f"{_log}Loop finished | steps={len(steps)}, reason={reason.value}")

        if memory is not None:
            memory.add(
                "assistant",
                f"Planned {len(state.itinerary)} day(s) after {len(steps)} step(s) "
                f"({reason.value})",
            )

        return state.merge(
            {
                "metadata": state.with_metadata(
                    react_history=[step.model_dump() for step in steps],
                    react_termination=reason.value,
                ),
                "execution": state.execution.advance(
                    "react_complete",
                    100,
                    f"Stopped after {len(steps)} step(s): {reason.value}",
                ),
            }
        )
