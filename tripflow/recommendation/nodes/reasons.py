"""Reason generation: one batched call explains each recommendation."""

import logging
from typing import Any, Dict, List

from tripflow.recommendation.prompts import build_reasons_prompt
from tripflow.recommendation.schemas import DestinationCandidate, RecommendationState
from tripflow.recommendation.services import RecommendationServices
from tripflow.shared.parsing import ParseError, parse_json_array


logger = logging.getLogger(__name__)

FALLBACK_REASON = "{name} is a strong match for your interests and travel style."


def parse_reasons(raw_response: str, count: int) -> Dict[int, str]:
    """
    Map 0-based candidate positions to reasons from [{"index", "reason"}].

    Raises:
        ParseError: If the response holds no JSON array
    """
    reasons: Dict[int, str] = {}
    for item in parse_json_array(raw_response, wrapper_key="reasons"):
        if not isinstance(item, dict):
            continue
        try:
            position = int(item.get("index")) - 1
        except (TypeError, ValueError):
            continue
        reason = str(item.get("reason") or "").strip()
        if 0 <= position < count and reason:
            reasons[position] = reason
    return reasons


async def generate_reasons_node(
    state: RecommendationState, services: RecommendationServices
) -> Dict[str, Any]:
    _log = f"[session={state.session_id or 'unknown'}] [graph=recommendation] [node=generate_reasons] "

    missing = [c for c in state.recommendations if not c.recommend_reason]
    reasons: Dict[int, str] = {}
    if missing:
        response = await services.chat.chat(build_reasons_prompt(state, missing))
        try:
            reasons = parse_reasons(response, len(missing))
        except ParseError as e:
            logger.warning(f"{_log}Could not parse reasons, using fallback text: {e}")

    updated: List[DestinationCandidate] = []
    position = 0
    for candidate in state.recommendations:
        if candidate.recommend_reason:
            updated.append(candidate)
            continue
        reason = reasons.get(position) or FALLBACK_REASON.format(name=candidate.name)
        updated.append(candidate.model_copy(update={"recommend_reason": reason}))
        position += 1

    logger.info(f"{_log}{len(reasons)}/{len(missing)} reasons generated -> END")
    return {
        "recommendations": updated,
        "completed": True,
        "execution": state.execution.advance("completed", 100, "Recommendations ready"),
    }
