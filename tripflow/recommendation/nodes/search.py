"""Candidate search: asks the reasoning collaborator for destination candidates."""

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from tripflow.recommendation.prompts import build_candidates_prompt
from tripflow.recommendation.schemas import DestinationCandidate, RecommendationState
from tripflow.recommendation.services import RecommendationServices
from tripflow.shared.parsing import ParseError, parse_json_array


logger = logging.getLogger(__name__)

_CANDIDATE_KEYS = {"budgetLevel": "budget_level", "matchScore": "match_score"}


def parse_candidates(raw_response: str, exclude_names: List[str] = None) -> List[DestinationCandidate]:
    """
    Parse a JSON array of candidates, skipping malformed and excluded entries.

    Raises:
        ParseError: If the response holds no JSON array
    """
    excluded = {name.strip().lower() for name in exclude_names or []}
    candidates = []
    for raw in parse_json_array(raw_response, wrapper_key="candidates"):
        if not isinstance(raw, dict):
            continue
        data = {_CANDIDATE_KEYS.get(k, k): v for k, v in raw.items()}
        try:
            candidate = DestinationCandidate.model_validate(data)
        except ValidationError as e:
            logger.debug(f"Skipping malformed candidate {raw!r}: {e}")
            continue
        if candidate.name.strip().lower() in excluded:
            continue
        candidates.append(candidate)
    return candidates


async def search_candidates_node(
    state: RecommendationState, services: RecommendationServices
) -> Dict[str, Any]:
    _log = f"[session={state.session_id or 'unknown'}] [graph=recommendation] [node=search_candidates] "

    prompt = build_candidates_prompt(state, services.config.candidate_count)
    response = await services.chat.chat(prompt)
    execution = state.execution

    try:
        candidates = parse_candidates(response, state.exclude_names)
    except ParseError as e:
        logger.warning(f"{_log}Could not parse candidates: {e}")
        candidates = []
        execution = execution.with_error(f"search_candidates: {e}")

    logger.info(f"{_log}{len(candidates)} candidate(s)")
    return {
        "candidates": candidates,
        "execution": execution.advance(
            "search_candidates", 30, f"Found {len(candidates)} candidates"
        ),
    }
