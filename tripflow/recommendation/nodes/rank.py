"""Ranking: orders candidates via the reasoning collaborator and keeps the top ones."""

import logging
from typing import Any, Dict, List

from tripflow.recommendation.prompts import build_ranking_prompt
from tripflow.recommendation.schemas import DestinationCandidate, RecommendationState
from tripflow.recommendation.services import RecommendationServices
from tripflow.shared.parsing import ParseError, parse_json_array


logger = logging.getLogger(__name__)


def apply_ranking(candidates: List[DestinationCandidate], indices: List[Any]) -> List[DestinationCandidate]:
    """
    Reorder candidates by 1-based indices.

    Invalid or repeated indices are skipped; candidates the ranking left
    out are appended in their original order.
    """
    order: List[int] = []
    for value in indices:
        try:
            position = int(value) - 1
        except (TypeError, ValueError):
            continue
        if 0 <= position < len(candidates) and position not in order:
            order.append(position)
    order += [i for i in range(len(candidates)) if i not in order]
    return [candidates[i] for i in order]


def sort_by_score(candidates: List[DestinationCandidate]) -> List[DestinationCandidate]:
    return sorted(candidates, key=lambda c: c.match_score, reverse=True)


async def rank_and_select_node(
    state: RecommendationState, services: RecommendationServices
) -> Dict[str, Any]:
    _log = f"[session={state.session_id or 'unknown'}] [graph=recommendation] [node=rank_and_select] "
    cfg = services.config
    candidates = state.filtered

    if len(candidates) < cfg.min_candidates_to_rank:
        ranked = list(candidates)
        logger.info(f"{_log}Only {len(candidates)} candidate(s), skipping ranking")
    else:
        response = await services.chat.chat(build_ranking_prompt(state, candidates))
        if not response.strip():
            logger.warning(f"{_log}Ranking unavailable, sorting by match score")
            ranked = sort_by_score(candidates)
        else:
            try:
                ranked = apply_ranking(candidates, parse_json_array(response))
            except ParseError as e:
                logger.warning(f"{_log}Could not parse ranking, keeping original order: {e}")
                ranked = list(candidates)

    selected = ranked[: cfg.top_k]
    logger.info(f"{_log}Selected {[c.name for c in selected]}")
    return {
        "ranked": ranked,
        "recommendations": selected,
        "execution": state.execution.advance(
            "rank_and_select", 70, f"Selected top {len(selected)}"
        ),
    }
