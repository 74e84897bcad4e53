"""Region filter: narrows candidates to the preferred region or place."""

import logging
from typing import Any, Dict, List, Optional

from tripflow.recommendation.schemas import DestinationCandidate, RecommendationState
from tripflow.recommendation.services import RecommendationServices


logger = logging.getLogger(__name__)

REGION_COUNTRIES = {
    "south america": ("brazil", "argentina", "peru", "chile", "colombia", "ecuador"),
    "europe": ("france", "italy", "spain", "germany", "uk", "united kingdom", "greece"),
    "asia": ("japan", "china", "thailand", "vietnam", "korea", "singapore"),
    "north america": ("usa", "united states", "canada", "mexico"),
}


def filter_by_region(
    candidates: List[DestinationCandidate], preference: Optional[str]
) -> List[DestinationCandidate]:
    """
    Keep candidates matching the preference.

    A known region matches by country; anything else matches by name or
    country substring. With no preference, or when nothing matches, the
    input list is returned unchanged.
    """
    text = (preference or "").strip().lower()
    if not text:
        return list(candidates)

    countries = next(
        (members for region, members in REGION_COUNTRIES.items() if region in text), None
    )
    if countries is not None:
        kept = [
            c for c in candidates
            if any(country in c.country.lower() for country in countries)
        ]
    else:
        kept = [c for c in candidates if text in c.name.lower() or text in c.country.lower()]

    return kept or list(candidates)


async def filter_by_region_node(
    state: RecommendationState, services: RecommendationServices
) -> Dict[str, Any]:
    filtered = filter_by_region(state.candidates, state.destination_preference)
    logger.info(
        f"[session={state.session_id or 'unknown'}] [graph=recommendation] "
        f"[node=filter_by_region] {len(state.candidates)} -> {len(filtered)}"
    )
    return {
        "filtered": filtered,
        "execution": state.execution.advance(
            "filter_by_region", 50, f"{len(filtered)} candidates match"
        ),
    }
