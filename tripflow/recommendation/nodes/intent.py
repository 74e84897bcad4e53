"""Intent analysis: classifies the destination preference and picks a search strategy."""

import logging
from typing import Any, Dict, List

from tripflow.recommendation.schemas import (
    AnalyzedIntent,
    DestinationType,
    RecommendationState,
    SearchStrategy,
)
from tripflow.recommendation.services import RecommendationServices


logger = logging.getLogger(__name__)

REGION_TERMS = ("europe", "asia", "america", "africa", "oceania", "middle east", "caribbean")
VAGUE_TERMS = ("beach", "mountain", "island", "countryside", "desert", "city break")
COUNTRY_TERMS = (
    "china", "japan", "france", "italy", "spain", "thailand", "vietnam",
    "mexico", "peru", "greece", "portugal", "morocco", "india", "brazil",
)


def infer_destination_type(preference: str) -> DestinationType:
    text = (preference or "").strip().lower()
    if not text:
        return DestinationType.UNKNOWN
    if any(term in text for term in REGION_TERMS):
        return DestinationType.REGION
    if any(term in text for term in VAGUE_TERMS):
        return DestinationType.VAGUE
    if any(term in text for term in COUNTRY_TERMS):
        return DestinationType.COUNTRY
    return DestinationType.CITY


def choose_strategy(destination_type: DestinationType, interests: List[str]) -> SearchStrategy:
    if destination_type not in (DestinationType.UNKNOWN, DestinationType.VAGUE):
        return SearchStrategy.DESTINATION_FOCUSED
    if interests:
        return SearchStrategy.INTEREST_FOCUSED
    return SearchStrategy.GENERAL


async def analyze_intent_node(
    state: RecommendationState, services: RecommendationServices
) -> Dict[str, Any]:
    destination_type = infer_destination_type(state.destination_preference or "")
    strategy = choose_strategy(destination_type, state.interests)

    keywords = [w for w in (state.destination_preference or "").lower().split() if w]
    keywords += [i.lower() for i in state.interests]
    if state.mood:
        keywords.append(state.mood.lower())

    logger.info(
        f"[session={state.session_id or 'unknown'}] [graph=recommendation] "
        f"[node=analyze_intent] type={destination_type.value}, strategy={strategy.value}"
    )
    return {
        "analyzed_intent": AnalyzedIntent(
            destination_type=destination_type,
            search_strategy=strategy,
            keywords=list(dict.fromkeys(keywords)),
        ),
        "execution": state.execution.advance("analyze_intent", 10, "Analyzing preferences"),
    }
