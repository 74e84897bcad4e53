"""Destination recommendation pipeline."""

from typing import Optional

from tripflow.recommendation.graph.build import create_recommendation_graph
from tripflow.recommendation.graph.config import RecommendationGraphConfig
from tripflow.recommendation.schemas import DestinationCandidate, RecommendationState
from tripflow.recommendation.services import RecommendationServices


async def recommend_destinations(
    state: RecommendationState,
    services: RecommendationServices,
    config: Optional[RecommendationGraphConfig] = None,
) -> RecommendationState:
    """Run the recommendation pipeline and return the terminal state."""
    app = create_recommendation_graph(services, config)
    return await app.run(state)


__all__ = [
    "DestinationCandidate",
    "RecommendationGraphConfig",
    "RecommendationServices",
    "RecommendationState",
    "create_recommendation_graph",
    "recommend_destinations",
]
