"""Graph construction and configuration for the recommendation pipeline."""

from tripflow.recommendation.graph.build import create_recommendation_graph
from tripflow.recommendation.graph.config import RecommendationGraphConfig

__all__ = ["create_recommendation_graph", "RecommendationGraphConfig"]
