"""Graph configuration for the recommendation pipeline."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RecommendationGraphConfig:
    """
    Attributes:
        recursion_limit: Maximum number of graph steps
        candidate_count: Candidates requested from the reasoning collaborator
        top_k: Recommendations kept after ranking
        min_candidates_to_rank: Below this many candidates, ranking is skipped
    """

    recursion_limit: int = 20
    candidate_count: int = 10
    top_k: int = 3
    min_candidates_to_rank: int = 4


DEFAULT_CONFIG = RecommendationGraphConfig()


def get_config(
    recursion_limit: Optional[int] = None,
    candidate_count: Optional[int] = None,
    top_k: Optional[int] = None,
) -> RecommendationGraphConfig:
    """Create a configuration with optional overrides."""
    return RecommendationGraphConfig(
        recursion_limit=recursion_limit
        if recursion_limit is not None
        else DEFAULT_CONFIG.recursion_limit,
        candidate_count=candidate_count
        if candidate_count is not None
        else DEFAULT_CONFIG.candidate_count,
        top_k=top_k
        if top_k is not None
        else DEFAULT_CONFIG.top_k,
    )
