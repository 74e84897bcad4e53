"""Graph nodes for the recommendation pipeline."""

from tripflow.recommendation.nodes.filter import filter_by_region, filter_by_region_node
from tripflow.recommendation.nodes.intent import analyze_intent_node, infer_destination_type
from tripflow.recommendation.nodes.rank import apply_ranking, rank_and_select_node
from tripflow.recommendation.nodes.reasons import generate_reasons_node
from tripflow.recommendation.nodes.search import parse_candidates, search_candidates_node

__all__ = [
    "analyze_intent_node",
    "apply_ranking",
    "filter_by_region",
    "filter_by_region_node",
    "generate_reasons_node",
    "infer_destination_type",
    "parse_candidates",
    "rank_and_select_node",
    "search_candidates_node",
]
