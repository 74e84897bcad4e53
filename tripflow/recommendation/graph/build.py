"""
Graph construction for the recommendation pipeline.

A linear workflow with no cycles.
"""

from dataclasses import replace
from functools import partial
from typing import Optional

from tripflow.graph import END, CompiledWorkflow, WorkflowGraph
from tripflow.recommendation.graph.config import RecommendationGraphConfig
from tripflow.recommendation.nodes import (
    analyze_intent_node,
    filter_by_region_node,
    generate_reasons_node,
    rank_and_select_node,
    search_candidates_node,
)
from tripflow.recommendation.schemas import RecommendationState
from tripflow.recommendation.services import RecommendationServices


NODE_SEQUENCE = (
    ("analyze_intent", analyze_intent_node),
    ("search_candidates", search_candidates_node),
    ("filter_by_region", filter_by_region_node),
    ("rank_and_select", rank_and_select_node),
    ("generate_reasons", generate_reasons_node),
)


def create_recommendation_graph(
    services: RecommendationServices,
    config: Optional[RecommendationGraphConfig] = None,
) -> CompiledWorkflow:
    """
    Create and compile the recommendation workflow.

    The graph structure is:
        Entry -> analyze_intent -> search_candidates -> filter_by_region
              -> rank_and_select -> generate_reasons -> END

    Returns:
        Compiled workflow ready for execution.
    """
    if config is not None and config is not services.config:
        services = replace(services, config=config)

    graph = WorkflowGraph("recommendation", RecommendationState)
    for name, node in NODE_SEQUENCE:
        graph.add_node(name, partial(node, services=services))

    graph.set_entry(NODE_SEQUENCE[0][0])
    for (source, _), (target, _) in zip(NODE_SEQUENCE, NODE_SEQUENCE[1:]):
        graph.add_edge(source, target)
    graph.add_edge(NODE_SEQUENCE[-1][0], END)

    return graph.compile(recursion_limit=services.config.recursion_limit)
