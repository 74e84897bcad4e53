"""
tripflow: LLM-driven travel itinerary orchestration.

This package contains:
- shared/: Common infrastructure (LLM client, logging, contracts, state, cache)
- tools/: Capability registry (knowledge search, geocoding, budget, nearby search)
- react/: Reason/act/observe agent loop
- graph/: Workflow graph engine on top of LangGraph
- planning/: Planning pipeline with bounded reflection loop
- recommendation/: Destination recommendation pipeline
- reflection/: Itinerary validator
"""

from tripflow.planning import create_planning_graph, plan_trip
from tripflow.react import ReActAgent
from tripflow.recommendation import create_recommendation_graph, recommend_destinations

__all__ = [
    "ReActAgent",
    "create_planning_graph",
    "create_recommendation_graph",
    "plan_trip",
    "recommend_destinations",
]
