"""Graph nodes for the planning pipeline."""

from tripflow.planning.nodes.budget import validate_budget_node
from tripflow.planning.nodes.finalize import finalize_node, normalize_itinerary
from tripflow.planning.nodes.generate import generate_itinerary_node
from tripflow.planning.nodes.plan import plan_node
from tripflow.planning.nodes.reflect import reflect_node
from tripflow.planning.nodes.retrieval import retrieve_knowledge_node
from tripflow.planning.nodes.routing import route_after_reflection

__all__ = [
    "finalize_node",
    "generate_itinerary_node",
    "normalize_itinerary",
    "plan_node",
    "reflect_node",
    "retrieve_knowledge_node",
    "route_after_reflection",
    "validate_budget_node",
]
