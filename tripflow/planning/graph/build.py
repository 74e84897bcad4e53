"""
Graph construction for the planning pipeline.

Builds and compiles the plan -> retrieve -> budget -> generate -> reflect
workflow with its single bounded regeneration cycle.
"""

from dataclasses import replace
from functools import partial
from typing import Optional

from tripflow.graph import END, CompiledWorkflow, WorkflowGraph
from tripflow.planning.generation import ItineraryGenerator
from tripflow.planning.graph.config import PlanningGraphConfig
from tripflow.planning.nodes import (
    finalize_node,
    generate_itinerary_node,
    plan_node,
    reflect_node,
    retrieve_knowledge_node,
    route_after_reflection,
    validate_budget_node,
)
from tripflow.planning.services import PlanningServices
from tripflow.shared.schemas import PlanState


def create_planning_graph(
    services: PlanningServices,
    config: Optional[PlanningGraphConfig] = None,
) -> CompiledWorkflow:
    """
    Create and compile the planning workflow.

    The graph structure is:
        Entry -> plan -> retrieve_knowledge -> validate_budget
              -> generate_itinerary -> reflect -> route_after_reflection
                   -> "regenerate" -> generate_itinerary (loop)
                   -> "finalize"   -> finalize -> END

    Args:
        services: Collaborators used by the nodes
        config: Optional configuration. Uses the services' config if not provided.
            The services object itself is never modified.

    Returns:
        Compiled workflow ready for execution.
    """
    config = config or services.config
    if config is not services.config:
        generator = services.generator
        if generator.max_attractions_in_prompt != config.max_attractions_in_prompt:
            generator = ItineraryGenerator(services.chat, config.max_attractions_in_prompt)
        services = replace(services, config=config, generator=generator)

    graph = WorkflowGraph("planning", PlanState)

    # Add nodes
    graph.add_node("plan", partial(plan_node, services=services))
    graph.add_node("retrieve_knowledge", partial(retrieve_knowledge_node, services=services))
    graph.add_node("validate_budget", partial(validate_budget_node, services=services))
    graph.add_node("generate_itinerary", partial(generate_itinerary_node, services=services))
    graph.add_node("reflect", partial(reflect_node, services=services))
    graph.add_node("finalize", partial(finalize_node, services=services))

    # Set entry point and edges
    graph.set_entry("plan")
    graph.add_edge("plan", "retrieve_knowledge")
    graph.add_edge("retrieve_knowledge", "validate_budget")
    graph.add_edge("validate_budget", "generate_itinerary")
    graph.add_edge("generate_itinerary", "reflect")
    graph.add_conditional_edge(
        "reflect",
        partial(route_after_reflection, max_reflections=config.max_reflections),
        {
            "regenerate": "generate_itinerary",
            "finalize": "finalize",
        },
    )
    graph.add_edge("finalize", END)

    return graph.compile(recursion_limit=config.recursion_limit)
