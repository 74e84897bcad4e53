"""Graph construction and configuration for the planning pipeline."""

from tripflow.planning.graph.build import create_planning_graph
from tripflow.planning.graph.config import PlanningGraphConfig

__all__ = ["create_planning_graph", "PlanningGraphConfig"]
