"""
Graph configuration for the planning pipeline.

Centralizes the knobs of the plan -> generate -> reflect workflow so they
can be tuned without modifying the graph wiring.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class PlanningGraphConfig:
    """
    Configuration for the planning graph.

    Attributes:
        recursion_limit: Maximum number of graph steps (prevents infinite loops)
        max_reflections: Reflection passes before finalizing without approval
        attractions_per_day: Knowledge search cap multiplier (days x this)
        enable_route_geocoding: Geocode activity locations after generation
        max_attractions_in_prompt: Attractions listed in the generation prompt
    """

    # Graph execution limits
    recursion_limit: int = 40

    # Reflection loop
    max_reflections: int = 3

    # Retrieval
    attractions_per_day: int = 4

    # Generation
    enable_route_geocoding: bool = True
    max_attractions_in_prompt: int = 20


# Default configuration instance
DEFAULT_CONFIG = PlanningGraphConfig()


def get_config(
    recursion_limit: Optional[int] = None,
    max_reflections: Optional[int] = None,
    attractions_per_day: Optional[int] = None,
    enable_route_geocoding: Optional[bool] = None,
) -> PlanningGraphConfig:
    """
    Create a configuration with optional overrides.

    Returns:
        PlanningGraphConfig with specified overrides applied
    """
    return PlanningGraphConfig(
        recursion_limit=recursion_limit
        if recursion_limit is not None
        else DEFAULT_CONFIG.recursion_limit,
        max_reflections=max_reflections
        if max_reflections is not None
        else DEFAULT_CONFIG.max_reflections,
        attractions_per_day=attractions_per_day
        if attractions_per_day is not None
        else DEFAULT_CONFIG.attractions_per_day,
        enable_route_geocoding=enable_route_geocoding
        if enable_route_geocoding is not None
        else DEFAULT_CONFIG.enable_route_geocoding,
    )
