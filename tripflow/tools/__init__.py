"""
Capability registry and the concrete capabilities.

- base: Capability base class, Outcome, categories
- registry: Name-keyed registry with timeouts and joined fan-out
- knowledge_search / geocoding / budget / nearby_search / generation
"""

from typing import Optional

from tripflow.tools.base import Capability, CapabilityCategory, Outcome
from tripflow.tools.budget import BudgetValidationCapability, validate_budget
from tripflow.tools.config import CapabilityConfig, DEFAULT_CONFIG
from tripflow.tools.generation import ItineraryGenerationCapability
from tripflow.tools.geocoding import GeocodeCapability
from tripflow.tools.knowledge_search import KnowledgeSearchCapability
from tripflow.tools.nearby_search import NearbySearchCapability
from tripflow.tools.registry import CapabilityRegistry


def create_default_registry(
    knowledge_base,
    geocoder,
    places=None,
    generator=None,
    config: Optional[CapabilityConfig] = None,
) -> CapabilityRegistry:
    """
    Wire the standard capabilities around the given collaborators.

    Nearby search is only registered when a places provider is given, and
    itinerary generation only when a generator is given.
    """
    config = config or DEFAULT_CONFIG
    registry = CapabilityRegistry(config)
    registry.register(KnowledgeSearchCapability(knowledge_base, config))
    registry.register(GeocodeCapability(geocoder))
    registry.register(BudgetValidationCapability())
    if places is not None:
        registry.register(NearbySearchCapability(places, config))
    if generator is not None:
        registry.register(ItineraryGenerationCapability(generator))
    return registry


__all__ = [
    "BudgetValidationCapability",
    "Capability",
    "CapabilityCategory",
    "CapabilityConfig",
    "CapabilityRegistry",
    "GeocodeCapability",
    "ItineraryGenerationCapability",
    "KnowledgeSearchCapability",
    "NearbySearchCapability",
    "Outcome",
    "create_default_registry",
    "validate_budget",
]
