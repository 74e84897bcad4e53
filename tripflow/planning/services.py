"""Collaborators and settings shared by the planning nodes."""

from dataclasses import dataclass, field
from typing import Optional

from tripflow.planning.generation import ItineraryGenerator
from tripflow.planning.graph.config import PlanningGraphConfig, DEFAULT_CONFIG
from tripflow.reflection import PlanValidator
from tripflow.shared.collaborators import ChatModel, PlanRepository
from tripflow.tools import CapabilityConfig, CapabilityRegistry, create_default_registry


@dataclass
class PlanningServices:
    chat: ChatModel
    registry: CapabilityRegistry
    validator: PlanValidator
    generator: ItineraryGenerator
    repository: Optional[PlanRepository] = None
    config: PlanningGraphConfig = field(default_factory=lambda: DEFAULT_CONFIG)

    @classmethod
    def create(
        cls,
        chat: ChatModel,
        knowledge_base,
        geocoder,
        places=None,
        repository: Optional[PlanRepository] = None,
        config: Optional[PlanningGraphConfig] = None,
        capability_config: Optional[CapabilityConfig] = None,
    ) -> "PlanningServices":
        """Wire the default registry, validator and generator around collaborators."""
        config = config or DEFAULT_CONFIG
        generator = ItineraryGenerator(chat, config.max_attractions_in_prompt)
        return cls(
            chat=chat,
            registry=create_default_registry(
                knowledge_base,
                geocoder,
                places=places,
                generator=generator,
                config=capability_config,
            ),
            validator=PlanValidator(chat),
            generator=generator,
            repository=repository,
            config=config,
        )
