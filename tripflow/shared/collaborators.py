"""
Interfaces of the external collaborators the pipelines consume.

Implementations live outside this package (vector store, geocoding
provider, places API, storage); tests supply in-memory fakes.
"""

from typing import List, Protocol, runtime_checkable

from tripflow.shared.contracts import Coordinates, KnowledgeRecord, PointOfInterest


@runtime_checkable
class ChatModel(Protocol):
    """Single-turn reasoning call. Must not raise."""

    async def chat(self, prompt: str) -> str: ...


@runtime_checkable
class KnowledgeBase(Protocol):
    """Relevance-ranked retrieval over travel knowledge."""

    async def search_knowledge(self, query: str, max_results: int) -> List[KnowledgeRecord]: ...


@runtime_checkable
class Geocoder(Protocol):
    async def geocode(self, location: str) -> Coordinates: ...


@runtime_checkable
class PlacesProvider(Protocol):
    async def search_nearby(
        self, latitude: float, longitude: float, radius_km: float, category: str
    ) -> List[PointOfInterest]: ...


@runtime_checkable
class PlanRepository(Protocol):
    """Receives the terminal plan state for storage."""

    async def persist(self, state) -> None: ...
