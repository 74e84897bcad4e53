"""
Shared fixtures: in-memory fakes for every external collaborator.
"""

import asyncio
import json
from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest

from tripflow.shared.contracts import Coordinates, KnowledgeRecord, PointOfInterest
from tripflow.tools import CapabilityConfig


# ============================================================================
# Fakes
# ============================================================================


class FakeChat:
    """
    Scripted chat collaborator.

    responses may be a list (consumed in order, then `default` forever) or
    a callable taking the prompt and returning the response.
    """

    def __init__(
        self,
        responses: Union[List[str], Callable[[str], str], None] = None,
        default: str = "",
    ):
        self._responses = responses if responses is not None else []
        self.default = default
        self.prompts: List[str] = []

    async def chat(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if callable(self._responses):
            return self._responses(prompt)
        if self._responses:
            return self._responses.pop(0)
        return self.default


class FakeKnowledgeBase:
    def __init__(self, records: Optional[List[KnowledgeRecord]] = None, failures: int = 0, delay: float = 0):
        self.records = records or []
        self.failures = failures
        self.delay = delay
        self.calls: List[Tuple[str, int]] = []

    async def search_knowledge(self, query: str, max_results: int) -> List[KnowledgeRecord]:
        self.calls.append((query, max_results))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("vector store unavailable")
        return self.records[:max_results]


class FakeGeocoder:
    """Resolves the first comma-separated part of a query via `points`."""

    def __init__(
        self,
        points: Optional[Dict[str, Tuple[float, float]]] = None,
        default: Optional[Tuple[float, float]] = (48.8566, 2.3522),
        failing: Tuple[str, ...] = (),
    ):
        self.points = points or {}
        self.default = default
        self.failing = failing
        self.queries: List[str] = []

    async def geocode(self, location: str) -> Coordinates:
        self.queries.append(location)
        key = location.split(",")[0].strip()
        if key in self.failing:
            raise TimeoutError(f"provider timeout for {key}")
        point = self.points.get(key, self.default)
        if point is None:
            return Coordinates.failed(location, "Location not found")
        return Coordinates(latitude=point[0], longitude=point[1], location=location, success=True)


class FakePlaces:
    def __init__(self, places: Optional[List[PointOfInterest]] = None, error: Optional[Exception] = None):
        self.places = places or []
        self.error = error
        self.calls: List[Tuple[float, float, float, str]] = []

    async def search_nearby(self, latitude, longitude, radius_km, category):
        self.calls.append((latitude, longitude, radius_km, category))
        if self.error:
            raise self.error
        return list(self.places)


class FakeRepository:
    def __init__(self, error: Optional[Exception] = None):
        self.saved = []
        self.error = error

    async def persist(self, state) -> None:
        if self.error:
            raise self.error
        self.saved.append(state)


# ============================================================================
# Builders
# ============================================================================


def make_records(n: int = 6, score: float = 0.9) -> List[KnowledgeRecord]:
    return [
        KnowledgeRecord(
            name=f"Attraction {i}",
            category="museum" if i % 2 else "park",
            price=f"${10 * i}",
            description=f"Description {i}",
            score=score,
            source="Paris",
        )
        for i in range(1, n + 1)
    ]


def make_itinerary_json(days: int = 2, per_day: int = 4, cost: float = 20.0) -> str:
    """A valid generated itinerary: no overlaps, mixed types, ~1h gaps."""
    types = ["accommodation", "activity", "dining", "activity"]
    payload = {"days": []}
    for day in range(1, days + 1):
        activities = []
        for slot in range(per_day):
            activities.append(
                {
                    "name": f"Day {day} stop {slot + 1}",
                    "type": types[slot % len(types)],
                    "startTime": f"{9 + slot * 3:02d}:00",
                    "durationMinutes": 120,
                    "estimatedCost": cost,
                    "location": f"Place {day}-{slot + 1}",
                    "description": "",
                }
            )
        payload["days"].append({"dayNumber": day, "theme": f"Theme {day}", "activities": activities})
    return json.dumps(payload)


def run(coro):
    return asyncio.run(coro)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def capability_config():
    """Capability settings without retry back-off so tests stay fast."""
    return CapabilityConfig(retry_min_wait=0, retry_max_wait=0, knowledge_timeout=1.0)


@pytest.fixture
def knowledge_base():
    return FakeKnowledgeBase(make_records())


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def places():
    return FakePlaces(
        [PointOfInterest(name=f"Cafe {i}", category="attraction", distance_km=0.1 * i) for i in range(15)]
    )


@pytest.fixture
def repository():
    return FakeRepository()
