"""
Geocoding capability.

Single lookups and batch lookups. The batch form issues one geocode per
location concurrently and joins all of them: every input location yields a
Coordinates entry, failed lookups included.
"""

import logging
from typing import Any, Dict, List

from tripflow.shared.collaborators import Geocoder
from tripflow.shared.concurrency import gather_joined
from tripflow.shared.contracts import Coordinates
from tripflow.tools.base import Capability, CapabilityCategory, Outcome


logger = logging.getLogger(__name__)


class GeocodeCapability(Capability):
    name = "geocode_location"
    description = (
        "Convert place names to latitude/longitude. Use to check travel "
        "distances between itinerary activities."
    )
    category = CapabilityCategory.GEOCODING

    def __init__(self, geocoder: Geocoder):
        self.geocoder = geocoder

    async def geocode(self, location: str) -> Coordinates:
        """Geocode one location; failures come back as unsuccessful Coordinates."""
        try:
            result = await self.geocoder.geocode(location)
        except Exception as e:
            logger.warning(f"[capability={self.name}] Geocoding failed for {location!r}: {e}")
            return Coordinates.failed(location, str(e))
        if result is None:
            return Coordinates.failed(location, "Location not found")
        result = Coordinates.model_validate(result)
        if not result.location:
            result = result.model_copy(update={"location": location})
        return result

    async def geocode_batch(self, locations: List[str]) -> List[Coordinates]:
        results = await gather_joined(self.geocode(location) for location in locations)
        return [
            r if isinstance(r, Coordinates) else Coordinates.failed(loc, str(r))
            for loc, r in zip(locations, results)
        ]

    async def _run(self, params: Dict[str, Any]) -> Outcome:
        if params.get("locations"):
            locations = [str(loc) for loc in params["locations"]]
            results = await self.geocode_batch(locations)
            found = sum(1 for r in results if r.success)
            return Outcome.ok(
                self.name,
                results,
                f"Geocoded {found}/{len(results)} locations",
            )

        location = params.get("location")
        if not location:
            return Outcome.failure(self.name, "No location provided", data=[])

        result = await self.geocode(str(location))
        if not result.success:
            return Outcome.failure(
                self.name, result.error_message or "Location not found", data=[result]
            )
        return Outcome.ok(
            self.name,
            [result],
            f"{location} is at ({result.latitude:.4f}, {result.longitude:.4f})",
        )
