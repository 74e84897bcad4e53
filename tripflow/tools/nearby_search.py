"""Nearby points-of-interest search capability."""

import logging
from typing import Any, Dict, Optional

from tripflow.shared.collaborators import PlacesProvider
from tripflow.shared.contracts import PointOfInterest
from tripflow.tools.base import Capability, CapabilityCategory, Outcome
from tripflow.tools.config import CapabilityConfig, DEFAULT_CONFIG


logger = logging.getLogger(__name__)


class NearbySearchCapability(Capability):
    name = "search_nearby"
    description = (
        "Find points of interest (restaurants, attractions, hotels) within a "
        "radius of a geocoded location."
    )
    category = CapabilityCategory.SEARCH

    def __init__(self, places: PlacesProvider, config: Optional[CapabilityConfig] = None):
        self.places = places
        self.config = config or DEFAULT_CONFIG

    async def _run(self, params: Dict[str, Any]) -> Outcome:
        if params.get("latitude") is None or params.get("longitude") is None:
            return Outcome.failure(self.name, "latitude and longitude are required", data=[])

        radius = params.get("radius_km")
        if radius is None or float(radius) <= 0:
            radius = self.config.default_radius_km
        category = params.get("category") or "attraction"

        try:
            raw = await self.places.search_nearby(
                float(params["latitude"]), float(params["longitude"]), float(radius), category
            )
        except Exception as e:
            logger.warning(f"[capability={self.name}] Nearby search failed: {e}")
            return Outcome.failure(self.name, f"Nearby search failed: {e}", data=[])

        places = [PointOfInterest.model_validate(p) for p in raw][: self.config.nearby_limit]
        if not places:
            return Outcome.failure(
                self.name, f"No {category} found within {radius} km", data=[]
            )
        return Outcome.ok(
            self.name,
            places,
            f"Found {len(places)} {category} places within {radius} km: "
            + ", ".join(p.name for p in places[:5]),
        )
