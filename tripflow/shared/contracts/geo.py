"""Geographic contracts: geocoding results and nearby points of interest."""

from typing import Optional

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    """
    Result of geocoding a location string.

    latitude/longitude are only meaningful when success is True.
    """

    latitude: float = 0.0
    longitude: float = 0.0
    location: str = Field(default="", description="Location text that was geocoded")
    success: bool = False
    error_message: Optional[str] = None

    @classmethod
    def failed(cls, location: str, error_message: str) -> "Coordinates":
        return cls(location=location, success=False, error_message=error_message)


class PointOfInterest(BaseModel):
    """A place returned by a nearby search."""

    name: str
    category: str = "attraction"
    latitude: float = 0.0
    longitude: float = 0.0
    address: Optional[str] = None
    distance_km: Optional[float] = None
