"""Great-circle distance and travel-time estimates."""

import math

EARTH_RADIUS_KM = 6371.0
AVERAGE_SPEED_KMH = 20.0
LONG_DISTANCE_KM = 20.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine great-circle distance in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def required_travel_minutes(distance_km: float, speed_kmh: float = AVERAGE_SPEED_KMH) -> int:
    """Whole minutes needed to cover distance_km at speed_kmh (truncated)."""
    return int(distance_km / speed_kmh * 60)
