"""Great-circle distance helpers."""

from __future__ import annotations

import math

# Earth radius in kilometers (for Haversine).
EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers between two points."""
    rlat1, rlat2 = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlon / 2) ** 2
    # Rounding can push a slightly above 1.0 for antipodal points.
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(a, 1.0)))


def distance_between(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Distance in kilometers between two (lng, lat) pairs."""
    return haversine_km(a[1], a[0], b[1], b[0])


def format_distance(km: float) -> str:
    if km < 1:
        return f"{round(km * 1000)} m"
    return f"{km:.1f} km"
