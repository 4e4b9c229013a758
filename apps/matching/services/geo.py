from __future__ import annotations

import math
from typing import Optional, Tuple

EARTH_RADIUS_KM = 6371.0

Coordinates = Tuple[float, float]


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def haversine_km(a: Optional[Coordinates], b: Optional[Coordinates]) -> Optional[float]:
    """Great-circle distance in km, rounded to one decimal; None if either point is missing."""
    if a is None or b is None:
        return None
    lat1, lng1 = (math.radians(float(value)) for value in a)
    lat2, lng2 = (math.radians(float(value)) for value in b)
    d_lat = lat2 - lat1
    d_lng = lng2 - lng1
    h = math.sin(d_lat / 2) ** 2 + math.sin(d_lng / 2) ** 2 * math.cos(lat1) * math.cos(lat2)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return round_half_up(EARTH_RADIUS_KM * c, 1)
