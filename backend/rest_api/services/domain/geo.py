"""
Great-circle distance for the nearby-shops search.
"""

import math
from typing import Any

EARTH_RADIUS_KM = 6371.0088


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def address_point(address: dict[str, Any] | None) -> tuple[float, float] | None:
    """(lat, lng) of a stored address, or None when it has no usable coordinates."""
    coordinates = (address or {}).get("coordinates") or {}
    try:
        return float(coordinates["lat"]), float(coordinates["lng"])
    except (KeyError, TypeError, ValueError):
        return None
