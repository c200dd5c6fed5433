"""Great-circle distance on a spherical Earth."""
import math
from typing import Tuple

# Mean Earth radius in meters. Spherical model, no ellipsoidal correction:
# errors stay well under 0.5%, far below the smallest quiz radius tolerance.
EARTH_RADIUS_M = 6_371_000.0


def distance_meters(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """
    Calculate distance between two points using the Haversine formula.

    Args:
        a: (lat, lon) of first point in degrees
        b: (lat, lon) of second point in degrees

    Returns:
        Distance in meters (never negative)
    """
    lat1_rad = math.radians(a[0])
    lat2_rad = math.radians(b[0])
    dlat = math.radians(b[0] - a[0])
    dlon = math.radians(b[1] - a[1])

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_M * c
