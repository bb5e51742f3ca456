"""
Great-circle helpers used by the nearest-metro backfill and the metro API
"""
from math import atan2, cos, radians, sin, sqrt
from typing import Iterable, Optional, Protocol, Tuple, TypeVar

EARTH_RADIUS_M = 6_371_000


class HasCoordinates(Protocol):
    latitude: float
    longitude: float


T = TypeVar("T", bound=HasCoordinates)


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distance between two points on the Earth's surface

    Args:
        lat1, lon1: First point in decimal degrees
        lat2, lon2: Second point in decimal degrees

    Returns:
        Distance in meters (not rounded)
    """
    d_lat = radians(lat2 - lat1)
    d_lon = radians(lon2 - lon1)

    a = (
        sin(d_lat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lon / 2) ** 2
    )
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_M * c


def find_nearest(lat: float, lon: float, points: Iterable[T]) -> Optional[Tuple[T, float]]:
    """
    Linear scan for the point closest to (lat, lon)

    The first point wins a tie. Returns None when `points` is empty.
    """
    nearest = None
    min_distance = float("inf")

    for point in points:
        distance = haversine_distance(lat, lon, point.latitude, point.longitude)
        if distance < min_distance:
            min_distance = distance
            nearest = point

    if nearest is None:
        return None
    return nearest, min_distance
