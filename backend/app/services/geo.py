"""
Great-circle distance helpers.
"""
import math
from dataclasses import dataclass
from typing import Optional

EARTH_RADIUS_KM = 6371.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometers between two coordinates in decimal degrees."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


@dataclass(frozen=True)
class BoundingBox:
    """Lat/lon window enclosing a radius; lon bounds are None when unusable."""
    min_lat: float
    max_lat: float
    min_lon: Optional[float]
    max_lon: Optional[float]


def bounding_box(lat: float, lon: float, radius_km: float) -> BoundingBox:
    """
    Conservative window around (lat, lon) used to prefilter rows in SQL.

    The exact Haversine check still runs afterwards. Longitude bounds are
    dropped when the circle reaches a pole or crosses the antimeridian.
    """
    angular = radius_km / EARTH_RADIUS_KM
    # Pad by 1% so float rounding never excludes a row the exact check keeps
    lat_delta = math.degrees(angular) * 1.01
    min_lat = max(-90.0, lat - lat_delta)
    max_lat = min(90.0, lat + lat_delta)

    cos_lat = math.cos(math.radians(lat))
    if min_lat <= -90.0 or max_lat >= 90.0 or cos_lat <= math.sin(angular):
        return BoundingBox(min_lat, max_lat, None, None)

    # Widest longitude span of a spherical cap centred at lat
    lon_delta = math.degrees(math.asin(math.sin(angular) / cos_lat)) * 1.01
    min_lon = lon - lon_delta
    max_lon = lon + lon_delta
    if min_lon < -180.0 or max_lon > 180.0:
        return BoundingBox(min_lat, max_lat, None, None)

    return BoundingBox(min_lat, max_lat, min_lon, max_lon)
