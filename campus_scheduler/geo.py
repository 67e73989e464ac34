import math

from campus_scheduler.config import config
from campus_scheduler.models import Coordinate
from campus_scheduler.utils import ConfigurationError


def _geo_setting(key):
    try:
        return config["geo"][key]
    except KeyError:
        raise ConfigurationError(f"Missing critical configuration: 'geo.{key}'")


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle distance between two points on Earth in kilometers.
    """
    R = _geo_setting("earth_radius_km")
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlambda = math.radians(b.lng - a.lng)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    h = min(1.0, h)  # Rounding can push h above 1 for near-antipodal points
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return R * c


def walking_time(a: Coordinate, b: Coordinate) -> int:
    """
    Estimated minutes to walk between two coordinates, rounded up.
    Straight-line distance at average walking speed plus a buffer for finding the room.
    """
    walking_speed = _geo_setting("walking_speed_kmh")
    buffer_minutes = _geo_setting("walking_buffer_min")
    minutes = haversine_km(a, b) / walking_speed * 60
    return math.ceil(minutes + buffer_minutes)
