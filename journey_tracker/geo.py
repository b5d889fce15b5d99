"""
Geodesic helpers for location and heading calculations.

All functions are pure. Coordinates are in degrees, distances in meters.
"""

import math

EARTH_RADIUS_M = 6371000  # Mean Earth radius in meters


def distance(lat1, lon1, lat2, lon2):
    """
    Haversine great-circle distance between two coordinates.

    Args:
        lat1, lon1: First coordinate (latitude, longitude in degrees)
        lat2, lon2: Second coordinate (latitude, longitude in degrees)

    Returns:
        float: Distance in meters
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def bearing(lat1, lon1, lat2, lon2):
    """
    Initial great-circle bearing from the first coordinate to the second.

    Identical points have no defined bearing and return NaN; callers treat
    NaN as "no movement".

    Returns:
        float: Bearing in degrees, normalized to [0, 360), 0 = north
    """
    if lat1 == lat2 and lon1 == lon2:
        return math.nan

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lon2 - lon1)

    east = math.sin(delta_lambda) * math.cos(phi2)
    north = (math.cos(phi1) * math.sin(phi2) -
             math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda))

    return normalize_bearing(math.degrees(math.atan2(east, north)))


def normalize_bearing(degrees):
    """Wrap any angle in degrees into [0, 360)."""
    result = math.fmod(degrees, 360.0)
    if result < 0:
        result += 360.0
    # fmod of a tiny negative value can round up to exactly 360.0
    if result >= 360.0:
        result = 0.0
    return result


def angle_difference(a, b):
    """Smallest absolute difference between two bearings, in [0, 180]."""
    diff = abs(normalize_bearing(a) - normalize_bearing(b))
    return 360.0 - diff if diff > 180.0 else diff


def latlon_to_meters(lat, lon, origin_lat, origin_lon):
    """
    Convert lat/lon to local east/north meters from origin (equirectangular).

    Accurate for the short segments used by heading estimation.

    Returns:
        tuple: (east, north) in meters
    """
    origin_lat_rad = math.radians(origin_lat)

    east = EARTH_RADIUS_M * math.radians(lon - origin_lon) * math.cos(origin_lat_rad)
    north = EARTH_RADIUS_M * math.radians(lat - origin_lat)

    return east, north
