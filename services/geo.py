"""Great-circle distance helpers for nearby search."""
import math

EARTH_RADIUS_KM = 6371.0
LATITUDE_BOUNDS = (-90.0, 90.0)
LONGITUDE_BOUNDS = (-180.0, 180.0)


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Spherical distance in km:
    R * acos(cos(lat1)cos(lat2)cos(lng2 - lng1) + sin(lat1)sin(lat2)).
    The acos argument is clamped to [-1, 1]; floating error pushes identical
    points slightly above 1.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta = math.radians(lng2 - lng1)
    cosine = math.cos(phi1) * math.cos(phi2) * math.cos(delta) + math.sin(phi1) * math.sin(phi2)
    cosine = max(-1.0, min(1.0, cosine))
    return EARTH_RADIUS_KM * math.acos(cosine)


def valid_coordinates(lat: float, lng: float) -> bool:
    """Finite and inside the usual latitude/longitude ranges."""
    return (
        LATITUDE_BOUNDS[0] <= lat <= LATITUDE_BOUNDS[1]
        and LONGITUDE_BOUNDS[0] <= lng <= LONGITUDE_BOUNDS[1]
    )


def parse_location(location: str):
    """'lat,lng' -> (lat, lng); anything else -> None"""
    if not location:
        return None
    parts = location.split(",")
    if len(parts) != 2:
        return None
    try:
        lat, lng = float(parts[0].strip()), float(parts[1].strip())
    except ValueError:
        return None
    if not valid_coordinates(lat, lng):
        return None
    return lat, lng
