"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..models.domain import GeoPoint

EARTH_RADIUS_MILES = 3959.0
# Assumed average road speed when no routed duration is available.
FALLBACK_SPEED_MPH = 60.0


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance_between(origin: GeoPoint, destination: GeoPoint) -> float:
    return haversine_miles(origin.latitude, origin.longitude, destination.latitude, destination.longitude)


def estimate_duration_seconds(miles: float, speed_mph: float = FALLBACK_SPEED_MPH) -> float:
    """Estimate travel time for a distance at a constant speed."""

    return (miles / speed_mph) * 3600


def format_duration(seconds: float) -> str:
    """Render seconds as ``"2h 5m"`` or ``"45m"``."""

    hours = int(seconds // 3600)
    minutes = round((seconds % 3600) / 60)
    if minutes == 60:
        hours += 1
        minutes = 0
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"
