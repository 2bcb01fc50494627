"""Domain models for drivers, coordinates and distance results."""

import math
from dataclasses import dataclass, field
from typing import Optional

DRIVER_STATUSES = ("available", "on_trip", "offline")


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A resolved latitude/longitude pair."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (-90 <= self.latitude <= 90):
            raise ValueError(f"latitude must be between -90 and 90, got {self.latitude}")
        if not (-180 <= self.longitude <= 180):
            raise ValueError(f"longitude must be between -180 and 180, got {self.longitude}")


@dataclass(slots=True)
class Driver:
    """A shuttle driver or company listed in the directory."""

    id: str
    name: str
    state: str
    city: str
    status: str = "available"
    phone_number: Optional[str] = None
    email: Optional[str] = None
    vehicle_type: Optional[str] = None
    service_locations: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def location_key(self) -> str:
        return location_key(self.city, self.state)


def location_key(city: str, state: str) -> str:
    """Build the cache/lookup key for a city. Exact concatenation, no normalization."""
    return f"{city}, {state}"


def round_miles(miles: float) -> int:
    """Nearest whole mile, halves rounded up."""
    return math.floor(miles + 0.5)


@dataclass(frozen=True, slots=True)
class ClosestMatch:
    """The nearest driver to a target point."""

    entity: Driver
    distance_miles: float

    @property
    def rounded_miles(self) -> int:
        return round_miles(self.distance_miles)


@dataclass(frozen=True, slots=True)
class RouteDistance:
    """Driving distance between two points; ``estimated`` marks a straight-line fallback."""

    miles: float
    seconds: float
    estimated: bool = False


@dataclass(slots=True)
class DistanceResult:
    """Outcome of a drop-off to pickup distance calculation."""

    distance_miles: int
    duration: str
    duration_seconds: float
    estimated: bool
    from_city: str
    to_city: str
    closest_driver: Optional[ClosestMatch] = None
    metadata: dict = field(default_factory=dict)
