"""Geocoding, routing and distance calculator API schemas."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.domain import ClosestMatch, DistanceResult, GeoPoint
from .drivers import DriverModel


class CoordinatesModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    @classmethod
    def from_point(cls, point: GeoPoint) -> "CoordinatesModel":
        return cls(lat=point.latitude, lng=point.longitude)

    def to_point(self) -> GeoPoint:
        return GeoPoint(latitude=self.lat, longitude=self.lng)


class GeocodeRequest(BaseModel):
    city: str


class GeocodeResponse(BaseModel):
    success: bool
    lat: Optional[float] = None
    lng: Optional[float] = None
    error: Optional[str] = None


class BatchGeocodeRequest(BaseModel):
    cities: List[str] = Field(..., max_length=500)


class BatchGeocodeResponse(BaseModel):
    success: bool
    results: Dict[str, Optional[CoordinatesModel]]


class RouteDistanceRequest(BaseModel):
    fromLat: float = Field(..., ge=-90, le=90)
    fromLng: float = Field(..., ge=-180, le=180)
    toLat: float = Field(..., ge=-90, le=90)
    toLng: float = Field(..., ge=-180, le=180)


class RouteDistanceResponse(BaseModel):
    success: bool
    distanceMiles: float
    durationSeconds: float
    estimated: bool


class ClosestDriverModel(BaseModel):
    driver: DriverModel
    distance: int = Field(..., description="Straight-line miles from the pickup, rounded.")
    distanceExact: float

    @classmethod
    def from_domain(cls, match: ClosestMatch) -> "ClosestDriverModel":
        return cls(
            driver=DriverModel.from_domain(match.entity),
            distance=match.rounded_miles,
            distanceExact=match.distance_miles,
        )


class ClosestDriverRequest(CoordinatesModel):
    pass


class ClosestDriverResponse(BaseModel):
    closestDriver: Optional[ClosestDriverModel] = None
    message: Optional[str] = None


class DistanceCalculationRequest(BaseModel):
    dropOffCity: str
    pickupCity: str
    sessionId: Optional[str] = Field(
        default=None,
        description="Client session; a newer query from the same session supersedes older ones.",
    )


class DistanceCalculationResponse(BaseModel):
    distance: int
    duration: str
    durationSeconds: float
    estimated: bool
    fromCity: str
    toCity: str
    fromCoordinates: Optional[CoordinatesModel] = None
    toCoordinates: Optional[CoordinatesModel] = None
    closestDriver: Optional[ClosestDriverModel] = None
    stale: bool = False

    @classmethod
    def from_domain(cls, result: DistanceResult, *, stale: bool = False) -> "DistanceCalculationResponse":
        origin = result.metadata.get("from")
        destination = result.metadata.get("to")
        return cls(
            distance=result.distance_miles,
            duration=result.duration,
            durationSeconds=result.duration_seconds,
            estimated=result.estimated,
            fromCity=result.from_city,
            toCity=result.to_city,
            fromCoordinates=CoordinatesModel(**origin) if origin else None,
            toCoordinates=CoordinatesModel(**destination) if destination else None,
            closestDriver=ClosestDriverModel.from_domain(result.closest_driver) if result.closest_driver else None,
            stale=stale,
        )
