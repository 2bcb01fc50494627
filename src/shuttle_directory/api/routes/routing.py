"""Driving distance endpoint."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...schemas.distance import RouteDistanceRequest, RouteDistanceResponse
from ...models.domain import GeoPoint
from ...services.routing import service as routing_service

router = APIRouter(prefix="/routing", tags=["routing"])


@router.post("/distance", response_model=RouteDistanceResponse, status_code=status.HTTP_200_OK)
def routing_distance(payload: RouteDistanceRequest) -> RouteDistanceResponse:
    trip = routing_service.route_distance(
        GeoPoint(latitude=payload.fromLat, longitude=payload.fromLng),
        GeoPoint(latitude=payload.toLat, longitude=payload.toLng),
    )
    return RouteDistanceResponse(
        success=True,
        distanceMiles=trip.miles,
        durationSeconds=trip.seconds,
        estimated=trip.estimated,
    )
