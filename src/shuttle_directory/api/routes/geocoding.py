"""City geocoding endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...errors import GeocodeFailed, InputInvalid
from ...schemas.distance import (
    BatchGeocodeRequest,
    BatchGeocodeResponse,
    CoordinatesModel,
    GeocodeRequest,
    GeocodeResponse,
)
from ...services.geocoding import GeocodingService
from ..dependencies import get_geocoding

router = APIRouter(prefix="/geocode", tags=["geocoding"])


@router.post("", response_model=GeocodeResponse, status_code=status.HTTP_200_OK)
def geocode_city(payload: GeocodeRequest, geocoding: GeocodingService = Depends(get_geocoding)) -> GeocodeResponse:
    """Resolve one city. Misses are reported in the body rather than as an HTTP error."""
    try:
        point = geocoding.geocode(payload.city)
    except InputInvalid as exc:
        return GeocodeResponse(success=False, error=exc.user_message)
    if point is None:
        return GeocodeResponse(success=False, error=GeocodeFailed(query=payload.city).user_message)
    return GeocodeResponse(success=True, lat=point.latitude, lng=point.longitude)


@router.post("/batch", response_model=BatchGeocodeResponse, status_code=status.HTTP_200_OK)
def geocode_cities(
    payload: BatchGeocodeRequest, geocoding: GeocodingService = Depends(get_geocoding)
) -> BatchGeocodeResponse:
    keys = [city.strip() for city in payload.cities if city and city.strip()]
    resolved = geocoding.geocode_batch(keys)
    return BatchGeocodeResponse(
        success=True,
        results={
            key: CoordinatesModel.from_point(point) if point is not None else None
            for key, point in resolved.items()
        },
    )
