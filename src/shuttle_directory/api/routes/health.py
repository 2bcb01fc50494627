"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.geocoding import GeocodingService
from ..dependencies import get_geocoding

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_osrm_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.osrm_client import check_health as osrm_health_check
    return osrm_health_check


def _get_geocoder_health_check():
    from ...services.geocoding.nominatim import check_health as geocoder_health_check
    return geocoder_health_check


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
def health_osrm() -> dict:
    """Check OSRM service health."""
    try:
        osrm_health_check = _get_osrm_health_check()
        return {"service": "osrm", "healthy": osrm_health_check()}
    except Exception as e:
        return {"service": "osrm", "healthy": False, "error": str(e)}


@router.get("/health/geocoder", status_code=status.HTTP_200_OK)
def health_geocoder(geocoding: GeocodingService = Depends(get_geocoding)) -> dict:
    """Check geocoder reachability and report cache occupancy."""
    try:
        healthy = _get_geocoder_health_check()()
    except Exception as e:
        return {"service": "geocoder", "healthy": False, "error": str(e), "cache": geocoding.cache.stats()}
    return {"service": "geocoder", "healthy": healthy, "cache": geocoding.cache.stats()}
