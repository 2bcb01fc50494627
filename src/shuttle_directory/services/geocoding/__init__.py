"""Geocoding providers, cache and service."""

from .base import Geocoder
from .cache import UNRESOLVABLE, GeocodeCache
from .nominatim import NominatimGeocoder
from .service import GeocodingService

__all__ = [
    "Geocoder",
    "GeocodeCache",
    "GeocodingService",
    "NominatimGeocoder",
    "UNRESOLVABLE",
]
