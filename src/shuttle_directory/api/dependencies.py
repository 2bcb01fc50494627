"""FastAPI dependencies for the long-lived services held on ``app.state``."""

from __future__ import annotations

from fastapi import Request

from ..services.calculator import DistanceCalculator, SessionRegistry
from ..services.geocoding import GeocodingService


def get_geocoding(request: Request) -> GeocodingService:
    """The process-wide geocoding service; its cache lives as long as the app."""
    return request.app.state.geocoding


def get_calculator(request: Request) -> DistanceCalculator:
    return DistanceCalculator(geocoding=get_geocoding(request))


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions
