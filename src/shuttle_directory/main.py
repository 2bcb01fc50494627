"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import distance, drivers, geocoding, health, routing
from .config import settings
from .services.calculator import SessionRegistry
from .services.geocoding import GeocodeCache, GeocodingService, NominatimGeocoder


def create_app(geocoding_service: GeocodingService | None = None) -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title=settings.app_name)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # One geocode cache for the process lifetime, shared by every request.
    app.state.geocoding = geocoding_service or GeocodingService(NominatimGeocoder(), GeocodeCache())
    app.state.sessions = SessionRegistry()

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(drivers.router, prefix=settings.api_prefix)
    app.include_router(geocoding.router, prefix=settings.api_prefix)
    app.include_router(routing.router, prefix=settings.api_prefix)
    app.include_router(distance.router, prefix=settings.api_prefix)
    return app


app = create_app()
