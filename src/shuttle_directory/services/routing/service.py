"""Driving distance between two points, with a straight-line fallback."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx

from ...config import settings
from ...errors import RouteUnavailable
from ...models.domain import GeoPoint, RouteDistance
from ..geospatial import distance_between, estimate_duration_seconds
from .osrm_client import METERS_PER_MILE, OSRMClient

logger = logging.getLogger(__name__)


def _routed_distance(client: OSRMClient, origin: GeoPoint, destination: GeoPoint) -> RouteDistance:
    try:
        data = client.route(
            [(origin.latitude, origin.longitude), (destination.latitude, destination.longitude)]
        )
    except (httpx.HTTPError, ConnectionError, ValueError) as exc:
        raise RouteUnavailable(str(exc)) from exc

    routes = data.get("routes") or []
    if not routes:
        raise RouteUnavailable("OSRM returned no routes.")
    meters = routes[0].get("distance")
    seconds = routes[0].get("duration")
    if not meters:
        raise RouteUnavailable("OSRM returned no distance.")
    miles = float(meters) / METERS_PER_MILE
    if not seconds:
        seconds = estimate_duration_seconds(miles)
    return RouteDistance(miles=miles, seconds=float(seconds), estimated=False)


def estimated_distance(origin: GeoPoint, destination: GeoPoint) -> RouteDistance:
    miles = distance_between(origin, destination)
    return RouteDistance(miles=miles, seconds=estimate_duration_seconds(miles), estimated=True)


def route_distance(
    origin: GeoPoint,
    destination: GeoPoint,
    client_factory: Optional[Callable[[], OSRMClient]] = None,
) -> RouteDistance:
    """Routed driving distance, or a haversine estimate when routing is unavailable.

    Never raises for routing failures; the fallback is flagged with ``estimated=True``.
    """
    if not settings.osrm_base_url and client_factory is None:
        return estimated_distance(origin, destination)

    try:
        client = (client_factory or OSRMClient)()
        return _routed_distance(client, origin, destination)
    except RouteUnavailable as exc:
        logger.warning(f"Routing unavailable, falling back to straight-line estimate: {exc.user_message}")
    except ValueError as exc:
        logger.warning(f"OSRM client misconfigured, falling back to straight-line estimate: {exc}")
    return estimated_distance(origin, destination)
