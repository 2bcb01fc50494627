"""Drop-off to pickup distance calculation and closest-driver lookup."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Callable, Generic, Optional, Sequence, TypeVar

from ..data.drivers_repository import load_drivers
from ..errors import DistanceError, GeocodeFailed, InputInvalid
from ..models.domain import ClosestMatch, DistanceResult, Driver, GeoPoint, RouteDistance, round_miles
from .geocoding.service import GeocodingService
from .geospatial import format_duration
from .resolver import find_closest
from .routing.service import route_distance

T = TypeVar("T")

DEFAULT_MAX_SESSIONS = 1000

logger = logging.getLogger(__name__)


class QueryTracker(Generic[T]):
    """Last-query-wins bookkeeping for one calculator session.

    Each query takes a token from ``begin``. Its result is applied only if no
    newer query has started since, so a slow response never replaces a
    fresher one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest = 0
        self._result: Optional[T] = None

    def begin(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest

    def apply(self, token: int, result: Optional[T]) -> bool:
        with self._lock:
            if token != self._latest:
                return False
            self._result = result
            return True

    @property
    def result(self) -> Optional[T]:
        with self._lock:
            return self._result

    def clear(self) -> None:
        with self._lock:
            self._latest += 1
            self._result = None


class SessionRegistry(Generic[T]):
    """Query trackers keyed by client session id, least recently used dropped first."""

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        self.max_sessions = max_sessions
        self._trackers: OrderedDict[str, QueryTracker[T]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> QueryTracker[T]:
        with self._lock:
            tracker = self._trackers.get(session_id)
            if tracker is None:
                tracker = QueryTracker()
                self._trackers[session_id] = tracker
                while len(self._trackers) > self.max_sessions:
                    self._trackers.popitem(last=False)
            else:
                self._trackers.move_to_end(session_id)
            return tracker

    def __len__(self) -> int:
        with self._lock:
            return len(self._trackers)


class DistanceCalculator:
    """Geocodes both endpoints, measures the trip and finds the closest driver to the pickup."""

    def __init__(
        self,
        geocoding: GeocodingService,
        directory: Callable[[], Sequence[Driver]] = load_drivers,
        router: Callable[[GeoPoint, GeoPoint], RouteDistance] = route_distance,
    ) -> None:
        self.geocoding = geocoding
        self.directory = directory
        self.router = router

    def calculate(self, drop_off_city: str, pickup_city: str) -> DistanceResult:
        drop_off = (drop_off_city or "").strip()
        pickup = (pickup_city or "").strip()
        if not drop_off or not pickup:
            raise InputInvalid()

        points = self.geocoding.geocode_batch([drop_off, pickup])
        origin, destination = points[drop_off], points[pickup]
        if origin is None or destination is None:
            failed = drop_off if origin is None else pickup
            raise GeocodeFailed(query=failed)

        trip = self.router(origin, destination)
        closest = self.closest_driver(destination)

        return DistanceResult(
            distance_miles=round_miles(trip.miles),
            duration=format_duration(trip.seconds),
            duration_seconds=trip.seconds,
            estimated=trip.estimated,
            from_city=drop_off,
            to_city=pickup,
            closest_driver=closest,
            metadata={
                "from": {"lat": origin.latitude, "lng": origin.longitude},
                "to": {"lat": destination.latitude, "lng": destination.longitude},
            },
        )

    def closest_driver(self, target: GeoPoint) -> Optional[ClosestMatch]:
        try:
            candidates = self.directory()
        except (OSError, ValueError) as exc:
            logger.warning(f"Driver directory unavailable, skipping closest driver: {exc}")
            return None
        if not candidates:
            logger.info("Driver directory is empty")
            return None
        return find_closest(target, candidates, self.geocoding)

    def calculate_latest(
        self, tracker: QueryTracker[DistanceResult], drop_off_city: str, pickup_city: str
    ) -> tuple[DistanceResult, bool]:
        """Run ``calculate`` under ``tracker``; the flag is False when a newer query superseded it."""
        token = tracker.begin()
        try:
            result = self.calculate(drop_off_city, pickup_city)
        except DistanceError:
            # A failed latest query clears whatever the session showed before.
            tracker.apply(token, None)
            raise
        applied = tracker.apply(token, result)
        if not applied:
            logger.info(f"Discarding stale distance result for query #{token}")
        return result, applied
