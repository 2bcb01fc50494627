"""Cached, parallel geocoding of city names."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Sequence

from ...config import settings
from ...errors import GeocodingProviderError, InputInvalid
from ...models.domain import GeoPoint
from .base import Geocoder
from .cache import UNRESOLVABLE, GeocodeCache

logger = logging.getLogger(__name__)


class GeocodingService:
    """Resolves city names through a geocoder, consulting the cache first.

    Every key reaches the geocoder at most once for the lifetime of the
    cache. Failures are cached as unresolvable and never retried.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        cache: GeocodeCache | None = None,
        max_parallel_requests: int | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.geocoder = geocoder
        self.cache = cache if cache is not None else GeocodeCache()
        self.max_parallel_requests = max_parallel_requests or settings.geocode_max_parallel_requests
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.geocode_timeout_seconds

    def geocode(self, query: str) -> GeoPoint | None:
        """Resolve a single place name. Raises ``InputInvalid`` for blank input."""
        key = query.strip() if query else ""
        if not key:
            raise InputInvalid("City is required")
        return self.geocode_batch([key])[key]

    def geocode_batch(self, queries: Sequence[str]) -> dict[str, GeoPoint | None]:
        """Resolve many keys, fanning uncached ones out over a thread pool.

        Keys are used verbatim. The returned mapping contains every input key;
        unresolvable keys map to ``None``.
        """
        unique_keys = list(dict.fromkeys(queries))
        if not unique_keys:
            return {}

        futures = {}
        owned: list[str] = []
        for key in unique_keys:
            future, is_owner = self.cache.claim(key)
            futures[key] = future
            if is_owner:
                owned.append(key)

        if owned:
            logger.info(
                f"Geocoding {len(owned)} uncached location(s) "
                f"({len(unique_keys) - len(owned)} cached or in flight)"
            )
            workers = min(self.max_parallel_requests, len(owned))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                for key in owned:
                    executor.submit(self._lookup, key)

        # One deadline covers every lookup this call waits on, including ones owned by other requests.
        done, pending = wait(futures.values(), timeout=self.timeout_seconds)
        if pending:
            logger.warning(f"Timed out waiting for {len(pending)} in-flight geocode lookup(s)")

        results: dict[str, GeoPoint | None] = {}
        for key, future in futures.items():
            value = future.result() if future in done else UNRESOLVABLE
            results[key] = None if value is UNRESOLVABLE else value
        return results

    def _lookup(self, key: str) -> None:
        value = UNRESOLVABLE
        try:
            point = self.geocoder.geocode(key)
            if point is not None:
                value = point
            else:
                logger.info("Geocoder returned no match")
                logger.debug(f"No geocoding match for '{key}'")
        except GeocodingProviderError as exc:
            logger.warning(f"Geocoding failed ({exc.provider_name}): {exc.message}")
        except Exception as exc:
            logger.exception(f"Unexpected geocoding error: {exc}")
        finally:
            self.cache.resolve(key, value)
