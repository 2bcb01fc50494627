"""OpenStreetMap Nominatim geocoder.

Uses the Nominatim search API for city-to-coordinate resolution. The public
instance is free but asks clients to stay under one request per second.
"""

from __future__ import annotations

import logging
import threading
import time

import httpx

from ...config import settings
from ...errors import GeocodingProviderError
from ...models.domain import GeoPoint
from .base import Geocoder

logger = logging.getLogger(__name__)


class NominatimGeocoder(Geocoder):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        email: str | None = None,
        country_codes: str | None = None,
        max_retries: int | None = None,
        rate_limit_seconds: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.geocode_timeout_seconds
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.email = email if email is not None else settings.geocoder_email
        self.country_codes = country_codes if country_codes is not None else settings.geocoder_country_codes
        self.max_retries = max_retries if max_retries is not None else settings.geocode_max_retries
        self.rate_limit_seconds = (
            rate_limit_seconds if rate_limit_seconds is not None else settings.geocode_rate_limit_seconds
        )
        self._throttle_lock = threading.Lock()
        self._last_request_at = 0.0

    @property
    def provider_name(self) -> str:
        return "nominatim"

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            headers={"User-Agent": self.user_agent},
        )

    def _throttle(self) -> None:
        if self.rate_limit_seconds <= 0:
            return
        with self._throttle_lock:
            wait = self._last_request_at + self.rate_limit_seconds - time.monotonic()
            if wait > 0:
                time.sleep(wait)
            self._last_request_at = time.monotonic()

    def geocode(self, query: str) -> GeoPoint | None:
        params: dict[str, str | int] = {"q": query, "format": "json", "limit": 1}
        if self.country_codes:
            params["countrycodes"] = self.country_codes
        if self.email:
            params["email"] = self.email
        url = f"{self.base_url}/search"

        client = self._get_client()
        try:
            attempt = 0
            while True:
                self._throttle()
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    return self._parse_response(response.json())
                except httpx.HTTPStatusError as e:
                    attempt += 1
                    # 4xx other than rate limiting will not improve on retry
                    if e.response.status_code != 429 and e.response.status_code < 500:
                        raise GeocodingProviderError(
                            self.provider_name,
                            f"Provider returned HTTP {e.response.status_code}",
                            status_code=e.response.status_code,
                        ) from e
                    if attempt > self.max_retries:
                        logger.warning(f"Nominatim HTTP error {e.response.status_code} after {attempt} attempts")
                        raise GeocodingProviderError(
                            self.provider_name,
                            f"Provider returned HTTP {e.response.status_code}",
                            status_code=e.response.status_code,
                        ) from e
                    time.sleep(attempt)
                except httpx.TimeoutException as e:
                    # A timed-out lookup is not retried; the caller treats it as unresolvable.
                    logger.warning("Nominatim geocoder timeout for query (redacted)")
                    raise GeocodingProviderError(self.provider_name, "Geocoding request timed out") from e
                except (httpx.ConnectError, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Nominatim geocoder connection error: {e}")
                        raise GeocodingProviderError(
                            self.provider_name, "Connection to geocoding provider failed"
                        ) from e
                    time.sleep(0.5 * attempt)
                except ValueError as e:
                    raise GeocodingProviderError(self.provider_name, f"Invalid response: {e}") from e
        finally:
            client.close()

    def _parse_response(self, data: list[dict]) -> GeoPoint | None:
        if not data:
            return None
        best = data[0]
        try:
            return GeoPoint(latitude=float(best["lat"]), longitude=float(best["lon"]))
        except (KeyError, TypeError) as e:
            raise ValueError(f"unexpected result shape: {e}") from e


def check_health(base_url: str | None = None) -> bool:
    """Check geocoder reachability with a known-good query."""
    base = (base_url or settings.geocoder_base_url).rstrip("/")
    try:
        response = httpx.get(
            f"{base}/search",
            params={"q": "Harrisburg, PA", "format": "json", "limit": 1},
            headers={"User-Agent": settings.geocoder_user_agent},
            timeout=5.0,
        )
        response.raise_for_status()
        return isinstance(response.json(), list)
    except (httpx.HTTPError, ValueError):
        return False
