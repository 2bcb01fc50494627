"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
import time
from typing import Sequence

import httpx

from ...config import settings

METERS_PER_MILE = 1609.344

logger = logging.getLogger(__name__)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
    ) -> None:
        self.base_url = base_url or settings.osrm_base_url
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.profile = profile or settings.osrm_profile
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout, connect=5.0))

    def route(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Driving route through ``coordinates`` given as (lat, lon) pairs.

        ``routes[0]`` of the response carries ``distance`` in meters and
        ``duration`` in seconds. Server errors, rate limiting and transport
        failures are retried with linear backoff. Other HTTP errors and
        non-"Ok" codes such as "NoRoute" are raised immediately.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        path = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        url = f"{self.base_url}/route/v1/{self.profile}/{path}"

        with self._get_client() as client:
            for attempt in range(self.max_retries + 1):
                try:
                    response = client.get(url, params={"overview": "false", "steps": "false"})
                    response.raise_for_status()
                except httpx.HTTPStatusError as e:
                    status = e.response.status_code
                    if (status != 429 and status < 500) or attempt == self.max_retries:
                        raise
                    logger.debug(f"OSRM returned HTTP {status}, retrying (attempt {attempt + 1}/{self.max_retries})")
                except httpx.TransportError as e:
                    if attempt == self.max_retries:
                        raise ConnectionError(f"OSRM at {self.base_url} unreachable: {e}") from e
                    logger.debug(f"OSRM transport error, retrying (attempt {attempt + 1}/{self.max_retries}): {e}")
                else:
                    data = response.json()
                    if data.get("code") != "Ok":
                        raise ValueError(f"OSRM route request failed: {data.get('message', data.get('code'))}")
                    return data
                time.sleep(self.backoff_seconds * (attempt + 1))
        raise ConnectionError(f"OSRM at {self.base_url} did not answer")


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health with a short route request.

    Public OSRM endpoints have no /health endpoint, so connectivity is
    tested with a minimal route between two nearby points (Harrisburg, PA).
    """
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        test_coords = "-76.8867,40.2732;-76.8800,40.2600"
        url = f"{base.rstrip('/')}/route/v1/{settings.osrm_profile}/{test_coords}"
        response = httpx.get(url, params={"overview": "false"}, timeout=5.0)
        response.raise_for_status()
        return response.json().get("code") == "Ok"
    except (httpx.HTTPError, ValueError):
        return False
