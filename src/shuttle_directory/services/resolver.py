"""Closest-driver lookup over city-level driver locations."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..models.domain import ClosestMatch, Driver, GeoPoint
from .geocoding.cache import UNRESOLVABLE
from .geocoding.service import GeocodingService
from .geospatial import distance_between

logger = logging.getLogger(__name__)


def resolve_locations(candidates: Sequence[Driver], geocoding: GeocodingService) -> dict[str, GeoPoint | None]:
    """Geocode the distinct location keys of ``candidates`` in first-seen order."""

    keys = list(dict.fromkeys(candidate.location_key for candidate in candidates))
    cached, missing = geocoding.cache.partition(keys)
    logger.debug(f"Resolving {len(keys)} driver locations ({len(cached)} cached, {len(missing)} to look up)")
    locations: dict[str, GeoPoint | None] = {
        key: (None if value is UNRESOLVABLE else value) for key, value in cached.items()
    }
    if missing:
        locations.update(geocoding.geocode_batch(missing))
    return locations


def find_closest(
    target: GeoPoint,
    candidates: Sequence[Driver],
    geocoding: GeocodingService,
) -> Optional[ClosestMatch]:
    """Return the candidate nearest to ``target`` by great-circle distance.

    Candidates whose city cannot be geocoded are skipped. Ties go to the
    candidate that appears first in ``candidates``. Returns ``None`` when no
    candidate has a resolvable location.
    """
    if not candidates:
        return None

    locations = resolve_locations(candidates, geocoding)

    closest: Driver | None = None
    min_distance = float("inf")
    for candidate in candidates:
        point = locations.get(candidate.location_key)
        if point is None:
            continue
        distance = distance_between(target, point)
        if distance < min_distance:
            min_distance = distance
            closest = candidate

    if closest is None:
        logger.info(f"No resolvable driver location among {len(candidates)} candidates")
        return None
    return ClosestMatch(entity=closest, distance_miles=min_distance)
