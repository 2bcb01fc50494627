"""Base class for geocoding providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...models.domain import GeoPoint


class Geocoder(ABC):
    """Contract for geocoding provider implementations."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider."""

    @abstractmethod
    def geocode(self, query: str) -> GeoPoint | None:
        """Resolve a place name such as ``"Altoona, PA"``.

        Returns ``None`` when the provider answers but finds no match.
        Raises ``GeocodingProviderError`` on transport or service errors.
        """
        raise NotImplementedError
