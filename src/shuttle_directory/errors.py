"""Error taxonomy for distance and geocoding operations.

Every error carries a ``user_message`` that the HTTP layer returns verbatim.
None of these are fatal to the process.
"""

from __future__ import annotations


class DistanceError(Exception):
    """Base class for recoverable distance calculator errors."""

    default_message = "Error calculating distance. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class InputInvalid(DistanceError):
    """A required city string was empty."""

    default_message = "Please enter both cities"


class GeocodeFailed(DistanceError):
    """A city could not be resolved to coordinates."""

    default_message = (
        "Could not find one or both cities. Please check spelling and include state "
        '(e.g., "Macungie, PA")'
    )

    def __init__(self, query: str | None = None, message: str | None = None) -> None:
        self.query = query
        super().__init__(message)


class RouteUnavailable(DistanceError):
    """The routing service failed or returned no distance."""

    default_message = "Could not calculate driving distance. Please try again."


class NoCandidates(DistanceError):
    """The directory is empty or no driver location could be resolved."""

    default_message = "No shuttle companies found near pickup location"


class GeocodingProviderError(Exception):
    """Raised when a geocoding provider has a transport or service error.

    Distinguishes provider failures (timeout, HTTP error, connection error)
    from a successful response with no match, which returns ``None``.
    """

    def __init__(self, provider_name: str, message: str, status_code: int | None = None) -> None:
        self.provider_name = provider_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider_name}: {message}")
