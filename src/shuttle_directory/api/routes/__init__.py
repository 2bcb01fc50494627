"""Route group exports."""

from . import distance, drivers, geocoding, health, routing

__all__ = ["distance", "drivers", "geocoding", "health", "routing"]
