"""Route group exports."""

from . import geocoding, health, zones

__all__ = ["zones", "geocoding", "health"]
