from .client import GeocodingClient, GeocodingError, GoogleGeocodingClient
from .models import PlaceDetails, PlaceSuggestion, ReverseGeocodeResult

__all__ = [
    "GeocodingClient",
    "GeocodingError",
    "GoogleGeocodingClient",
    "PlaceDetails",
    "PlaceSuggestion",
    "ReverseGeocodeResult",
]
