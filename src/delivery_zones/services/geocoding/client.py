"""HTTP client for the Google Places and Geocoding web services."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional, Protocol

import httpx

from ...config import settings
from ...models.domain import BoundingBox, Coordinate
from ..geospatial import validate_coordinate
from .models import PlaceDetails, PlaceSuggestion, ReverseGeocodeResult

PLACE_DETAIL_FIELDS = "place_id,name,formatted_address,geometry,address_components,types"
CITY_COMPONENT_TYPES = ("locality", "administrative_area_level_2")
MIN_QUERY_LENGTH = 2

logger = logging.getLogger(__name__)


class GeocodingError(RuntimeError):
    """Raised when the upstream geocoding service fails or rejects a request."""

    def __init__(self, message: str, status: str | None = None) -> None:
        super().__init__(message)
        self.status = status


class GeocodingClient(Protocol):
    def search(self, query: str, city: str | None = None) -> list[PlaceSuggestion]:
        ...

    def place_details(self, place_id: str) -> PlaceDetails | None:
        ...

    def reverse_geocode(self, point: Coordinate) -> ReverseGeocodeResult | None:
        ...


class GoogleGeocodingClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        region: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Google Maps API key is not configured.")
        self.base_url = (base_url or settings.google_maps_base_url).rstrip("/")
        self.region = region if region is not None else settings.geocoding_region
        self.timeout = timeout if timeout is not None else settings.geocoding_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.geocoding_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.geocoding_backoff_seconds
        )
        self._client = http_client

    def search(self, query: str, city: str | None = None) -> list[PlaceSuggestion]:
        """Autocomplete suggestions for a locality name, optionally scoped to a city."""
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        params = {"input": f"{query}, {city.strip()}" if city and city.strip() else query}
        if self.region:
            params["components"] = f"country:{self.region}"
        data = self._get("/place/autocomplete/json", params)

        suggestions: list[PlaceSuggestion] = []
        for prediction in data.get("predictions") or []:
            place_id = prediction.get("place_id")
            if not place_id:
                continue
            formatting = prediction.get("structured_formatting") or {}
            suggestions.append(
                PlaceSuggestion(
                    place_id=place_id,
                    description=prediction.get("description", ""),
                    main_text=formatting.get("main_text"),
                    secondary_text=formatting.get("secondary_text"),
                )
            )
        return suggestions

    def place_details(self, place_id: str) -> PlaceDetails | None:
        if not place_id or not place_id.strip():
            raise ValueError("place_id is required")
        data = self._get(
            "/place/details/json",
            {"place_id": place_id.strip(), "fields": PLACE_DETAIL_FIELDS},
        )
        result = data.get("result")
        if not result:
            return None

        geometry = result.get("geometry") or {}
        location = _coordinate(geometry.get("location"))
        if location is None:
            logger.warning(f"Place '{place_id}' has no usable location")
            return None
        return PlaceDetails(
            place_id=result.get("place_id", place_id),
            name=result.get("name", ""),
            formatted_address=result.get("formatted_address", ""),
            location=location,
            bounds=_box(geometry.get("bounds")),
            viewport=_box(geometry.get("viewport")),
            city=_city(result.get("address_components")),
        )

    def reverse_geocode(self, point: Coordinate) -> ReverseGeocodeResult | None:
        validate_coordinate(point, label="reverse geocode point")
        data = self._get("/geocode/json", {"latlng": f"{point.lat},{point.lng}"})
        results = data.get("results") or []
        if not results:
            logger.warning("Reverse geocoding returned no results")
            return None
        first = results[0]
        return ReverseGeocodeResult(
            address=first.get("formatted_address", ""),
            city=_city(first.get("address_components")),
        )

    def _get(self, path: str, params: dict[str, Any]) -> dict:
        url = f"{self.base_url}{path}"
        query = {**params, "key": self.api_key}
        client = self._client or httpx.Client(timeout=httpx.Timeout(self.timeout, connect=5.0))
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=query)
                    response.raise_for_status()
                    data = response.json()
                    break
                except httpx.HTTPStatusError as e:
                    if e.response.status_code < 500:
                        raise GeocodingError(
                            f"Geocoding request to {path} failed with HTTP {e.response.status_code}"
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingError(
                            f"Geocoding service returned HTTP {e.response.status_code} after {attempt} attempts"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Geocoding HTTP {e.response.status_code}, retrying in {wait_time:.1f}s")
                    time.sleep(wait_time)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingError(
                            f"Geocoding service at {self.base_url} is not reachable: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"Geocoding network error, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries}): {e}"
                    )
                    time.sleep(wait_time)
                except ValueError as e:
                    raise GeocodingError(f"Geocoding response from {path} was not valid JSON") from e
        finally:
            if self._client is None:
                client.close()

        status = data.get("status")
        if status in ("OK", "ZERO_RESULTS", "NOT_FOUND"):
            return data
        message = data.get("error_message") or f"Geocoding API error: {status}"
        logger.error(f"Geocoding API error on {path}: {status} {data.get('error_message') or ''}")
        raise GeocodingError(message, status=status)


def _coordinate(value: Any) -> Optional[Coordinate]:
    if not isinstance(value, dict):
        return None
    lat = value.get("lat")
    lng = value.get("lng")
    if lat is None or lng is None:
        return None
    point = Coordinate(lat=float(lat), lng=float(lng))
    return point if point.is_valid() else None


def _box(value: Any) -> Optional[BoundingBox]:
    if not isinstance(value, dict):
        return None
    southwest = _coordinate(value.get("southwest"))
    northeast = _coordinate(value.get("northeast"))
    if southwest is None or northeast is None:
        return None
    box = BoundingBox(southwest=southwest, northeast=northeast)
    return box if box.is_valid() else None


def _city(components: Any) -> Optional[str]:
    for component in components or []:
        types = component.get("types") or []
        if any(kind in types for kind in CITY_COMPONENT_TYPES):
            return component.get("long_name") or None
    return None
