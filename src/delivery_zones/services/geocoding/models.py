"""Geocoding domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...models.domain import BoundingBox, Coordinate


@dataclass(slots=True)
class PlaceSuggestion:
    place_id: str
    description: str
    main_text: Optional[str] = None
    secondary_text: Optional[str] = None


@dataclass(slots=True)
class PlaceDetails:
    place_id: str
    name: str
    formatted_address: str
    location: Coordinate
    bounds: Optional[BoundingBox] = None
    viewport: Optional[BoundingBox] = None
    city: Optional[str] = None


@dataclass(slots=True)
class ReverseGeocodeResult:
    address: str
    city: Optional[str] = None
