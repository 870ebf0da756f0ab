"""Helpers for operators adding new delivery areas from a place lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..models.domain import Area, BoundingBox, Coordinate
from .geocoding.models import PlaceDetails
from .resolution.radius import estimate_radius_km


class DuplicateAreaError(ValueError):
    """Raised when a drafted area is already configured in the zone."""


@dataclass(slots=True)
class AreaDraft:
    name: str
    place_id: str
    address: str
    centroid: Coordinate
    radius_km: float
    bounds: Optional[BoundingBox] = None
    viewport: Optional[BoundingBox] = None
    city: Optional[str] = None

    def to_area(self) -> Area:
        return Area(
            name=self.name,
            centroid=self.centroid,
            bounds=self.bounds,
            radius_km=self.radius_km,
            external_ref=self.place_id,
            address=self.address or None,
        )


def draft_area_from_place(details: PlaceDetails) -> AreaDraft:
    """Pre-fill an area from place details.

    The radius is estimated from the place bounds; without bounds it stays 0
    so the resolver falls back to its default radius until an operator sets one.
    """
    radius_km = 0.0
    if details.bounds is not None:
        radius_km = estimate_radius_km(details.location, details.bounds)
    return AreaDraft(
        name=details.name,
        place_id=details.place_id,
        address=details.formatted_address,
        centroid=details.location,
        radius_km=radius_km,
        bounds=details.bounds,
        viewport=details.viewport,
        city=details.city,
    )


def ensure_not_duplicate(draft: AreaDraft, existing: Iterable[Area]) -> None:
    name = draft.name.strip().lower()
    for area in existing:
        if draft.place_id and area.external_ref == draft.place_id:
            raise DuplicateAreaError(f"Area '{area.name}' already uses place '{draft.place_id}'.")
        if area.name.strip().lower() == name:
            raise DuplicateAreaError(f"Area '{area.name}' is already configured.")
