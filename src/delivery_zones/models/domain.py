"""Domain models for delivery zones, areas and resolution results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

DELIVERY_TYPE_CITY = "city"
DELIVERY_TYPE_RANGE = "range"
DELIVERY_TYPES = (DELIVERY_TYPE_CITY, DELIVERY_TYPE_RANGE)


class InvalidCoordinateError(ValueError):
    """Raised when a latitude/longitude pair is NaN, infinite or out of range."""


def is_real_number(value: Any) -> bool:
    """True for finite ints and floats; strings and bools are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A WGS84 point in decimal degrees.

    Construction does not validate, so malformed configuration can still be
    represented and reported. Use ``is_valid`` or
    ``services.geospatial.validate_coordinate`` before trusting a value.
    """

    lat: float
    lng: float

    def is_valid(self) -> bool:
        if not (is_real_number(self.lat) and is_real_number(self.lng)):
            return False
        return -90.0 <= self.lat <= 90.0 and -180.0 <= self.lng <= 180.0


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned box; no anti-meridian wraparound."""

    southwest: Coordinate
    northeast: Coordinate

    def is_valid(self) -> bool:
        if not (self.southwest.is_valid() and self.northeast.is_valid()):
            return False
        return self.southwest.lat <= self.northeast.lat and self.southwest.lng <= self.northeast.lng


@dataclass(frozen=True, slots=True)
class Area:
    """A locality ("society") inside a delivery zone."""

    name: str
    centroid: Coordinate
    bounds: Optional[BoundingBox] = None
    radius_km: Optional[float] = None
    external_ref: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Zone:
    """A city with its ordered delivery areas.

    ``city`` zones are served area by area. ``range`` zones are served by a
    circle of ``delivery_radius_km`` around ``shop_location``; their areas
    are listed but not matched individually.
    """

    name: str
    areas: tuple[Area, ...] = ()
    active: bool = True
    display_order: int = 0
    delivery_type: str = DELIVERY_TYPE_CITY
    shop_location: Optional[Coordinate] = None
    shop_address: Optional[str] = None
    delivery_radius_km: float = 0.0

    @property
    def is_range(self) -> bool:
        return self.delivery_type == DELIVERY_TYPE_RANGE

    def has_shop_range(self) -> bool:
        shop = self.shop_location
        if shop is None or not shop.is_valid():
            return False
        return is_real_number(self.delivery_radius_km) and self.delivery_radius_km > 0


@dataclass(frozen=True, slots=True)
class ZoneCatalog:
    """Immutable snapshot of configured zones, in resolution order."""

    _zones: tuple[Zone, ...] = ()

    @classmethod
    def from_zones(cls, zones: Iterable[Zone]) -> "ZoneCatalog":
        return cls(tuple(zones))

    def zones(self) -> tuple[Zone, ...]:
        return self._zones

    def area_count(self) -> int:
        return sum(len(zone.areas) for zone in self._zones)

    def __len__(self) -> int:
        return len(self._zones)


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    zone_name: str
    area_name: str


@dataclass(frozen=True, slots=True)
class NearbyCandidate:
    area_name: str
    zone_name: str
    distance_km: float


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome of resolving a point: a match, or nearby suggestions, never both."""

    match: Optional[ResolutionMatch] = None
    nearby: tuple[NearbyCandidate, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.match is not None and self.nearby:
            raise ValueError("a matched result cannot carry nearby candidates")

    @property
    def matched(self) -> bool:
        return self.match is not None

    def to_dict(self) -> dict:
        return {
            "match": (
                {"zone": self.match.zone_name, "area": self.match.area_name}
                if self.match is not None
                else None
            ),
            "nearby": [
                {
                    "area": candidate.area_name,
                    "zone": candidate.zone_name,
                    "distance_km": candidate.distance_km,
                }
                for candidate in self.nearby
            ],
        }
