"""Resolve a customer coordinate to a configured delivery area."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...config import settings
from ...models.domain import (
    Area,
    Coordinate,
    NearbyCandidate,
    ResolutionMatch,
    ResolutionResult,
    Zone,
    ZoneCatalog,
    is_real_number,
)
from ..geospatial import contains_box, haversine_km, validate_coordinate

DEFAULT_AREA_RADIUS_KM = 2.0
NEARBY_THRESHOLD_KM = 10.0
MAX_NEARBY_RESULTS = 5
# Absorbs float error for points placed exactly on a radius boundary.
RADIUS_TOLERANCE_KM = 1e-6

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolveOptions:
    default_area_radius_km: float = DEFAULT_AREA_RADIUS_KM
    nearby_threshold_km: float = NEARBY_THRESHOLD_KM
    max_nearby_results: int = MAX_NEARBY_RESULTS
    city: Optional[str] = None
    include_inactive: bool = False

    def __post_init__(self) -> None:
        if self.default_area_radius_km <= 0:
            raise ValueError("default_area_radius_km must be > 0")
        if self.nearby_threshold_km < 0:
            raise ValueError("nearby_threshold_km must be >= 0")
        if self.max_nearby_results < 0:
            raise ValueError("max_nearby_results must be >= 0")

    @classmethod
    def from_settings(cls, **overrides) -> "ResolveOptions":
        values = {
            "default_area_radius_km": settings.default_area_radius_km,
            "nearby_threshold_km": settings.nearby_threshold_km,
            "max_nearby_results": settings.max_nearby_results,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


def resolve(
    catalog: ZoneCatalog,
    point: Coordinate,
    options: ResolveOptions | None = None,
) -> ResolutionResult:
    """Find the first area containing ``point``, or rank nearby areas.

    Zones are scanned in catalog order and areas in stored order; the first
    area whose bounds contain the point, or whose centroid lies within its
    effective radius, wins. Bounds are checked before the radius. Without a
    match, areas within ``nearby_threshold_km`` of the point are returned
    nearest first, ties kept in catalog order.

    Range zones match on the circle around their shop and contribute no
    per-area matches or suggestions.
    """
    options = options or ResolveOptions()
    validate_coordinate(point, label="query point")

    candidates: list[NearbyCandidate] = []
    for zone in _eligible_zones(catalog, options):
        if zone.is_range:
            match = _match_shop_range(zone, point)
            if match is not None:
                return ResolutionResult(match=match)
            continue

        for area in zone.areas:
            if not is_well_formed(area):
                logger.warning(
                    "Skipping malformed area '%s' in zone '%s': centroid=%r bounds=%r",
                    area.name,
                    zone.name,
                    area.centroid,
                    area.bounds,
                )
                continue

            if area.bounds is not None and contains_box(area.bounds, point):
                logger.debug("Point %s matched '%s' in '%s' by bounds", point, area.name, zone.name)
                return ResolutionResult(match=ResolutionMatch(zone_name=zone.name, area_name=area.name))

            distance_km = haversine_km(area.centroid, point)
            radius_km = effective_radius_km(area, options.default_area_radius_km)
            if distance_km <= radius_km + RADIUS_TOLERANCE_KM:
                logger.debug(
                    "Point %s matched '%s' in '%s' by radius (%.3f <= %.3f km)",
                    point,
                    area.name,
                    zone.name,
                    distance_km,
                    radius_km,
                )
                return ResolutionResult(match=ResolutionMatch(zone_name=zone.name, area_name=area.name))

            if distance_km <= options.nearby_threshold_km:
                candidates.append(
                    NearbyCandidate(
                        area_name=area.name,
                        zone_name=zone.name,
                        distance_km=round(distance_km, 2),
                    )
                )

    candidates.sort(key=lambda candidate: candidate.distance_km)
    return ResolutionResult(match=None, nearby=tuple(candidates[: options.max_nearby_results]))


def effective_radius_km(area: Area, default_radius_km: float = DEFAULT_AREA_RADIUS_KM) -> float:
    """Area radius when positive, otherwise the default."""

    if is_real_number(area.radius_km) and area.radius_km > 0:
        return float(area.radius_km)
    return default_radius_km


def _eligible_zones(catalog: ZoneCatalog, options: ResolveOptions) -> list[Zone]:
    city = options.city.strip().lower() if options.city else None
    zones: list[Zone] = []
    for zone in catalog.zones():
        if not zone.active and not options.include_inactive:
            continue
        if city and zone.name.strip().lower() != city:
            continue
        zones.append(zone)
    return zones


def is_well_formed(area: Area) -> bool:
    if not isinstance(area.centroid, Coordinate) or not area.centroid.is_valid():
        return False
    if area.bounds is not None and not area.bounds.is_valid():
        return False
    if area.radius_km is not None and not is_real_number(area.radius_km):
        return False
    return True


def _match_shop_range(zone: Zone, point: Coordinate) -> Optional[ResolutionMatch]:
    if not zone.has_shop_range():
        logger.warning(
            "Skipping range zone '%s' without a usable shop location: shop=%r radius=%r",
            zone.name,
            zone.shop_location,
            zone.delivery_radius_km,
        )
        return None

    radius_km = zone.delivery_radius_km
    distance_km = haversine_km(zone.shop_location, point)
    if distance_km <= radius_km + RADIUS_TOLERANCE_KM:
        logger.debug("Point %s within %.3f km of the '%s' shop", point, radius_km, zone.name)
        return ResolutionMatch(zone_name=zone.name, area_name=zone.shop_address or zone.name)
    return None
