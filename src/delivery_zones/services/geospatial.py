"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..models.domain import BoundingBox, Coordinate, InvalidCoordinateError

EARTH_RADIUS_KM = 6371.0


def validate_coordinate(point: Coordinate, *, label: str = "coordinate") -> Coordinate:
    """Return ``point`` unchanged or raise ``InvalidCoordinateError``."""

    if not isinstance(point, Coordinate) or not point.is_valid():
        raise InvalidCoordinateError(
            f"Invalid {label}: {point!r}. Latitude must be within [-90, 90] "
            f"and longitude within [-180, 180]."
        )
    return point


def validate_bounds(bounds: BoundingBox, *, label: str = "bounds") -> BoundingBox:
    if not isinstance(bounds, BoundingBox) or not bounds.is_valid():
        raise InvalidCoordinateError(
            f"Invalid {label}: {bounds!r}. Corners must be valid coordinates with "
            f"southwest <= northeast."
        )
    return bounds


def haversine_km(start: Coordinate, end: Coordinate) -> float:
    """Compute the great-circle distance between two coordinates using the Haversine formula."""

    validate_coordinate(start, label="start coordinate")
    validate_coordinate(end, label="end coordinate")

    phi1, phi2 = math.radians(start.lat), math.radians(end.lat)
    d_phi = math.radians(end.lat - start.lat)
    d_lambda = math.radians(end.lng - start.lng)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def contains_box(box: BoundingBox, point: Coordinate) -> bool:
    """Return True if the point lies inside or on the edge of the box."""

    return (
        box.southwest.lat <= point.lat <= box.northeast.lat
        and box.southwest.lng <= point.lng <= box.northeast.lng
    )


def destination_point(origin: Coordinate, bearing_deg: float, distance_km: float) -> Coordinate:
    """Point reached travelling ``distance_km`` from ``origin`` on the initial bearing."""

    validate_coordinate(origin, label="origin")
    if distance_km < 0:
        raise ValueError("distance_km must be >= 0")

    angular = distance_km / EARTH_RADIUS_KM
    theta = math.radians(bearing_deg)
    phi1 = math.radians(origin.lat)
    lambda1 = math.radians(origin.lng)

    phi2 = math.asin(
        math.sin(phi1) * math.cos(angular) + math.cos(phi1) * math.sin(angular) * math.cos(theta)
    )
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(angular) * math.cos(phi1),
        math.cos(angular) - math.sin(phi1) * math.sin(phi2),
    )
    lng = (math.degrees(lambda2) + 540) % 360 - 180
    return Coordinate(lat=math.degrees(phi2), lng=lng)
