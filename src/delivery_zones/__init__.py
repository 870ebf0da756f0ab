"""Delivery zone resolution for the storefront's location checks."""

from .models.domain import (
    Area,
    BoundingBox,
    Coordinate,
    InvalidCoordinateError,
    NearbyCandidate,
    ResolutionMatch,
    ResolutionResult,
    Zone,
    ZoneCatalog,
)
from .services.resolution import ResolveOptions, estimate_radius_km, resolve

__all__ = [
    "Area",
    "BoundingBox",
    "Coordinate",
    "InvalidCoordinateError",
    "NearbyCandidate",
    "ResolutionMatch",
    "ResolutionResult",
    "ResolveOptions",
    "Zone",
    "ZoneCatalog",
    "estimate_radius_km",
    "resolve",
]
