"""Service radius estimation for newly authored areas."""

from __future__ import annotations

from ...models.domain import BoundingBox, Coordinate
from ..geospatial import haversine_km, validate_bounds, validate_coordinate


def estimate_radius_km(centroid: Coordinate, bounds: BoundingBox) -> float:
    """Approximate an area's radius as the distance from its centroid to the box's northeast corner.

    With the centroid near the middle of the box this slightly overestimates
    the true extent, which is acceptable for a circular fallback.
    """

    validate_coordinate(centroid, label="centroid")
    validate_bounds(bounds)
    return round(haversine_km(centroid, bounds.northeast), 2)
