"""Export helpers for delivery zones."""

from .geojson import area_polygon, catalog_to_geojson, save_geojson

__all__ = ["area_polygon", "catalog_to_geojson", "save_geojson"]
