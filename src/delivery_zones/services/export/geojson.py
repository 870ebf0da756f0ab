"""GeoJSON export of configured delivery areas."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from shapely.geometry import Polygon, box, mapping

from ...models.domain import Area, Coordinate, Zone, ZoneCatalog
from ...persistence.filesystem import FileStorage
from ..geospatial import destination_point
from ..resolution.resolver import ResolveOptions, effective_radius_km, is_well_formed

CIRCLE_SEGMENTS = 64

logger = logging.getLogger(__name__)


def generate_zone_color(index: int) -> str:
    """Generate distinct colors for zones."""
    colors = [
        "#02d8e0", "#e0003e", "#38e000", "#0000c1", "#e0e005",
        "#611cc7", "#e0af00", "#13aae0", "#a4d819", "#00e0bb",
    ]
    return colors[index % len(colors)]


def _circle(center: Coordinate, radius_km: float) -> Polygon:
    ring = []
    for step in range(CIRCLE_SEGMENTS):
        point = destination_point(center, 360.0 * step / CIRCLE_SEGMENTS, radius_km)
        ring.append((point.lng, point.lat))
    return Polygon(ring)


def area_polygon(area: Area, default_radius_km: float) -> Polygon:
    """Shape used to highlight an area: its bounding box, or a circle of its effective radius.

    Shapely coordinates are (lng, lat).
    """
    if area.bounds is not None:
        sw, ne = area.bounds.southwest, area.bounds.northeast
        return box(sw.lng, sw.lat, ne.lng, ne.lat)
    return _circle(area.centroid, effective_radius_km(area, default_radius_km))


def _shop_feature(zone: Zone, color: str) -> Dict[str, Any] | None:
    shop = zone.shop_location
    if not zone.has_shop_range():
        logger.warning(f"Skipping range zone '{zone.name}' without a usable shop location for GeoJSON export")
        return None
    return {
        "type": "Feature",
        "geometry": mapping(_circle(shop, zone.delivery_radius_km)),
        "properties": {
            "zone": zone.name,
            "area": zone.shop_address or zone.name,
            "source": "shop",
            "radius_km": zone.delivery_radius_km,
            "centroid": [shop.lat, shop.lng],
            "place_id": None,
            "color": color,
        },
    }


def catalog_to_geojson(
    catalog: ZoneCatalog,
    options: ResolveOptions | None = None,
) -> Dict[str, Any]:
    """Convert the catalog to a GeoJSON FeatureCollection, one feature per area.

    Range zones export a single circle around their shop. Inactive zones are
    left out unless ``options.include_inactive`` is set. Malformed areas are
    skipped.
    """
    options = options or ResolveOptions()
    features: List[Dict[str, Any]] = []

    for idx, zone in enumerate(catalog.zones()):
        if not zone.active and not options.include_inactive:
            continue
        color = generate_zone_color(idx)
        if zone.is_range:
            feature = _shop_feature(zone, color)
            if feature is not None:
                features.append(feature)
            continue
        for area in zone.areas:
            if not is_well_formed(area):
                logger.warning(f"Skipping malformed area '{area.name}' in '{zone.name}' for GeoJSON export")
                continue
            polygon = area_polygon(area, options.default_area_radius_km)
            features.append(
                {
                    "type": "Feature",
                    "geometry": mapping(polygon),
                    "properties": {
                        "zone": zone.name,
                        "area": area.name,
                        "source": "bounds" if area.bounds is not None else "radius",
                        "radius_km": (
                            None
                            if area.bounds is not None
                            else effective_radius_km(area, options.default_area_radius_km)
                        ),
                        "centroid": [area.centroid.lat, area.centroid.lng],
                        "place_id": area.external_ref,
                        "color": color,
                    },
                }
            )

    return {"type": "FeatureCollection", "features": features}


def save_geojson(collection: Dict[str, Any], storage: FileStorage | None = None) -> Path:
    """Write the collection into a fresh run directory and return the file path."""
    storage = storage or FileStorage()
    path = storage.save_export("zones_geojson", "zones.geojson", collection)
    logger.info(f"Saved {len(collection.get('features', []))} features to {path}")
    return path
