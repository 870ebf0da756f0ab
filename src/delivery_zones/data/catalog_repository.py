"""Zone catalog loader with database-first approach, falling back to an Excel workbook."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from openpyxl import load_workbook

from ..config import settings
from ..db.supabase import fetch_rows
from ..models.domain import (
    DELIVERY_TYPE_CITY,
    DELIVERY_TYPES,
    Area,
    BoundingBox,
    Coordinate,
    Zone,
    ZoneCatalog,
)

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"City", "Society", "Latitude", "Longitude"}


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError as exc:
        raise ValueError(f"Unable to parse float from value '{value}'") from exc


def _coerce_bool(value: Any, default: bool = True) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "y", "active"}


def _coerce_int(value: Any, default: int = 0) -> int:
    number = _coerce_float(value)
    return default if number is None else int(number)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _build_bounds(
    sw_lat: Optional[float],
    sw_lng: Optional[float],
    ne_lat: Optional[float],
    ne_lng: Optional[float],
) -> Optional[BoundingBox]:
    corners = (sw_lat, sw_lng, ne_lat, ne_lng)
    if any(value is None for value in corners):
        return None
    if all(value == 0 for value in corners):
        return None
    return BoundingBox(
        southwest=Coordinate(lat=sw_lat, lng=sw_lng),
        northeast=Coordinate(lat=ne_lat, lng=ne_lng),
    )


def _bounds_from_mapping(bounds: Any) -> Optional[BoundingBox]:
    if not isinstance(bounds, dict):
        return None
    southwest = bounds.get("southwest") or {}
    northeast = bounds.get("northeast") or {}
    return _build_bounds(
        _coerce_float(southwest.get("lat")),
        _coerce_float(southwest.get("lng")),
        _coerce_float(northeast.get("lat")),
        _coerce_float(northeast.get("lng")),
    )


def _area_from_mapping(item: dict) -> Area:
    name = _optional_text(item.get("name"))
    if not name:
        raise ValueError("area is missing a name")
    lat = _coerce_float(item.get("latitude", item.get("lat")))
    lng = _coerce_float(item.get("longitude", item.get("lng")))
    if lat is None or lng is None:
        raise ValueError(f"area '{name}' is missing coordinates")
    return Area(
        name=name,
        centroid=Coordinate(lat=lat, lng=lng),
        bounds=_bounds_from_mapping(item.get("bounds")),
        radius_km=_coerce_float(item.get("radius")),
        external_ref=_optional_text(item.get("placeId") or item.get("place_id")),
        address=_optional_text(item.get("address")),
    )


def _delivery_type(value: Any) -> str:
    text = _optional_text(value)
    if text is None:
        return DELIVERY_TYPE_CITY
    kind = text.lower()
    if kind not in DELIVERY_TYPES:
        raise ValueError(f"unknown delivery type '{text}'")
    return kind


def _shop_location(lat: Any, lng: Any) -> Optional[Coordinate]:
    shop_lat = _coerce_float(lat)
    shop_lng = _coerce_float(lng)
    if shop_lat is None or shop_lng is None:
        return None
    return Coordinate(lat=shop_lat, lng=shop_lng)


def _zone_settings(
    delivery_type: Any,
    shop_lat: Any,
    shop_lng: Any,
    shop_address: Any,
    delivery_radius: Any,
) -> dict[str, Any]:
    """Keyword arguments for the delivery-mode fields of a ``Zone``."""
    return {
        "delivery_type": _delivery_type(delivery_type),
        "shop_location": _shop_location(shop_lat, shop_lng),
        "shop_address": _optional_text(shop_address),
        "delivery_radius_km": _coerce_float(delivery_radius) or 0.0,
    }


def _sorted_zones(zones: Iterable[Zone]) -> ZoneCatalog:
    return ZoneCatalog.from_zones(sorted(zones, key=lambda zone: (zone.display_order, zone.name)))


def zones_from_records(rows: Iterable[dict]) -> ZoneCatalog:
    """Build a catalog from stored delivery-area documents (one document per city)."""

    zones: list[Zone] = []
    for row in rows:
        city = _optional_text(row.get("city"))
        if not city:
            logger.warning(f"Skipping delivery area record without a city: {row.get('id')}")
            continue
        shop = row.get("shop_location") or row.get("shopLocation") or {}
        try:
            display_order = _coerce_int(row.get("display_order", row.get("displayOrder")), default=0)
            zone_settings = _zone_settings(
                row.get("delivery_type", row.get("deliveryType")),
                shop.get("latitude", shop.get("lat")),
                shop.get("longitude", shop.get("lng")),
                shop.get("address"),
                row.get("delivery_radius", row.get("deliveryRadius")),
            )
        except (AttributeError, ValueError) as exc:
            logger.warning(f"Skipping delivery area record for '{city}': {exc}")
            continue
        areas: list[Area] = []
        for item in row.get("delivery_areas") or row.get("deliveryAreas") or []:
            try:
                areas.append(_area_from_mapping(item))
            except (AttributeError, TypeError, ValueError) as exc:
                logger.warning(f"Skipping invalid area in '{city}': {exc}")
        zones.append(
            Zone(
                name=city,
                areas=tuple(areas),
                active=_coerce_bool(row.get("is_active", row.get("isActive")), default=True),
                display_order=display_order,
                **zone_settings,
            )
        )
    return _sorted_zones(zones)


def _load_catalog_from_database() -> ZoneCatalog | None:
    """Load zones from Supabase. Returns None if the database is not available or empty."""
    rows = fetch_rows(settings.supabase_areas_table)
    if not rows:
        return None
    catalog = zones_from_records(rows)
    return catalog if len(catalog) else None


def _load_catalog_from_file(source: Path | None = None) -> ZoneCatalog:
    """Load zones from the areas workbook, one row per area."""
    workbook_path = source or settings.areas_file
    if not workbook_path.exists():
        raise FileNotFoundError(f"Areas workbook not found: {workbook_path}")

    wb = load_workbook(workbook_path, data_only=True, read_only=True)
    try:
        sheet = wb.active
        rows = sheet.iter_rows(min_row=1, values_only=True)
        header = next(rows, None)
        if header is None:
            raise ValueError(f"Areas workbook '{workbook_path}' is empty.")

        header_map = {str(name).strip(): idx for idx, name in enumerate(header) if name is not None}
        missing_columns = REQUIRED_COLUMNS - set(header_map)
        if missing_columns:
            raise ValueError(f"Areas workbook missing columns: {', '.join(sorted(missing_columns))}")

        def cell(row: tuple, column: str) -> Any:
            idx = header_map.get(column)
            if idx is None or idx >= len(row):
                return None
            return row[idx]

        zone_order: list[str] = []
        zone_areas: dict[str, list[Area]] = {}
        zone_meta: dict[str, dict[str, Any]] = {}
        for line_number, row in enumerate(rows, start=2):
            city = _optional_text(cell(row, "City"))
            name = _optional_text(cell(row, "Society"))
            if not city and not name:
                continue
            try:
                if not city or not name:
                    raise ValueError("City and Society are required")
                lat = _coerce_float(cell(row, "Latitude"))
                lng = _coerce_float(cell(row, "Longitude"))
                if lat is None or lng is None:
                    raise ValueError("Latitude and Longitude are required")
                area = Area(
                    name=name,
                    centroid=Coordinate(lat=lat, lng=lng),
                    bounds=_build_bounds(
                        _coerce_float(cell(row, "SW Lat")),
                        _coerce_float(cell(row, "SW Lng")),
                        _coerce_float(cell(row, "NE Lat")),
                        _coerce_float(cell(row, "NE Lng")),
                    ),
                    radius_km=_coerce_float(cell(row, "Radius")),
                    external_ref=_optional_text(cell(row, "PlaceId")),
                    address=_optional_text(cell(row, "Address")),
                )
                meta = {
                    "active": _coerce_bool(cell(row, "Active"), default=True),
                    "display_order": _coerce_int(cell(row, "Display Order"), default=0),
                    **_zone_settings(
                        cell(row, "Delivery Type"),
                        cell(row, "Shop Lat"),
                        cell(row, "Shop Lng"),
                        cell(row, "Shop Address"),
                        cell(row, "Delivery Radius"),
                    ),
                }
            except ValueError as exc:
                logger.warning(f"Skipping invalid area row {line_number} in {workbook_path.name}: {exc}")
                continue

            if city not in zone_areas:
                zone_order.append(city)
                zone_areas[city] = []
                zone_meta[city] = meta
            zone_areas[city].append(area)
    finally:
        wb.close()

    return _sorted_zones(
        Zone(name=city, areas=tuple(zone_areas[city]), **zone_meta[city]) for city in zone_order
    )


def load_catalog(source: Path | None = None) -> ZoneCatalog:
    """Load the zone catalog from the database, or from the workbook when the database has none."""
    if source is None:
        catalog = _load_catalog_from_database()
        if catalog is not None:
            logger.info(f"Loaded {len(catalog)} zones from database")
            return catalog

    catalog = _load_catalog_from_file(source)
    logger.info(f"Loaded {len(catalog)} zones from workbook")
    return catalog
