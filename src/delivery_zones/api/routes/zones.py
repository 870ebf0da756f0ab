"""API routes for delivery zone lookup and authoring."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models.domain import Coordinate, InvalidCoordinateError
from ...schemas.zones import (
    CatalogResponse,
    RadiusEstimateRequest,
    RadiusEstimateResponse,
    ResolveRequest,
    ResolveResponse,
)
from ...services.catalog_store import CatalogNotReadyError, CatalogStore
from ...services.export.geojson import catalog_to_geojson, save_geojson
from ...services.resolution import ResolveOptions, estimate_radius_km, resolve
from ..dependencies import get_catalog_store
from ..serializers import (
    NOT_SERVICEABLE_MESSAGE,
    bounds_from_model,
    catalog_to_models,
    coordinate_from_model,
    resolution_to_response,
)

router = APIRouter(prefix="/zones", tags=["zones"])

logger = logging.getLogger(__name__)


def _snapshot(store: CatalogStore):
    try:
        return store.snapshot()
    except CatalogNotReadyError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def _catalog_response(store: CatalogStore) -> CatalogResponse:
    catalog = _snapshot(store)
    return CatalogResponse(
        zones=catalog_to_models(catalog),
        zone_count=len(catalog),
        area_count=catalog.area_count(),
        published_at=store.published_at,
    )


@router.get("", response_model=CatalogResponse, status_code=status.HTTP_200_OK)
def list_zones(store: CatalogStore = Depends(get_catalog_store)) -> CatalogResponse:
    """Return the currently published zone catalog."""
    return _catalog_response(store)


@router.post("/reload", response_model=CatalogResponse, status_code=status.HTTP_200_OK)
def reload_zones(store: CatalogStore = Depends(get_catalog_store)) -> CatalogResponse:
    """Reload zone configuration and publish it as the new snapshot."""
    try:
        store.load()
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to reload zones: {exc}",
        ) from exc
    return _catalog_response(store)


@router.post("/resolve", response_model=ResolveResponse, status_code=status.HTTP_200_OK)
def resolve_location(
    payload: ResolveRequest,
    store: CatalogStore = Depends(get_catalog_store),
) -> ResolveResponse:
    """Check whether a location falls inside a delivery area, suggesting nearby areas if not."""
    catalog = _snapshot(store)
    try:
        options = ResolveOptions.from_settings(
            city=payload.city,
            default_area_radius_km=payload.default_area_radius_km,
            nearby_threshold_km=payload.nearby_threshold_km,
            max_nearby_results=payload.max_nearby_results,
        )
        result = resolve(catalog, Coordinate(lat=payload.lat, lng=payload.lng), options)
    except InvalidCoordinateError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": NOT_SERVICEABLE_MESSAGE, "reason": str(exc)},
        ) from exc

    if not result.matched:
        logger.info(
            f"No delivery area for ({payload.lat}, {payload.lng}); {len(result.nearby)} nearby suggestions"
        )
    return resolution_to_response(result)


@router.post("/estimate-radius", response_model=RadiusEstimateResponse, status_code=status.HTTP_200_OK)
def estimate_radius(payload: RadiusEstimateRequest) -> RadiusEstimateResponse:
    """Estimate an area's service radius from its centroid and bounding box."""
    try:
        radius_km = estimate_radius_km(
            coordinate_from_model(payload.centroid),
            bounds_from_model(payload.bounds),
        )
    except InvalidCoordinateError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return RadiusEstimateResponse(radius_km=radius_km)


@router.get("/geojson", status_code=status.HTTP_200_OK)
def zones_geojson(
    include_inactive: bool = Query(default=False, description="Include zones that are switched off."),
    persist: bool = Query(default=False, description="Also write the collection to the outputs folder."),
    store: CatalogStore = Depends(get_catalog_store),
) -> dict:
    """Highlighted delivery areas as a GeoJSON FeatureCollection."""
    catalog = _snapshot(store)
    collection = catalog_to_geojson(catalog, ResolveOptions.from_settings(include_inactive=include_inactive))
    if persist:
        try:
            save_geojson(collection)
        except OSError as exc:
            logger.warning(f"Failed to save GeoJSON export: {exc}")
    return collection
