"""API routes for place search and zone authoring lookups."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ...models.domain import Coordinate, InvalidCoordinateError
from ...schemas.geocoding import (
    AreaDraftModel,
    PlaceDetailsModel,
    PlaceSuggestionModel,
    ReverseGeocodeResponse,
)
from ...services.authoring import DuplicateAreaError, draft_area_from_place, ensure_not_duplicate
from ...services.catalog_store import CatalogNotReadyError, CatalogStore
from ...services.geocoding.client import GeocodingClient, GeocodingError
from ...services.geocoding.models import PlaceDetails
from ...services.geospatial import validate_coordinate
from ..dependencies import get_catalog_store, get_geocoding_client
from ..serializers import bounds_to_model, coordinate_to_model

router = APIRouter(prefix="/geocode", tags=["geocoding"])


def _upstream_error(exc: GeocodingError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


def _load_place(client: GeocodingClient, place_id: str) -> PlaceDetails:
    try:
        details = client.place_details(place_id)
    except GeocodingError as exc:
        raise _upstream_error(exc) from exc
    if details is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Place '{place_id}' not found.")
    return details


@router.get("/search", response_model=list[PlaceSuggestionModel], status_code=status.HTTP_200_OK)
def search_places(
    q: str = Query(..., min_length=1, description="Locality or society name."),
    city: Optional[str] = Query(default=None, description="City to scope the search to."),
    client: GeocodingClient = Depends(get_geocoding_client),
) -> list[PlaceSuggestionModel]:
    try:
        suggestions = client.search(q, city=city)
    except GeocodingError as exc:
        raise _upstream_error(exc) from exc
    return [
        PlaceSuggestionModel(
            place_id=item.place_id,
            description=item.description,
            main_text=item.main_text,
            secondary_text=item.secondary_text,
        )
        for item in suggestions
    ]


@router.get("/places/{place_id}", response_model=PlaceDetailsModel, status_code=status.HTTP_200_OK)
def place_details(
    place_id: str = Path(..., min_length=1),
    client: GeocodingClient = Depends(get_geocoding_client),
) -> PlaceDetailsModel:
    details = _load_place(client, place_id)
    return PlaceDetailsModel(
        place_id=details.place_id,
        name=details.name,
        formatted_address=details.formatted_address,
        location=coordinate_to_model(details.location),
        bounds=bounds_to_model(details.bounds),
        viewport=bounds_to_model(details.viewport),
        city=details.city,
    )


@router.get("/places/{place_id}/draft", response_model=AreaDraftModel, status_code=status.HTTP_200_OK)
def draft_area(
    place_id: str = Path(..., min_length=1),
    zone: Optional[str] = Query(default=None, description="Zone the area will be added to; checked for duplicates."),
    client: GeocodingClient = Depends(get_geocoding_client),
    store: CatalogStore = Depends(get_catalog_store),
) -> AreaDraftModel:
    """Pre-fill a new delivery area, including an estimated radius, from a place lookup."""
    draft = draft_area_from_place(_load_place(client, place_id))

    if zone:
        try:
            catalog = store.snapshot()
        except CatalogNotReadyError as exc:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
        wanted = zone.strip().lower()
        for configured in catalog.zones():
            if configured.name.strip().lower() == wanted:
                try:
                    ensure_not_duplicate(draft, configured.areas)
                except DuplicateAreaError as exc:
                    raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return AreaDraftModel(
        name=draft.name,
        place_id=draft.place_id,
        address=draft.address,
        centroid=coordinate_to_model(draft.centroid),
        radius_km=draft.radius_km,
        bounds=bounds_to_model(draft.bounds),
        viewport=bounds_to_model(draft.viewport),
        city=draft.city,
    )


@router.get("/reverse", response_model=ReverseGeocodeResponse, status_code=status.HTTP_200_OK)
def reverse_geocode(
    lat: float = Query(...),
    lng: float = Query(...),
    client: GeocodingClient = Depends(get_geocoding_client),
) -> ReverseGeocodeResponse:
    try:
        point = validate_coordinate(Coordinate(lat=lat, lng=lng), label="reverse geocode point")
        result = client.reverse_geocode(point)
    except InvalidCoordinateError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except GeocodingError as exc:
        raise _upstream_error(exc) from exc
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No address found for this location.")
    return ReverseGeocodeResponse(address=result.address, city=result.city)
