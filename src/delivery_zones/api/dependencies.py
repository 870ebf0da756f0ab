"""Request-scoped access to the catalog store and geocoding client."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..services.catalog_store import CatalogStore
from ..services.geocoding.client import GeocodingClient, GoogleGeocodingClient


def get_catalog_store(request: Request) -> CatalogStore:
    return request.app.state.catalog_store


def get_geocoding_client(request: Request) -> GeocodingClient:
    client = getattr(request.app.state, "geocoding_client", None)
    if client is not None:
        return client
    try:
        client = GoogleGeocodingClient()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Geocoding is not available: {exc}",
        ) from exc
    request.app.state.geocoding_client = client
    return client
