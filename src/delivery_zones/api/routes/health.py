"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.catalog_store import CatalogStore
from ..dependencies import get_catalog_store

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/catalog", status_code=status.HTTP_200_OK)
def health_catalog(store: CatalogStore = Depends(get_catalog_store)) -> dict:
    """Report whether a zone catalog has been published."""
    if not store.ready:
        return {
            "ready": False,
            "message": "Zone catalog not loaded. Configure Supabase or the areas workbook and reload.",
            "zones_count": 0,
            "areas_count": 0,
        }

    catalog = store.snapshot()
    return {
        "ready": True,
        "zones_count": len(catalog),
        "areas_count": catalog.area_count(),
        "published_at": store.published_at.isoformat() if store.published_at else None,
    }
