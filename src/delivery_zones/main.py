"""FastAPI application entry point."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import geocoding, health, zones
from .config import settings
from .data.catalog_repository import load_catalog
from .services.catalog_store import CatalogStore
from .services.geocoding.client import GeocodingClient

logger = logging.getLogger(__name__)


def create_app(
    catalog_store: CatalogStore | None = None,
    geocoding_client: GeocodingClient | None = None,
    load_catalog_on_startup: bool = True,
) -> FastAPI:
    store = catalog_store or CatalogStore(loader=load_catalog)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if load_catalog_on_startup and not store.ready:
            try:
                await asyncio.to_thread(store.load)
            except Exception as exc:
                # Serve health and geocoding anyway; zone endpoints answer 503 until a reload succeeds.
                logger.warning(f"Starting without a zone catalog: {exc}")
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.catalog_store = store
    app.state.geocoding_client = geocoding_client

    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(zones.router, prefix=settings.api_prefix)
    app.include_router(geocoding.router, prefix=settings.api_prefix)
    return app


app = create_app()
