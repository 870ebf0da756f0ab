"""Holder for the current zone catalog snapshot."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from ..models.domain import ZoneCatalog

logger = logging.getLogger(__name__)


class CatalogNotReadyError(RuntimeError):
    """Raised when the catalog is read before any snapshot has been published."""


class CatalogStore:
    """Publishes immutable catalog snapshots.

    Loading happens outside the lock; only the reference swap is guarded, so
    readers always see either the previous snapshot or the new one in full.
    """

    def __init__(self, loader: Callable[[], ZoneCatalog] | None = None) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._snapshot: Optional[ZoneCatalog] = None
        self._published_at: Optional[datetime] = None

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    @property
    def published_at(self) -> Optional[datetime]:
        return self._published_at

    def wait_until_ready(self, timeout: float | None = None) -> bool:
        return self._ready.wait(timeout)

    def snapshot(self) -> ZoneCatalog:
        snapshot = self._snapshot
        if snapshot is None:
            raise CatalogNotReadyError("Zone catalog has not been loaded yet.")
        return snapshot

    def publish(self, catalog: ZoneCatalog) -> ZoneCatalog:
        with self._lock:
            self._snapshot = catalog
            self._published_at = datetime.now(timezone.utc)
        self._ready.set()
        logger.info(
            "Published zone catalog with %d zones and %d areas", len(catalog), catalog.area_count()
        )
        return catalog

    def load(self) -> ZoneCatalog:
        """Run the loader and publish its result.

        A failed load leaves the previous snapshot in place and re-raises.
        """
        if self._loader is None:
            raise RuntimeError("CatalogStore has no loader configured.")
        try:
            catalog = self._loader()
        except Exception:
            logger.exception("Zone catalog load failed; keeping previous snapshot")
            raise
        return self.publish(catalog)
