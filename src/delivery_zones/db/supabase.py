"""Supabase access for the delivery-area configuration table."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Optional[Client]:
    """Cached client, or None when no URL/key is configured or the client cannot be built."""
    if not settings.supabase_url or not settings.supabase_key:
        logger.info("Supabase not configured; zone catalog will come from the workbook")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client for {settings.supabase_url}: {e}")
        return None


def fetch_rows(table: str) -> Optional[list[dict[str, Any]]]:
    """All rows of ``table``, or None if the database is unavailable or the query fails."""
    client = get_supabase_client()
    if client is None:
        return None

    try:
        response = client.table(table).select("*").execute()
    except Exception as e:
        logger.warning(f"Query on '{table}' failed: {e}")
        return None
    return list(response.data or [])
