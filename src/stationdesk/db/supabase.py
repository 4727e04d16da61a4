"""Supabase client for the remote record tables."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if the remote store is enabled, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.remote_enabled:
        logging.info("Supabase disabled (missing URL/key or STATIONDESK_FORCE_LOCAL set)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None
