"""
Supabase client initialization module.

This module provides a thread-safe singleton Supabase client used by the
document store. When SUPABASE_SERVICE_ROLE_KEY is set the client uses it so
that the service can read and delete every stored analysis regardless of RLS.
Falls back to the anon key.
"""

import logging
import threading

from supabase import Client, create_client

from app.config import get_settings

logger = logging.getLogger(__name__)

_client: Client | None = None
_lock = threading.Lock()


def get_supabase_client() -> Client:
    """
    Return the shared Supabase client, initializing once in a thread-safe way.

    Returns:
        Client: Shared Supabase client instance

    Raises:
        ValueError: If the client cannot be created from the configured credentials
    """
    global _client
    if _client is not None:
        return _client
    with _lock:
        if _client is not None:
            return _client
        settings = get_settings()
        key = settings.supabase_service_role_key or settings.supabase_key
        try:
            _client = create_client(settings.supabase_url, key)
        except Exception as e:
            raise ValueError(f"Failed to create Supabase client: {str(e)}") from e
        logger.info("Supabase client initialised for %s", settings.supabase_url)
        return _client


def reset_supabase_client() -> None:
    """Drop the cached client so the next call re-reads settings."""
    global _client
    with _lock:
        _client = None
