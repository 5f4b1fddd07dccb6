"""Supabase client and table names for the delivery backend."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings

PROFILES_TABLE = "perfis"
COURIERS_TABLE = "entregadores"
CLIENTS_TABLE = "clientes"
DELIVERIES_TABLE = "entregas"


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
        return client
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


def create_session_client() -> Client | None:
    """Create an uncached client for one caller's auth flow.

    Sign-in, sign-up and recovery store a session on the client that performs
    them, so those calls must not run on the shared client above.
    """
    if not settings.supabase_url or not settings.supabase_key:
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logging.error(f"Failed to create Supabase session client: {e}")
        return None
