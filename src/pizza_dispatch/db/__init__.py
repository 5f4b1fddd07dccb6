"""Database clients and utilities."""

from .supabase import (
    CLIENTS_TABLE,
    COURIERS_TABLE,
    DELIVERIES_TABLE,
    PROFILES_TABLE,
    create_session_client,
    get_supabase_client,
)

__all__ = [
    "get_supabase_client",
    "create_session_client",
    "PROFILES_TABLE",
    "COURIERS_TABLE",
    "CLIENTS_TABLE",
    "DELIVERIES_TABLE",
]
