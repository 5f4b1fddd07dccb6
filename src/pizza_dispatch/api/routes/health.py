"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...db.supabase import DELIVERIES_TABLE
from ...services.session import SessionBridge
from ...services.store import DomainDataStore
from ..dependencies import get_data_store, get_session_bridge, get_supabase

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root(
    bridge: SessionBridge = Depends(get_session_bridge),
    store: DomainDataStore = Depends(get_data_store),
) -> dict:
    """Liveness plus the state of the session and the cached snapshot."""
    return {
        "status": "ok",
        "session": bridge.state.value,
        "data": {
            "loading": store.loading,
            "error": store.error,
            "deliveries": len(store.deliveries),
            "clients": len(store.clients),
            "couriers": len(store.couriers),
        },
    }


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database(supabase=Depends(get_supabase)) -> dict:
    """Check that Supabase is configured and the deliveries table answers."""
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set DISPATCH_SUPABASE_URL and DISPATCH_SUPABASE_KEY environment variables.",
        }

    try:
        supabase.table(DELIVERIES_TABLE).select("id").limit(1).execute()
        return {"configured": True, "connected": True, "message": "Database connected."}
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
