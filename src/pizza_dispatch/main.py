"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from supabase import Client as SupabaseClient

from .api.routes import auth, clients, couriers, deliveries, health, reports
from .config import settings
from .db.supabase import create_session_client, get_supabase_client
from .services.session import SessionBridge
from .services.store import DomainDataStore

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], Optional[SupabaseClient]]


def _reload_when_authenticated(store: DomainDataStore) -> Callable[[SessionBridge], None]:
    def listener(bridge: SessionBridge) -> None:
        if bridge.is_authenticated:
            store.fetch_all()

    return listener


def create_app(
    client_factory: Optional[ClientFactory] = None,
    session_client_factory: Optional[ClientFactory] = None,
) -> FastAPI:
    """Build the API with one session bridge and one data store for the process.

    `client_factory` gives the shared client used for data access and token
    checks. `session_client_factory` gives a new client per sign-in or
    recovery so that no caller's session is stored on the shared one.
    """
    factory = client_factory or get_supabase_client
    bridge = SessionBridge(factory)
    store = DomainDataStore(factory)
    bridge.add_listener(_reload_when_authenticated(store))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        bridge.start()
        logger.info(f"Session bridge started ({bridge.state.value})")
        store.fetch_all()
        try:
            yield
        finally:
            bridge.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.client_factory = factory
    app.state.session_client_factory = session_client_factory or create_session_client
    app.state.session_bridge = bridge
    app.state.data_store = store

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
    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(deliveries.router, prefix=settings.api_prefix)
    app.include_router(clients.router, prefix=settings.api_prefix)
    app.include_router(couriers.router, prefix=settings.api_prefix)
    app.include_router(reports.router, prefix=settings.api_prefix)
    return app


app = create_app()
