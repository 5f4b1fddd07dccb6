"""Pytest configuration for the dispatch backend tests."""

import pytest

from pizza_dispatch.services.session import SessionBridge
from pizza_dispatch.services.store import DomainDataStore

from .fakes import FakeSupabase


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def store(fake_supabase: FakeSupabase) -> DomainDataStore:
    return DomainDataStore(
        lambda: fake_supabase,
        strict_status_transitions=False,
        compensate_partial_writes=True,
    )


@pytest.fixture
def bridge(fake_supabase: FakeSupabase) -> SessionBridge:
    return SessionBridge(
        lambda: fake_supabase,
        manager_access_code="SEGREDO",
        password_reset_redirect_url="http://localhost:5173/redefinir-senha",
        min_password_length=6,
        compensate_partial_writes=True,
    )
