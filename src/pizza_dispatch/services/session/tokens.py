"""Per-request identity for the HTTP API.

Every request carries the caller's Supabase access token. The token is
checked with the auth service and paired with the caller's profile; nothing
here reads or changes a session held by a client.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client as SupabaseClient

from ...models.domain import CurrentUser
from .profiles import fetch_profile

logger = logging.getLogger(__name__)


def user_for_access_token(client: Optional[SupabaseClient], access_token: Optional[str]) -> Optional[CurrentUser]:
    """Resolve a bearer token to the caller, or None when the token or profile is not valid."""
    if client is None or not access_token:
        return None
    try:
        response = client.auth.get_user(access_token)
    except Exception as exc:
        logger.warning(f"Rejected access token: {exc}")
        return None

    identity = getattr(response, "user", None) if response is not None else None
    if identity is None:
        return None
    profile = fetch_profile(client, str(identity.id))
    if profile is None:
        return None
    return CurrentUser(
        id=str(identity.id),
        email=getattr(identity, "email", None) or "",
        full_name=profile.full_name,
        role=profile.role,
    )


def session_tokens(client: Optional[SupabaseClient]) -> Optional[Any]:
    """The session a sign-in just opened on `client`, if any."""
    if client is None:
        return None
    try:
        return client.auth.get_session()
    except Exception as exc:
        logger.error(f"Could not read the new session: {exc}")
        return None


def revoke_access_token(client: Optional[SupabaseClient], access_token: str) -> bool:
    """End the session behind `access_token` on the auth service."""
    if client is None:
        return False
    try:
        client.auth.admin.sign_out(access_token)
    except Exception as exc:
        logger.error(f"Logout error: {exc}")
        return False
    return True
