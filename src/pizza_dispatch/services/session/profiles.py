"""Profile lookup by auth identity."""

from __future__ import annotations

import logging
from typing import Optional

from supabase import Client as SupabaseClient

from ...db.supabase import PROFILES_TABLE
from ...models.domain import Profile
from ...persistence.mappers import profile_from_row

logger = logging.getLogger(__name__)


def fetch_profile(client: SupabaseClient, identity_id: str) -> Optional[Profile]:
    """Return the `perfis` row for an identity, or None when missing or unreadable."""
    try:
        rows = (
            client.table(PROFILES_TABLE).select("*").eq("id", identity_id).limit(1).execute()
        ).data or []
    except Exception as exc:
        logger.error(f"Error fetching profile for {identity_id}: {exc}")
        return None
    if not rows:
        logger.warning(f"No profile found for identity {identity_id}")
        return None
    try:
        return profile_from_row(rows[0])
    except (KeyError, ValueError) as exc:
        logger.error(f"Invalid profile row for {identity_id}: {exc}")
        return None
