"""Session bridge exports."""

from .bridge import SessionBridge, SessionState
from .tokens import revoke_access_token, session_tokens, user_for_access_token

__all__ = [
    "SessionBridge",
    "SessionState",
    "user_for_access_token",
    "session_tokens",
    "revoke_access_token",
]
