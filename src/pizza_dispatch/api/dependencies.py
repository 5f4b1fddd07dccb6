"""Request dependencies: per-app services, per-request identity and role gates.

The caller is identified on every request from the Supabase access token in
the `Authorization: Bearer` header. The process-wide session bridge is never
consulted for authorization.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..models.domain import CurrentUser, OperationResult
from ..schemas.deliveries import OperationResponse
from ..services.session import SessionBridge, user_for_access_token
from ..services.store import DomainDataStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_supabase(request: Request):
    """The app's shared Supabase client, or None when credentials are missing."""
    return request.app.state.client_factory()


def get_session_client(request: Request):
    """A fresh client for one caller's sign-in, sign-up or recovery flow."""
    return request.app.state.session_client_factory()


def get_session_bridge(request: Request) -> SessionBridge:
    return request.app.state.session_bridge


def get_caller_bridge(client=Depends(get_session_client)) -> SessionBridge:
    """A bridge over the caller's own client; it is never started, so no state is shared."""
    return SessionBridge(lambda: client)


def get_data_store(request: Request) -> DomainDataStore:
    return request.app.state.data_store


def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Não autenticado.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def require_user(
    access_token: str = Depends(get_access_token),
    supabase=Depends(get_supabase),
) -> CurrentUser:
    user = user_for_access_token(supabase, access_token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Não autenticado.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_manager(user: CurrentUser = Depends(require_user)) -> CurrentUser:
    if not user.is_manager:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acesso restrito a gerentes.")
    return user


def result_response(result: OperationResult) -> OperationResponse:
    """Turn a failed operation into a 400 carrying its message."""
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return OperationResponse(success=True)
