"""Authentication endpoints.

Each call that opens a session (login, recovery) runs on a fresh client owned
by the caller; the access token it yields is returned to the caller and is the
only credential later requests are checked against.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...models.domain import AuthResult, CurrentUser
from ...schemas.auth import (
    AuthResponse,
    CurrentUserModel,
    EmailRequest,
    LoginRequest,
    LoginResponse,
    PasswordResetRequest,
    RegisterRequest,
)
from ...services.session import SessionBridge, revoke_access_token, session_tokens, user_for_access_token
from ...services.store import DomainDataStore
from ..dependencies import (
    get_access_token,
    get_caller_bridge,
    get_data_store,
    get_session_client,
    get_supabase,
    require_user,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(result: AuthResult) -> AuthResponse:
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    return AuthResponse(success=True, message=result.message)


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
def login(
    payload: LoginRequest,
    bridge: SessionBridge = Depends(get_caller_bridge),
    session_client=Depends(get_session_client),
    supabase=Depends(get_supabase),
    store: DomainDataStore = Depends(get_data_store),
) -> LoginResponse:
    result = bridge.login(payload.email, payload.password)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": result.message, "errorKind": result.error_kind.value if result.error_kind else None},
        )

    session = session_tokens(session_client)
    access_token = getattr(session, "access_token", None)
    if not access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Erro inesperado ao fazer login.", "errorKind": "erro_generico"},
        )

    user = user_for_access_token(supabase, access_token)
    store.fetch_all()
    return LoginResponse(
        success=True,
        access_token=access_token,
        refresh_token=getattr(session, "refresh_token", None),
        user=CurrentUserModel.from_user(user) if user else None,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, bridge: SessionBridge = Depends(get_caller_bridge)) -> AuthResponse:
    return _auth_response(
        bridge.register(
            payload.email,
            payload.password,
            payload.full_name,
            payload.role,
            access_code=payload.access_code,
            confirm_password=payload.confirm_password,
        )
    )


@router.post("/password-reset", response_model=AuthResponse)
def request_password_reset(payload: EmailRequest, bridge: SessionBridge = Depends(get_caller_bridge)) -> AuthResponse:
    return _auth_response(bridge.request_password_reset(payload.email))


@router.post("/password", response_model=AuthResponse)
def reset_password(payload: PasswordResetRequest, bridge: SessionBridge = Depends(get_caller_bridge)) -> AuthResponse:
    return _auth_response(bridge.reset_password(payload.token, payload.new_password, payload.confirm_password))


@router.post("/resend-confirmation", response_model=AuthResponse)
def resend_confirmation(payload: EmailRequest, bridge: SessionBridge = Depends(get_caller_bridge)) -> AuthResponse:
    return _auth_response(bridge.resend_confirmation_email(payload.email))


@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(access_token: str = Depends(get_access_token), supabase=Depends(get_supabase)) -> dict:
    # The client drops its token either way; a failed revoke is only logged.
    revoke_access_token(supabase, access_token)
    return {"success": True}


@router.get("/me", response_model=CurrentUserModel)
def current_user(user: CurrentUser = Depends(require_user)) -> CurrentUserModel:
    return CurrentUserModel.from_user(user)
