"""Session bridge between Supabase Auth identities and `perfis` profiles.

The bridge owns the "who is logged in" state. Auth-state notifications from
the Supabase client drive it: each one marks the bridge as loading, looks up
the profile for the identity and resolves to authenticated or not. Login and
logout calls only ask the auth service to change the session; the state change
itself arrives through the subscription.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional

from supabase import Client as SupabaseClient

from ...config import settings
from ...db.supabase import COURIERS_TABLE, PROFILES_TABLE, get_supabase_client
from ...models.domain import (
    AuthResult,
    CurrentUser,
    LoginErrorKind,
    LoginResult,
    Profile,
    Role,
)
from ...models.errors import RemoteServiceError, ValidationError, describe_remote_error
from ...persistence.mappers import courier_to_row, profile_to_row
from ..compensation import compensate
from .profiles import fetch_profile
from .validation import normalize_email, require_filled, validate_new_password

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


SessionListener = Callable[["SessionBridge"], None]

INVALID_RECOVERY_MESSAGE = "Link de recuperação inválido ou expirado."


def _login_failure(exc: BaseException) -> LoginResult:
    message = describe_remote_error(exc)
    code = str(getattr(exc, "code", "") or "")
    if "Email not confirmed" in message or "email_not_confirmed" in message or code == "email_not_confirmed":
        return LoginResult(
            success=False,
            message=(
                "Seu email ainda não foi confirmado. Verifique sua caixa de entrada "
                "e clique no link de confirmação."
            ),
            error_kind=LoginErrorKind.EMAIL_NOT_CONFIRMED,
        )
    if "Invalid login credentials" in message or "invalid_credentials" in message or code == "invalid_credentials":
        return LoginResult(
            success=False,
            message="Email ou senha incorretos.",
            error_kind=LoginErrorKind.INVALID_CREDENTIALS,
        )
    return LoginResult(
        success=False,
        message="Erro ao fazer login. Tente novamente.",
        error_kind=LoginErrorKind.GENERIC,
    )


def _registration_failure(exc: BaseException) -> AuthResult:
    message = describe_remote_error(exc)
    if "permission denied" in message.lower() or "RLS" in message:
        return AuthResult(False, "Erro de permissão no banco de dados. Verifique as políticas RLS.")
    return AuthResult(False, f"Erro ao criar conta: {message}")


class SessionBridge:
    """Single source of truth for the current identity, its profile and role."""

    def __init__(
        self,
        client_factory: Callable[[], Optional[SupabaseClient]] = get_supabase_client,
        *,
        manager_access_code: str | None = None,
        password_reset_redirect_url: str | None = None,
        min_password_length: int | None = None,
        compensate_partial_writes: bool | None = None,
    ) -> None:
        self._client_factory = client_factory
        self.manager_access_code = manager_access_code or settings.manager_access_code
        self.password_reset_redirect_url = password_reset_redirect_url or settings.password_reset_redirect_url
        self.min_password_length = min_password_length or settings.min_password_length
        self.compensate_partial_writes = (
            settings.compensate_partial_writes if compensate_partial_writes is None else compensate_partial_writes
        )

        self.state = SessionState.UNINITIALIZED
        self.identity: Any = None
        self.profile: Optional[Profile] = None
        self._subscription: Any = None
        self._listeners: list[SessionListener] = []

    # -- derived view ----------------------------------------------------

    @property
    def loading(self) -> bool:
        return self.state in (SessionState.UNINITIALIZED, SessionState.LOADING)

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None and self.profile is not None and not self.loading

    @property
    def is_manager(self) -> bool:
        return self.profile is not None and self.profile.role is Role.MANAGER

    @property
    def is_courier(self) -> bool:
        return self.profile is not None and self.profile.role is Role.COURIER

    @property
    def current_user(self) -> Optional[CurrentUser]:
        if not self.is_authenticated:
            return None
        return CurrentUser(
            id=str(self.identity.id),
            email=getattr(self.identity, "email", None) or "",
            full_name=self.profile.full_name,
            role=self.profile.role,
        )

    # -- lifecycle -------------------------------------------------------

    def _client(self) -> SupabaseClient:
        client = self._client_factory()
        if client is None:
            raise RemoteServiceError("Serviço de autenticação não configurado.")
        return client

    def add_listener(self, listener: SessionListener) -> None:
        """Call `listener(bridge)` every time the state resolves."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Subscribe to auth-state changes and replay the session already held by the client."""
        if self._subscription is not None:
            return
        client = self._client_factory()
        if client is None:
            logger.warning("Supabase not configured - session bridge starts unauthenticated")
            self._resolve(identity=None, profile=None)
            return

        self._subscription = client.auth.on_auth_state_change(self._on_auth_state_change)
        try:
            session = client.auth.get_session()
        except Exception as exc:
            logger.warning(f"Could not read the stored session: {exc}")
            session = None
        self._on_auth_state_change("INITIAL_SESSION", session)

    def dispose(self) -> None:
        if self._subscription is None:
            return
        try:
            self._subscription.unsubscribe()
        except Exception as exc:
            logger.warning(f"Error unsubscribing from auth state changes: {exc}")
        self._subscription = None

    def _on_auth_state_change(self, event: Any, session: Any) -> None:
        user = getattr(session, "user", None) if session is not None else None
        logger.info(f"Auth state change: {event} (user={'yes' if user is not None else 'no'})")

        self.state = SessionState.LOADING
        self.identity = user
        profile = self._fetch_profile(str(user.id)) if user is not None else None
        self._resolve(identity=user, profile=profile)

    def _resolve(self, identity: Any, profile: Optional[Profile]) -> None:
        self.identity = identity
        self.profile = profile
        if identity is not None and profile is not None:
            self.state = SessionState.AUTHENTICATED
        else:
            self.state = SessionState.UNAUTHENTICATED
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Session listener failed")

    def _fetch_profile(self, identity_id: str) -> Optional[Profile]:
        client = self._client_factory()
        if client is None:
            return None
        return fetch_profile(client, identity_id)

    def refresh_profile(self) -> None:
        """Re-read the profile of the current identity, e.g. after it was just created."""
        if self.identity is None:
            return
        self.state = SessionState.LOADING
        self._resolve(self.identity, self._fetch_profile(str(self.identity.id)))

    # -- operations ------------------------------------------------------

    def login(self, email: str, password: str) -> LoginResult:
        try:
            require_filled(email, password)
        except ValidationError as exc:
            return LoginResult(success=False, message=exc.message, error_kind=LoginErrorKind.GENERIC)

        try:
            response = self._client().auth.sign_in_with_password(
                {"email": normalize_email(email), "password": password}
            )
        except Exception as exc:
            logger.error(f"Supabase authentication error: {exc}")
            return _login_failure(exc)

        if getattr(response, "user", None) is None:
            return LoginResult(
                success=False,
                message="Erro inesperado ao fazer login.",
                error_kind=LoginErrorKind.GENERIC,
            )
        logger.info(f"Login successful for user {response.user.id}")
        return LoginResult(success=True)

    def register(
        self,
        email: str,
        password: str,
        full_name: str,
        role: Role | str,
        access_code: Optional[str] = None,
        confirm_password: Optional[str] = None,
    ) -> AuthResult:
        """Create the auth identity, its profile and, for couriers, the courier record."""
        try:
            role = Role(role)
        except ValueError:
            return AuthResult(False, "Cargo inválido.")
        try:
            require_filled(email, password, full_name, message="Por favor, preencha todos os campos obrigatórios.")
            validate_new_password(password, confirm_password, self.min_password_length)
            if role is Role.MANAGER and (not access_code or access_code != self.manager_access_code):
                raise ValidationError("Código de acesso inválido.")
        except ValidationError as exc:
            return AuthResult(False, exc.message)

        logger.info(f"Creating {role.value} account for {normalize_email(email)}")
        try:
            client = self._client()
            auth_response = client.auth.sign_up({"email": normalize_email(email), "password": password})
        except Exception as exc:
            logger.error(f"Error creating auth account: {exc}")
            if "already registered" in describe_remote_error(exc):
                return AuthResult(False, "Este email já está cadastrado no sistema.")
            return _registration_failure(exc)

        user = getattr(auth_response, "user", None)
        if user is None:
            return AuthResult(False, "Erro ao criar conta de autenticação.")
        identity_id = str(user.id)

        try:
            client.table(PROFILES_TABLE).insert(profile_to_row(identity_id, full_name.strip(), role)).execute()
        except Exception as exc:
            logger.error(f"Error creating profile: {exc}")
            self._undo_identity(client, identity_id)
            return _registration_failure(exc)

        if role is Role.COURIER:
            try:
                client.table(COURIERS_TABLE).insert(courier_to_row(identity_id, full_name.strip())).execute()
            except Exception as exc:
                logger.error(f"Error creating courier record: {exc}")
                if self.compensate_partial_writes:
                    compensate(
                        f"profile {identity_id}",
                        lambda: client.table(PROFILES_TABLE).delete().eq("id", identity_id).execute(),
                    )
                self._undo_identity(client, identity_id)
                return _registration_failure(exc)

        if self.identity is not None and str(self.identity.id) == identity_id and self.profile is None:
            self.refresh_profile()

        return AuthResult(
            True,
            f"Conta de {role.value} criada com sucesso! Verifique seu email para confirmar a conta.",
        )

    def _undo_identity(self, client: SupabaseClient, identity_id: str) -> None:
        # Deleting auth users needs the service role key; with the anon key this logs an orphan.
        if self.compensate_partial_writes:
            compensate(f"auth identity {identity_id}", lambda: client.auth.admin.delete_user(identity_id))

    def request_password_reset(self, email: str) -> AuthResult:
        try:
            require_filled(email, message="Por favor, digite seu email.")
        except ValidationError as exc:
            return AuthResult(False, exc.message)

        try:
            self._client().auth.reset_password_for_email(
                normalize_email(email),
                {"redirect_to": self.password_reset_redirect_url},
            )
        except Exception as exc:
            logger.error(f"Password recovery error: {exc}")
            if "not found" in describe_remote_error(exc).lower():
                return AuthResult(False, "Email não encontrado no sistema.")
            return AuthResult(False, "Erro ao enviar email de recuperação.")

        return AuthResult(True, "Email de recuperação enviado! Verifique sua caixa de entrada.")

    def reset_password(
        self,
        reset_token: str,
        new_password: str,
        confirm_password: Optional[str] = None,
    ) -> AuthResult:
        """Open the recovery session named by the emailed `reset_token`, then set the new password.

        The password is only written after the auth service accepts the token,
        so it always lands on the account the recovery email was sent to.
        """
        try:
            require_filled(reset_token, message=INVALID_RECOVERY_MESSAGE)
            require_filled(new_password)
            validate_new_password(new_password, confirm_password, self.min_password_length)
        except ValidationError as exc:
            return AuthResult(False, exc.message)

        try:
            client = self._client()
            client.auth.verify_otp({"type": "recovery", "token_hash": reset_token})
        except Exception as exc:
            logger.warning(f"Recovery token rejected: {exc}")
            return AuthResult(False, INVALID_RECOVERY_MESSAGE)

        try:
            client.auth.update_user({"password": new_password})
        except Exception as exc:
            logger.error(f"Password reset error: {exc}")
            return AuthResult(False, "Erro ao redefinir senha.")
        return AuthResult(True, "Senha redefinida com sucesso!")

    def resend_confirmation_email(self, email: str) -> AuthResult:
        try:
            require_filled(email, message="Por favor, digite seu email primeiro.")
        except ValidationError as exc:
            return AuthResult(False, exc.message)

        try:
            self._client().auth.resend({"type": "signup", "email": normalize_email(email)})
        except Exception as exc:
            logger.error(f"Resend confirmation error: {exc}")
            return AuthResult(False, "Erro ao reenviar email de confirmação.")
        return AuthResult(True, "Email de confirmação reenviado! Verifique sua caixa de entrada.")

    def logout(self) -> None:
        """End the session; local state is cleared even when the auth service errors."""
        try:
            self._client().auth.sign_out()
        except Exception as exc:
            logger.error(f"Logout error: {exc}")
            self._resolve(identity=None, profile=None)
