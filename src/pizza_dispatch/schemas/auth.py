"""Authentication API schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models.domain import CurrentUser, LoginErrorKind, Role


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CurrentUserModel(_CamelModel):
    id: str
    email: str
    full_name: str
    role: Role
    is_manager: bool
    is_courier: bool

    @classmethod
    def from_user(cls, user: CurrentUser) -> "CurrentUserModel":
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=user.role,
            is_manager=user.is_manager,
            is_courier=user.is_courier,
        )


class LoginRequest(_CamelModel):
    email: str
    password: str


class LoginResponse(_CamelModel):
    """Send `access_token` back as `Authorization: Bearer <token>` on every later request."""

    success: bool
    message: Optional[str] = None
    error_kind: Optional[LoginErrorKind] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user: Optional[CurrentUserModel] = None


class RegisterRequest(_CamelModel):
    email: str
    password: str
    confirm_password: Optional[str] = None
    full_name: str
    role: Role
    access_code: Optional[str] = None


class EmailRequest(_CamelModel):
    email: str


class PasswordResetRequest(_CamelModel):
    token: str = ""
    new_password: str
    confirm_password: Optional[str] = None


class AuthResponse(_CamelModel):
    success: bool
    message: str
