"""Input checks applied before any call to the auth service."""

from __future__ import annotations

from typing import Optional

from ...models.errors import ValidationError


def require_filled(*values: Optional[str], message: str = "Por favor, preencha todos os campos.") -> None:
    if any(value is None or not value.strip() for value in values):
        raise ValidationError(message)


def validate_new_password(password: str, confirmation: Optional[str], min_length: int) -> None:
    """Confirmation is only compared when the caller collected one."""
    if confirmation is not None and password != confirmation:
        raise ValidationError("As senhas não coincidem.")
    if len(password) < min_length:
        raise ValidationError(f"A senha deve ter pelo menos {min_length} caracteres.")


def normalize_email(email: str) -> str:
    return email.strip().lower()
