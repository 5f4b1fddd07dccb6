"""Domain error codes for the delivery workflow."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    REMOTE_SERVICE_FAILED = "REMOTE_SERVICE_FAILED"
    BUSINESS_RULE_VIOLATED = "BUSINESS_RULE_VIOLATED"


GENERIC_REMOTE_MESSAGE = "Erro desconhecido ao comunicar com o servidor."


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised before any remote call when user input is unusable."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message)


class RemoteServiceError(DomainError):
    """Raised when the hosted database or auth service reports a failure."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(code=ErrorCode.REMOTE_SERVICE_FAILED, message=message)
        self.cause = cause

    @classmethod
    def from_exception(cls, exc: BaseException) -> "RemoteServiceError":
        if isinstance(exc, RemoteServiceError):
            return exc
        return cls(describe_remote_error(exc), cause=exc)


class BusinessRuleViolation(DomainError):
    """Raised when a pre-check query shows a write would break a business rule."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.BUSINESS_RULE_VIOLATED, message=message)


def describe_remote_error(exc: BaseException) -> str:
    """Extract a readable message from a Supabase/PostgREST/GoTrue exception."""
    if isinstance(exc, DomainError):
        return exc.message
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message.strip():
        return message
    text = str(exc).strip()
    return text or GENERIC_REMOTE_MESSAGE
