"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DISPATCH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Borda de Fogo Delivery Control API"
    api_prefix: str = "/api"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase anon key (or service role key when registration compensation must delete auth users).",
    )

    # Accounts
    manager_access_code: str = Field(
        default="BORDA777",
        description="Secret required to register an account with the manager role.",
    )
    password_reset_redirect_url: str = Field(
        default="http://localhost:5173/redefinir-senha",
        description="Where the password recovery email sends the user.",
    )
    min_password_length: int = Field(default=6, ge=1)

    # Delivery workflow
    strict_status_transitions: bool = Field(
        default=False,
        description="Reject status writes that do not move forward along Aguardando -> Em Rota -> Entregue/Cancelado.",
    )
    compensate_partial_writes: bool = Field(
        default=True,
        description="Undo completed steps of multi-step writes when a later step fails.",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
