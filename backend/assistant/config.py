"""Typed settings configuration - single source of truth.

Settings are constructed explicitly at startup and injected into the components that need
them. There is no module-level cache: tests build their own ``Settings`` instance instead
of resetting a global.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_BATCH_SIZE = 6


class Settings(BaseSettings):
    """Assistant settings loaded from ``ASSISTANT_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ASSISTANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=(),
    )

    # Database (None -> in-memory trip store and log sink)
    database_url: str | None = None

    # Models
    model_primary: str = "gpt-4o"
    model_fallback: str = "gpt-4o-mini"

    # Action pipeline
    max_batch_size: int = Field(MAX_BATCH_SIZE, ge=1, le=MAX_BATCH_SIZE)
    audit_enabled: bool = True

    # Logging
    log_level: str = "INFO"


def load_settings(**overrides: object) -> Settings:
    """Construct a fresh settings instance from the environment plus overrides."""
    return Settings(**overrides)  # type: ignore[arg-type]
