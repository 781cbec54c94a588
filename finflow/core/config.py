"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app and the terminal driver
share a consistent configuration surface.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    populate_by_name=True,
)


class SessionSettings(BaseSettings):
    """Storage of in-progress guided flow sessions."""

    model_config = _ENV_CONFIG

    db_path: str = Field(
        "data/finflow_sessions.db", validation_alias="FINFLOW_SESSION_DB_PATH"
    )
    ttl_seconds: int = Field(
        3600,
        validation_alias="FINFLOW_SESSION_TTL",
        description="Idle seconds after which a session is discarded.",
    )


class IntentServiceSettings(BaseSettings):
    """Where queries are sent for classification."""

    model_config = _ENV_CONFIG

    base_url: Optional[AnyHttpUrl] = Field(
        None,
        validation_alias="INTENT_SERVICE_URL",
        description="Remote intent service. The in-process classifier is used when unset.",
    )
    timeout_seconds: float = Field(10.0, validation_alias="INTENT_SERVICE_TIMEOUT")


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = _ENV_CONFIG

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    summary_field_limit: int = Field(
        2,
        validation_alias="FINFLOW_SUMMARY_FIELDS",
        description="Reported fields shown per step in the cross-step summary.",
    )
    session: SessionSettings = Field(default_factory=SessionSettings)
    intent_service: IntentServiceSettings = Field(default_factory=IntentServiceSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "IntentServiceSettings",
    "SessionSettings",
    "get_settings",
]
