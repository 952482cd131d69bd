"""
Application configuration models and helpers.

Centralizes settings management so the session bridge, its HTTP surface and
the maintenance scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class ApiSettings(BaseSettings):
    """Configuration for the remote moment and token endpoints."""

    model_config = SettingsConfigDict(env_prefix="STAYREAL_API_", extra="ignore")

    base_url: AnyHttpUrl = Field("https://mobile.bereal.com/api")
    token_url: AnyHttpUrl = Field("https://auth.bereal.team/token")
    client_id: str = Field("android", description="Client identifier sent on refresh.")
    client_secret: Optional[str] = Field(
        None,
        description="Optional client secret sent alongside the refresh credential.",
    )
    timeout_seconds: float = Field(10.0, gt=0)
    user_agent: str = Field("StayReal/1.0")


class StorageSettings(BaseSettings):
    """Where credentials and preferences are persisted and how they are sealed."""

    model_config = SettingsConfigDict(env_prefix="STAYREAL_STORAGE_", extra="ignore")

    db_path: str = Field("data/stayreal.db")
    encryption_secret: str = Field(
        ...,
        description="Secret used to derive the symmetric key for sealing credentials.",
    )

    @field_validator("encryption_secret")
    @classmethod
    def _reject_blank_secret(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("encryption secret must not be blank")
        return value


class NotificationSettings(BaseSettings):
    """Push topic subscription and permission prompt configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STAYREAL_NOTIFICATIONS_", extra="ignore"
    )

    enabled: bool = Field(True)
    credentials_path: Optional[str] = Field(
        None,
        description="Service account JSON used to initialise firebase-admin.",
    )
    registration_token: Optional[str] = Field(
        None,
        description="Messaging registration token of this device.",
    )
    supports_runtime_permission_prompt: bool = Field(
        True,
        description=(
            "Whether the platform requires an explicit runtime prompt before "
            "notifications may be posted."
        ),
    )
    default_region: str = Field("europe-west")


class AppSettings(BaseSettings):
    """Root settings object for the session bridge."""

    model_config = SettingsConfigDict(
        env_prefix="STAYREAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    api: ApiSettings = Field(default_factory=ApiSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "ApiSettings",
    "AppSettings",
    "NotificationSettings",
    "StorageSettings",
    "get_settings",
]
