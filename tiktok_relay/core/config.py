"""
Application configuration models and helpers.

Centralizes settings management so the HTTP surface, the TikTok clients and
the command-line helpers share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal, Optional

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


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


class TikTokSettings(BaseSettings):
    """Credentials and endpoints for the TikTok developer application."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    client_key: str = Field(..., validation_alias="TIKTOK_CLIENT_KEY")
    client_secret: str = Field(..., validation_alias="TIKTOK_CLIENT_SECRET")
    redirect_uri: str = Field(
        ...,
        validation_alias="TIKTOK_REDIRECT_URI",
        description=(
            "Callback URL registered with TikTok. Sent verbatim, it must match "
            "the registered value exactly."
        ),
    )
    api_base_url: str = Field(
        "https://open.tiktokapis.com", validation_alias="TIKTOK_API_BASE_URL"
    )
    auth_base_url: str = Field(
        "https://www.tiktok.com/v2/auth/authorize/",
        validation_alias="TIKTOK_AUTH_BASE_URL",
    )


class OAuthSettings(BaseSettings):
    """OAuth flow configuration."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    state_ttl_seconds: int = Field(900, validation_alias="OAUTH_STATE_TTL")
    scopes: Annotated[tuple[str, ...], NoDecode] = Field(
        ("user.info.basic", "video.publish"),
        validation_alias="TIKTOK_SCOPES",
    )

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing scopes as a comma-separated string."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(value)
        return tuple(scope.strip() for scope in value.split(",") if scope.strip())


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(3000, validation_alias="PORT")
    frontend_base_url: Optional[AnyHttpUrl] = Field(
        None,
        validation_alias="FRONTEND_URL",
        description="Front-end URL receiving the auth=success/error redirect.",
    )
    callback_response_mode: Literal["redirect", "text"] = Field(
        "redirect",
        validation_alias="CALLBACK_RESPONSE_MODE",
        description=(
            "How /auth/callback answers: redirect to the front-end, or plain text."
        ),
    )
    enable_debug_routes: bool = Field(False, validation_alias="ENABLE_DEBUG_ROUTES")
    http_timeout_seconds: float = Field(10.0, validation_alias="HTTP_TIMEOUT_SECONDS")
    tiktok: TikTokSettings = Field(default_factory=TikTokSettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "OAuthSettings",
    "TikTokSettings",
    "get_settings",
]
