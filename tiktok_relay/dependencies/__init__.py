"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_authorization_service,
    get_oauth_state_encoder,
    get_publish_service,
    get_tiktok_content_client,
    get_tiktok_oauth_client,
    get_tiktok_profile_client,
    get_token_store,
)
from .config import AppSettingsDependency, get_app_settings

__all__ = [
    "AppSettingsDependency",
    "get_app_settings",
    "get_authorization_service",
    "get_oauth_state_encoder",
    "get_publish_service",
    "get_tiktok_content_client",
    "get_tiktok_oauth_client",
    "get_tiktok_profile_client",
    "get_token_store",
]
