"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from tiktok_relay.clients import (
    InMemoryTokenStore,
    OAuthStateEncoder,
    TikTokContentClient,
    TikTokOAuthClient,
    TikTokProfileClient,
    TokenStore,
)
from tiktok_relay.core.config import get_settings
from tiktok_relay.services import TikTokAuthorizationService, VideoPublishService


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_token_store() -> TokenStore:
    """Provide the process-wide token store."""
    return InMemoryTokenStore()


@lru_cache()
def get_oauth_state_encoder() -> OAuthStateEncoder:
    """Provide an OAuth state encoder derived from the TikTok client secret."""
    settings = _settings()
    return OAuthStateEncoder(secret_key=settings.tiktok.client_secret)


@lru_cache()
def get_tiktok_oauth_client() -> TikTokOAuthClient:
    """Create a singleton TikTok OAuth client."""
    settings = _settings()
    return TikTokOAuthClient(
        settings.tiktok, settings.oauth, timeout=settings.http_timeout_seconds
    )


@lru_cache()
def get_tiktok_profile_client() -> TikTokProfileClient:
    settings = _settings()
    return TikTokProfileClient(
        settings.tiktok.api_base_url, timeout=settings.http_timeout_seconds
    )


@lru_cache()
def get_tiktok_content_client() -> TikTokContentClient:
    settings = _settings()
    return TikTokContentClient(
        settings.tiktok.api_base_url, timeout=settings.http_timeout_seconds
    )


def get_authorization_service(
    oauth_client: Annotated[TikTokOAuthClient, Depends(get_tiktok_oauth_client)],
    profile_client: Annotated[TikTokProfileClient, Depends(get_tiktok_profile_client)],
    store: Annotated[TokenStore, Depends(get_token_store)],
) -> TikTokAuthorizationService:
    """Build the authorization service from the shared clients and store."""
    return TikTokAuthorizationService(
        oauth_client=oauth_client,
        profile_client=profile_client,
        store=store,
    )


def get_publish_service(
    content_client: Annotated[TikTokContentClient, Depends(get_tiktok_content_client)],
    store: Annotated[TokenStore, Depends(get_token_store)],
) -> VideoPublishService:
    """Build the publish proxy service."""
    return VideoPublishService(store=store, content_client=content_client)


__all__ = [
    "get_authorization_service",
    "get_oauth_state_encoder",
    "get_publish_service",
    "get_tiktok_content_client",
    "get_tiktok_oauth_client",
    "get_tiktok_profile_client",
    "get_token_store",
]
