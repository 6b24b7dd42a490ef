"""Expose constructed client wrappers."""

from .tiktok_auth import OAuthStateEncoder, TikTokOAuthClient
from .tiktok_content import TikTokContentClient, VendorResponse
from .tiktok_profile import TikTokProfileClient
from .token_store import InMemoryTokenStore, TokenStore

__all__ = [
    "InMemoryTokenStore",
    "OAuthStateEncoder",
    "TikTokContentClient",
    "TikTokOAuthClient",
    "TikTokProfileClient",
    "TokenStore",
    "VendorResponse",
]
