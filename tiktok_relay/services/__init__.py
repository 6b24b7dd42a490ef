"""Service layer exports."""

from .authorization import AuthorizationResult, TikTokAuthorizationService
from .publishing import PublishOutcome, VideoPublishService
from .token_status import TokenStatus, describe_token, summarize_tokens

__all__ = [
    "AuthorizationResult",
    "PublishOutcome",
    "TikTokAuthorizationService",
    "TokenStatus",
    "VideoPublishService",
    "describe_token",
    "summarize_tokens",
]
