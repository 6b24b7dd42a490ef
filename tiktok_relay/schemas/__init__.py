"""Public schema exports."""

from .auth import AuthorizationUrlResponse, DebugTokenEntry, TokenStatusResponse
from .publish import PublishVideoRequest, PublishVideoResponse

__all__ = [
    "AuthorizationUrlResponse",
    "DebugTokenEntry",
    "PublishVideoRequest",
    "PublishVideoResponse",
    "TokenStatusResponse",
]
