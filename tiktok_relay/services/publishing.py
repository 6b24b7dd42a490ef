"""Validate stored tokens and forward publish requests to TikTok."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from tiktok_relay.clients.tiktok_content import TikTokContentClient
from tiktok_relay.clients.token_store import TokenStore
from tiktok_relay.core.errors import (
    InsufficientScopeError,
    MissingParameterError,
    TokenExpiredError,
    UnauthenticatedError,
)
from tiktok_relay.schemas.publish import PublishVideoRequest

logger = logging.getLogger(__name__)

PUBLISH_SCOPE = "video.publish"
# Unaudited TikTok clients may only post privately.
FORCED_PRIVACY_LEVEL = "SELF_ONLY"
MAX_CAPTION_LENGTH = 2200


@dataclass(slots=True)
class PublishOutcome:
    """Vendor answer to a publish-init call."""

    success: bool
    status_code: int
    data: Optional[Dict[str, Any]] = None
    error: Optional[Dict[str, Any]] = None


def build_caption(title: str | None, description: str | None) -> str:
    parts = [part.strip() for part in (title, description) if part and part.strip()]
    return "\n\n".join(parts)[:MAX_CAPTION_LENGTH]


class VideoPublishService:
    """Run the pre-flight token checks, then start a pull-from-URL publish job."""

    def __init__(
        self,
        *,
        store: TokenStore,
        content_client: TikTokContentClient,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._store = store
        self._content = content_client
        self._clock = clock

    async def publish(self, request: PublishVideoRequest) -> PublishOutcome:
        open_id = (request.open_id or "").strip()
        video_url = (request.video_url or "").strip()
        if not open_id or not video_url:
            raise MissingParameterError("open_id and video_url are required.")

        record = self._store.get(open_id)
        if record is None:
            raise UnauthenticatedError(
                "User not authenticated. Complete the TikTok login first."
            )
        if record.is_expired(self._clock()):
            raise TokenExpiredError("Access token expired. Please re-authenticate.")
        if not record.has_scope(PUBLISH_SCOPE):
            raise InsufficientScopeError(
                f"Token is missing the {PUBLISH_SCOPE} scope."
            )

        if request.privacy_level and request.privacy_level != FORCED_PRIVACY_LEVEL:
            logger.debug(
                "Ignoring requested privacy_level=%s for open_id=%s",
                request.privacy_level,
                open_id,
            )

        post_info = {
            "title": build_caption(request.title, request.description),
            "privacy_level": FORCED_PRIVACY_LEVEL,
            "disable_duet": False,
            "disable_comment": False,
            "disable_stitch": False,
        }
        response = await self._content.init_video_publish(
            record.access_token, post_info=post_info, video_url=video_url
        )

        if response.ok:
            logger.info("Publish job started for open_id=%s", open_id)
            return PublishOutcome(
                success=True, status_code=response.status_code, data=response.body
            )

        logger.warning(
            "Publish init rejected for open_id=%s with HTTP %s",
            open_id,
            response.status_code,
        )
        return PublishOutcome(
            success=False, status_code=response.status_code, error=response.body
        )


__all__ = [
    "FORCED_PRIVACY_LEVEL",
    "PUBLISH_SCOPE",
    "PublishOutcome",
    "VideoPublishService",
    "build_caption",
]
