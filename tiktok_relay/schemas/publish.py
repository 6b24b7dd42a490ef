"""Schemas for the publish proxy endpoint."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class PublishVideoRequest(BaseModel):
    """Body of ``POST /api/post-to-tiktok``.

    Every field is optional at the schema level so missing identifiers surface
    as a 400 ``MissingParameterError`` rather than a validation error.
    """

    open_id: Optional[str] = Field(None, description="TikTok user to post as.")
    video_url: Optional[str] = Field(
        None, description="Publicly reachable media URL TikTok will pull from."
    )
    title: Optional[str] = None
    description: Optional[str] = None
    privacy_level: Optional[str] = Field(
        None,
        description="Accepted for compatibility; posts are always SELF_ONLY.",
    )


class PublishVideoResponse(BaseModel):
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[Any] = None


__all__ = ["PublishVideoRequest", "PublishVideoResponse"]
