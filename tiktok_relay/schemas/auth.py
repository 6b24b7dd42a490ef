"""Schemas related to OAuth flows and token state."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class AuthorizationUrlResponse(BaseModel):
    authorization_url: str
    state: str


class TokenStatusResponse(BaseModel):
    """Answer of ``GET /api/token-status/{open_id}`` for a known user."""

    success: bool = True
    authenticated: bool
    expires_at: Optional[datetime] = None
    expires_in: int = Field(0, description="Seconds until the access token expires.")
    scope: List[str] = Field(default_factory=list)


class DebugTokenEntry(BaseModel):
    open_id: str
    has_access_token: bool
    has_refresh_token: bool
    expires_at: datetime
    expired: bool
    scope: List[str]


__all__ = ["AuthorizationUrlResponse", "DebugTokenEntry", "TokenStatusResponse"]
