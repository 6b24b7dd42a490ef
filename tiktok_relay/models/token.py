"""
Domain models for the TikTok token lifecycle.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from pydantic import BaseModel, Field


def parse_scope(raw: str | Iterable[str] | None) -> frozenset[str]:
    """Split a TikTok scope value into a set of capability names.

    TikTok returns a comma-separated string; whitespace separators and lists are
    accepted as well.
    """
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        parts = raw.replace(",", " ").split()
    else:
        parts = [str(item).strip() for item in raw]
    return frozenset(part for part in parts if part)


class TokenGrant(BaseModel):
    """Normalized result of a successful authorization-code exchange."""

    open_id: str
    access_token: str
    expires_in: int
    refresh_token: Optional[str] = None
    refresh_expires_in: Optional[int] = None
    scope: frozenset[str] = Field(default_factory=frozenset)
    token_type: Optional[str] = None


class UserProfile(BaseModel):
    """Display metadata returned by the user info endpoint."""

    open_id: Optional[str] = None
    union_id: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class TokenRecord(BaseModel):
    """Token state kept for one TikTok user, keyed by ``open_id``."""

    open_id: str = Field(..., description="TikTok-assigned opaque user identifier.")
    access_token: str
    refresh_token: Optional[str] = None
    issued_at: datetime
    expires_at: datetime
    refresh_expires_at: Optional[datetime] = None
    scope: frozenset[str] = Field(default_factory=frozenset)
    token_type: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_grant(cls, grant: TokenGrant, *, issued_at: datetime) -> "TokenRecord":
        refresh_expires_at = None
        if grant.refresh_expires_in:
            refresh_expires_at = issued_at + timedelta(seconds=grant.refresh_expires_in)
        return cls(
            open_id=grant.open_id,
            access_token=grant.access_token,
            refresh_token=grant.refresh_token,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=grant.expires_in),
            refresh_expires_at=refresh_expires_at,
            scope=grant.scope,
            token_type=grant.token_type,
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at

    def seconds_remaining(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        return max(0, int((self.expires_at - now).total_seconds()))

    def has_scope(self, name: str) -> bool:
        return name in self.scope


__all__ = ["TokenGrant", "TokenRecord", "UserProfile", "parse_scope"]
