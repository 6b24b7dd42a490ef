"""Read-only views over stored tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from tiktok_relay.clients.token_store import TokenStore


@dataclass(slots=True)
class TokenStatus:
    found: bool
    valid: bool = False
    expires_at: Optional[datetime] = None
    seconds_remaining: int = 0
    scope: List[str] | None = None


def describe_token(
    store: TokenStore, open_id: str, now: datetime | None = None
) -> TokenStatus:
    """Summarize the stored token for ``open_id`` without touching it."""
    record = store.get(open_id)
    if record is None:
        return TokenStatus(found=False)

    now = now or datetime.now(timezone.utc)
    return TokenStatus(
        found=True,
        valid=not record.is_expired(now),
        expires_at=record.expires_at,
        seconds_remaining=record.seconds_remaining(now),
        scope=sorted(record.scope),
    )


def summarize_tokens(store: TokenStore, now: datetime | None = None) -> list[dict]:
    """Presence flags for every stored record; raw tokens are never included."""
    now = now or datetime.now(timezone.utc)
    return [
        {
            "open_id": record.open_id,
            "has_access_token": bool(record.access_token),
            "has_refresh_token": bool(record.refresh_token),
            "expires_at": record.expires_at.isoformat(),
            "expired": record.is_expired(now),
            "scope": sorted(record.scope),
        }
        for record in sorted(store.items(), key=lambda item: item.open_id)
    ]


__all__ = ["TokenStatus", "describe_token", "summarize_tokens"]
