"""Pytest configuration shared across the suite."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

from datetime import datetime, timedelta, timezone
from typing import Callable

import httpx
import pytest

from tiktok_relay.clients.token_store import InMemoryTokenStore
from tiktok_relay.core.config import OAuthSettings, TikTokSettings
from tiktok_relay.models.token import TokenRecord


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def tiktok_settings() -> TikTokSettings:
    return TikTokSettings(
        TIKTOK_CLIENT_KEY="client-key",
        TIKTOK_CLIENT_SECRET="client-secret",
        TIKTOK_REDIRECT_URI="https://relay.example.com/auth/callback",
        TIKTOK_API_BASE_URL="https://open.tiktokapis.test",
    )


@pytest.fixture
def oauth_settings() -> OAuthSettings:
    return OAuthSettings()


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def make_record() -> Callable[..., TokenRecord]:
    """Build a stored token record relative to the current time."""

    def _make(
        open_id: str = "U1",
        *,
        expires_in: int = 3600,
        scope: tuple[str, ...] = ("user.info.basic", "video.publish"),
        access_token: str = "T1",
        refresh_token: str | None = "R1",
    ) -> TokenRecord:
        issued_at = datetime.now(timezone.utc)
        return TokenRecord(
            open_id=open_id,
            access_token=access_token,
            refresh_token=refresh_token,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=expires_in),
            scope=frozenset(scope),
        )

    return _make


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    return RecordingTransport
