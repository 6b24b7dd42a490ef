"""Complete the TikTok authorization-code flow and record the resulting token."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from tiktok_relay.clients.tiktok_auth import TikTokOAuthClient
from tiktok_relay.clients.tiktok_profile import TikTokProfileClient
from tiktok_relay.clients.token_store import TokenStore
from tiktok_relay.core.errors import RelayError
from tiktok_relay.models.token import TokenRecord, UserProfile

logger = logging.getLogger(__name__)

PROFILE_SCOPE = "user.info.basic"


@dataclass(slots=True)
class AuthorizationResult:
    """Outcome of a successful code exchange."""

    record: TokenRecord
    profile: Optional[UserProfile] = None
    note: Optional[str] = None


class TikTokAuthorizationService:
    """Exchange a code, store the token, then enrich it with profile data."""

    def __init__(
        self,
        *,
        oauth_client: TikTokOAuthClient,
        profile_client: TikTokProfileClient,
        store: TokenStore,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._oauth = oauth_client
        self._profile = profile_client
        self._store = store
        self._clock = clock

    async def complete_authorization(self, code: str) -> AuthorizationResult:
        grant = await self._oauth.exchange_authorization_code(code)
        issued_at = self._clock()

        record = TokenRecord.from_grant(grant, issued_at=issued_at)
        self._store.put(record)
        logger.info(
            "Stored TikTok token for open_id=%s scope=%s expires_at=%s",
            record.open_id,
            ",".join(sorted(record.scope)),
            record.expires_at.isoformat(),
        )

        if not record.has_scope(PROFILE_SCOPE):
            return AuthorizationResult(record=record)

        try:
            profile = await self._profile.fetch_profile(record.access_token)
        except RelayError as exc:
            logger.warning(
                "Profile fetch failed for open_id=%s: %s", record.open_id, exc.message
            )
            return AuthorizationResult(
                record=record, note="Profile details could not be retrieved."
            )

        record = record.model_copy(
            update={
                "display_name": profile.display_name,
                "avatar_url": profile.avatar_url,
            }
        )
        self._store.put(record)
        return AuthorizationResult(record=record, profile=profile)


__all__ = ["AuthorizationResult", "PROFILE_SCOPE", "TikTokAuthorizationService"]
