"""Client for the TikTok user info endpoint."""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from tiktok_relay.core.errors import (
    MalformedUpstreamResponseError,
    RelayError,
    UpstreamUnavailableError,
)
from tiktok_relay.models.token import UserProfile
from tiktok_relay.utils.http import bearer_headers, invalid_fields, read_json_body

PROFILE_FIELDS = ("open_id", "union_id", "avatar_url", "display_name")


class TikTokProfileClient:
    """Fetch display metadata for an authenticated user."""

    USER_INFO_PATH = "/v2/user/info/"

    def __init__(
        self,
        api_base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = api_base_url.rstrip("/") + self.USER_INFO_PATH
        self._timeout = timeout
        self._transport = transport

    async def fetch_profile(self, access_token: str) -> UserProfile:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(
                    self._url,
                    params={"fields": ",".join(PROFILE_FIELDS)},
                    headers=bearer_headers(access_token),
                )
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(f"User info endpoint unreachable: {exc}") from exc

        if not response.is_success:
            raise RelayError(
                f"User info endpoint returned HTTP {response.status_code}."
            )

        body = read_json_body(response, context="User info endpoint")
        data = body.get("data")
        if isinstance(data, dict):
            user = data.get("user")
            payload = user if isinstance(user, dict) else data
        else:
            payload = body
        try:
            return UserProfile(**{field: payload.get(field) for field in PROFILE_FIELDS})
        except ValidationError as exc:
            raise MalformedUpstreamResponseError(
                f"User info endpoint returned unexpected types for: {invalid_fields(exc)}."
            ) from exc


__all__ = ["PROFILE_FIELDS", "TikTokProfileClient"]
