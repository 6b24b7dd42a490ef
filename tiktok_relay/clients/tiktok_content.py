"""Client for the TikTok Content Posting API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import httpx

from tiktok_relay.core.errors import (
    MalformedUpstreamResponseError,
    UpstreamUnavailableError,
)
from tiktok_relay.utils.http import bearer_headers, read_json_body


@dataclass(frozen=True, slots=True)
class VendorResponse:
    """Status and decoded body of a TikTok API call, relayed as-is."""

    status_code: int
    body: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class TikTokContentClient:
    """Start direct-post publish jobs that pull media from a URL."""

    PUBLISH_INIT_PATH = "/v2/post/publish/video/init/"

    def __init__(
        self,
        api_base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = api_base_url.rstrip("/") + self.PUBLISH_INIT_PATH
        self._timeout = timeout
        self._transport = transport

    async def init_video_publish(
        self, access_token: str, *, post_info: Dict[str, Any], video_url: str
    ) -> VendorResponse:
        payload = {
            "post_info": post_info,
            "source_info": {"source": "PULL_FROM_URL", "video_url": video_url},
        }
        headers = {
            **bearer_headers(access_token),
            "Content-Type": "application/json; charset=UTF-8",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self._url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(f"Publish endpoint unreachable: {exc}") from exc

        if not response.is_success:
            # Gateways in front of TikTok answer errors with HTML.
            try:
                body = read_json_body(response, context="Publish endpoint")
            except MalformedUpstreamResponseError:
                body = {"message": response.text}
            return VendorResponse(status_code=response.status_code, body=body)

        body = read_json_body(response, context="Publish endpoint")
        return VendorResponse(status_code=response.status_code, body=body)


__all__ = ["TikTokContentClient", "VendorResponse"]
