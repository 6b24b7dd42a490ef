"""HTTP helpers shared by the TikTok API clients."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from tiktok_relay.core.errors import MalformedUpstreamResponseError


def read_json_body(response: httpx.Response, *, context: str) -> dict[str, Any]:
    """Decode a JSON object body or raise ``MalformedUpstreamResponseError``."""
    try:
        body = response.json()
    except ValueError as exc:
        raise MalformedUpstreamResponseError(
            f"{context} returned a non-JSON body (HTTP {response.status_code})."
        ) from exc
    if not isinstance(body, dict):
        raise MalformedUpstreamResponseError(
            f"{context} returned {type(body).__name__} instead of a JSON object."
        )
    return body


def invalid_fields(exc: ValidationError) -> str:
    """Name the offending fields without echoing their values."""
    names = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
    return ", ".join(sorted(names))


def bearer_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


__all__ = ["bearer_headers", "invalid_fields", "read_json_body"]
