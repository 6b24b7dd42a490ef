"""
TikTok OAuth utilities.

These helpers build the consent URL, protect the ``state`` round trip and
exchange authorization codes for access tokens.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import json
import logging
from hashlib import sha256
from typing import Any, Dict, Literal, Tuple
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from tiktok_relay.core.config import OAuthSettings, TikTokSettings
from tiktok_relay.core.errors import (
    ExchangeError,
    InvalidStateError,
    MalformedUpstreamResponseError,
    MissingParameterError,
)
from tiktok_relay.models.token import TokenGrant, parse_scope
from tiktok_relay.utils.http import invalid_fields, read_json_body

logger = logging.getLogger(__name__)

PayloadShape = Literal["nested", "flat"]


class OAuthStateEncoder:
    """Encode and decode OAuth state values to guard against tampering."""

    def __init__(self, secret_key: str) -> None:
        self._secret_key = secret_key.encode("utf-8")

    def encode(self, payload: Dict[str, Any]) -> str:
        serialized = json.dumps(payload, separators=(",", ":"), sort_keys=True)
        signature = hmac.new(self._secret_key, serialized.encode("utf-8"), sha256).digest()
        return base64.urlsafe_b64encode(signature + serialized.encode("utf-8")).decode("utf-8")

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            decoded = base64.urlsafe_b64decode(token.encode("utf-8"))
        except (binascii.Error, ValueError) as exc:
            raise InvalidStateError("Malformed OAuth state.") from exc
        signature, serialized = decoded[:32], decoded[32:]
        expected_signature = hmac.new(self._secret_key, serialized, sha256).digest()
        if not hmac.compare_digest(signature, expected_signature):
            raise InvalidStateError("Invalid OAuth state signature.")
        return json.loads(serialized)


def _unwrap_token_payload(body: Dict[str, Any]) -> Tuple[PayloadShape, Dict[str, Any]]:
    """Pick the token fields out of either response shape, nested first."""
    data = body.get("data")
    if isinstance(data, dict) and data:
        return "nested", data
    return "flat", body


def _vendor_error_message(payload: Dict[str, Any]) -> str | None:
    for key in ("error_description", "description", "message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value and value != "success":
            return value
    return None


def normalize_token_payload(body: Dict[str, Any]) -> TokenGrant:
    """Turn a token endpoint body into a ``TokenGrant``.

    TikTok has served both ``{"data": {...}}`` and flat bodies from the token
    endpoint; both remain supported.
    """
    shape, payload = _unwrap_token_payload(body)

    access_token = payload.get("access_token")
    if not access_token:
        detail = _vendor_error_message(payload) or _vendor_error_message(body)
        raise ExchangeError(
            f"Token response ({shape}) did not include an access token"
            + (f": {detail}" if detail else ".")
        )

    open_id = payload.get("open_id")
    if not open_id:
        raise ExchangeError(f"Token response ({shape}) did not include an open_id.")

    try:
        expires_in = int(payload.get("expires_in") or 0)
    except (TypeError, ValueError) as exc:
        raise ExchangeError("Token response carried a non-numeric expires_in.") from exc
    if expires_in <= 0:
        raise ExchangeError("Token response did not include a positive expires_in.")

    refresh_expires_in = payload.get("refresh_expires_in")
    try:
        refresh_expires_in = int(refresh_expires_in) if refresh_expires_in else None
    except (TypeError, ValueError):
        refresh_expires_in = None

    try:
        return TokenGrant(
            open_id=str(open_id),
            access_token=str(access_token),
            expires_in=expires_in,
            refresh_token=payload.get("refresh_token") or None,
            refresh_expires_in=refresh_expires_in,
            scope=parse_scope(payload.get("scope")),
            token_type=payload.get("token_type"),
        )
    except ValidationError as exc:
        raise MalformedUpstreamResponseError(
            f"Token response ({shape}) carried unexpected types for: "
            f"{invalid_fields(exc)}."
        ) from exc
    except TypeError as exc:
        raise MalformedUpstreamResponseError(
            f"Token response ({shape}) carried an unreadable scope."
        ) from exc


class TikTokOAuthClient:
    """Build TikTok authorization URLs and exchange authorization codes."""

    TOKEN_PATH = "/v2/oauth/token/"

    def __init__(
        self,
        tiktok_settings: TikTokSettings,
        oauth_settings: OAuthSettings,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._tiktok = tiktok_settings
        self._oauth = oauth_settings
        self._timeout = timeout
        self._transport = transport

    @property
    def token_url(self) -> str:
        return self._tiktok.api_base_url.rstrip("/") + self.TOKEN_PATH

    def build_authorization_url(self, state: str) -> str:
        """Construct the TikTok consent URL."""
        params = {
            "client_key": self._tiktok.client_key,
            "response_type": "code",
            "scope": ",".join(self._oauth.scopes),
            "redirect_uri": self._tiktok.redirect_uri,
            "state": state,
        }
        return f"{self._tiktok.auth_base_url}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> TokenGrant:
        """Exchange an authorization code for a ``TokenGrant``."""
        if not code or not code.strip():
            raise MissingParameterError("Authorization code is required.")

        payload = {
            "client_key": self._tiktok.client_key,
            "client_secret": self._tiktok.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self._tiktok.redirect_uri,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.token_url,
                    data=payload,
                    headers={"Cache-Control": "no-cache"},
                )
        except httpx.HTTPError as exc:
            logger.warning("Token exchange request failed: %s", exc)
            raise ExchangeError(f"Token endpoint unreachable: {exc}") from exc

        if not response.is_success:
            raise ExchangeError(
                f"Token endpoint returned HTTP {response.status_code}: {response.text}"
            )

        body = read_json_body(response, context="Token endpoint")
        return normalize_token_payload(body)


__all__ = [
    "OAuthStateEncoder",
    "TikTokOAuthClient",
    "normalize_token_payload",
]
