try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from tiktok_relay.clients.tiktok_auth import (
    OAuthStateEncoder,
    TikTokOAuthClient,
    normalize_token_payload,
)
from tiktok_relay.core.errors import (
    ExchangeError,
    InvalidStateError,
    MalformedUpstreamResponseError,
    MissingParameterError,
)

FLAT_BODY = {
    "access_token": "T1",
    "open_id": "U1",
    "expires_in": 86400,
    "refresh_token": "R1",
    "refresh_expires_in": 31536000,
    "scope": "user.info.basic,video.publish",
    "token_type": "Bearer",
}


def test_normalize_flat_payload() -> None:
    grant = normalize_token_payload(FLAT_BODY)

    assert grant.access_token == "T1"
    assert grant.open_id == "U1"
    assert grant.expires_in == 86400
    assert grant.refresh_token == "R1"
    assert grant.scope == {"user.info.basic", "video.publish"}


def test_normalize_nested_payload() -> None:
    grant = normalize_token_payload({"data": FLAT_BODY, "message": "success"})

    assert grant.access_token == "T1"
    assert grant.refresh_expires_in == 31536000


def test_nested_payload_wins_over_flat_fields() -> None:
    body = {**FLAT_BODY, "access_token": "flat-token", "data": {**FLAT_BODY, "access_token": "nested-token"}}

    assert normalize_token_payload(body).access_token == "nested-token"


def test_missing_access_token_surfaces_vendor_description() -> None:
    body = {
        "data": {"description": "Authorization code is expired.", "error_code": 10007},
        "message": "error",
    }

    with pytest.raises(ExchangeError, match="Authorization code is expired"):
        normalize_token_payload(body)


@pytest.mark.parametrize("expires_in", [None, 0, -5, "soon"])
def test_non_positive_lifetime_is_rejected(expires_in) -> None:
    with pytest.raises(ExchangeError):
        normalize_token_payload({**FLAT_BODY, "expires_in": expires_in})


@pytest.mark.parametrize(
    "overrides", [{"token_type": 1}, {"refresh_token": 987654321}, {"scope": 42}]
)
def test_unexpected_field_types_are_malformed(overrides) -> None:
    with pytest.raises(MalformedUpstreamResponseError) as excinfo:
        normalize_token_payload({**FLAT_BODY, **overrides})

    assert isinstance(excinfo.value, ExchangeError)
    assert "987654321" not in excinfo.value.message


def test_missing_open_id_is_rejected() -> None:
    body = dict(FLAT_BODY)
    body.pop("open_id")
    with pytest.raises(ExchangeError, match="open_id"):
        normalize_token_payload(body)


def test_build_authorization_url(tiktok_settings, oauth_settings) -> None:
    client = TikTokOAuthClient(tiktok_settings, oauth_settings)

    url = client.build_authorization_url(state="xyz")
    query = parse_qs(urlparse(url).query)

    assert url.startswith("https://www.tiktok.com/v2/auth/authorize/?")
    assert query["client_key"] == ["client-key"]
    assert query["response_type"] == ["code"]
    assert query["scope"] == ["user.info.basic,video.publish"]
    assert query["redirect_uri"] == ["https://relay.example.com/auth/callback"]
    assert query["state"] == ["xyz"]


@pytest.mark.anyio
async def test_exchange_posts_form_with_fixed_redirect(
    tiktok_settings, oauth_settings, recording_transport
) -> None:
    transport = recording_transport(lambda request: httpx.Response(200, json=FLAT_BODY))
    client = TikTokOAuthClient(tiktok_settings, oauth_settings, transport=transport)

    grant = await client.exchange_authorization_code("abc123")

    assert grant.access_token == "T1"
    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://open.tiktokapis.test/v2/oauth/token/"
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    form = parse_qs(request.content.decode())
    assert form == {
        "client_key": ["client-key"],
        "client_secret": ["client-secret"],
        "code": ["abc123"],
        "grant_type": ["authorization_code"],
        "redirect_uri": ["https://relay.example.com/auth/callback"],
    }


@pytest.mark.anyio
async def test_exchange_rejects_non_success_status(
    tiktok_settings, oauth_settings, recording_transport
) -> None:
    transport = recording_transport(
        lambda request: httpx.Response(400, json={"error": "invalid_grant"})
    )
    client = TikTokOAuthClient(tiktok_settings, oauth_settings, transport=transport)

    with pytest.raises(ExchangeError, match="HTTP 400"):
        await client.exchange_authorization_code("abc123")


@pytest.mark.anyio
async def test_exchange_wraps_transport_errors(tiktok_settings, oauth_settings) -> None:
    def _boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = TikTokOAuthClient(
        tiktok_settings, oauth_settings, transport=httpx.MockTransport(_boom)
    )

    with pytest.raises(ExchangeError, match="unreachable"):
        await client.exchange_authorization_code("abc123")


@pytest.mark.anyio
async def test_exchange_flags_non_json_body(
    tiktok_settings, oauth_settings, recording_transport
) -> None:
    transport = recording_transport(
        lambda request: httpx.Response(200, text="<html>maintenance</html>")
    )
    client = TikTokOAuthClient(tiktok_settings, oauth_settings, transport=transport)

    with pytest.raises(MalformedUpstreamResponseError):
        await client.exchange_authorization_code("abc123")


@pytest.mark.anyio
async def test_exchange_requires_code(
    tiktok_settings, oauth_settings, recording_transport
) -> None:
    transport = recording_transport(lambda request: httpx.Response(200, json=FLAT_BODY))
    client = TikTokOAuthClient(tiktok_settings, oauth_settings, transport=transport)

    with pytest.raises(MissingParameterError):
        await client.exchange_authorization_code("  ")
    assert transport.requests == []


def test_state_encoder_round_trip_and_tamper_detection() -> None:
    encoder = OAuthStateEncoder(secret_key="secret")
    token = encoder.encode({"nonce": "n1", "issued_at": "2026-01-01T00:00:00+00:00"})

    assert encoder.decode(token)["nonce"] == "n1"

    with pytest.raises(InvalidStateError):
        OAuthStateEncoder(secret_key="other").decode(token)
    with pytest.raises(InvalidStateError):
        encoder.decode("not-base64!")
