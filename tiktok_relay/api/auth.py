"""
Browser-facing OAuth routes: consent redirect and the TikTok callback.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from http import HTTPStatus
from typing import Annotated, Any
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from tiktok_relay.core.config import AppSettings
from tiktok_relay.core.errors import (
    ExchangeError,
    InvalidStateError,
    MissingParameterError,
    RelayError,
)
from tiktok_relay.dependencies import (
    AppSettingsDependency,
    get_authorization_service,
    get_oauth_state_encoder,
    get_tiktok_oauth_client,
)
from tiktok_relay.schemas import AuthorizationUrlResponse
from tiktok_relay.services import AuthorizationResult

router = APIRouter()
logger = logging.getLogger(__name__)


def _verify_state(state_encoder: Any, state: str, settings: AppSettings) -> dict:
    state_data = state_encoder.decode(state)

    issued_at_raw = state_data.get("issued_at")
    if not issued_at_raw:
        raise InvalidStateError("Missing issued_at in state token.")
    try:
        issued_at = datetime.fromisoformat(issued_at_raw)
    except ValueError as exc:
        raise InvalidStateError("Invalid issued_at in state token.") from exc
    if issued_at.tzinfo is None:
        issued_at = issued_at.replace(tzinfo=timezone.utc)

    age = datetime.now(timezone.utc) - issued_at
    if age > timedelta(seconds=settings.oauth.state_ttl_seconds):
        raise InvalidStateError("OAuth state token has expired.")
    return state_data


def _wants_redirect(settings: AppSettings) -> bool:
    return settings.callback_response_mode == "redirect" and bool(
        settings.frontend_base_url
    )


def _frontend_redirect(settings: AppSettings, params: dict[str, str]) -> RedirectResponse:
    base = str(settings.frontend_base_url)
    separator = "&" if "?" in base else "?"
    return RedirectResponse(
        url=f"{base}{separator}{urlencode(params)}",
        status_code=HTTPStatus.TEMPORARY_REDIRECT,
    )


def _render_success_text(result: AuthorizationResult) -> str:
    record = result.record
    lines = [
        "TikTok authorization complete.",
        f"open_id: {record.open_id}",
        f"scope: {','.join(sorted(record.scope)) or '(none)'}",
        f"expires_at: {record.expires_at.isoformat()}",
    ]
    if record.display_name:
        lines.append(f"display_name: {record.display_name}")
    if result.note:
        lines.append(f"note: {result.note}")
    return "\n".join(lines)


@router.get("/auth/login", response_model=None)
async def start_tiktok_oauth_flow(
    oauth_client: Annotated[Any, Depends(get_tiktok_oauth_client)],
    state_encoder: Annotated[Any, Depends(get_oauth_state_encoder)],
    redirect: bool = Query(
        default=True,
        description="When false, return the consent URL as JSON instead of redirecting.",
    ),
) -> Response | AuthorizationUrlResponse:
    """Send the browser to TikTok's consent screen with a signed state."""
    state = state_encoder.encode(
        {
            "nonce": uuid.uuid4().hex,
            "issued_at": datetime.now(timezone.utc).isoformat(),
        }
    )
    authorization_url = oauth_client.build_authorization_url(state=state)
    if redirect:
        return RedirectResponse(
            url=authorization_url, status_code=HTTPStatus.TEMPORARY_REDIRECT
        )
    return AuthorizationUrlResponse(authorization_url=authorization_url, state=state)


@router.get("/auth/callback")
async def handle_tiktok_callback(
    service: Annotated[Any, Depends(get_authorization_service)],
    state_encoder: Annotated[Any, Depends(get_oauth_state_encoder)],
    settings: AppSettingsDependency,
    code: str | None = Query(default=None, description="Authorization code from TikTok."),
    state: str | None = Query(default=None, description="State issued by /auth/login."),
    error: str | None = Query(default=None),
    error_description: str | None = Query(default=None),
) -> Response:
    """Exchange the authorization code and report back to the browser."""
    try:
        if error:
            raise ExchangeError(f"Authorization denied: {error_description or error}")
        if not code:
            raise MissingParameterError("Authorization code missing from callback.")
        # Links predating /auth/login carry no state.
        if state:
            _verify_state(state_encoder, state, settings)
        result = await service.complete_authorization(code)
    except RelayError as exc:
        logger.warning("TikTok callback failed (%s): %s", exc.code, exc.message)
        if _wants_redirect(settings):
            return _frontend_redirect(settings, {"auth": "error", "message": exc.message})
        return PlainTextResponse(
            f"Authorization failed: {exc.message}", status_code=int(exc.status_code)
        )

    if _wants_redirect(settings):
        return _frontend_redirect(
            settings, {"auth": "success", "open_id": result.record.open_id}
        )
    return PlainTextResponse(_render_success_text(result))


__all__ = ["router"]
