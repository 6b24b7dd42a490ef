"""
JSON API routes for token status and the publish proxy.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from tiktok_relay.dependencies import get_publish_service, get_token_store
from tiktok_relay.schemas import (
    DebugTokenEntry,
    PublishVideoRequest,
    PublishVideoResponse,
    TokenStatusResponse,
)
from tiktok_relay.services import describe_token, summarize_tokens

router = APIRouter()
debug_router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get(
    "/token-status/{open_id}",
    response_model=TokenStatusResponse,
    responses={404: {"description": "No token stored for the user."}},
)
async def get_token_status(
    open_id: str,
    store: Annotated[Any, Depends(get_token_store)],
) -> TokenStatusResponse | JSONResponse:
    """Report whether a usable token is stored for ``open_id``."""
    status = describe_token(store, open_id)
    if not status.found:
        return JSONResponse(
            status_code=HTTPStatus.NOT_FOUND,
            content={
                "success": False,
                "authenticated": False,
                "message": "No token found for this user.",
            },
        )
    return TokenStatusResponse(
        authenticated=status.valid,
        expires_at=status.expires_at,
        expires_in=status.seconds_remaining,
        scope=status.scope or [],
    )


@router.post("/post-to-tiktok", response_model=PublishVideoResponse)
async def post_to_tiktok(
    payload: PublishVideoRequest,
    service: Annotated[Any, Depends(get_publish_service)],
) -> JSONResponse:
    """Start a TikTok publish job for a stored user, mirroring TikTok's status."""
    outcome = await service.publish(payload)
    if outcome.success:
        content = {"success": True, "data": outcome.data}
    else:
        content = {"success": False, "error": outcome.error}
    return JSONResponse(status_code=outcome.status_code, content=content)


@debug_router.get("/debug/tokens", response_model=list[DebugTokenEntry])
async def list_stored_tokens(
    store: Annotated[Any, Depends(get_token_store)],
) -> list[dict]:
    """Dump which users have tokens; never returns token values."""
    return summarize_tokens(store)


__all__ = ["debug_router", "router"]
