"""Typed errors raised by the relay and their HTTP translation."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """Base error carrying a stable ``code`` and the HTTP status to answer with."""

    code = "internal.error"
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_public_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.message, "code": self.code}


class MissingParameterError(RelayError):
    """A required request parameter was absent or blank."""

    code = "request.missing_parameter"
    status_code = HTTPStatus.BAD_REQUEST


class InvalidStateError(RelayError):
    """The OAuth ``state`` value failed verification or has expired."""

    code = "auth.invalid_state"
    status_code = HTTPStatus.BAD_REQUEST


class ExchangeError(RelayError):
    """Raised when the token endpoint rejects or garbles the code exchange."""

    code = "auth.exchange_failed"
    status_code = HTTPStatus.BAD_REQUEST


class MalformedUpstreamResponseError(ExchangeError):
    """TikTok answered with a body that is not the JSON we expect."""

    code = "upstream.malformed_response"
    status_code = HTTPStatus.BAD_GATEWAY


class UnauthenticatedError(RelayError):
    code = "auth.unauthenticated"
    status_code = HTTPStatus.UNAUTHORIZED


class TokenExpiredError(RelayError):
    code = "auth.token_expired"
    status_code = HTTPStatus.UNAUTHORIZED


class InsufficientScopeError(RelayError):
    code = "auth.insufficient_scope"
    status_code = HTTPStatus.FORBIDDEN


class UpstreamUnavailableError(RelayError):
    """Transport-level failure talking to TikTok (DNS, connect, timeout)."""

    code = "upstream.unavailable"
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    """Translate ``RelayError`` escaping a route into the JSON error envelope."""

    @app.exception_handler(RelayError)
    async def _relay_error_handler(request: Request, exc: RelayError) -> Response:
        logger.info(
            "%s %s failed with %s: %s",
            request.method,
            request.url.path,
            exc.code,
            exc.message,
        )
        return JSONResponse(
            status_code=int(exc.status_code), content=exc.to_public_dict()
        )


__all__ = [
    "ExchangeError",
    "InsufficientScopeError",
    "InvalidStateError",
    "MalformedUpstreamResponseError",
    "MissingParameterError",
    "RelayError",
    "TokenExpiredError",
    "UnauthenticatedError",
    "UpstreamUnavailableError",
    "register_exception_handlers",
]
