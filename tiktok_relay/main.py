"""
FastAPI application entrypoint for the TikTok OAuth relay.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from tiktok_relay.api.auth import router as auth_router
from tiktok_relay.api.routes import debug_router
from tiktok_relay.api.routes import router as api_router
from tiktok_relay.core.config import AppSettings, get_settings
from tiktok_relay.core.errors import register_exception_handlers
from tiktok_relay.core.logging import configure_logging


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Factory for the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="TikTok OAuth Relay",
        version="0.1.0",
        description="Relays the TikTok login flow and video publish requests.",
    )

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def liveness() -> str:
        return "TikTok relay is running."

    app.include_router(auth_router)
    app.include_router(api_router, prefix="/api")
    if settings.enable_debug_routes:
        app.include_router(debug_router, prefix="/api")
    register_exception_handlers(app)
    return app


app = create_app()

__all__ = ["app", "create_app"]
