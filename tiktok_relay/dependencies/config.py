"""
FastAPI dependency for injecting the relay configuration.
"""

from typing import Annotated

from fastapi import Depends

from tiktok_relay.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings.

    Routes depend on this instead of ``get_settings`` so tests can override it.
    """
    return get_settings()


AppSettingsDependency = Annotated[AppSettings, Depends(get_app_settings)]

__all__ = ["AppSettingsDependency", "get_app_settings"]
