"""Run the relay with uvicorn using the configured host and port."""

import uvicorn

from tiktok_relay.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "tiktok_relay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
