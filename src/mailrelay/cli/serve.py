"""Run the mail relay web server."""

from __future__ import annotations

import sys

import uvicorn
from loguru import logger

from mailrelay.infrastructure import get_settings


def main() -> int:
    """Entry point for the web server."""
    settings = get_settings()

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=settings.log_level,
    )

    logger.info(f"Mail relay listening on http://{settings.api_host}:{settings.api_port}")

    uvicorn.run(
        "mailrelay.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
