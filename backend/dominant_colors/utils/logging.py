"""
Dominant Colors Logging
Centralized loguru configuration.
"""
import sys
from typing import Optional

from loguru import logger

from dominant_colors.config import config

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Replace loguru's default handler with the service format (idempotent)."""
    global _configured
    if _configured and level is None:
        return

    logger.remove()
    logger.add(
        sys.stdout,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message} | {extra}",
        level=level or config.LOG_LEVEL,
        serialize=False  # Set to True for JSON output
    )
    _configured = True


def request_logger(request_id: str):
    """Logger bound to a request id."""
    return logger.bind(request_id=request_id)
