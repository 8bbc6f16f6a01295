"""Shared logging configuration.

Loguru-based logging module with:
- Structured JSON logging for production
- Colored console output for development
- Request id correlation
- Automatic sensitive data redaction
"""

from loguru import logger

from .config import (
    InterceptHandler,
    configure_third_party_loggers,
    get_logger,
    setup_logger,
)

__all__ = [
    "logger",
    "setup_logger",
    "get_logger",
    "InterceptHandler",
    "configure_third_party_loggers",
]
