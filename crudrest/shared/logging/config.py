"""Logger configuration.

This module configures a unified logger for the application:
- Loguru for application logs (pretty format, colors, structured data)
- Intercept handler for third-party library logs (uvicorn, fastapi, sqlalchemy)
- Request id correlation from the tracing middleware
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger

from crudrest.shared.context import get_request_id

if TYPE_CHECKING:
    from crudrest.core.config import Settings

NO_REQUEST = "-"

# Sensitive field patterns for redaction
SENSITIVE_PATTERNS = re.compile(
    r"(password|token|secret|credential|api_key)",
    re.IGNORECASE,
)


def _get_settings() -> Settings:
    """Get settings lazily to avoid circular imports."""
    from crudrest.core.config import settings

    return settings


class InterceptHandler(logging.Handler):
    """Handler for intercepting standard logging and redirecting to Loguru.

    Library modules (and this project's own modules) log through the standard
    logging module; this handler funnels all of it into Loguru's sinks.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """Forward a single standard logging record to Loguru.

        Args:
            record: Log record from standard logging
        """
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)

        frame = logging.currentframe()
        depth = 2

        if frame:
            while frame.f_code.co_filename == logging.__file__:
                if frame.f_back:
                    frame = frame.f_back
                    depth += 1
                else:
                    break

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _request_patcher(record: dict[str, Any]) -> None:
    """Add the current request id to every record."""
    record["extra"].setdefault("request_id", get_request_id() or NO_REQUEST)


def _redact_sensitive_value(key: str, value: Any) -> Any:
    """Redact sensitive values based on key name."""
    if SENSITIVE_PATTERNS.search(key):
        return "***REDACTED***"
    return value


def _create_json_sink(service_name: str) -> Any:
    """Create a JSON sink for stdout logging.

    Args:
        service_name: Name of the service for log entries

    Returns:
        Sink function for Loguru
    """

    def json_sink(message: Any) -> None:
        """Write JSON formatted log to stdout."""
        record = message.record
        log_entry: dict[str, Any] = {
            "timestamp": record["time"].isoformat(),
            "level": record["level"].name,
            "message": record["message"],
            "module": record["extra"].get("name", record["name"]),
            "function": record["function"],
            "line": record["line"],
            "request_id": record["extra"].get("request_id", NO_REQUEST),
            "service": service_name,
        }

        excluded_keys = {"request_id", "name"}
        for key, value in record["extra"].items():
            if key not in excluded_keys:
                log_entry[key] = _redact_sensitive_value(key, value)

        if record.get("exception"):
            exc = record["exception"]
            log_entry["exception"] = {
                "type": exc.type.__name__ if exc.type else None,
                "value": str(exc.value) if exc.value else None,
            }

        sys.stdout.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")
        sys.stdout.flush()

    return json_sink


def setup_logger() -> None:
    """Configure Loguru logger.

    Sets up:
    - Console handler with colored output (dev) or JSON format (prod)
    - Request id correlation
    - Third-party library log interception
    """
    settings = _get_settings()

    logger.remove()
    logger.configure(patcher=_request_patcher)

    is_json = settings.logging.format.lower() == "json"

    if is_json:
        logger.add(
            _create_json_sink(settings.app.name),
            level=settings.logging.level.upper(),
            backtrace=True,
            diagnose=False,  # Don't expose internal state in production
            enqueue=True,
        )
    else:
        dev_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level> | "
            "<dim>request_id={extra[request_id]}</dim>"
        )
        logger.add(
            sys.stdout,
            format=dev_format,
            level=settings.logging.level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=settings.app.debug,
            enqueue=True,
        )

    configure_third_party_loggers()

    logger.info(
        "Logger configured",
        level=settings.logging.level,
        format="json" if is_json else "console",
    )


def configure_third_party_loggers() -> None:
    """Route standard logging through Loguru and tame chatty libraries."""
    settings = _get_settings()

    logging.root.handlers = []
    logging.root.setLevel(settings.logging.level.upper())

    loggers_to_configure = [
        "",  # root logger
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "fastapi",
        "sqlalchemy",
        "sqlalchemy.engine",
        "crudrest",
    ]

    for logger_name in loggers_to_configure:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers.clear()
        logging_logger.addHandler(InterceptHandler())
        logging_logger.propagate = False

        if logger_name in ["sqlalchemy", "sqlalchemy.engine"]:
            logging_logger.setLevel(logging.WARNING)
        elif logger_name == "crudrest":
            logging_logger.setLevel(settings.logging.level.upper())
        else:
            logging_logger.setLevel(logging.INFO)

    logger.debug("Third-party loggers configured")


def get_logger(name: str):
    """Get a logger with the specified name.

    Args:
        name: Logger name (usually __name__ of the module)

    Returns:
        Configured Loguru logger with bound name
    """
    return logger.bind(name=name)
