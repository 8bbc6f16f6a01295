"""Mapping of storage errors to domain errors.

Storage adapters raise typed domain errors instead of leaking driver
exceptions wrapped in SQLAlchemy ones.
"""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import IntegrityError

from .domain import IntegrityViolationError

logger = logging.getLogger(__name__)


class StorageExceptionMapper:
    """Centralized mapping of storage exceptions to domain exceptions."""

    _handlers: dict[type[Exception], Callable[[Exception, str], Exception]] = {}

    @classmethod
    def register(
        cls, *exception_types: type[Exception]
    ) -> Callable[[Callable[[Any, str], Exception]], Callable[[Any, str], Exception]]:
        """Register a handler for exception types.

        Usage:
            @StorageExceptionMapper.register(IntegrityError)
            def _handle_integrity_error(exc: IntegrityError, func_name: str) -> Exception:
                return IntegrityViolationError(exc.orig or exc)
        """

        def decorator(
            handler: Callable[[Any, str], Exception]
        ) -> Callable[[Any, str], Exception]:
            for exc_type in exception_types:
                cls._handlers[exc_type] = handler
            return handler

        return decorator

    @classmethod
    def map(cls, exc: Exception, func_name: str = "") -> Exception | None:
        """Map a storage exception to a domain exception.

        Args:
            exc: The exception raised by the storage layer
            func_name: Name of the function where exception occurred (for logging)

        Returns:
            The domain exception, or None when the exception is not a storage
            failure this mapper knows about.
        """
        # Direct type match
        handler = cls._handlers.get(type(exc))

        # Try inheritance match if no direct match
        if handler is None:
            for exc_type, exc_handler in cls._handlers.items():
                if isinstance(exc, exc_type):
                    handler = exc_handler
                    break

        if handler is None:
            return None
        return handler(exc, func_name)


# --- Register default handlers ---


@StorageExceptionMapper.register(IntegrityError)
def _handle_integrity_error(exc: IntegrityError, func_name: str) -> Exception:
    """Database: integrity constraint violation (unique, foreign key, not null)."""
    root = exc.orig if exc.orig is not None else exc
    logger.warning("Integrity violation in %s: %s", func_name, root)
    return IntegrityViolationError(root)
