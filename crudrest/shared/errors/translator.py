"""Translation of failures into HTTP responses.

The translator sits at the boundary between a resource and its persistence
service: whatever the service raises is turned into a status code and an
optional structured body right there.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from fastapi import Response
from fastapi.responses import JSONResponse

from crudrest.core.config import CrudOptions

from .base import AppError, qualified_name
from .domain import IntegrityViolationError, UnsupportedFilterError
from .schemas import string_tree

logger = logging.getLogger(__name__)

ExceptionHandler = Callable[[Any], Response]


def _unsupported_filter(exc: UnsupportedFilterError) -> Response:
    """Backend without a query engine: the request is valid, the capability is missing."""
    return JSONResponse(
        status_code=501,
        content=string_tree(
            {"error": {"exception": qualified_name(exc), "detailMessage": str(exc)}}
        ),
    )


DEFAULT_MAPPERS: dict[type[Exception], ExceptionHandler] = {
    UnsupportedFilterError: _unsupported_filter,
}


class ErrorTranslator:
    """Turns a caught failure into the response sent to the client.

    Rules, in order:
    - IntegrityViolationError: 400 naming the storage exception, only when
      `return_exception_body` is enabled; otherwise treated as unmapped.
    - Any other AppError: its own status and body (validation errors,
      malformed bodies, missing entities, disabled features).
    - Anything else: the mapper registered for the exact exception type, or
      500 with an empty body.
    """

    def __init__(
        self,
        options: CrudOptions,
        mappers: Mapping[type[Exception], ExceptionHandler] | None = None,
    ) -> None:
        self._options = options
        self._mappers: dict[type[Exception], ExceptionHandler] = dict(DEFAULT_MAPPERS)
        if mappers:
            self._mappers.update(mappers)

    def register(
        self, *exception_types: type[Exception]
    ) -> Callable[[ExceptionHandler], ExceptionHandler]:
        """Register a response mapper for exact exception types.

        Usage:
            @translator.register(TimeoutError)
            def _timeout(exc: TimeoutError) -> Response:
                return Response(status_code=504)
        """

        def decorator(handler: ExceptionHandler) -> ExceptionHandler:
            for exc_type in exception_types:
                self._mappers[exc_type] = handler
            return handler

        return decorator

    def mapper_for(self, exc: BaseException) -> ExceptionHandler | None:
        """Return the mapper registered for the exact type of `exc`."""
        handler = self._mappers.get(type(exc))
        if handler is None or getattr(handler, "__self__", None) is self:
            return None
        return handler

    def translate(self, exc: Exception) -> Response:
        """Build the response for a failure."""
        if isinstance(exc, IntegrityViolationError):
            if self._options.return_exception_body:
                return exc.to_response()
        elif isinstance(exc, AppError):
            logger.debug("Request rejected: %s (%s)", exc.code, exc.message)
            return exc.to_response()

        handler = self.mapper_for(exc)
        if handler is not None:
            return handler(exc)

        logger.error("Unmapped failure: %s", type(exc).__name__, exc_info=exc)
        return Response(status_code=500)
