"""Exception handlers for FastAPI.

Resources translate failures of their own service calls. These handlers
cover what escapes a route: AppErrors raised outside the resource boundary
and requests FastAPI cannot parse (malformed JSON, non-integer ids).
"""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .base import AppError
from .schemas import string_tree
from .translator import ErrorTranslator

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI, translator: ErrorTranslator) -> None:
    """Register exception handlers in FastAPI application.

    Registers handlers for:
    - Application errors (AppError), through the translator
    - Request parsing errors (RequestValidationError)

    Args:
        app: FastAPI application instance
        translator: Translator shared with the resources
    """

    @app.exception_handler(AppError)
    async def app_exception_handler(request: Request, exc: AppError) -> Response:
        """Handle application errors raised outside a resource boundary."""
        return translator.translate(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle requests that cannot be parsed into the route's parameters.

        Transforms parsing errors into the `error` payload with a 400 status.
        """
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        logger.debug("Unparseable request %s %s: %s", request.method, request.url.path, details)
        return JSONResponse(
            status_code=400,
            content=string_tree(
                {"error": {"exception": "RequestValidationError", "detailMessage": details}}
            ),
            headers={"X-Error-Code": "MALFORMED_REQUEST"},
        )
