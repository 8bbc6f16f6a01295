"""
Request processing middleware.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from crudrest.shared.context import request_id_var

from .config import CrudOptions

logger = logging.getLogger(__name__)


# ==================== Request Tracing Middleware ====================


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Attaches a request id to every request and logs its outcome."""

    SKIP_LOG_ENDPOINTS: set[str] = {"/health"}

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed: %s %s after %.2f ms",
                request.method,
                request.url.path,
                (time.perf_counter() - start_time) * 1000,
            )
            raise
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        self._log_request(request, response, time.perf_counter() - start_time)
        return response

    def _log_request(self, request: Request, response: Response, duration: float) -> None:
        """Log method, path, status and duration."""
        if request.url.path in self.SKIP_LOG_ENDPOINTS:
            return

        level = logging.INFO
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING

        logger.log(
            level,
            "%s %s -> %d (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration * 1000,
        )


# ==================== CORS Middleware ====================


class CorsMiddleware(BaseHTTPMiddleware):
    """Allow-all cross-origin policy.

    Preflight OPTIONS requests are acknowledged with 200 before routing when
    `allow_options` is on. Every response gets the permissive CORS headers
    when `cors` is on; the exposed headers list is always set.
    """

    ALLOW_HEADERS: dict[str, str] = {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS, HEAD",
        "Access-Control-Allow-Headers": "origin, content-type, accept, authorization",
    }
    EXPOSE_HEADERS = "Link, Location"

    def __init__(self, app: ASGIApp, options: CrudOptions) -> None:
        super().__init__(app)
        self.options = options

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if self.options.allow_options and request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        if self.options.cors:
            response.headers.update(self.ALLOW_HEADERS)
        response.headers["Access-Control-Expose-Headers"] = self.EXPOSE_HEADERS
        return response
