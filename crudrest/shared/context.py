"""
Context variables for request tracing across the application.

The request id set by the tracing middleware is readable from anywhere
during request processing, most notably by the log patcher.
"""

from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Get current request ID from context.

    Returns:
        Request ID string or empty string if not set.
    """
    return request_id_var.get()
