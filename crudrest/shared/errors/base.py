"""Base exception class for application errors.

Core exception logic with auto-generation of error codes and messages.
"""

import re
from typing import Any

from fastapi import Response
from fastapi.responses import JSONResponse

from .schemas import string_tree


def qualified_name(exc: BaseException) -> str:
    """Return the fully qualified class name of an exception."""
    cls = type(exc)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


class AppError(Exception):
    """Base class for all application errors.

    Features:
    - Auto-generates error code from class name (e.g., NotFoundError -> NOT_FOUND)
    - Auto-generates default_message from docstring
    - Knows the HTTP status and the response body it translates into
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"
    # Whether the response carries a JSON body or is sent empty
    has_body: bool = True

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message or self.default_message

        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code

        super().__init__(self.message)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Auto-generate code and default_message for subclasses."""
        super().__init_subclass__(**kwargs)

        # Auto-generate error code from class name
        if "code" not in cls.__dict__:
            name = cls.__name__
            for suffix in ("Exception", "Error"):
                if name.endswith(suffix):
                    name = name[: -len(suffix)]
                    break
            cls.code = re.sub(r"(?<!^)(?=[A-Z])", "_", name).upper()

        # Auto-generate default message from docstring
        if "default_message" not in cls.__dict__ and cls.__doc__:
            cls.default_message = cls.__doc__.strip().split("\n")[0]

    def to_dict(self) -> dict[str, Any] | None:
        """Serialize exception to the `error` payload, or None for an empty body."""
        if not self.has_body:
            return None
        return string_tree(
            {
                "error": {
                    "exception": qualified_name(self),
                    "detailMessage": self.message,
                }
            }
        )

    def to_response(self) -> Response:
        """Build the HTTP response for this error."""
        headers = {"X-Error-Code": self.code}
        body = self.to_dict()
        if body is None:
            return Response(status_code=self.status_code, headers=headers)
        return JSONResponse(status_code=self.status_code, content=body, headers=headers)
