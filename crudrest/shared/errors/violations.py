"""Field-level constraint violations.

Declared constraints live on pydantic schemas. A failed validation is turned
into one ConstraintViolation per error so the response can describe each
failure without exposing pydantic internals.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError
from pydantic_core import ErrorDetails, PydanticKnownError

# Property path used when a violation concerns the entity as a whole
WHOLE_OBJECT = "."

# Context keys that describe the failure itself rather than the constraint
RESERVED_ATTRIBUTES = frozenset({"error", "message", "payload", "groups"})


@dataclass(frozen=True, slots=True)
class ConstraintViolation:
    """One violated constraint on one property."""

    property_path: str
    message_template: str
    invalid_value: Any
    constraint_name: str
    attributes: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Describe the violation with the payload's key names."""
        return {
            "messageTemplate": self.message_template,
            "invalidValue": self.invalid_value,
            "constraintClassName": self.constraint_name,
            "attributes": self.attributes,
        }


def _message_template(error: ErrorDetails) -> str:
    """Return the unformatted message of a pydantic error type.

    Custom error types have no registered template; their rendered message is
    used instead.
    """
    try:
        return PydanticKnownError(error["type"], error.get("ctx")).message_template
    except (KeyError, TypeError, ValueError):
        return error["msg"]


def from_pydantic_error(error: ErrorDetails) -> ConstraintViolation:
    """Convert a single pydantic error into a violation."""
    path = ".".join(str(part) for part in error["loc"]) or WHOLE_OBJECT
    ctx = error.get("ctx") or {}
    invalid_value = None if error["type"] == "missing" else error.get("input")
    return ConstraintViolation(
        property_path=path,
        message_template=_message_template(error),
        invalid_value=invalid_value,
        constraint_name=error["type"],
        attributes={
            key: value
            for key, value in ctx.items()
            if key not in RESERVED_ATTRIBUTES and value is not None
        },
    )


def violations_from(exc: ValidationError) -> list[ConstraintViolation]:
    """Convert every error of a pydantic ValidationError."""
    return [from_pydantic_error(error) for error in exc.errors()]
