"""Standard domain error types.

Catalog of the failures a CRUD request can end with.
"""

from typing import Any

from .base import AppError, qualified_name
from .schemas import string_tree
from .violations import ConstraintViolation


class NotFoundError(AppError):
    """Resource not found."""

    status_code = 404
    has_body = False


class FeatureDisabledError(AppError):
    """Operation disabled by configuration."""

    status_code = 403
    has_body = False

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"{feature} is disabled")


class BadRequestError(AppError):
    """Bad request - malformed or invalid."""

    status_code = 400


class MalformedBodyError(BadRequestError):
    """Request body does not fit the request."""


class BodyIdNotNullError(MalformedBodyError):
    """Request body entity's id field is expected to be null."""


class BodyIdMismatchError(MalformedBodyError):
    """Request body entity's id field is expected to be empty or to match the id path parameter."""


class MalformedFilterValueError(BadRequestError):
    """Filter value cannot be used for this field."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Filter value {value!r} is not valid for field {field!r}")


class UnknownFilterFieldError(BadRequestError):
    """Filter names an unknown field."""

    def __init__(self, field: str, entity: str) -> None:
        self.field = field
        self.entity = entity
        super().__init__(f"{entity} has no filterable field {field!r}")


class ValidationFailedError(BadRequestError):
    """Entity violates declared constraints."""

    def __init__(self, violations: list[ConstraintViolation]) -> None:
        if not violations:
            raise ValueError("ValidationFailedError requires at least one violation")
        self.violations = violations
        super().__init__(
            "; ".join(f"{v.property_path}: {v.constraint_name}" for v in violations)
        )

    def to_dict(self) -> dict[str, Any]:
        errors: dict[str, Any] = {}
        for violation in self.violations:
            errors.setdefault(violation.property_path, violation.to_dict())
        return string_tree({"validationErrors": errors})


class IntegrityViolationError(BadRequestError):
    """Storage rejected the change because of an integrity constraint."""

    def __init__(self, root_cause: BaseException) -> None:
        self.root_cause = root_cause
        super().__init__(str(root_cause))

    def to_dict(self) -> dict[str, Any]:
        return string_tree(
            {
                "error": {
                    "exception": qualified_name(self.root_cause),
                    "detailMessage": str(self.root_cause),
                }
            }
        )


class UnsupportedFilterError(NotImplementedError):
    """The storage backend cannot evaluate filters."""

    def __init__(self, backend: str) -> None:
        self.backend = backend
        super().__init__(f"Custom filtering not implemented by {backend}")
