"""Shared errors package.

Centralized error handling and exception management.
"""

from .base import AppError, qualified_name
from .decorators import storage_errors
from .domain import (
    BadRequestError,
    BodyIdMismatchError,
    BodyIdNotNullError,
    FeatureDisabledError,
    IntegrityViolationError,
    MalformedBodyError,
    MalformedFilterValueError,
    NotFoundError,
    UnknownFilterFieldError,
    UnsupportedFilterError,
    ValidationFailedError,
)
from .handlers import setup_exception_handlers
from .mapping import StorageExceptionMapper
from .schemas import (
    ErrorResponse,
    ExceptionInfo,
    ValidationErrorResponse,
    ViolationInfo,
    string_tree,
)
from .translator import ErrorTranslator
from .violations import WHOLE_OBJECT, ConstraintViolation, violations_from

__all__ = [
    # Base
    "AppError",
    "qualified_name",
    # Domain errors
    "NotFoundError",
    "FeatureDisabledError",
    "BadRequestError",
    "MalformedBodyError",
    "BodyIdNotNullError",
    "BodyIdMismatchError",
    "MalformedFilterValueError",
    "UnknownFilterFieldError",
    "ValidationFailedError",
    "IntegrityViolationError",
    "UnsupportedFilterError",
    # Violations
    "ConstraintViolation",
    "WHOLE_OBJECT",
    "violations_from",
    # Mapping
    "StorageExceptionMapper",
    "storage_errors",
    # Translation
    "ErrorTranslator",
    "setup_exception_handlers",
    # Schemas
    "ErrorResponse",
    "ExceptionInfo",
    "ValidationErrorResponse",
    "ViolationInfo",
    "string_tree",
]
