"""Error payload structures.

Error bodies are nested mappings whose leaves are strings (or null), so a
client can rely on the shape without knowing the Python types of the values
that failed.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def string_tree(tree: Mapping[Any, Any]) -> dict[str, Any]:
    """Copy an arbitrarily nested mapping, turning keys and leaves into strings.

    None leaves are kept as None.
    """
    result: dict[str, Any] = {}
    for key, value in tree.items():
        if value is None:
            result[str(key)] = None
        elif isinstance(value, Mapping):
            result[str(key)] = string_tree(value)
        else:
            result[str(key)] = str(value)
    return result


class ExceptionInfo(BaseModel):
    """Name and message of a single exception."""

    model_config = ConfigDict(populate_by_name=True)

    exception: str = Field(..., description="Qualified exception class name")
    detail_message: str | None = Field(default=None, alias="detailMessage")


class ErrorResponse(BaseModel):
    """Response body for a single unexpected exception."""

    error: ExceptionInfo


class ViolationInfo(BaseModel):
    """Description of one violated constraint."""

    model_config = ConfigDict(populate_by_name=True)

    message_template: str = Field(..., alias="messageTemplate")
    invalid_value: str | None = Field(default=None, alias="invalidValue")
    constraint_class_name: str = Field(..., alias="constraintClassName")
    attributes: dict[str, str] = Field(default_factory=dict)


class ValidationErrorResponse(BaseModel):
    """Response body for constraint violations, keyed by field ("." = whole entity)."""

    model_config = ConfigDict(populate_by_name=True)

    validation_errors: dict[str, ViolationInfo] = Field(..., alias="validationErrors")
