"""Pydantic schemas for customers."""

from pydantic import Field

from crudrest.shared.schemas import EntitySchema

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CustomerSchema(EntitySchema):
    """Constraints on a customer and its JSON representation."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name",
    )
    email: str = Field(
        ...,
        max_length=255,
        pattern=EMAIL_PATTERN,
        description="Contact address",
    )
    city: str | None = Field(
        default=None,
        max_length=100,
        description="City of residence",
    )
