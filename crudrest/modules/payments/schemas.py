"""Pydantic schemas for payments."""

from pydantic import Field

from crudrest.shared.schemas import EntitySchema


class PaymentSchema(EntitySchema):
    """Constraints on a payment and its JSON representation."""

    amount: int = Field(..., ge=0, description="Amount in minor currency units")
    description: str | None = Field(default=None, max_length=255)
    customer_id: int = Field(..., description="Paying customer")
