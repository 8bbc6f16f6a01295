"""SQLAlchemy model for payments."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crudrest.core.database import Base
from crudrest.shared.entity import CrudEntityMixin

if TYPE_CHECKING:
    from crudrest.modules.customers.models import Customer


class Payment(CrudEntityMixin, Base):
    """A payment made by a customer.

    Attributes:
        id: Identifier assigned on first save
        amount: Amount in minor currency units
        description: Free text (optional)
        customer_id: Paying customer
        customer: Relationship to the paying customer
    """

    __tablename__ = "payments"

    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    customer: Mapped[Customer] = relationship()
