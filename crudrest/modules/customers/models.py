"""SQLAlchemy model for customers."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from crudrest.core.database import Base
from crudrest.shared.entity import CrudEntityMixin


class Customer(CrudEntityMixin, Base):
    """A customer.

    Attributes:
        id: Identifier assigned on first save
        name: Display name
        email: Contact address, unique across customers
        city: City of residence (optional)
    """

    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
