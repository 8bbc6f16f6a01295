"""Entity contract shared by services and resources."""

from typing import Any, Protocol, TypeVar, runtime_checkable

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column


@runtime_checkable
class Identifiable(Protocol):
    """Minimal contract of an entity handled by a CRUD service.

    `id` is None until storage assigns it on the first save.
    """

    id: int | None


EntityT = TypeVar("EntityT", bound=Identifiable)


class IdentityMixin:
    """Equality by identifier.

    Two entities are equal when both carry an id and the ids match. An entity
    without an id is only equal to itself.
    """

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Identifiable):
            return False
        return self.id is not None and other.id is not None and self.id == other.id

    def __hash__(self) -> int:
        if self.id is None:
            return object.__hash__(self)
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r})"


class CrudEntityMixin(IdentityMixin):
    """Mixin giving a SQLAlchemy model an auto-generated integer primary key.

    Example:
        class Customer(CrudEntityMixin, Base):
            __tablename__ = "customers"
            name: Mapped[str] = mapped_column(String(100))
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    def to_dict(self) -> dict[str, Any]:
        """Return the column values keyed by attribute name."""
        mapper = self.__mapper__  # type: ignore[attr-defined]
        return {attr.key: getattr(self, attr.key) for attr in mapper.column_attrs}
