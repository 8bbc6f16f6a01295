"""Base persistence service with async CRUD operations."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Generic

from pydantic import BaseModel, ValidationError

from crudrest.shared.entity import EntityT
from crudrest.shared.errors import ValidationFailedError, violations_from

Filters = Mapping[str, str]


class CrudService(Generic[EntityT], ABC):
    """Abstract persistence service for one entity type.

    Operations:
        - Create: create() + save()
        - Read: find_by_id() / find_all() / find_by() / count_all() / count_by()
        - Update: save()
        - Delete: delete() / delete_all() / delete_by()

    The unfiltered reads and deletes are the filtered ones called with no
    filters, so a backend only implements the filtered variants.

    Declared constraints come from an optional pydantic schema: save()
    validates the entity against it before anything reaches storage.

    Type Parameters:
        EntityT: The entity class, satisfying the Identifiable contract.

    Example:
        service = SqlAlchemyCrudService(db_manager.create_session, Customer, CustomerSchema)
        customer = await service.save(service.create({"name": "Ada", "city": "Rome"}))
        romans = await service.find_by({"city": "Rome"})
    """

    def __init__(self, model: type[EntityT], schema: type[BaseModel] | None = None) -> None:
        """Initialize the service.

        Args:
            model: The entity class.
            schema: Pydantic schema declaring the entity's constraints.
        """
        self._model = model
        self._schema = schema

    @property
    def model(self) -> type[EntityT]:
        """Get the entity class."""
        return self._model

    @property
    def schema(self) -> type[BaseModel] | None:
        """Get the constraint schema, if any."""
        return self._schema

    def field_names(self) -> set[str]:
        """Names of the entity attributes a client may set."""
        if self._schema is not None:
            return set(self._schema.model_fields)
        names: set[str] = set()
        for klass in reversed(self._model.__mro__):
            names.update(vars(klass).get("__annotations__", {}))
        return names

    def create(self, values: Mapping[str, Any] | None = None) -> EntityT:
        """Build a new, unsaved entity.

        Keys that are not entity fields are ignored.

        Args:
            values: Initial attribute values.

        Returns:
            The new entity instance.
        """
        entity = self._model()
        allowed = self.field_names()
        for name, value in (values or {}).items():
            if name in allowed:
                setattr(entity, name, value)
        return entity

    def validate(self, entity: EntityT) -> None:
        """Check the entity against the declared constraints.

        Validated values are written back, so normalization done by the
        schema (e.g. stripped whitespace) is what gets stored.

        Raises:
            ValidationFailedError: At least one constraint is violated.
        """
        if self._schema is None:
            return
        try:
            validated = self._schema.model_validate(entity, from_attributes=True)
        except ValidationError as e:
            raise ValidationFailedError(violations_from(e)) from e

        for name in type(validated).model_fields:
            if name != "id" and hasattr(entity, name):
                setattr(entity, name, getattr(validated, name))

    async def find_all(self) -> list[EntityT]:
        """Return all entities."""
        return await self.find_by(None)

    async def count_all(self) -> int:
        """Count all entities."""
        return await self.count_by(None)

    async def delete_all(self) -> None:
        """Delete all entities."""
        await self.delete_by(None)

    async def save(self, entity: EntityT) -> EntityT:
        """Insert or update an entity.

        An entity without id is inserted and receives one; otherwise the
        stored record with that id is replaced. Always continue with the
        returned entity rather than the argument.

        Raises:
            ValidationFailedError: The entity violates declared constraints.
        """
        self.validate(entity)
        return await self._persist(entity)

    @abstractmethod
    async def find_by_id(self, id: int) -> EntityT | None:
        """Return the entity with the given id, or None."""

    @abstractmethod
    async def find_by(self, filters: Filters | None) -> list[EntityT]:
        """Return all entities matching every filter."""

    @abstractmethod
    async def count_by(self, filters: Filters | None) -> int:
        """Count the entities matching every filter."""

    @abstractmethod
    async def delete(self, id: int) -> None:
        """Delete the entity with the given id. Missing ids are ignored."""

    @abstractmethod
    async def delete_by(self, filters: Filters | None) -> None:
        """Delete all entities matching every filter."""

    @abstractmethod
    async def _persist(self, entity: EntityT) -> EntityT:
        """Write a validated entity to storage."""
