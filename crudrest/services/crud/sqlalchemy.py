"""Durable persistence service on SQLAlchemy's async ORM."""

import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel
from sqlalchemy import String, cast, delete, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import ColumnProperty, Mapper, RelationshipProperty
from sqlalchemy.orm.interfaces import MANYTOONE
from sqlalchemy.sql.elements import ColumnElement

from crudrest.shared.entity import EntityT
from crudrest.shared.errors import (
    MalformedFilterValueError,
    UnknownFilterFieldError,
    storage_errors,
)
from crudrest.shared.predicates import QueryOperator, QueryPredicate, resolve_all

from .base import CrudService, Filters

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncSession]

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}
# Column types that accept range comparisons
_NUMERIC = (int, float, Decimal)


def _python_type(prop: ColumnProperty) -> type | None:
    try:
        return prop.columns[0].type.python_type
    except NotImplementedError:
        return None


def _convert(field: str, raw: str, python_type: type | None) -> Any:
    """Convert a raw filter literal to the column's Python type."""
    if python_type is None or python_type is str:
        return raw
    try:
        if python_type is bool:
            lowered = raw.lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValueError(raw)
        if python_type in (date, datetime, time):
            return python_type.fromisoformat(raw)
        return python_type(raw)
    except (ValueError, TypeError, InvalidOperation) as e:
        raise MalformedFilterValueError(field, raw) from e


class SqlAlchemyCrudService(CrudService[EntityT]):
    """CRUD service storing entities through SQLAlchemy.

    Every call opens its own session and runs in exactly one transaction,
    committed on return and rolled back on failure. Returned entities are
    detached with their column attributes loaded.

    Filters are compiled from the predicate grammar against the model's
    mapped columns and relationships:
        - EQ: column == literal converted to the column type
        - LE/GE: column <= / >= integer (numeric columns only)
        - LIKE: column LIKE pattern (non-text columns are cast to text)
        - ID: foreign key column of a many-to-one association == literal

    Example:
        service = SqlAlchemyCrudService(db_manager.create_session, Payment, PaymentSchema)
        large = await service.find_by({"amount": ">1000"})
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        model: type[EntityT],
        schema: type[BaseModel] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session_factory: Callable returning a new AsyncSession.
            model: The SQLAlchemy model class.
            schema: Pydantic schema declaring the entity's constraints.
        """
        super().__init__(model, schema)
        self._session_factory = session_factory

    @property
    def mapper(self) -> Mapper:
        return inspect(self._model)

    def field_names(self) -> set[str]:
        if self._schema is not None:
            return super().field_names()
        return {prop.key for prop in self.mapper.column_attrs}

    @asynccontextmanager
    async def _transaction(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._session_factory() as session:
            async with session.begin():
                yield session

    # ==================== Reads ====================

    @storage_errors
    async def find_by_id(self, id: int) -> EntityT | None:
        async with self._transaction() as session:
            entity = await session.get(self._model, id)
            session.expunge_all()
        return entity

    @storage_errors
    async def find_by(self, filters: Filters | None) -> list[EntityT]:
        clauses = self._compile(filters)
        query = select(self._model).order_by(self.mapper.primary_key[0])
        if clauses:
            query = query.where(*clauses)

        async with self._transaction() as session:
            result = await session.execute(query)
            entities = list(result.scalars().all())
            session.expunge_all()
        return entities

    @storage_errors
    async def count_by(self, filters: Filters | None) -> int:
        clauses = self._compile(filters)
        query = select(func.count()).select_from(self._model)
        if clauses:
            query = query.where(*clauses)

        async with self._transaction() as session:
            result = await session.execute(query)
            return result.scalar_one()

    # ==================== Writes ====================

    @storage_errors
    async def delete(self, id: int) -> None:
        async with self._transaction() as session:
            entity = await session.get(self._model, id)
            if entity is None:
                return
            await session.delete(entity)
        logger.info("Deleted %s %s", self._model.__name__, id)

    @storage_errors
    async def delete_by(self, filters: Filters | None) -> None:
        clauses = self._compile(filters)
        statement = delete(self._model).execution_options(synchronize_session=False)
        if clauses:
            statement = statement.where(*clauses)

        async with self._transaction() as session:
            result = await session.execute(statement)
        logger.info(
            "Deleted %d %s record(s) matching %s",
            result.rowcount,
            self._model.__name__,
            dict(filters or {}),
        )

    @storage_errors
    async def _persist(self, entity: EntityT) -> EntityT:
        inserting = entity.id is None
        async with self._transaction() as session:
            if inserting:
                session.add(entity)
            else:
                entity = await session.merge(entity)
            await session.flush()
            await session.refresh(entity)
            session.expunge(entity)

        logger.info(
            "%s %s %s", "Created" if inserting else "Saved", self._model.__name__, entity.id
        )
        return entity

    # ==================== Filter compilation ====================

    def _compile(self, filters: Filters | None) -> list[ColumnElement[bool]]:
        """Compile a filter set into WHERE clauses, all ANDed."""
        return [self._clause(predicate) for predicate in resolve_all(filters)]

    def _clause(self, predicate: QueryPredicate) -> ColumnElement[bool]:
        if predicate.operator is QueryOperator.ID:
            return self._association_clause(predicate)

        prop = self._column_property(predicate.field)
        column = getattr(self._model, predicate.field)

        match predicate.operator:
            case QueryOperator.LE | QueryOperator.GE if _python_type(prop) not in _NUMERIC:
                raise MalformedFilterValueError(predicate.field, str(predicate.literal))
            case QueryOperator.LE:
                return column <= predicate.literal
            case QueryOperator.GE:
                return column >= predicate.literal
            case QueryOperator.LIKE:
                if _python_type(prop) is not str:
                    column = cast(column, String)
                return column.like(predicate.literal)
            case _:
                literal = _convert(predicate.field, str(predicate.literal), _python_type(prop))
                return column == literal

    def _column_property(self, field: str) -> ColumnProperty:
        props = self.mapper.column_attrs
        if field not in props:
            raise UnknownFilterFieldError(field, self._model.__name__)
        return props[field]

    def _association_clause(self, predicate: QueryPredicate) -> ColumnElement[bool]:
        """Compare the id of the association named by the predicate."""
        field = f"{predicate.field}Id"
        relationships = self.mapper.relationships
        if predicate.field not in relationships:
            # A plain column whose name happens to end in "Id"
            if field in self.mapper.column_attrs:
                return self._clause(QueryPredicate(field, QueryOperator.EQ, predicate.literal))
            raise UnknownFilterFieldError(field, self._model.__name__)

        rel: RelationshipProperty = relationships[predicate.field]
        target_pk = rel.mapper.primary_key[0]
        value = _convert(field, str(predicate.literal), target_pk.type.python_type)

        if rel.direction is MANYTOONE and len(rel.local_remote_pairs) == 1:
            local_column, _ = rel.local_remote_pairs[0]
            return local_column == value

        attribute = getattr(self._model, predicate.field)
        if rel.uselist:
            return attribute.any(target_pk == value)
        return attribute.has(target_pk == value)
