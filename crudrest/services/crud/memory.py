"""Volatile persistence service backed by a dictionary."""

import logging
import threading

from pydantic import BaseModel

from crudrest.shared.entity import EntityT
from crudrest.shared.errors import UnsupportedFilterError

from .base import CrudService, Filters

logger = logging.getLogger(__name__)


class InMemoryCrudService(CrudService[EntityT]):
    """Keeps entities in process memory, keyed by id.

    Ids are assigned from a counter starting at 1. Saving an entity that
    already carries an id moves the counter past it, so later inserts never
    collide. Filtering is not supported: any non-empty filter set raises
    UnsupportedFilterError.
    """

    def __init__(self, model: type[EntityT], schema: type[BaseModel] | None = None) -> None:
        super().__init__(model, schema)
        self._entities: dict[int, EntityT] = {}
        self._current_id = 0
        self._lock = threading.Lock()

    def _reject_filters(self, filters: Filters | None) -> None:
        if filters:
            raise UnsupportedFilterError(type(self).__name__)

    async def find_by_id(self, id: int) -> EntityT | None:
        with self._lock:
            return self._entities.get(id)

    async def find_by(self, filters: Filters | None) -> list[EntityT]:
        self._reject_filters(filters)
        with self._lock:
            return list(self._entities.values())

    async def count_by(self, filters: Filters | None) -> int:
        self._reject_filters(filters)
        with self._lock:
            return len(self._entities)

    async def delete(self, id: int) -> None:
        with self._lock:
            removed = self._entities.pop(id, None)
        if removed is not None:
            logger.debug("Deleted %s %s", self._model.__name__, id)

    async def delete_by(self, filters: Filters | None) -> None:
        self._reject_filters(filters)
        with self._lock:
            self._entities.clear()

    async def _persist(self, entity: EntityT) -> EntityT:
        with self._lock:
            if entity.id is None:
                self._current_id += 1
                entity.id = self._current_id
            else:
                self._current_id = max(self._current_id, entity.id)
            self._entities[entity.id] = entity
        logger.debug("Saved %s %s", self._model.__name__, entity.id)
        return entity
