"""Generic CRUD persistence services.

- CrudService: the backend-independent contract
- SqlAlchemyCrudService: durable backend, one transaction per call
- InMemoryCrudService: dict-backed backend for tests and prototypes
"""

from .base import CrudService
from .memory import InMemoryCrudService
from .sqlalchemy import SqlAlchemyCrudService

__all__ = [
    "CrudService",
    "InMemoryCrudService",
    "SqlAlchemyCrudService",
]
