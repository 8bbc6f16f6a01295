"""API package: the generic CRUD resource and system routes."""

from crudrest.api import resource, system

__all__ = [
    "resource",
    "system",
]
