"""Decorators for error handling.

Function wrappers turning storage failures into domain errors.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from .base import AppError
from .mapping import StorageExceptionMapper

P = ParamSpec("P")
T = TypeVar("T")


def storage_errors(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Decorator for storage adapter methods.

    Usage:
        @storage_errors
        async def save(self, entity: Customer) -> Customer:
            # Domain errors (AppError) pass through
            # Known storage errors (IntegrityError) -> domain errors
            ...

    Exceptions the mapper does not know are re-raised unchanged.
    """

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except AppError:
            raise
        except Exception as e:
            mapped = StorageExceptionMapper.map(e, func.__name__)
            if mapped is None:
                raise
            raise mapped from e

    return wrapper
