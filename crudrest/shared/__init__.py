"""
Shared module - cross-cutting concerns and utilities.

This module provides shared functionality used across the application:
- Entity contract and filter predicate grammar
- Context variables for the request id
- Logging utilities with Loguru
"""

from .context import get_request_id, request_id_var
from .entity import CrudEntityMixin, EntityT, Identifiable, IdentityMixin
from .logging import get_logger, logger, setup_logger
from .predicates import QueryOperator, QueryPredicate, resolve, resolve_all

__all__ = [
    # Context
    "get_request_id",
    "request_id_var",
    # Entity
    "CrudEntityMixin",
    "EntityT",
    "Identifiable",
    "IdentityMixin",
    # Predicates
    "QueryOperator",
    "QueryPredicate",
    "resolve",
    "resolve_all",
    # Logging
    "logger",
    "setup_logger",
    "get_logger",
]
