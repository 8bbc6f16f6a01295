"""Query predicate grammar for filter parameters.

Each request query parameter becomes one predicate. The operator is picked by
a marker at the start of the value, then by the field name:

    <N      field <= N          (N must be an integer)
    >N      field >= N
    ~P      field LIKE P        (P passed through, % and _ are wildcards)
    fooId   foo.id == value     (association id)
    value   field == value

Markers win over the field suffix: `customerId=<5` is a LE filter on
`customerId`, not an association filter.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from .errors import MalformedFilterValueError

_INTEGER = re.compile(r"[+-]?\d+")

ID_SUFFIX = "Id"


class QueryOperator(str, Enum):
    """Supported filter operators with their marker."""

    EQ = ""
    LE = "<"
    GE = ">"
    LIKE = "~"
    ID = ID_SUFFIX


@dataclass(frozen=True, slots=True)
class QueryPredicate:
    """A single (field, operator, literal) condition.

    For `ID` predicates `field` is the association name, already stripped of
    its `Id` suffix. `literal` is an int for `LE`/`GE` and a string otherwise.
    """

    field: str
    operator: QueryOperator
    literal: str | int


def _parse_integer(field: str, value: str) -> int:
    if not _INTEGER.fullmatch(value):
        raise MalformedFilterValueError(field, value)
    return int(value)


def resolve(field: str, value: str) -> QueryPredicate:
    """Resolve one filter parameter into a predicate."""
    if value.startswith(QueryOperator.LE.value):
        return QueryPredicate(field, QueryOperator.LE, _parse_integer(field, value[1:]))
    if value.startswith(QueryOperator.GE.value):
        return QueryPredicate(field, QueryOperator.GE, _parse_integer(field, value[1:]))
    if value.startswith(QueryOperator.LIKE.value):
        return QueryPredicate(field, QueryOperator.LIKE, value[1:])
    if field.endswith(ID_SUFFIX) and len(field) > len(ID_SUFFIX):
        return QueryPredicate(field[: -len(ID_SUFFIX)], QueryOperator.ID, value)
    return QueryPredicate(field, QueryOperator.EQ, value)


def resolve_all(filters: Mapping[str, str] | None) -> list[QueryPredicate]:
    """Resolve a filter set. An empty or missing set yields no predicates."""
    if not filters:
        return []
    return [resolve(field, value) for field, value in filters.items()]
