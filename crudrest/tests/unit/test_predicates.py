"""Unit tests for the filter predicate grammar."""

import pytest

from crudrest.shared.errors import MalformedFilterValueError
from crudrest.shared.predicates import QueryOperator, QueryPredicate, resolve, resolve_all

# ==================== Operator Resolution ====================


class TestResolve:
    """Tests for resolve()."""

    def test_plain_value_is_equality(self):
        assert resolve("city", "Rome") == QueryPredicate("city", QueryOperator.EQ, "Rome")

    def test_less_or_equal(self):
        assert resolve("amount", "<100") == QueryPredicate("amount", QueryOperator.LE, 100)

    def test_greater_or_equal(self):
        assert resolve("amount", ">-5") == QueryPredicate("amount", QueryOperator.GE, -5)

    def test_explicit_plus_sign(self):
        assert resolve("amount", "<+7").literal == 7

    def test_like_passes_pattern_through(self):
        predicate = resolve("name", "~Jo%n_")

        assert predicate.operator is QueryOperator.LIKE
        assert predicate.literal == "Jo%n_"

    def test_association_id(self):
        assert resolve("customerId", "3") == QueryPredicate("customer", QueryOperator.ID, "3")

    def test_bare_id_field_is_equality(self):
        assert resolve("Id", "3").operator is QueryOperator.EQ

    def test_field_without_id_suffix_is_equality(self):
        assert resolve("identity", "x").operator is QueryOperator.EQ

    def test_empty_value_is_equality(self):
        assert resolve("city", "") == QueryPredicate("city", QueryOperator.EQ, "")


class TestPrecedence:
    """Value markers win over the field name suffix."""

    @pytest.mark.parametrize(
        ("value", "operator"),
        [
            ("<5", QueryOperator.LE),
            (">5", QueryOperator.GE),
            ("~5%", QueryOperator.LIKE),
        ],
    )
    def test_marker_beats_id_suffix(self, value, operator):
        predicate = resolve("customerId", value)

        assert predicate.operator is operator
        assert predicate.field == "customerId"

    def test_first_marker_wins(self):
        predicate = resolve("name", "~<5")

        assert predicate.operator is QueryOperator.LIKE
        assert predicate.literal == "<5"


class TestMalformedValues:
    """Comparison operators need an integer."""

    @pytest.mark.parametrize("value", ["<", ">", "<abc", ">1.5", "<1e3", "< 5", ">5x"])
    def test_rejects_non_integer(self, value):
        with pytest.raises(MalformedFilterValueError) as exc_info:
            resolve("amount", value)

        assert exc_info.value.field == "amount"
        assert exc_info.value.value == value[1:]
        assert exc_info.value.status_code == 400


# ==================== Filter Sets ====================


class TestResolveAll:
    """Tests for resolve_all()."""

    def test_none_matches_everything(self):
        assert resolve_all(None) == []

    def test_empty_matches_everything(self):
        assert resolve_all({}) == []

    def test_one_predicate_per_entry(self):
        predicates = resolve_all({"city": "Rome", "amount": "<100"})

        assert predicates == [
            QueryPredicate("city", QueryOperator.EQ, "Rome"),
            QueryPredicate("amount", QueryOperator.LE, 100),
        ]

    def test_is_deterministic(self):
        filters = {"customerId": "1", "name": "~A%"}

        assert resolve_all(filters) == resolve_all(dict(filters))
