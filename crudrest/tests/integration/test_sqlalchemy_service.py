"""Integration tests for SqlAlchemyCrudService against SQLite."""

import pytest

from crudrest.modules.customers import Customer, create_customer_service
from crudrest.modules.payments import Payment, create_payment_service
from crudrest.services.crud import SqlAlchemyCrudService
from crudrest.shared.errors import (
    IntegrityViolationError,
    MalformedFilterValueError,
    UnknownFilterFieldError,
    ValidationFailedError,
)

# ==================== Fixtures ====================


@pytest.fixture
def customers(session_factory) -> SqlAlchemyCrudService[Customer]:
    return create_customer_service(session_factory)


@pytest.fixture
def payments(session_factory) -> SqlAlchemyCrudService[Payment]:
    return create_payment_service(session_factory)


async def _customer(service, name: str, city: str | None = None) -> Customer:
    email = f"{name.lower()}@example.com"
    return await service.save(service.create({"name": name, "email": email, "city": city}))


@pytest.fixture
async def people(customers) -> list[Customer]:
    return [
        await _customer(customers, "Ada", "Rome"),
        await _customer(customers, "Grace", "Paris"),
        await _customer(customers, "Linus", "Rome"),
    ]


@pytest.fixture
async def ledger(payments, people) -> list[Payment]:
    ada, grace, _ = people
    rows = [(ada, 50), (ada, 100), (ada, 150), (grace, 100), (grace, 500)]
    return [
        await payments.save(payments.create({"amount": amount, "customer_id": who.id}))
        for who, amount in rows
    ]


# ==================== Save / Find ====================


class TestSave:
    """Insert and update semantics."""

    async def test_insert_assigns_id(self, customers):
        saved = await _customer(customers, "Ada")

        assert saved.id is not None
        assert await customers.find_by_id(saved.id) == saved

    async def test_returned_entity_is_usable_after_commit(self, customers):
        saved = await _customer(customers, "Ada", "Rome")

        assert saved.to_dict() == {
            "id": saved.id,
            "name": "Ada",
            "email": "ada@example.com",
            "city": "Rome",
        }

    async def test_update_keeps_id(self, customers):
        saved = await _customer(customers, "Ada", "Rome")

        saved.city = "Milan"
        updated = await customers.save(saved)

        assert updated.id == saved.id
        assert (await customers.find_by_id(saved.id)).city == "Milan"
        assert await customers.count_all() == 1

    async def test_save_new_object_with_existing_id_replaces(self, customers):
        saved = await _customer(customers, "Ada", "Rome")

        replacement = customers.create(
            {"name": "Ada L.", "email": "ada@example.com", "city": "London"}
        )
        replacement.id = saved.id
        await customers.save(replacement)

        found = await customers.find_by_id(saved.id)
        assert (found.name, found.city) == ("Ada L.", "London")

    async def test_validation_blocks_storage(self, customers):
        with pytest.raises(ValidationFailedError) as exc_info:
            await customers.save(customers.create({"name": "", "email": "nope"}))

        assert {v.property_path for v in exc_info.value.violations} == {"name", "email"}
        assert await customers.count_all() == 0

    async def test_normalized_values_are_stored(self, customers):
        saved = await customers.save(
            customers.create({"name": "  Ada  ", "email": "ada@example.com"})
        )

        assert (await customers.find_by_id(saved.id)).name == "Ada"

    async def test_unique_violation_is_typed(self, customers):
        await _customer(customers, "Ada")

        with pytest.raises(IntegrityViolationError) as exc_info:
            await _customer(customers, "Ada")

        assert "UNIQUE" in str(exc_info.value.root_cause)
        assert await customers.count_all() == 1


# ==================== Delete ====================


class TestDelete:
    async def test_delete_then_absent(self, customers):
        saved = await _customer(customers, "Ada")

        await customers.delete(saved.id)

        assert await customers.find_by_id(saved.id) is None

    async def test_delete_missing_is_noop(self, customers):
        await customers.delete(12345)

        assert await customers.find_by_id(12345) is None

    async def test_delete_all_twice(self, customers, people):
        await customers.delete_all()
        await customers.delete_all()

        assert await customers.find_all() == []

    async def test_delete_by_filter(self, customers, people):
        await customers.delete_by({"city": "Rome"})

        assert [c.name for c in await customers.find_all()] == ["Grace"]


# ==================== Filters ====================


class TestFilters:
    """Predicate compilation against the mapped columns."""

    async def test_equality(self, customers, people):
        romans = await customers.find_by({"city": "Rome"})

        assert {c.name for c in romans} == {"Ada", "Linus"}

    async def test_less_or_equal(self, payments, ledger):
        small = await payments.find_by({"amount": "<100"})

        expected = sorted(p.amount for p in await payments.find_all() if p.amount <= 100)
        assert sorted(p.amount for p in small) == expected == [50, 100, 100]

    async def test_greater_or_equal(self, payments, ledger):
        large = await payments.find_by({"amount": ">150"})

        assert sorted(p.amount for p in large) == [150, 500]

    async def test_like(self, customers, people):
        found = await customers.find_by({"name": "~%a%"})

        assert {c.name for c in found} == {"Ada", "Grace"}

    async def test_like_on_integer_column(self, payments, ledger):
        found = await payments.find_by({"amount": "~1%"})

        assert sorted(p.amount for p in found) == [100, 100, 150]

    async def test_association_id(self, payments, ledger, people):
        ada = people[0]

        found = await payments.find_by({"customerId": str(ada.id)})

        assert sorted(p.amount for p in found) == [50, 100, 150]

    async def test_filters_are_anded(self, payments, ledger, people):
        grace = people[1]

        found = await payments.find_by({"customerId": str(grace.id), "amount": "<200"})

        assert [p.amount for p in found] == [100]

    async def test_integer_equality(self, payments, ledger):
        assert len(await payments.find_by({"amount": "100"})) == 2

    @pytest.mark.parametrize(
        "filters",
        [
            {},
            {"amount": "<100"},
            {"amount": ">100"},
            {"amount": "100"},
            {"description": "~%"},
        ],
    )
    async def test_count_matches_find(self, payments, ledger, filters):
        assert await payments.count_by(filters) == len(await payments.find_by(filters))

    async def test_same_filters_for_delete(self, payments, ledger):
        doomed = await payments.find_by({"amount": ">150"})

        await payments.delete_by({"amount": ">150"})

        remaining = await payments.find_all()
        assert not set(doomed) & set(remaining)
        assert len(remaining) == len(ledger) - len(doomed)

    async def test_unknown_field(self, customers):
        with pytest.raises(UnknownFilterFieldError):
            await customers.find_by({"colour": "red"})

    async def test_unknown_association(self, customers):
        with pytest.raises(UnknownFilterFieldError):
            await customers.find_by({"ownerId": "1"})

    async def test_unconvertible_literal(self, payments):
        with pytest.raises(MalformedFilterValueError):
            await payments.find_by({"amount": "lots"})

    async def test_range_on_text_column(self, customers, people):
        with pytest.raises(MalformedFilterValueError):
            await customers.find_by({"name": "<5"})
