"""Unit tests for the in-memory CRUD service."""

import asyncio

import pytest
from pydantic import BaseModel, Field

from crudrest.services.crud import InMemoryCrudService
from crudrest.shared.entity import IdentityMixin
from crudrest.shared.errors import UnsupportedFilterError, ValidationFailedError


class Note(IdentityMixin):
    """Plain entity stored in memory."""

    id: int | None
    title: str | None
    stars: int | None

    def __init__(self) -> None:
        self.id = None
        self.title = None
        self.stars = None


class NoteSchema(BaseModel):
    id: int | None = None
    title: str = Field(..., min_length=1)
    stars: int = Field(default=0, ge=0, le=5)


@pytest.fixture
def service() -> InMemoryCrudService[Note]:
    return InMemoryCrudService(Note)


def _note(service: InMemoryCrudService[Note], title: str = "hello", stars: int = 1) -> Note:
    return service.create({"title": title, "stars": stars})


# ==================== Create / Save ====================


class TestSave:
    """Tests for id assignment and replacement."""

    async def test_ids_start_at_one(self, service):
        first = await service.save(_note(service))
        second = await service.save(_note(service))

        assert first.id == 1
        assert second.id == 2

    async def test_saved_entity_is_found(self, service):
        saved = await service.save(_note(service, "found"))

        found = await service.find_by_id(saved.id)

        assert found == saved
        assert found.title == "found"

    async def test_save_with_id_replaces(self, service):
        saved = await service.save(_note(service, "old"))

        replacement = _note(service, "new")
        replacement.id = saved.id
        await service.save(replacement)

        assert (await service.find_by_id(saved.id)).title == "new"
        assert await service.count_all() == 1

    async def test_explicit_id_moves_counter(self, service):
        explicit = _note(service)
        explicit.id = 10
        await service.save(explicit)

        following = await service.save(_note(service))

        assert following.id == 11

    async def test_concurrent_saves_get_unique_ids(self, service):
        saved = await asyncio.gather(*(service.save(_note(service)) for _ in range(20)))

        assert sorted(n.id for n in saved) == list(range(1, 21))

    async def test_create_ignores_unknown_keys(self, service):
        note = service.create({"title": "t", "color": "red"})

        assert note.title == "t"
        assert not hasattr(note, "color")


class TestValidation:
    """Tests for declared constraints."""

    async def test_invalid_entity_is_not_stored(self):
        service = InMemoryCrudService(Note, NoteSchema)

        with pytest.raises(ValidationFailedError) as exc_info:
            await service.save(service.create({"title": "", "stars": 9}))

        paths = {v.property_path for v in exc_info.value.violations}
        assert paths == {"title", "stars"}
        assert await service.count_all() == 0

    async def test_normalized_values_are_written_back(self):
        service = InMemoryCrudService(Note, NoteSchema)

        saved = await service.save(service.create({"title": "t", "stars": "3"}))

        assert saved.stars == 3


# ==================== Read / Delete ====================


class TestReadAndDelete:
    async def test_find_all_in_insertion_order(self, service):
        for title in ("a", "b", "c"):
            await service.save(_note(service, title))

        assert [n.title for n in await service.find_all()] == ["a", "b", "c"]

    async def test_missing_id_is_none(self, service):
        assert await service.find_by_id(42) is None

    async def test_delete_missing_is_noop(self, service):
        await service.delete(42)

        assert await service.find_by_id(42) is None

    async def test_delete_removes(self, service):
        saved = await service.save(_note(service))

        await service.delete(saved.id)

        assert await service.find_by_id(saved.id) is None

    async def test_delete_all_twice(self, service):
        await service.save(_note(service))
        await service.save(_note(service))

        await service.delete_all()
        await service.delete_all()

        assert await service.find_all() == []
        assert await service.count_all() == 0

    async def test_empty_filters_behave_as_unfiltered(self, service):
        await service.save(_note(service))

        assert len(await service.find_by({})) == 1
        assert await service.count_by({}) == 1
        await service.delete_by({})
        assert await service.count_all() == 0


class TestFilters:
    """The in-memory backend has no query engine."""

    @pytest.mark.parametrize("method", ["find_by", "count_by", "delete_by"])
    async def test_non_empty_filters_unsupported(self, service, method):
        await service.save(_note(service))

        with pytest.raises(UnsupportedFilterError):
            await getattr(service, method)({"title": "hello"})

        assert await service.count_all() == 1
