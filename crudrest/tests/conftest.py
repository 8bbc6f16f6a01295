"""Pytest configuration and fixtures for crudrest tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

import crudrest.modules  # noqa: F401  (registers all models on Base.metadata)
from crudrest.core.config import CrudOptions
from crudrest.core.database import Base
from crudrest.shared.errors import ErrorTranslator

# ==================== Options Fixtures ====================


@pytest.fixture
def options() -> CrudOptions:
    """Default CRUD options, independent of the environment."""
    return CrudOptions(
        allow_filters=True,
        allow_count=True,
        allow_delete_all=True,
        return_exception_body=False,
        cors=True,
        allow_options=True,
    )


@pytest.fixture
def translator(options: CrudOptions) -> ErrorTranslator:
    """Error translator bound to the default options."""
    return ErrorTranslator(options)


# ==================== Database Fixtures ====================


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a SQLite test database with all tables.

    Each test gets its own database file, so tests never see each other's rows.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'crudrest.db'}",
        poolclass=NullPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session source handed to the durable services."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# ==================== Application Fixtures ====================


@pytest.fixture
def app(options: CrudOptions, session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """Application wired to the test database."""
    from crudrest.main import create_app

    return create_app(options=options, session_factory=session_factory)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the application in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
