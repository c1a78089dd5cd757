"""Shared fixtures: an in-memory database per test, repositories and seed data."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from demo_service.core.models import User
    from demo_service.core.repositories import UserRepository

# No file database and no conf/ directory leak into the tests
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_STARTUP_RETRY_ATTEMPTS", "1")
os.environ.setdefault("DB_STARTUP_RETRY_DELAY", "0")
os.environ.setdefault("DB_CONFIG_DIR", "/nonexistent/demo-service/conf")
os.environ.setdefault("LOGGING_CONFIG_DIR", "/nonexistent/demo-service/conf")


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Each test reads settings from its own environment."""
    from demo_service.core.settings import clear_all_caches

    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Private in-memory SQLite database, disposed after the test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session over freshly created tables.

    Whatever the test leaves uncommitted is rolled back, then the tables are
    dropped again.
    """
    import demo_service.core.models  # noqa: F401
    from demo_service.core.database.base import Base

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    make_session = async_sessionmaker(db_engine, expire_on_commit=False, autoflush=False)
    async with make_session() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def user_repository() -> UserRepository:
    """A new UserRepository (it holds no state)."""
    from demo_service.core.repositories import UserRepository

    return UserRepository()


@pytest.fixture
async def seeded_users(db_session: AsyncSession, user_repository: UserRepository) -> list[User]:
    """Four users: two named "alice", one "bob" and an inactive "carol"."""
    from demo_service.core.models import User

    return list(
        await user_repository.create_many(
            db_session,
            [
                User(username="alice", email="alice@example.com", full_name="Alice Liddell"),
                User(username="bob", email="bob@example.com", full_name="Bob Builder"),
                User(username="alice", email="alice2@example.com", full_name="Alice Cooper"),
                User(username="carol", email="carol@example.com", is_active=False),
            ],
        )
    )
