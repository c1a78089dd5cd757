"""Tests for the FastAPI dependency providers."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from demo_service.core.dependencies import (
    DbSessionDep,
    UserRepositoryDep,
    get_db_session,
    get_user_repository,
)
from demo_service.core.models import User
from demo_service.core.repositories import UserRepository
from demo_service.infra.database import close_database, get_async_session, init_database


@pytest.fixture
async def initialized_database():
    """Initialize the process-wide in-memory database for one test."""
    await close_database()
    await init_database()
    yield
    await close_database()


@pytest.fixture
def app() -> FastAPI:
    """Minimal application wired with the repository dependencies."""
    application = FastAPI()

    @application.get("/users/by-name/{username}")
    async def users_by_name(username: str, session: DbSessionDep, repo: UserRepositoryDep):
        users = await repo.find_all_by_username(session, username)
        return [{"id": u.id, "username": u.username} for u in users]

    return application


@pytest.mark.unit
class TestProviders:
    """Test suite for the provider functions."""

    def test_user_repository_is_shared(self):
        repo = get_user_repository()

        assert isinstance(repo, UserRepository)
        assert repo is get_user_repository()

    async def test_get_db_session_yields_session(self, initialized_database):
        sessions = get_db_session()

        session = await anext(sessions)
        try:
            assert isinstance(session, AsyncSession)
        finally:
            await sessions.aclose()


@pytest.mark.unit
class TestRouteWiring:
    """Dependencies resolve inside a FastAPI route."""

    async def test_route_returns_users_with_username(self, initialized_database, app):
        repo = UserRepository()
        async with get_async_session() as session:
            async with session.begin():
                await repo.save_all(
                    session,
                    [User(username="alice"), User(username="bob"), User(username="alice")],
                )

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/users/by-name/alice")
            empty = await client.get("/users/by-name/mallory")

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 2
        assert {item["username"] for item in body} == {"alice"}
        assert empty.status_code == 200
        assert empty.json() == []
