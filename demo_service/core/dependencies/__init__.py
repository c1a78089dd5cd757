"""FastAPI dependencies for route handlers.

Re-exports the database and repository providers so features import them
from one place.

Usage:
    from demo_service.core.dependencies import DbSessionDep, UserRepositoryDep

    @router.get("/users/by-name/{username}")
    async def users_by_name(username: str, session: DbSessionDep, repo: UserRepositoryDep):
        return await repo.find_all_by_username(session, username)
"""

from .database import DbSessionDep, get_db_session
from .repositories import UserRepositoryDep, get_user_repository

__all__ = [
    "DbSessionDep",
    "UserRepositoryDep",
    "get_db_session",
    "get_user_repository",
]
