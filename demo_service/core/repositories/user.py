"""Queries over ``users`` keyed by username.

Usernames are not unique, so the main lookup returns every match.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import exists, select

from demo_service.core.database import BaseRepository
from demo_service.core.models.user import User

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from demo_service.core.database import StatementFilter


class UserRepository(BaseRepository[User]):
    """``BaseRepository[User]`` plus username lookups.

        repo = UserRepository()
        await repo.save(session, User(username="alice"))
        namesakes = await repo.find_all_by_username(session, "alice")
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def find_all_by_username(
        self,
        session: AsyncSession,
        username: str,
        *filters: StatementFilter,
    ) -> Sequence[User]:
        """Every user whose username is exactly ``username``, or an empty sequence.

        Row order is left to the database unless an ``OrderBy`` is passed in
        ``filters``; ``LimitOffset`` pages the result.
        """
        stmt = self._apply_filters(select(User).where(User.username == username), filters)
        return await self._fetch(session, stmt, f"db.find_all_by_username({username!r})")

    async def find_first_by_username(self, session: AsyncSession, username: str) -> User | None:
        """Lowest-id user called ``username``."""
        return await self.get_by(session, User.username, username)

    async def find_active_users(self, session: AsyncSession) -> Sequence[User]:
        stmt = select(User).where(User.is_active.is_(True)).order_by(User.id)
        return await self._fetch(session, stmt, "db.find_active_users")

    async def username_exists(self, session: AsyncSession, username: str) -> bool:
        return bool(await session.scalar(select(exists().where(User.username == username))))
