"""Request-scoped database session for FastAPI routes.

``get_db_session`` is the ``Depends`` flavour of
``infra.database.get_async_session``: the session opens with the request and
is closed (rolling back anything uncommitted) when the response is done.
Scripts and background jobs use ``get_async_session`` directly.

    @router.get("/users/{user_id}")
    async def read_user(user_id: int, session: DbSessionDep): ...
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from demo_service.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    async with get_async_session() as session:
        yield session


DbSessionDep = Annotated[AsyncSession, Depends(get_db_session)]

__all__ = [
    "DbSessionDep",
    "get_db_session",
]
