"""Database infrastructure package.

Provides the async SQLAlchemy engine, session factory and lifecycle hooks.

Example:
    from demo_service.infra.database import close_database, get_async_session, init_database

    await init_database()

    async with get_async_session() as session:
        result = await session.execute(...)

    await close_database()
"""

from .session import (
    DatabaseStartupError,
    close_database,
    create_schema,
    get_async_session,
    get_engine,
    get_sessionmaker,
    init_database,
    wait_for_database,
)

__all__ = [
    "DatabaseStartupError",
    "close_database",
    "create_schema",
    "get_async_session",
    "get_engine",
    "get_sessionmaker",
    "init_database",
    "wait_for_database",
]
