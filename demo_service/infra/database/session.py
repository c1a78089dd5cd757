"""Database engine and session management for the async SQLAlchemy stack."""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from demo_service.core.database.base import Base
from demo_service.core.settings import get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Return the process-wide async engine, created on first use from DatabaseSettings."""
    db_settings = get_db_settings()
    engine = create_async_engine(
        db_settings.get_sqlalchemy_url(),
        **db_settings.sqlalchemy_engine_kwargs(),
    )
    logger.debug(
        "Database engine created",
        extra={"url": db_settings.safe_url, "backend": db_settings.backend},
    )
    return engine


@lru_cache(maxsize=1)
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to get_engine()."""
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=get_db_settings().expire_on_commit,
        autoflush=False,
    )


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Session from the shared factory, closed on exit.

    Nothing is committed for you; leaving the block discards uncommitted work.

        async with get_async_session() as session, session.begin():
            await UserRepository().save(session, User(username="alice"))
    """
    async with get_sessionmaker()() as session:
        yield session


async def create_schema(engine: AsyncEngine | None = None) -> None:
    """CREATE TABLE for each registered model whose table is missing.

    Existing tables are left untouched, so repeated calls are harmless.
    """
    # Registers every mapped class on Base.metadata
    import demo_service.core.models  # noqa: F401

    target = engine or get_engine()
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Database schema ensured",
        extra={"tables": sorted(Base.metadata.tables)},
    )


class DatabaseStartupError(RuntimeError):
    """The database stayed unreachable for every startup ping.

    The last driver error is chained as ``__cause__``.
    """

    def __init__(self, url: str, attempts: int) -> None:
        self.url = url
        self.attempts = attempts
        super().__init__(f"Database at {url} unreachable after {attempts} attempt(s)")


async def _ping(engine: AsyncEngine) -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def wait_for_database(
    engine: AsyncEngine,
    *,
    attempts: int,
    delay: float,
    timeout: float,
    max_delay: float = 30.0,
) -> int:
    """Run ``SELECT 1`` until it succeeds, doubling the pause after each failure.

    Gives up once ``attempts`` pings have failed or ``timeout`` seconds have
    passed since the first one. Only connectivity errors (``DBAPIError``,
    ``OSError``) are retried; anything else is a configuration problem and
    propagates at once.

    Returns:
        The number of pings it took.

    Raises:
        DatabaseStartupError: When the budget is spent.
    """
    deadline = time.monotonic() + timeout
    safe_url = engine.url.render_as_string(hide_password=True)

    for attempt in range(1, attempts + 1):
        try:
            await _ping(engine)
        except (DBAPIError, OSError) as exc:
            pause = min(delay * 2 ** (attempt - 1), max_delay)
            if attempt == attempts or time.monotonic() + pause > deadline:
                raise DatabaseStartupError(safe_url, attempt) from exc
            logger.warning(
                "Database not reachable yet, retrying",
                extra={"url": safe_url, "attempt": attempt, "delay": pause, "error": str(exc)},
            )
            await asyncio.sleep(pause)
        else:
            return attempt

    # attempts < 1 is rejected by DatabaseSettings
    raise DatabaseStartupError(safe_url, 0)


async def init_database() -> None:
    """Wait for the database, then create missing tables when ``create_schema`` is set.

    A no-op when the database is disabled.

    Raises:
        DatabaseStartupError: If the database never answered.
    """
    db_settings = get_db_settings()
    if not db_settings.is_configured:
        logger.info("Database disabled, skipping initialization")
        return

    try:
        attempts = await wait_for_database(
            get_engine(),
            attempts=db_settings.startup_retry_attempts,
            delay=db_settings.startup_retry_delay,
            timeout=db_settings.startup_retry_timeout,
        )
    except DatabaseStartupError as e:
        logger.error(
            "Database unreachable at startup",
            extra={"url": db_settings.safe_url, "attempts": e.attempts, "error": str(e.__cause__)},
        )
        raise

    if db_settings.create_schema:
        await create_schema()

    logger.info(
        "Database connection established",
        extra={"url": db_settings.safe_url, "backend": db_settings.backend, "attempts": attempts},
    )


async def close_database() -> None:
    """Dispose the engine at shutdown; the next get_engine() builds a new one.

    Disposal errors are logged, not raised.
    """
    if get_engine.cache_info().currsize == 0:
        return

    logger.info("Disposing database engine")
    engine = get_engine()
    get_sessionmaker.cache_clear()
    get_engine.cache_clear()

    try:
        await engine.dispose()
        logger.info("Database engine disposed")
    except Exception:
        logger.exception(
            "Database engine disposal failed",
            extra={"url": engine.url.render_as_string(hide_password=True)},
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
