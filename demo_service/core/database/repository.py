"""Generic repository over one mapped class.

``BaseRepository[T]`` gives every entity the same persistence vocabulary:
lookups by primary key or column, paging, counting, insert-or-update and
deletes. The session is an argument of every call, so one repository object
serves the whole process while each request keeps its own unit of work.

Repositories ``flush`` so generated keys and defaults are visible, but they
never commit; wrap calls in ``session.begin()`` (or commit yourself).

    repo = BaseRepository(User)
    async with session.begin():
        alice = await repo.save(session, User(username="alice"))
    same = await repo.get(session, alice.id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import Select, exists, func, select
from sqlalchemy import delete as sql_delete
from sqlalchemy import inspect as sa_inspect

from demo_service.core.database.exceptions import NotFoundError
from demo_service.core.database.filters import CollectionFilter
from demo_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute
    from sqlalchemy.sql.base import ExecutableOption

    from demo_service.core.database.filters import StatementFilter

# delete_many above this many rows is reported at WARNING
BULK_DELETE_WARN_THRESHOLD = 10

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class SearchResult(Generic[T]):
    """One page of a search plus the size of the whole result set."""

    items: Sequence[T]
    total: int
    limit: int
    offset: int

    @property
    def page(self) -> int:
        """1-based page number; a zero limit means everything is page 1."""
        if not self.limit:
            return 1
        return self.offset // self.limit + 1

    @property
    def pages(self) -> int:
        if not self.limit:
            return 1
        return -(-self.total // self.limit)

    @property
    def has_next(self) -> bool:
        return self.offset + len(self.items) < self.total

    @property
    def has_prev(self) -> bool:
        return self.offset > 0


class BaseRepository(Generic[T]):
    """CRUD for one model class, addressed by its (single-column) primary key.

    Lookups that find nothing return ``None``, ``False`` or an empty
    sequence; only ``get_or_raise`` turns absence into ``NotFoundError``.
    Driver and constraint errors are SQLAlchemy's own and pass straight
    through.
    """

    __slots__ = ("model", "_log", "_trace")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        name = f"repository.{model.__name__}"
        self._log = logging.getLogger(name)
        # Per-query DEBUG lines, built only when DEBUG is on
        self._trace = get_lazy_logger(name)

    @property
    def _entity(self) -> str:
        return self.model.__name__

    # -- lookups ------------------------------------------------------------

    async def get(
        self, session: AsyncSession, id: Any, *, options: Sequence[ExecutableOption] | None = None  # noqa: A002
    ) -> T | None:
        """Row with primary key ``id`` (served from the identity map when loaded).

        ``options`` are loader options such as ``selectinload(...)``.
        """
        instance = await session.get(self.model, id, options=options)
        self._trace.debug(lambda: f"db.get: {self._entity}({id}) -> {_hit(instance)}")
        return instance

    async def get_or_raise(
        self, session: AsyncSession, id: Any, *, options: Sequence[ExecutableOption] | None = None  # noqa: A002
    ) -> T:
        """Like ``get`` but a missing row raises ``NotFoundError``."""
        instance = await self.get(session, id, options=options)
        if instance is not None:
            return instance

        self._log.info(
            "Entity not found",
            extra={"entity": self._entity, "id": str(id), "operation": "db.get_or_raise"},
        )
        raise NotFoundError(self._entity, {"id": id})

    async def get_by(
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        value: Any,
        *,
        options: Sequence[ExecutableOption] | None = None,
    ) -> T | None:
        """First row (lowest primary key) whose ``attr`` equals ``value``.

        ``await repo.get_by(session, User.email, "bob@example.com")``
        """
        stmt = select(self.model).where(attr == value).order_by(self._pk_attr()).limit(1)
        if options:
            stmt = stmt.options(*options)
        instance = (await session.scalars(stmt)).first()
        self._trace.debug(
            lambda: f"db.get_by: {self._entity}.{attr.key}={value!r} -> {_hit(instance)}"
        )
        return instance

    async def exists(self, session: AsyncSession, id: Any) -> bool:  # noqa: A002
        found = bool(await session.scalar(select(exists().where(self._pk_attr() == id))))
        self._trace.debug(lambda: f"db.exists: {self._entity}({id}) -> {found}")
        return found

    async def count(self, session: AsyncSession) -> int:
        total = await session.scalar(select(func.count()).select_from(self.model)) or 0
        self._trace.debug(lambda: f"db.count: {self._entity} -> {total}")
        return total

    async def list(
        self,
        session: AsyncSession,
        *,
        limit: int = 100,
        offset: int = 0,
        options: Sequence[ExecutableOption] | None = None,
    ) -> Sequence[T]:
        """A window of rows in primary-key order."""
        stmt = select(self.model).order_by(self._pk_attr()).limit(limit).offset(offset)
        if options:
            stmt = stmt.options(*options)
        return await self._fetch(session, stmt, f"db.list(limit={limit}, offset={offset})")

    async def list_all(self, session: AsyncSession, *filters: StatementFilter) -> Sequence[T]:
        """Every row, shaped by any ``OrderBy``/``LimitOffset``/... filters given."""
        stmt = self._apply_filters(select(self.model), filters)
        return await self._fetch(session, stmt, "db.list_all")

    async def list_by_ids(self, session: AsyncSession, ids: Iterable[Any]) -> Sequence[T]:
        """Rows whose key is in ``ids``; unknown keys are skipped, order is unspecified."""
        wanted = list(ids)
        if not wanted:
            return []
        stmt = CollectionFilter(self._pk_attr(), wanted).apply(select(self.model))
        return await self._fetch(session, stmt, f"db.list_by_ids({len(wanted)} ids)")

    async def search(
        self,
        session: AsyncSession,
        statement: Select[tuple[T]],
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> SearchResult[T]:
        """Page through a caller-built ``select`` and count all its rows.

        The statement should carry its own ORDER BY for stable pages.
        """
        total = await session.scalar(select(func.count()).select_from(statement.subquery())) or 0
        items = (await session.scalars(statement.limit(limit).offset(offset))).all()

        result = SearchResult(items=items, total=total, limit=limit, offset=offset)
        self._trace.debug(
            lambda: f"db.search: {self._entity} page {result.page}/{result.pages} -> {len(items)}/{total}"
        )
        return result

    # -- writes -------------------------------------------------------------

    async def create(self, session: AsyncSession, instance: T) -> T:
        """INSERT a new row; generated key and defaults are loaded back."""
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        self._trace.debug(lambda: f"db.create: {self._entity}(id={self._pk_value(instance)})")
        return instance

    async def create_many(self, session: AsyncSession, instances: Iterable[T]) -> Sequence[T]:
        batch = list(instances)
        session.add_all(batch)
        await session.flush()
        for instance in batch:
            await session.refresh(instance)
        self._trace.debug(lambda: f"db.create_many: {self._entity} -> {len(batch)} created")
        return batch

    async def save(self, session: AsyncSession, instance: T) -> T:
        """Insert-or-update.

        Without a primary key the instance is inserted. With one it is merged:
        the stored row is updated, or inserted under that key if absent.
        Always continue with the returned object, which after a merge is the
        session's copy rather than ``instance``.
        """
        if self._pk_value(instance) is None:
            session.add(instance)
            managed, how = instance, "insert"
        else:
            managed, how = await session.merge(instance), "merge"

        await session.flush()
        await session.refresh(managed)
        self._trace.debug(lambda: f"db.save: {self._entity}(id={self._pk_value(managed)}) -> {how}")
        return managed

    async def save_all(self, session: AsyncSession, instances: Iterable[T]) -> Sequence[T]:
        return [await self.save(session, instance) for instance in instances]

    async def delete(self, session: AsyncSession, instance: T) -> None:
        """DELETE a row the session already holds."""
        pk = self._pk_value(instance)
        await session.delete(instance)
        await session.flush()
        self._log.info(
            "Entity deleted",
            extra={"entity": self._entity, "id": str(pk), "operation": "db.delete"},
        )

    async def delete_by_id(self, session: AsyncSession, id: Any) -> bool:  # noqa: A002
        """Delete by key; ``False`` (not an error) when there was no such row."""
        instance = await self.get(session, id)
        if instance is None:
            return False
        await self.delete(session, instance)
        return True

    async def delete_many(self, session: AsyncSession, ids: Iterable[Any]) -> int:
        """One DELETE ... WHERE pk IN (...); returns how many rows went away."""
        doomed = list(ids)
        if not doomed:
            return 0

        result = await session.execute(sql_delete(self.model).where(self._pk_attr().in_(doomed)))
        await session.flush()
        deleted: int = result.rowcount

        if deleted > BULK_DELETE_WARN_THRESHOLD:
            self._log.warning(
                "Bulk delete executed",
                extra={
                    "entity": self._entity,
                    "requested": len(doomed),
                    "deleted": deleted,
                    "operation": "db.delete_many",
                },
            )
        else:
            self._trace.debug(lambda: f"db.delete_many: {self._entity} -> {deleted} deleted")
        return deleted

    async def delete_all(self, session: AsyncSession) -> int:
        """Empty the table; always logged at WARNING."""
        result = await session.execute(sql_delete(self.model))
        await session.flush()
        deleted: int = result.rowcount

        self._log.warning(
            "All entities deleted",
            extra={"entity": self._entity, "deleted": deleted, "operation": "db.delete_all"},
        )
        return deleted

    # -- helpers ------------------------------------------------------------

    async def _fetch(self, session: AsyncSession, stmt: Select[tuple[T]], label: str) -> Sequence[T]:
        rows = (await session.scalars(stmt)).all()
        self._trace.debug(lambda: f"{label}: {self._entity} -> {len(rows)} items")
        return rows

    @staticmethod
    def _apply_filters(
        statement: Select[tuple[T]], filters: Iterable[StatementFilter]
    ) -> Select[tuple[T]]:
        for statement_filter in filters:
            statement = statement_filter.apply(statement)
        return statement

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        mapper = sa_inspect(self.model)
        return getattr(self.model, mapper.get_property_by_column(mapper.primary_key[0]).key)

    def _pk_value(self, instance: T) -> Any:
        return getattr(instance, self._pk_attr().key, None)


def _hit(instance: object | None) -> str:
    return "found" if instance is not None else "not found"


__all__ = [
    "BULK_DELETE_WARN_THRESHOLD",
    "BaseRepository",
    "SearchResult",
]
