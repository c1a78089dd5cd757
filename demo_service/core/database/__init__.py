"""Persistence building blocks shared by every model.

``Base``/``TimestampMixin`` for mapping, ``BaseRepository[T]`` for CRUD with
an explicit session, statement filters for ordering, paging and IN lists,
and the two repository errors.

    repo = BaseRepository(User)
    page = await repo.list_all(session, OrderBy(User.username), LimitOffset(20))
"""

from __future__ import annotations

from demo_service.core.database.base import NAMING_CONVENTION, Base, TimestampMixin
from demo_service.core.database.exceptions import NotFoundError, RepositoryError
from demo_service.core.database.filters import (
    CollectionFilter,
    LimitOffset,
    OrderBy,
    StatementFilter,
)
from demo_service.core.database.repository import BaseRepository, SearchResult

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "CollectionFilter",
    "LimitOffset",
    "NotFoundError",
    "OrderBy",
    "RepositoryError",
    "SearchResult",
    "StatementFilter",
    "TimestampMixin",
]
