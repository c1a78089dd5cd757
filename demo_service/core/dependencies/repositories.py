"""Repository providers for FastAPI routes.

A repository keeps no per-request state, so every request shares one
instance.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from demo_service.core.repositories import UserRepository


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    return UserRepository()


UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]

__all__ = [
    "UserRepositoryDep",
    "get_user_repository",
]
