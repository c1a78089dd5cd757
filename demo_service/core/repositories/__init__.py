"""Model-specific repositories built on ``BaseRepository``."""
from __future__ import annotations

from demo_service.core.repositories.user import UserRepository

__all__ = [
    "UserRepository",
]
