"""Mapped classes; importing this package registers every table on ``Base.metadata``."""

from __future__ import annotations

from .user import User

__all__ = ["User"]
