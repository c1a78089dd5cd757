"""Errors raised by the repository layer itself.

Anything the database reports (integrity violations, dropped connections)
reaches callers as the original SQLAlchemy exception.
"""
from __future__ import annotations

from typing import Any


def _pairs(mapping: dict[str, Any]) -> str:
    return ", ".join(f"{key}={value!r}" for key, value in mapping.items())


class RepositoryError(Exception):
    """Root of the repository hierarchy; ``details`` carries structured context."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        return f"{self.message} ({_pairs(self.details)})" if self.details else self.message


class NotFoundError(RepositoryError):
    """A lookup that must return a row found none.

    ``identifier`` holds the column values that were looked up, for example
    ``{"id": 7}``.
    """

    def __init__(self, model_name: str, identifier: dict[str, Any]):
        self.model_name = model_name
        self.identifier = identifier
        super().__init__(
            f"{model_name} not found with {_pairs(identifier)}",
            details={"model": model_name, **identifier},
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model_name!r}, identifier={self.identifier!r})"


__all__ = [
    "NotFoundError",
    "RepositoryError",
]
