"""Per-task fields that ride along on every log record.

The fields live in a ``ContextVar``, so concurrent requests never see each
other's values. ``ContextInjectingFilter`` copies them onto records.

    set_log_context(request_id="r-17")
    logger.info("lookup")        # record.request_id == "r-17"
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

# Values are replaced, never mutated in place, so the shared default stays empty
_fields: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add or overwrite fields for the current task."""
    _fields.set({**_fields.get(), **kwargs})


def get_log_context() -> dict[str, Any]:
    return dict(_fields.get())


def clear_log_context() -> None:
    _fields.set({})


def remove_from_log_context(*keys: str) -> None:
    """Drop ``keys``; unknown keys are ignored."""
    _fields.set({k: v for k, v in _fields.get().items() if k not in keys})


class ContextInjectingFilter(logging.Filter):
    """Copy the task's log context onto each record it passes.

    Attributes already on the record (including ``extra=`` values) win over
    context fields. The filter never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        missing = {k: v for k, v in _fields.get().items() if not hasattr(record, k)}
        record.__dict__.update(missing)
        return True


__all__ = [
    "ContextInjectingFilter",
    "clear_log_context",
    "get_log_context",
    "remove_from_log_context",
    "set_log_context",
]
