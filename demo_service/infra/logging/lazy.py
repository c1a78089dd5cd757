"""Deferred DEBUG messages for hot data-access paths.

Repositories describe every query at DEBUG. Building those strings (reprs of
filter values, row counts) is wasted work when DEBUG is off, so messages and
%-arguments may be zero-argument callables that are only invoked once the
level check passes.
"""

from __future__ import annotations

import logging
from typing import Any


def _resolve(value: Any) -> Any:
    return value() if callable(value) else value


class LazyLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter whose message and arguments may be thunks.

    ``repo_log.debug(lambda: f"db.get: User({pk}) -> found")`` costs a level
    check and nothing else unless ``repository.User`` is at DEBUG.
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        super().log(level, _resolve(msg), *(_resolve(a) for a in args), **kwargs)


def get_lazy_logger(name: str, **bound: Any) -> LazyLoggerAdapter:
    """Return a LazyLoggerAdapter over ``logging.getLogger(name)``.

    Keyword arguments become ``extra`` fields on every record.
    """
    return LazyLoggerAdapter(logging.getLogger(name), bound)


__all__ = ["LazyLoggerAdapter", "get_lazy_logger"]
