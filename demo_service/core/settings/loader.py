"""Settings singletons.

Each settings class is read from YAML and the environment once per process.
Tests that change the environment call ``clear_all_caches()`` afterwards.
"""

from __future__ import annotations

from functools import lru_cache

from .database import DatabaseSettings
from .logs import LoggingSettings


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


def clear_all_caches() -> None:
    """Forget the cached settings so the next getter call re-reads them."""
    for getter in (get_db_settings, get_logging_settings):
        getter.cache_clear()
