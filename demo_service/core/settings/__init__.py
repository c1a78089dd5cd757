"""Typed settings for the database and logging layers.

Use the cached getters rather than instantiating the classes:

    from demo_service.core.settings import get_db_settings

    engine_url = get_db_settings().url

Sources, strongest first: constructor arguments, ``conf/<name>.yaml`` plus
``conf/<name>.d/*.yaml``, environment variables, ``.env``, secret files.
"""

from __future__ import annotations

from .database import DEFAULT_DATABASE_URL, DatabaseSettings
from .loader import clear_all_caches, get_db_settings, get_logging_settings
from .logs import LoggingSettings

__all__ = [
    "DEFAULT_DATABASE_URL",
    "DatabaseSettings",
    "LoggingSettings",
    "clear_all_caches",
    "get_db_settings",
    "get_logging_settings",
]
