"""Database settings consumed by ``infra.database``."""

from __future__ import annotations

from typing import Any

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

from .yaml_sources import create_db_yaml_source

# Local file, so the service runs without a database server
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./demo.db"


class DatabaseSettings(BaseSettings):
    """Engine URL, pool sizing and startup behaviour.

    Read from DB_* variables or conf/db.yaml, e.g.
    DB_URL=postgresql+psycopg://app:secret@db:5432/demo (needs the
    ``postgres`` extra). Pool sizing is ignored for SQLite.
    """

    enabled: bool = True
    url: str = Field(default=DEFAULT_DATABASE_URL, min_length=1)

    pool_size: int = Field(default=10, ge=1, le=100)
    max_overflow: int = Field(default=10, ge=0, le=100)
    pool_timeout: float = Field(default=30.0, gt=0, le=300)
    pool_recycle: int = Field(default=1800, ge=0, le=86400)
    pool_pre_ping: bool = True
    # Engine-level SQL echo; prefer LOG_SQL_LEVEL=INFO
    echo: bool = False

    expire_on_commit: bool = False
    create_schema: bool = True

    # init_database: SELECT 1 up to N times, pausing delay, 2*delay, ... within timeout
    startup_retry_attempts: int = Field(default=3, ge=1, le=20)
    startup_retry_delay: float = Field(default=2.0, ge=0, le=60)
    startup_retry_timeout: float = Field(default=60.0, gt=0, le=300)

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """init kwargs, then YAML, then the environment, .env and secrets."""
        return (
            init_settings,
            create_db_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        try:
            make_url(value)
        except Exception as exc:
            msg = f"not a SQLAlchemy URL: {value!r} ({exc})"
            raise ValueError(msg) from exc
        return value

    @property
    def parsed_url(self) -> URL:
        return make_url(self.url)

    @computed_field  # type: ignore[misc]
    @property
    def backend(self) -> str:
        """Dialect without the driver, e.g. ``postgresql``."""
        return self.parsed_url.get_backend_name()

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.url)

    @property
    def safe_url(self) -> str:
        """``url`` with the password replaced by ``***``."""
        return self.parsed_url.render_as_string(hide_password=True)

    def get_sqlalchemy_url(self) -> str:
        return self.url

    def sqlalchemy_engine_kwargs(self) -> dict[str, Any]:
        """Extra ``create_async_engine`` arguments.

        SQLite's default pools take no queue sizing, so only server backends
        get the pool settings.
        """
        kwargs: dict[str, Any] = {"echo": self.echo, "pool_pre_ping": self.pool_pre_ping}
        if self.is_sqlite:
            return kwargs
        return kwargs | {
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_timeout": self.pool_timeout,
            "pool_recycle": self.pool_recycle,
        }


__all__ = ["DEFAULT_DATABASE_URL", "DatabaseSettings"]
