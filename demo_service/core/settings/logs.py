"""Logging settings consumed by ``infra.logging.setup_logging``."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_logging_yaml_source

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Where log records go and how they look.

    Read from LOG_* variables (LOG_LEVEL=DEBUG, LOG_JSON_LOGS=false,
    LOG_FILE_ENABLED=true ...) or conf/logging.yaml. Level names are
    case-insensitive.
    """

    service_name: str = "demo-service"
    level: LogLevel = "INFO"
    json_logs: bool = True

    # stderr sink
    console_enabled: bool = True
    console_level: LogLevel | None = None

    # Rotating file sink, only opened when file_enabled is set
    file_enabled: bool = False
    file_path: Path | None = Path("logs/demo-service.log.jsonl")
    file_level: LogLevel | None = None
    file_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    file_backup_count: int = Field(default=5, ge=0, le=100)

    include_context: bool = True
    capture_warnings: bool = True
    # INFO echoes every SQL statement the repositories issue
    sql_level: LogLevel = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
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
            create_logging_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @field_validator("level", "console_level", "file_level", "sql_level", mode="before")
    @classmethod
    def upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @computed_field
    @property
    def effective_file_path(self) -> Path | None:
        """``file_path`` when the file sink is enabled, else None."""
        return self.file_path if self.file_enabled else None

    @computed_field
    @property
    def effective_console_level(self) -> LogLevel:
        return self.console_level or self.level

    @computed_field
    @property
    def effective_file_level(self) -> LogLevel:
        return self.file_level or self.level

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``configure_logging``."""
        return {
            "log_level": self.level,
            "console_level": self.effective_console_level,
            "file_level": self.effective_file_level,
            "file_path": self.effective_file_path,
            "json_logs": self.json_logs,
            "console_enabled": self.console_enabled,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "service_name": self.service_name,
            "sql_level": self.sql_level,
        }


__all__ = ["LogLevel", "LoggingSettings"]
