"""Unit tests for the database and logging settings."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from demo_service.core.settings import (
    DEFAULT_DATABASE_URL,
    DatabaseSettings,
    LoggingSettings,
    clear_all_caches,
    get_db_settings,
    get_logging_settings,
)
from demo_service.core.settings.yaml_sources import ConfDYamlConfigSettingsSource


@pytest.mark.unit
class TestDatabaseSettings:
    """Test suite for DatabaseSettings."""

    def test_defaults(self, monkeypatch):
        """Without overrides the service points at the local SQLite file."""
        monkeypatch.delenv("DB_URL", raising=False)
        monkeypatch.delenv("DB_STARTUP_RETRY_ATTEMPTS", raising=False)
        monkeypatch.delenv("DB_STARTUP_RETRY_DELAY", raising=False)

        settings = DatabaseSettings()

        assert settings.url == DEFAULT_DATABASE_URL
        assert settings.backend == "sqlite"
        assert settings.is_sqlite is True
        assert settings.enabled is True
        assert settings.expire_on_commit is False
        assert settings.create_schema is True
        assert settings.startup_retry_attempts == 3

    def test_env_override(self, monkeypatch):
        """DB_-prefixed environment variables override defaults."""
        monkeypatch.setenv("DB_URL", "postgresql+psycopg://app:secret@db:5432/demo")
        monkeypatch.setenv("DB_POOL_SIZE", "20")
        monkeypatch.setenv("DB_ECHO", "true")

        settings = DatabaseSettings()

        assert settings.backend == "postgresql"
        assert settings.pool_size == 20
        assert settings.echo is True

    def test_frozen(self):
        """Settings instances are immutable."""
        settings = DatabaseSettings()

        with pytest.raises(ValidationError):
            settings.echo = True

    def test_invalid_url_rejected(self):
        """URLs SQLAlchemy cannot parse fail validation."""
        with pytest.raises(ValidationError):
            DatabaseSettings(url="not a url")

    def test_pool_bounds(self):
        """Out-of-range pool sizes fail validation."""
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_size=0)

    def test_safe_url_hides_password(self):
        settings = DatabaseSettings(url="postgresql+psycopg://app:secret@db:5432/demo")

        assert "secret" not in settings.safe_url
        assert "***" in settings.safe_url

    def test_engine_kwargs_for_sqlite(self):
        """SQLite engines get no queue pool sizing."""
        kwargs = DatabaseSettings(url="sqlite+aiosqlite:///:memory:").sqlalchemy_engine_kwargs()

        assert kwargs == {"echo": False, "pool_pre_ping": True}

    def test_engine_kwargs_for_server_backend(self):
        """Server backends get the full pool configuration."""
        settings = DatabaseSettings(
            url="postgresql+psycopg://app:secret@db:5432/demo",
            pool_size=5,
            max_overflow=2,
        )

        kwargs = settings.sqlalchemy_engine_kwargs()

        assert kwargs["pool_size"] == 5
        assert kwargs["max_overflow"] == 2
        assert kwargs["pool_timeout"] == settings.pool_timeout
        assert kwargs["pool_recycle"] == settings.pool_recycle

    def test_is_configured(self):
        assert DatabaseSettings().is_configured is True
        assert DatabaseSettings(enabled=False).is_configured is False


@pytest.mark.unit
class TestYamlSources:
    """Test suite for YAML and conf.d settings sources."""

    def test_yaml_and_confd_merge(self, tmp_path, monkeypatch):
        """conf.d files override the base file, and YAML beats environment."""
        (tmp_path / "db.yaml").write_text("pool_size: 7\necho: true\n")
        confd = tmp_path / "db.d"
        confd.mkdir()
        (confd / "10-pool.yaml").write_text("pool_size: 8\n")
        (confd / "20-pool.yaml").write_text("pool_size: 9\n")
        monkeypatch.setenv("DB_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("DB_POOL_SIZE", "3")

        settings = DatabaseSettings()

        assert settings.pool_size == 9
        assert settings.echo is True

    def test_init_kwargs_beat_yaml(self, tmp_path, monkeypatch):
        (tmp_path / "db.yaml").write_text("pool_size: 7\n")
        monkeypatch.setenv("DB_CONFIG_DIR", str(tmp_path))

        assert DatabaseSettings(pool_size=11).pool_size == 11

    def test_source_lists_files_in_load_order(self, tmp_path, monkeypatch):
        (tmp_path / "logging.yaml").write_text("level: DEBUG\n")
        confd = tmp_path / "logging.d"
        confd.mkdir()
        (confd / "b.yml").write_text("json_logs: false\n")
        (confd / "notes.txt").write_text("level: ERROR\n")
        (confd / "a.yaml").write_text("console_enabled: false\n")
        monkeypatch.setenv("LOGGING_CONFIG_DIR", str(tmp_path))

        source = ConfDYamlConfigSettingsSource(LoggingSettings, "logging", "LOGGING_CONFIG_DIR")

        assert [p.name for p in source.yaml_files] == ["logging.yaml", "a.yaml", "b.yml"]

        settings = LoggingSettings()
        assert settings.level == "DEBUG"
        assert settings.json_logs is False
        assert settings.console_enabled is False

    def test_missing_directory_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DB_CONFIG_DIR", str(tmp_path / "absent"))

        source = ConfDYamlConfigSettingsSource(DatabaseSettings, "db", "DB_CONFIG_DIR")

        assert source.yaml_files == []


@pytest.mark.unit
class TestLoggingSettings:
    """Test suite for LoggingSettings."""

    def test_defaults(self):
        settings = LoggingSettings()

        assert settings.service_name == "demo-service"
        assert settings.level == "INFO"
        assert settings.json_logs is True
        assert settings.file_enabled is False
        assert settings.sql_level == "WARNING"

    def test_invalid_level_rejected(self):
        with pytest.raises(ValidationError):
            LoggingSettings(level="LOUD")

    def test_file_path_ignored_when_disabled(self):
        settings = LoggingSettings(file_enabled=False)

        assert settings.effective_file_path is None
        assert settings.to_logging_kwargs()["file_path"] is None

    def test_handler_levels_fall_back_to_root(self):
        settings = LoggingSettings(level="WARNING", file_enabled=True, file_level="ERROR")
        kwargs = settings.to_logging_kwargs()

        assert kwargs["log_level"] == "WARNING"
        assert kwargs["console_level"] == "WARNING"
        assert kwargs["file_level"] == "ERROR"
        assert kwargs["service_name"] == "demo-service"


@pytest.mark.unit
class TestLoaders:
    """Test suite for cached settings loaders."""

    def test_loaders_cache_instances(self):
        assert get_db_settings() is get_db_settings()
        assert get_logging_settings() is get_logging_settings()

    def test_clear_all_caches_reloads(self, monkeypatch):
        first = get_db_settings()
        monkeypatch.setenv("DB_ECHO", "true")

        assert get_db_settings() is first

        clear_all_caches()

        reloaded = get_db_settings()
        assert reloaded is not first
        assert reloaded.echo is True
