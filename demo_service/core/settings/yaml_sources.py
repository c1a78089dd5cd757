"""Optional YAML configuration with a conf.d override directory.

For a stem such as ``db`` the files read are::

    <dir>/db.yaml          base values
    <dir>/db.d/*.yaml|yml  overrides, applied in file-name order

``<dir>`` defaults to ``conf`` relative to the working directory and can be
moved with ``DB_CONFIG_DIR`` / ``LOGGING_CONFIG_DIR``. Missing files are
simply skipped, so deployments that configure purely through the
environment need none of this.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic_settings import YamlConfigSettingsSource

if TYPE_CHECKING:
    from pydantic_settings import BaseSettings

DEFAULT_CONFIG_DIR = "conf"
_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def discover_yaml_files(config_dir: Path, stem: str) -> list[Path]:
    """Existing YAML files for ``stem`` under ``config_dir``, lowest precedence first."""
    found: list[Path] = []

    base = config_dir / f"{stem}.yaml"
    if base.is_file():
        found.append(base)

    overrides = config_dir / f"{stem}.d"
    if overrides.is_dir():
        found.extend(
            sorted(
                (p for p in overrides.iterdir() if p.is_file() and p.suffix in _YAML_SUFFIXES),
                key=lambda p: p.name,
            )
        )
    return found


class ConfDYamlConfigSettingsSource(YamlConfigSettingsSource):
    """pydantic-settings source fed by ``discover_yaml_files``.

    Later files win key by key; pydantic-settings does the parsing and merging.
    """

    def __init__(self, settings_cls: type[BaseSettings], stem: str, config_dir_env: str) -> None:
        self.config_dir = Path(os.getenv(config_dir_env, DEFAULT_CONFIG_DIR))
        self._yaml_files = discover_yaml_files(self.config_dir, stem)
        super().__init__(
            settings_cls,
            yaml_file=self._yaml_files or None,
            yaml_file_encoding="utf-8",
        )

    @property
    def yaml_files(self) -> list[Path]:
        return list(self._yaml_files)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(config_dir={str(self.config_dir)!r}, files={len(self._yaml_files)})"


def create_db_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    return ConfDYamlConfigSettingsSource(settings_cls, "db", "DB_CONFIG_DIR")


def create_logging_yaml_source(
    settings_cls: type[BaseSettings],
) -> ConfDYamlConfigSettingsSource:
    return ConfDYamlConfigSettingsSource(settings_cls, "logging", "LOGGING_CONFIG_DIR")


__all__ = [
    "ConfDYamlConfigSettingsSource",
    "create_db_yaml_source",
    "create_logging_yaml_source",
    "discover_yaml_files",
]
