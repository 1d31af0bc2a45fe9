"""Unified settings — init kwargs, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — values passed by the embedding application
  2. Env vars     — ``UCMIGRATE_*`` prefix
  3. TOML file    — ``ucmigrate.toml`` next to the application
  4. Code defaults — baked into the fields below
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from ucmigrate.config.discovery import find_config, read_toml
from ucmigrate.config.models import MigrationOptions
from ucmigrate.domain.identity import Identity
from ucmigrate.infrastructure.locator import ConfigScope


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Values parsed from ``ucmigrate.toml``, limited to declared fields."""

    def __init__(self, settings_cls: type[BaseSettings], data: Mapping[str, Any]) -> None:
        super().__init__(settings_cls)
        fields = settings_cls.model_fields
        self._data = {k: v for k, v in data.items() if k in fields and k != "config_path"}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


# Parsed TOML for the settings object under construction on this thread.
_tls = threading.local()


class MigratorSettings(BaseSettings):
    """Settings for an embedding application's migration step.

    Attributes:
        config_path: The TOML file the values came from, if any.
        verbose: Log resolution and transfer details at DEBUG.
        log_json: Emit JSON log lines instead of console output.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "UCMIGRATE_",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    config_path: Path | None = None

    # --- Logging ---
    verbose: bool = False
    log_json: bool = False

    # --- Migration options ---
    accept_higher: bool = False
    debugging: bool = False
    scope: ConfigScope = ConfigScope.ROAMING_AND_LOCAL
    previous_identities: tuple[Identity, ...] = Field(default=())

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_data = getattr(_tls, "toml_data", None) or {}
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_data),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> MigratorSettings:
        """Construct settings for an application launch.

        Reads the explicit *config_path*, or the ``ucmigrate.toml`` found from
        *start* (typically the application directory), and merges *overrides*
        as highest-priority values.

        Raises:
            SettingsFileNotFoundError: *config_path* does not exist.
            MalformedDocumentError: the config file is not valid TOML.
        """
        toml_path = Path(config_path) if config_path else find_config(start)
        _tls.toml_data = read_toml(toml_path) if toml_path else {}
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_data = None

    def to_options(self) -> MigrationOptions:
        """The migration options carried by these settings."""
        return MigrationOptions(
            accept_higher=self.accept_higher,
            previous_identities=self.previous_identities,
            debugging=self.debugging,
            scope=self.scope,
        )
