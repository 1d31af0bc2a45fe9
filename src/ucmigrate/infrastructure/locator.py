"""Current settings file location.

The host platform knows where the running application's settings file
lives. Everything else is derived from that path's ancestors::

    {app_data_root}/{root_group}/{assembly dir}/{version}/user.config
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Protocol

from ucmigrate.domain.errors import InvalidArgumentError, MalformedDirectoryNameError
from ucmigrate.domain.identity import Identity
from ucmigrate.domain.versions import SemanticVersion


class ConfigScope(StrEnum):
    """User-level configuration scopes offered by the platform."""

    ROAMING = "roaming"
    ROAMING_AND_LOCAL = "roaming-and-local"


class PlatformConfigLocator(Protocol):
    """Returns the absolute path of the current settings file for a scope."""

    def settings_path(self, scope: ConfigScope) -> Path: ...


class StaticConfigLocator:
    """Locator returning one fixed path regardless of scope."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def settings_path(self, scope: ConfigScope) -> Path:
        return self._path


@dataclass(frozen=True)
class CurrentSettingsContext:
    """What the current settings path says about the running application."""

    settings_path: Path
    app_data_root: Path
    identity: Identity
    version: SemanticVersion


def current_settings_context(
    settings_path: Path | str | None,
    *,
    debugging: bool = False,
) -> CurrentSettingsContext:
    """Derive app-data root, identity, and version from the current path.

    *debugging* is forwarded to the assembly name extraction.

    Raises:
        InvalidArgumentError: the path is empty or has fewer than four
            ancestor levels.
        MalformedDirectoryNameError: the version directory is not a
            version, or the assembly directory lacks the naming separator.
    """
    if settings_path is None or not str(settings_path).strip():
        msg = "'settings_path' must not be empty"
        raise InvalidArgumentError(msg)

    path = Path(settings_path)
    version_dir = path.parent
    assembly_dir = version_dir.parent
    root_group_dir = assembly_dir.parent
    app_data_root = root_group_dir.parent
    if not root_group_dir.name or root_group_dir == app_data_root:
        msg = f"{str(path)!r} is too shallow to be a user settings path"
        raise InvalidArgumentError(msg)

    version = SemanticVersion.try_parse(version_dir.name)
    if version is None:
        msg = f"{str(version_dir)!r} is not a valid version directory"
        raise MalformedDirectoryNameError(msg)

    identity = Identity.from_assembly_dir(
        root_group_dir.name, assembly_dir.name, debugging=debugging
    )
    return CurrentSettingsContext(
        settings_path=path,
        app_data_root=app_data_root,
        identity=identity,
        version=version,
    )
