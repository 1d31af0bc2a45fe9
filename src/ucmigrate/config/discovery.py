"""Locating and reading ``ucmigrate.toml``.

The file ships with the host application, so discovery starts from a
directory the application names (usually its install directory) rather
than the process working directory. ``UCMIGRATE_CONFIG`` names a file
directly and takes precedence over discovery.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from ucmigrate.config.models import MigrationOptions
from ucmigrate.domain.errors import MalformedDocumentError, SettingsFileNotFoundError

CONFIG_FILENAME = "ucmigrate.toml"
CONFIG_ENV_VAR = "UCMIGRATE_CONFIG"


def _ancestors(start: Path, stop: Path | None) -> list[Path]:
    start = start.resolve()
    chain = [start, *start.parents]
    if stop is None:
        return chain
    stop = stop.resolve()
    if stop not in chain:
        return [start]
    return chain[: chain.index(stop) + 1]


def find_config(start: Path | None = None, *, stop: Path | None = None) -> Path | None:
    """Return the config file that applies to *start*, or None.

    ``UCMIGRATE_CONFIG`` wins when set. Otherwise *start* and its parents
    are searched up to and including *stop* (the filesystem root when
    *stop* is None or not an ancestor of *start*). Without *start* only the
    environment variable is consulted.

    Raises:
        SettingsFileNotFoundError: ``UCMIGRATE_CONFIG`` names a missing file.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        named = Path(env_path)
        if not named.is_file():
            msg = f"{CONFIG_ENV_VAR} names a missing file: {env_path}"
            raise SettingsFileNotFoundError(msg)
        return named

    if start is None:
        return None
    for directory in _ancestors(start, stop):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML.

    Raises:
        SettingsFileNotFoundError: *path* does not exist.
        MalformedDocumentError: *path* is not valid TOML.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        msg = f"Config file not found: {path}"
        raise SettingsFileNotFoundError(msg) from exc
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise MalformedDocumentError(msg) from exc


def load_config(path: Path | None = None, start: Path | None = None) -> MigrationOptions:
    """Migration options from *path*, or from the file found from *start*.

    Defaults are returned when no file applies. Logging keys such as
    ``verbose`` are not migration options and are ignored here.
    """
    if path is None:
        path = find_config(start)
    if path is None:
        return MigrationOptions()
    data = read_toml(path)
    known = MigrationOptions.model_fields
    return MigrationOptions.model_validate({k: v for k, v in data.items() if k in known})
