"""Shared pytest fixtures and test helpers for ucmigrate tests."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from xml.sax.saxutils import escape, quoteattr

import pytest

SETTINGS_SECTION = "App.Properties.Settings"


def render_user_config(entries: Mapping[str, str]) -> str:
    """Render a ``user.config`` document with one section holding *entries*."""
    settings = "".join(
        f'      <setting name={quoteattr(name)} serializeAs="String">\n'
        f"        <value>{escape(value)}</value>\n"
        f"      </setting>\n"
        for name, value in entries.items()
    )
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        "<configuration>\n"
        "  <userSettings>\n"
        f"    <{SETTINGS_SECTION}>\n"
        f"{settings}"
        f"    </{SETTINGS_SECTION}>\n"
        "  </userSettings>\n"
        "</configuration>\n"
    )


def make_user_config(
    app_data_root: Path,
    root_group: str,
    assembly_dir: str,
    version: str,
    entries: Mapping[str, str] | None = None,
) -> Path:
    """Create ``{root}/{group}/{assembly}/{version}/user.config`` and return its path."""
    path = app_data_root / root_group / assembly_dir / version / "user.config"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_user_config(entries or {}), encoding="utf-8")
    return path


class FakeClock:
    """Creation-time lookup keyed by path, for deterministic tie-breaks."""

    def __init__(self) -> None:
        self.times: dict[Path, datetime] = {}

    def set(self, path: Path, timestamp: datetime) -> None:
        self.times[path] = timestamp

    def __call__(self, path: Path) -> datetime:
        return self.times.get(path, datetime(2020, 1, 1, tzinfo=UTC))


@pytest.fixture
def app_data_root(tmp_path: Path) -> Path:
    """Empty per-user application data root."""
    root = tmp_path / "AppData" / "Local"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
