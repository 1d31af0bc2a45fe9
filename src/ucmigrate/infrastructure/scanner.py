"""Versioned settings tree scanner.

Walks ``{app_data_root}/{root_group}/{assembly dir}/{version}/user.config``
and selects the best prior settings file for a set of scan targets.

Selection rule: the strictly higher version wins; on an exact version tie
the file created later wins. The whole target list is always enumerated,
so the result is the global best rather than the first hit.

An entry that cannot be listed or stat-ed is logged at DEBUG and skipped.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ucmigrate.domain.identity import ScanTarget
from ucmigrate.domain.naming import SETTINGS_FILENAME, matches_prefix
from ucmigrate.domain.versions import SemanticVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedSettingsFile:
    """The winning candidate of a scan."""

    path: Path
    version: SemanticVersion
    created_at: datetime

    def outranks(self, other: ResolvedSettingsFile | None) -> bool:
        """Whether this candidate beats *other* under the selection rule."""
        if other is None:
            return True
        if self.version != other.version:
            return self.version > other.version
        return self.created_at > other.created_at


def file_created_at(path: Path) -> datetime:
    """Creation time of *path*, falling back to ctime where birth time is unknown."""
    stat = path.stat()
    timestamp = getattr(stat, "st_birthtime", None)
    if timestamp is None:
        timestamp = stat.st_ctime
    return datetime.fromtimestamp(timestamp, tz=UTC)


def _is_dir(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir()
    except OSError as exc:
        logger.debug("Skipping unreadable entry %s: %s", entry.path, exc)
        return False


def _subdirs(path: Path) -> Iterator[Path]:
    # Sorted for deterministic logs; selection itself is order-independent.
    try:
        with os.scandir(path) as entries:
            names = sorted(e.name for e in entries if _is_dir(e))
    except OSError as exc:
        logger.debug("Cannot list directory %s: %s", path, exc)
        return
    for name in names:
        yield path / name


def _check(path: Path, predicate: Callable[[Path], bool]) -> bool:
    try:
        return predicate(path)
    except OSError as exc:
        logger.debug("Cannot stat %s: %s", path, exc)
        return False


def iter_candidates(
    app_data_root: Path,
    target: ScanTarget,
    *,
    exclude_dirs: Iterable[str] = (),
) -> Iterator[tuple[Path, SemanticVersion]]:
    """Yield ``(settings_file, version)`` for every well-formed version dir.

    Assembly directories named in *exclude_dirs* (case-insensitive) are
    skipped entirely.
    """
    root_dir = app_data_root / target.root_group
    if not _check(root_dir, Path.is_dir):
        logger.debug("Root group directory missing: %s", root_dir)
        return

    excluded = {name.lower() for name in exclude_dirs}
    for assembly_dir in _subdirs(root_dir):
        if not matches_prefix(assembly_dir.name, target.dir_prefix):
            continue
        if assembly_dir.name.lower() in excluded:
            logger.debug("Skipping excluded assembly directory: %s", assembly_dir)
            continue
        for version_dir in _subdirs(assembly_dir):
            settings_file = version_dir / SETTINGS_FILENAME
            if not _check(settings_file, Path.is_file):
                logger.debug("No %s in %s", SETTINGS_FILENAME, version_dir)
                continue
            version = SemanticVersion.try_parse(version_dir.name)
            if version is None:
                logger.debug("Unparsable version directory: %s", version_dir)
                continue
            yield settings_file, version


def scan(
    app_data_root: Path,
    targets: Sequence[ScanTarget],
    current_version: SemanticVersion,
    *,
    accept_higher: bool,
    accept_same: bool,
    exclude_dirs: Iterable[str] = (),
    created_at: Callable[[Path], datetime] = file_created_at,
) -> ResolvedSettingsFile | None:
    """Find the best settings file across all *targets*.

    Candidates equal to *current_version* are dropped unless *accept_same*;
    candidates above it are dropped unless *accept_higher*. Returns None
    when nothing qualifies. *created_at* reads a file's creation time
    for tie-breaks.
    """
    excluded = tuple(exclude_dirs)
    best: ResolvedSettingsFile | None = None
    for target in targets:
        for settings_file, version in iter_candidates(
            app_data_root, target, exclude_dirs=excluded
        ):
            if version == current_version and not accept_same:
                logger.debug("Skipping same version %s: %s", version, settings_file)
                continue
            if version > current_version and not accept_higher:
                logger.debug("Skipping higher version %s: %s", version, settings_file)
                continue
            try:
                created = created_at(settings_file)
            except OSError as exc:
                logger.debug("Cannot read creation time of %s: %s", settings_file, exc)
                continue
            candidate = ResolvedSettingsFile(
                path=settings_file, version=version, created_at=created
            )
            if candidate.outranks(best):
                best = candidate

    if best is not None:
        logger.debug("Selected %s (version %s)", best.path, best.version)
    return best
