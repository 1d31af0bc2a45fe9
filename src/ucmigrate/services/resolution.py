"""SettingsResolver — tiered search for the best prior settings file.

Priority order:

1. The current identity's exact assembly directory, when known. A hit
   here is the most precise signal and ends the search.
2. Prefix search over the current and previous identities: debug-host
   names first (only while debugging), then extensionless names.
3. Tier 2 again, this time accepting the current version too. This
   recovers settings of a relocated install whose directory hash changed
   while its version did not.

Tiers 2 and 3 never revisit the exact directory from tier 1.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Any

from ucmigrate.config.models import MigrationOptions
from ucmigrate.domain.errors import InvalidArgumentError
from ucmigrate.domain.identity import Identity, ScanTarget
from ucmigrate.domain.naming import ExtensionVariant, build_candidate_dir_prefix
from ucmigrate.domain.versions import SemanticVersion
from ucmigrate.infrastructure.scanner import ResolvedSettingsFile, scan

logger = logging.getLogger(__name__)

Scanner = Callable[..., ResolvedSettingsFile | None]


def variant_targets(
    identities: Iterable[Identity],
    variant: ExtensionVariant,
) -> list[ScanTarget]:
    """Scan targets for *identities* under one naming *variant*, deduplicated.

    An identity carrying a directory hint targets that directory under
    every variant.
    """
    targets: list[ScanTarget] = []
    seen: set[tuple[str, str]] = set()
    for identity in identities:
        if identity.assembly_dir_hint:
            target = ScanTarget.exact(identity)
        else:
            target = ScanTarget(
                root_group=identity.root_group,
                dir_prefix=build_candidate_dir_prefix(identity, variant),
            )
        key = (target.root_group.lower(), target.dir_prefix.lower())
        if key in seen:
            continue
        seen.add(key)
        targets.append(target)
    return targets


class SettingsResolver:
    """Runs the scanner across identity candidates and acceptance tiers.

    The scanner is injectable so tests can observe which targets each
    tier asks for.
    """

    def __init__(self, scanner: Scanner = scan) -> None:
        self._scan = scanner

    def resolve(
        self,
        current_version: SemanticVersion,
        current_identity: Identity,
        app_data_root: Path,
        options: MigrationOptions | None = None,
    ) -> ResolvedSettingsFile | None:
        """Return the best prior settings file, or None if there is none."""
        if current_version is None:
            msg = "'current_version' must not be None"
            raise InvalidArgumentError(msg)
        if current_identity is None:
            msg = "'current_identity' must not be None"
            raise InvalidArgumentError(msg)
        if app_data_root is None or not str(app_data_root).strip():
            msg = "'app_data_root' must not be empty"
            raise InvalidArgumentError(msg)
        options = options or MigrationOptions()
        app_data_root = Path(app_data_root)

        hint = current_identity.assembly_dir_hint
        if hint:
            found = self._scan_tier(
                "exact",
                app_data_root,
                [ScanTarget.exact(current_identity)],
                current_version,
                accept_higher=options.accept_higher,
                accept_same=False,
            )
            if found is not None:
                return found

        # The current hint was tier 1; fallbacks search by bare name.
        identities = [
            dataclasses.replace(current_identity, assembly_dir_hint=None),
            *options.previous_identities,
        ]
        exclude = (hint,) if hint else ()
        for accept_same in (False, True):
            found = self._scan_fallbacks(
                app_data_root,
                identities,
                current_version,
                options,
                accept_same=accept_same,
                exclude_dirs=exclude,
            )
            if found is not None:
                return found

        logger.debug(
            "No prior settings for %s/%s below %s",
            current_identity.root_group,
            current_identity.assembly_bare_name,
            current_version,
        )
        return None

    def _scan_fallbacks(
        self,
        app_data_root: Path,
        identities: Sequence[Identity],
        current_version: SemanticVersion,
        options: MigrationOptions,
        *,
        accept_same: bool,
        exclude_dirs: Sequence[str],
    ) -> ResolvedSettingsFile | None:
        variants = [ExtensionVariant.NONE]
        if options.debugging:
            variants.insert(0, ExtensionVariant.DEBUG)
        for variant in variants:
            found = self._scan_tier(
                f"{variant.name.lower()}{'+same' if accept_same else ''}",
                app_data_root,
                variant_targets(identities, variant),
                current_version,
                accept_higher=options.accept_higher,
                accept_same=accept_same,
                exclude_dirs=exclude_dirs,
            )
            if found is not None:
                return found
        return None

    def _scan_tier(
        self,
        tier: str,
        app_data_root: Path,
        targets: list[ScanTarget],
        current_version: SemanticVersion,
        **kwargs: Any,
    ) -> ResolvedSettingsFile | None:
        logger.debug("Scanning tier %s with %d target(s)", tier, len(targets))
        found = self._scan(app_data_root, targets, current_version, **kwargs)
        if found is not None:
            logger.info("Tier %s matched %s (version %s)", tier, found.path, found.version)
        return found
