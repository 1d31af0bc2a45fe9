"""MigrationService — find, export, apply.

Pipeline: RESOLVE → EXPORT → APPLY → REPORT

This is the only operation that mutates the caller's settings store.
When resolution finds nothing the store is left untouched and the result
reports ``found=False``; that is the normal first-install outcome, not
an error.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ucmigrate.config.models import MigrationOptions
from ucmigrate.domain.errors import InvalidArgumentError, MigrationError
from ucmigrate.domain.identity import Identity
from ucmigrate.domain.versions import SemanticVersion
from ucmigrate.infrastructure.locator import PlatformConfigLocator, current_settings_context
from ucmigrate.infrastructure.scanner import ResolvedSettingsFile
from ucmigrate.infrastructure.stores import SettingsStore
from ucmigrate.services.resolution import SettingsResolver
from ucmigrate.services.result import ServiceError, ServiceResult
from ucmigrate.services.transfer import apply_settings, export_settings

logger = logging.getLogger(__name__)


def _stage_error(stage: str, exc: Exception, **detail: Any) -> ServiceError:
    return ServiceError(
        code=f"{stage}_FAILED",
        message=f"Failed to {stage.lower()} settings: {exc}",
        detail=detail,
    )


def _resolved_data(resolved: ResolvedSettingsFile | None) -> dict[str, Any]:
    if resolved is None:
        return {"found": False, "path": None, "version": None}
    return {
        "found": True,
        "path": str(resolved.path),
        "version": str(resolved.version),
        "created_at": resolved.created_at.isoformat(),
    }


class MigrationService:
    """Composes resolution and transfer into a single migration.

    Args:
        app_data_root: Root of the per-user settings tree. Required by
            :meth:`find_latest` and :meth:`migrate` unless a *locator* is
            given, in which case it is derived from the current path.
        locator: Source of the current settings file path.
        resolver: Resolution policy, injectable for tests.
    """

    def __init__(
        self,
        app_data_root: Path | str | None = None,
        *,
        locator: PlatformConfigLocator | None = None,
        resolver: SettingsResolver | None = None,
    ) -> None:
        self._app_data_root = Path(app_data_root) if app_data_root else None
        self._locator = locator
        self._resolver = resolver or SettingsResolver()

    def _root_for(self, options: MigrationOptions) -> Path:
        if self._app_data_root is not None:
            return self._app_data_root
        if self._locator is None:
            msg = "Either 'app_data_root' or 'locator' must be provided"
            raise InvalidArgumentError(msg)
        path = self._locator.settings_path(options.scope)
        return current_settings_context(path, debugging=options.debugging).app_data_root

    def find_latest(
        self,
        current_version: SemanticVersion,
        current_identity: Identity,
        options: MigrationOptions | None = None,
    ) -> ServiceResult:
        """Locate the best prior settings file without touching any store."""
        op = "find_latest"
        options = options or MigrationOptions()
        try:
            resolved = self._resolver.resolve(
                current_version,
                current_identity,
                self._root_for(options),
                options,
            )
        except MigrationError as exc:
            return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))
        except Exception as exc:
            return ServiceResult(ok=False, op=op, error=_stage_error("RESOLVE", exc))
        return ServiceResult(ok=True, op=op, data=_resolved_data(resolved))

    def migrate(
        self,
        current_version: SemanticVersion,
        current_identity: Identity,
        store: SettingsStore,
        options: MigrationOptions | None = None,
    ) -> ServiceResult:
        """RESOLVE → EXPORT → APPLY → REPORT.

        Export and apply always both run once a file is found, even when
        the export yields no fields.

        Failures outside the error taxonomy are reported as
        ``RESOLVE_FAILED``, ``EXPORT_FAILED`` or ``APPLY_FAILED``.
        """
        op = "migrate"
        options = options or MigrationOptions()
        if store is None:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code=InvalidArgumentError.code,
                    message="'store' must not be None",
                ),
            )

        # RESOLVE
        try:
            resolved = self._resolver.resolve(
                current_version,
                current_identity,
                self._root_for(options),
                options,
            )
        except MigrationError as exc:
            return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))
        except Exception as exc:
            return ServiceResult(ok=False, op=op, error=_stage_error("RESOLVE", exc))

        if resolved is None:
            return ServiceResult(ok=True, op=op, data=_resolved_data(None) | {"applied": []})

        # EXPORT
        try:
            exported = export_settings(resolved.path, store)
        except MigrationError as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError.from_exception(exc, path=str(resolved.path)),
            )
        except Exception as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=_stage_error("EXPORT", exc, path=str(resolved.path)),
            )

        # APPLY
        try:
            applied = apply_settings(exported.fields, store)
        except Exception as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=_stage_error("APPLY", exc, path=str(resolved.path)),
            )

        # REPORT
        logger.info(
            "Migrated %d setting(s) from %s (version %s)",
            len(applied.fields),
            resolved.path,
            resolved.version,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=_resolved_data(resolved)
            | {
                "exported": sorted(exported.fields),
                "applied": sorted(applied.fields),
            },
            warnings=[*exported.warnings, *applied.warnings],
        )

    def migrate_current(
        self,
        store: SettingsStore,
        options: MigrationOptions | None = None,
    ) -> ServiceResult:
        """Migrate using the identity and version of the current settings path."""
        op = "migrate"
        options = options or MigrationOptions()
        if self._locator is None:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code=InvalidArgumentError.code,
                    message="'locator' is required to derive the current settings context",
                ),
            )
        try:
            context = current_settings_context(
                self._locator.settings_path(options.scope),
                debugging=options.debugging,
            )
        except MigrationError as exc:
            return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))
        except Exception as exc:
            return ServiceResult(ok=False, op=op, error=_stage_error("LOCATE", exc))

        service = MigrationService(context.app_data_root, resolver=self._resolver)
        return service.migrate(context.version, context.identity, store, options)


def migrate_settings(
    current_version: SemanticVersion,
    current_identity: Identity,
    store: SettingsStore,
    app_data_root: Path | str,
    options: MigrationOptions | None = None,
    *,
    resolver: SettingsResolver | None = None,
) -> bool:
    """Boolean form of :meth:`MigrationService.migrate`.

    Returns whether a prior settings file was found (and applied).
    Structural failures raise instead of being folded into a result.
    """
    if store is None:
        msg = "'store' must not be None"
        raise InvalidArgumentError(msg)
    resolved = (resolver or SettingsResolver()).resolve(
        current_version,
        current_identity,
        Path(app_data_root),
        options or MigrationOptions(),
    )
    if resolved is None:
        return False
    exported = export_settings(resolved.path, store)
    apply_settings(exported.fields, store)
    return True
