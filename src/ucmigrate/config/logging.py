"""structlog configuration for ucmigrate.

Library modules log through stdlib ``logging.getLogger(__name__)``. An
embedding application calls :func:`configure_logging` (or
:func:`configure_from_settings`) once at startup to route those records
through structlog, and may pass each migration's result to
:func:`log_migration_result` for a structured summary.

Two output modes:
- Human (default): colored console output
- JSON (``log_json=True``): one JSON object per line
"""

from __future__ import annotations

import logging
import sys
from typing import IO, TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from ucmigrate.config.settings import MigratorSettings
    from ucmigrate.services.result import ServiceResult

PACKAGE_LOGGER = "ucmigrate"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: DEBUG level for ``ucmigrate`` loggers, so every skipped
            directory and field is reported. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        stream: Destination, stderr by default.
    """
    out = stream or sys.stderr
    shared = _shared_processors()

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=out.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


def configure_from_settings(settings: MigratorSettings) -> None:
    """Apply the logging flags carried by *settings*."""
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)


def log_migration_result(result: ServiceResult) -> None:
    """Emit one structured event for a migration result.

    Failures log at WARNING with the error code; a successful migration
    logs at INFO, and each skipped field at DEBUG.
    """
    log = structlog.get_logger(f"{PACKAGE_LOGGER}.migration")
    if not result.ok:
        error = result.error
        log.warning(
            "migration.failed",
            op=result.op,
            code=error.code if error else None,
            message=error.message if error else None,
        )
        return

    for warning in result.warnings:
        log.debug("migration.field_skipped", op=result.op, reason=warning)

    log.info(
        "migration.complete",
        op=result.op,
        found=result.data.get("found", False),
        path=result.data.get("path"),
        version=result.data.get("version"),
        applied=len(result.data.get("applied", [])),
        skipped=len(result.warnings),
    )
