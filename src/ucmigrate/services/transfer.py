"""Field-level transfer between a settings file and a settings store.

Export reads raw entries and coerces each to the store's declared type;
apply assigns the coerced values back by name.

INVARIANT: One bad field never aborts a transfer. Unknown names and
coercion or assignment failures are logged, recorded as warnings, and
skipped. Only structural problems raise.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import PydanticSchemaGenerationError, ValidationError

from ucmigrate.domain.errors import InvalidArgumentError
from ucmigrate.domain.naming import SETTINGS_FILENAME
from ucmigrate.infrastructure.settings_file import read_raw_settings
from ucmigrate.infrastructure.stores import SettingsStore, type_adapter_for

logger = logging.getLogger(__name__)


@dataclass
class TransferReport:
    """Outcome of an export or apply pass.

    Attributes:
        fields: Exported name → coerced value (export), or the names and
            values actually assigned (apply).
        warnings: One message per skipped entry.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def skip(self, message: str) -> None:
        logger.debug(message)
        self.warnings.append(message)


def export_settings(path: Path | str | None, schema: SettingsStore | None) -> TransferReport:
    """Read *path* and coerce its entries to the types declared by *schema*.

    Raises:
        InvalidArgumentError: *path* is empty or not a ``user.config`` file,
            or *schema* is None.
        SettingsFileNotFoundError: *path* does not exist.
        MalformedDocumentError: *path* is not well-formed XML.
    """
    if path is None or not str(path).strip():
        msg = "'path' must not be empty"
        raise InvalidArgumentError(msg)
    path = Path(path)
    if path.name.lower() != SETTINGS_FILENAME:
        msg = f"{str(path)!r} must end with {SETTINGS_FILENAME!r}"
        raise InvalidArgumentError(msg)
    if schema is None:
        msg = "'schema' must not be None"
        raise InvalidArgumentError(msg)

    report = TransferReport()
    for raw in read_raw_settings(path):
        if raw.name is None:
            report.skip(f"Setting node {raw.markup!r} is missing a 'name' attribute")
            continue

        declared = schema.field_type(raw.name)
        if declared is None:
            report.skip(f"Setting {raw.name!r} is not declared by the target schema")
            continue

        try:
            value = type_adapter_for(declared).validate_python(raw.value)
        except ValidationError as exc:
            report.skip(
                f"Failed to export setting {raw.name!r} raw value {raw.value!r} "
                f"as {_type_name(declared)}: {exc.error_count()} validation error(s)"
            )
            continue
        except PydanticSchemaGenerationError:
            report.skip(
                f"Setting {raw.name!r} has type {_type_name(declared)} "
                "which cannot be read from a settings file"
            )
            continue
        report.fields[raw.name] = value

    logger.debug("Exported %d setting(s) from %s", len(report.fields), path)
    return report


def apply_settings(
    fields: Mapping[str, Any] | None,
    schema: SettingsStore | None,
) -> TransferReport:
    """Assign every known field in *fields* onto *schema*.

    Raises:
        InvalidArgumentError: *fields* or *schema* is None.
    """
    if fields is None:
        msg = "'fields' must not be None"
        raise InvalidArgumentError(msg)
    if schema is None:
        msg = "'schema' must not be None"
        raise InvalidArgumentError(msg)

    report = TransferReport()
    for name, value in fields.items():
        if not name:
            report.skip(f"Setting with value {value!r} is missing a name")
            continue

        declared = schema.field_type(name)
        if declared is None:
            report.skip(f"Setting {name!r} is not declared by the target store")
            continue

        try:
            schema.set(name, value)
        except (ValidationError, TypeError, ValueError, KeyError, AttributeError) as exc:
            report.skip(
                f"Failed to apply setting {name!r} value {value!r} "
                f"as {_type_name(declared)}: {exc}"
            )
            continue
        report.fields[name] = value

    logger.debug("Applied %d setting(s)", len(report.fields))
    return report


def _type_name(declared: Any) -> str:
    return getattr(declared, "__name__", None) or repr(declared)
