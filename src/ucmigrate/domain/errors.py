"""Structural error taxonomy.

Only structural problems raise: bad identity construction, a missing
settings file, an unparsable document. Per-entry problems during
export/apply are reported as warnings, and "no prior settings found"
is a plain ``None`` / ``found=False`` result.

Each class carries a ``code`` that the service layer copies into
:class:`~ucmigrate.services.result.ServiceError`.
"""

from __future__ import annotations

from typing import ClassVar


class MigrationError(Exception):
    """Base class for all structural migration failures."""

    code: ClassVar[str] = "MIGRATION_ERROR"


class InvalidArgumentError(MigrationError, ValueError):
    """A required identity, path, or collaborator is missing or empty."""

    code: ClassVar[str] = "INVALID_ARGUMENT"


class MalformedDirectoryNameError(MigrationError, ValueError):
    """A directory name violates the ``{name}_Url_{hash}`` convention."""

    code: ClassVar[str] = "MALFORMED_DIRECTORY_NAME"


class InvalidIdentityError(MigrationError, ValueError):
    """A derived assembly bare name is empty."""

    code: ClassVar[str] = "INVALID_IDENTITY"


class SettingsFileNotFoundError(MigrationError, FileNotFoundError):
    """The settings file expected at transfer time does not exist."""

    code: ClassVar[str] = "FILE_NOT_FOUND"


class MalformedDocumentError(MigrationError, ValueError):
    """The settings file cannot be parsed as XML."""

    code: ClassVar[str] = "MALFORMED_DOCUMENT"
