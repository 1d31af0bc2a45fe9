"""Assembly directory naming convention.

The settings platform names each assembly directory
``{assembly}{extension}_Url_{hash}``, for example ``App.exe_Url_3kq0x1``.
The extension reflects how the program was hosted when the directory was
created: ``.exe`` for a release build, ``.vshost.exe`` under the legacy
debugger host, ``.dll`` for a library host, or nothing at all.

The separator and extensions are an on-disk contract shared with the
platform. They are fixed constants, never configuration.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from ucmigrate.domain.errors import InvalidIdentityError, MalformedDirectoryNameError

if TYPE_CHECKING:
    from ucmigrate.domain.identity import Identity

SEPARATOR = "_Url_"
SETTINGS_FILENAME = "user.config"

RELEASE_EXTENSIONS: tuple[str, ...] = (".exe", ".dll")
DEBUG_EXTENSION = ".vshost.exe"


class ExtensionVariant(StrEnum):
    """Historical assembly directory naming variants."""

    NONE = ""
    RELEASE = ".exe"
    DEBUG = ".vshost.exe"


def _strip_suffix_ci(name: str, suffix: str) -> str:
    if name.lower().endswith(suffix.lower()):
        return name[: -len(suffix)]
    return name


def strip_legacy_extension(name: str, *, debugging: bool = False) -> str:
    """Remove one known legacy extension from the tail of *name*.

    The debug host extension is only recognised when *debugging* is set;
    otherwise ``App.vshost.exe`` loses just its ``.exe``.
    """
    if debugging:
        stripped = _strip_suffix_ci(name, DEBUG_EXTENSION)
        if stripped != name:
            return stripped
    for ext in RELEASE_EXTENSIONS:
        stripped = _strip_suffix_ci(name, ext)
        if stripped != name:
            return stripped
    return name


def extract_bare_name(
    dir_name: str,
    *,
    require_separator: bool,
    debugging: bool = False,
) -> str:
    """Extract the bare assembly name from an assembly directory name.

    Locates the rightmost ``_Url_`` (case-insensitive). Without one, the
    whole string is the name unless *require_separator* is set.

    Raises:
        MalformedDirectoryNameError: separator missing while required, at
            index 0, or with no hash characters after it.
        InvalidIdentityError: nothing is left once the extension is removed.
    """
    index = dir_name.lower().rfind(SEPARATOR.lower())
    if index < 0:
        if require_separator:
            msg = f"{dir_name!r} does not contain the {SEPARATOR!r} separator"
            raise MalformedDirectoryNameError(msg)
        name = dir_name
    elif index == 0:
        msg = f"{dir_name!r} assembly name must be at least one character long"
        raise MalformedDirectoryNameError(msg)
    elif index + len(SEPARATOR) >= len(dir_name):
        msg = f"{dir_name!r} assembly hash must be at least one character long"
        raise MalformedDirectoryNameError(msg)
    else:
        name = dir_name[:index]

    bare = strip_legacy_extension(name, debugging=debugging)
    if not bare.strip():
        msg = f"{dir_name!r} yields an empty assembly name"
        raise InvalidIdentityError(msg)
    return bare


def is_assembly_dir_name(dir_name: str) -> bool:
    """Whether *dir_name* follows the ``{name}_Url_{hash}`` convention."""
    try:
        extract_bare_name(dir_name, require_separator=True)
    except (MalformedDirectoryNameError, InvalidIdentityError):
        return False
    return True


def build_candidate_dir_prefix(identity: Identity, variant: ExtensionVariant) -> str:
    """Directory-name prefix for *identity* under a naming *variant*.

    A bare name that already is a full assembly directory name is used
    unchanged. Otherwise any legacy extension is dropped and the variant's
    extension appended; the hash part is left to prefix matching.
    """
    name = identity.assembly_bare_name
    if is_assembly_dir_name(name):
        return name
    return strip_legacy_extension(name, debugging=True) + variant.value


def matches_prefix(dir_name: str, prefix: str) -> bool:
    """Case-insensitive starts-with, as the platform's file system compares."""
    return dir_name.lower().startswith(prefix.lower())
