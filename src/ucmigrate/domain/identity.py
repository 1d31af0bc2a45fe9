"""Application identities and scan targets.

An :class:`Identity` names where an application's settings live in the
per-user tree: ``{root_group}/{assembly dir}/{version}/user.config``.
A :class:`ScanTarget` is an identity resolved to the directory-name
prefix the scanner matches against.

INVARIANT: Identities are immutable and always hold valid filenames.
"""

from __future__ import annotations

from dataclasses import dataclass

from ucmigrate.domain.errors import InvalidArgumentError
from ucmigrate.domain.naming import extract_bare_name

# Characters the settings platform rejects in a single path segment.
_RESERVED_CHARS = frozenset('<>:"/\\|?*') | frozenset(chr(c) for c in range(32))


def validate_filename(value: str | None, field_name: str) -> str:
    """Return *value* if it is a usable single path segment.

    Raises :class:`InvalidArgumentError` for None, blank, or reserved
    characters.
    """
    if value is None or not value.strip():
        msg = f"{field_name!r} must not be empty"
        raise InvalidArgumentError(msg)
    if any(ch in _RESERVED_CHARS for ch in value):
        msg = f"{field_name!r} value contains invalid filename characters: {value!r}"
        raise InvalidArgumentError(msg)
    return value


@dataclass(frozen=True)
class Identity:
    """Who owns a settings tree.

    Attributes:
        root_group: Top-level per-user directory (company or namespace).
        assembly_bare_name: Program name without extension or hash.
        assembly_dir_hint: Exact observed assembly directory name, enabling
            a direct match instead of a prefix search.
    """

    root_group: str
    assembly_bare_name: str
    assembly_dir_hint: str | None = None

    def __post_init__(self) -> None:
        validate_filename(self.root_group, "root_group")
        validate_filename(self.assembly_bare_name, "assembly_bare_name")
        if self.assembly_dir_hint is not None:
            validate_filename(self.assembly_dir_hint, "assembly_dir_hint")

    @property
    def effective_dir_name(self) -> str:
        """The name assembly directories are matched against."""
        return self.assembly_dir_hint or self.assembly_bare_name

    @classmethod
    def from_assembly_dir(
        cls,
        root_group: str,
        assembly_dir_name: str,
        *,
        debugging: bool = False,
    ) -> Identity:
        """Build an identity from an observed ``{name}_Url_{hash}`` directory.

        With *debugging*, a debug-host ``.vshost.exe`` extension is stripped too.
        """
        validate_filename(assembly_dir_name, "assembly_dir_name")
        bare = extract_bare_name(assembly_dir_name, require_separator=True, debugging=debugging)
        return cls(
            root_group=root_group,
            assembly_bare_name=bare,
            assembly_dir_hint=assembly_dir_name,
        )


@dataclass(frozen=True)
class ScanTarget:
    """A root group plus the assembly directory prefix to look for."""

    root_group: str
    dir_prefix: str

    @classmethod
    def exact(cls, identity: Identity) -> ScanTarget:
        """Target the identity's effective directory name as-is."""
        return cls(root_group=identity.root_group, dir_prefix=identity.effective_dir_name)
