"""Four-component application versions (``major.minor.build.revision``).

Version directory names follow the host platform's version grammar:
two to four dot-separated non-negative integers. Missing ``build`` and
``revision`` components compare as ``0``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_VERSION_RE = re.compile(r"([0-9]+)\.([0-9]+)(?:\.([0-9]+))?(?:\.([0-9]+))?\Z", re.ASCII)

# Components are 32-bit signed on the platform that writes the directories.
_MAX_COMPONENT = 2**31 - 1


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """Totally ordered version value parsed from a version directory name."""

    major: int
    minor: int
    build: int = 0
    revision: int = 0

    def __post_init__(self) -> None:
        for part in (self.major, self.minor, self.build, self.revision):
            if part < 0 or part > _MAX_COMPONENT:
                msg = f"Version component out of range: {part}"
                raise ValueError(msg)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}.{self.revision}"

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse *text*, raising ``ValueError`` if it is not a version."""
        match = _VERSION_RE.match(text)
        if match is None:
            msg = f"Not a valid version: {text!r}"
            raise ValueError(msg)
        parts = [int(g) if g is not None else 0 for g in match.groups()]
        return cls(*parts)

    @classmethod
    def try_parse(cls, text: str) -> SemanticVersion | None:
        """Parse *text*, returning None instead of raising."""
        try:
            return cls.parse(text)
        except ValueError:
            return None
