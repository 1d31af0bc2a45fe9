"""Pydantic configuration models with code-baked defaults.

:class:`MigrationOptions` is the explicit configuration structure handed
to the top of the migration pipeline. Every field is optional; the
defaults reproduce a plain upgrade with no renames.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ucmigrate.domain.identity import Identity
from ucmigrate.infrastructure.locator import ConfigScope


class MigrationOptions(BaseModel):
    """Knobs for one migration, frozen after construction."""

    model_config = {"frozen": True}

    accept_higher: bool = Field(
        default=False,
        description=(
            "Also consider settings saved by higher application versions. "
            "Useful when downgrading."
        ),
    )
    previous_identities: tuple[Identity, ...] = Field(
        default=(),
        description=(
            "Identities the application was known by before a rename of its "
            "root group or assembly; their settings trees are searched too."
        ),
    )
    debugging: bool = Field(
        default=False,
        description=(
            "Running under an attached debugger. Enables the search of legacy "
            "debug-host directory names (``.vshost.exe``)."
        ),
    )
    scope: ConfigScope = Field(
        default=ConfigScope.ROAMING_AND_LOCAL,
        description="User-level configuration scope used to locate the current settings file.",
    )
