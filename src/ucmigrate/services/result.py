"""ServiceResult and ServiceError — the top-level migration contract.

INVARIANT: Every public service method returns ServiceResult.
Structural failures become ``ok=False`` with a ServiceError; per-field
skips become ``warnings`` on an otherwise successful result.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ucmigrate.domain.errors import MigrationError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: MigrationError, **detail: Any) -> ServiceError:
        """Build an error payload from a structural migration exception."""
        return cls(code=exc.code, message=str(exc), detail=detail)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"migrate"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
