"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer operations return ServiceResult; domain errors
never escape a service as exceptions. The CLI and any embedding caller
consume this type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from pathctl.domain.errors import PathError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_path_error(cls, exc: PathError) -> ServiceError:
        return cls(code=exc.code.code, message=exc.message, detail=exc.detail())


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"connect"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry, timing).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @property
    def code(self) -> str | None:
        """Error code shortcut (None on success)."""
        return self.error.code if self.error is not None else None
