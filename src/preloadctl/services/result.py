"""ServiceResult and ServiceError: the service contract.

INVARIANT: All service-layer methods return ServiceResult.
Row violations travel in ``data``; configuration and input defects travel
in ``error``. The two are never mixed.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation ran to completion.
        op: Name of the operation (e.g. ``"verify"``).
        data: Operation-specific payload on success.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry, counts).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Build a failed result carrying a single :class:`ServiceError`."""
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )
