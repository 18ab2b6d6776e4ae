"""ServiceResult and ServiceError: the contract between services and the CLI.

INVARIANT: every QuoteService operation returns a ServiceResult; use-case
exceptions never reach the command layer.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from quotectl.services.errors import ApplicationError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"calculate"``).
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

    @classmethod
    def failure(
        cls, op: str, code: str, message: str, detail: dict[str, Any] | None = None
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )

    @classmethod
    def from_error(cls, op: str, exc: ApplicationError) -> ServiceResult:
        """Failure result carrying the code, message and detail of *exc*."""
        return cls.failure(op, exc.code, exc.message, exc.detail)
