"""ServiceResult and ServiceError: the envelope the adapters emit.

The registry itself returns raw hub values and raises typed errors.
The CLI and MCP adapters wrap both outcomes in a ServiceResult so an
agent always receives the same top-level shape.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from hactl.errors import HactlError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type of an invoked operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"ha_light_on"``).
        data: Decoded hub response (JSON value, raw text, or ``{}``).
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: Any = None
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def success(cls, op: str, data: Any) -> ServiceResult:
        return cls(ok=True, op=op, data=data)

    @classmethod
    def failure(cls, op: str, exc: HactlError) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=exc.code, message=exc.message, detail=exc.details),
        )
