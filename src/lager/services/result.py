"""What an engine operation hands back to the CLI.

INVARIANT: EngineService methods return a ServiceResult and never raise
for an engine or plugin failure. Only the CLI turns ``ok`` into an output
stream and an exit code.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ServiceError(BaseModel):
    """Why an operation failed: a stable ``code`` plus context in ``detail``."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one operation (``plugins``, ``config``, ``fire``, ...).

    ``data`` is filled on success and ``error`` on failure; ``warnings``
    carry non-fatal problems such as plugins that could not be loaded.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        error = ServiceError(code=code, message=message, detail=detail)
        return cls(ok=False, op=op, error=error)
