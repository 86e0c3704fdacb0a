"""Response envelopes of the dashboard REST backend."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ApiEnvelope(BaseModel):
    """``{success, data?, error?}`` wrapper returned by every endpoint."""

    success: bool = False
    data: Any = None
    error: str | None = None
    message: str | None = None
    details: Any = None


class Page(BaseModel):
    """Paginated ``data`` payload of list endpoints."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 0
