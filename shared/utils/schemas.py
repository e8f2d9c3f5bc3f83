"""
Shared Pydantic schemas used across the application.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from shared.utils.pagination import PaginationInfo

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Response Envelope
# =============================================================================


class StandardApiResponse(BaseModel, Generic[T]):
    """
    Envelope wrapped around every response body.

    Successful entity responses always carry `data`; the delete
    acknowledgement and error responses carry none.
    """

    success: bool
    message: str
    data: T | None = None
    pagination: PaginationInfo | None = None
    timestamp: datetime = Field(default_factory=utc_now)
    path: str | None = None


class ErrorResponse(StandardApiResponse[None]):
    """Envelope for failures, rendered by the exception handlers."""

    success: bool = False
    errors: list[str] | None = None


# =============================================================================
# Health
# =============================================================================


class HealthResponse(BaseModel):
    """Liveness/readiness payload."""

    status: str
    database: str
