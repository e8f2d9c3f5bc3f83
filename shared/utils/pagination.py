"""
Page-based pagination shared by every list endpoint.

PaginationRequest is what the caller asks for, PaginationResult is what a
repository hands back, PaginationInfo is the metadata placed in the envelope.
Derived values (total pages, next/prev flags) are always computed from
total/page/limit, never stored.

Usage:
    from shared.utils.pagination import PaginationRequest, PaginationInfo

    query = PaginationRequest.from_params({"page": "2", "limit": "10", "company": "Acme"})
    query.filters  # {"company": "Acme"}

    info = PaginationInfo.from_result(result)
    info.has_next_page
"""

from __future__ import annotations

import math
from typing import Any, Generic, Literal, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic import ValidationError as PydanticValidationError

from shared.config.settings import settings
from shared.utils.exceptions import ValidationError

T = TypeVar("T")


def total_pages_for(total: int, limit: int) -> int:
    """Number of pages needed to hold `total` items, `limit` per page."""
    if limit < 1:
        raise ValueError("limit must be at least 1")
    return math.ceil(total / limit)


class PaginationRequest(BaseModel):
    """
    Page request with optional sorting.

    Any parameter besides page/limit/sort/order is kept as an
    entity-specific filter input and exposed through `filters`.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default_factory=lambda: settings.default_page_size, ge=1)
    sort: str | None = None
    order: Literal["asc", "desc"] | None = None

    @field_validator("limit")
    @classmethod
    def _cap_limit(cls, value: int) -> int:
        if value > settings.max_page_size:
            raise ValueError(f"limit must not exceed {settings.max_page_size}")
        return value

    @field_validator("order", mode="before")
    @classmethod
    def _normalize_order(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value

    @property
    def filters(self) -> dict[str, Any]:
        """Entity-specific filter inputs (the non-pagination parameters)."""
        return dict(self.model_extra or {})

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "PaginationRequest":
        """
        Build a request from raw query parameters.

        Raises:
            ValidationError: listing every invalid parameter.
        """
        cleaned = {k: v for k, v in params.items() if v not in (None, "")}
        try:
            return cls.model_validate(cleaned)
        except PydanticValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            raise ValidationError("Invalid pagination parameters", fields=fields) from e


class PageOptions(BaseModel):
    """Page/limit pair handed to a repository."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(ge=1)
    limit: int = Field(ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationResult(BaseModel, Generic[T]):
    """Raw page returned by a repository."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: list[T]
    total: int = Field(ge=0)
    page: int = Field(ge=1)
    limit: int = Field(ge=1)

    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total, self.limit)


class PaginationInfo(BaseModel):
    """Pagination metadata attached to list responses."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total_items: int = Field(ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total_items, self.limit)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    @classmethod
    def from_result(cls, result: PaginationResult[Any]) -> "PaginationInfo":
        return cls(page=result.page, limit=result.limit, total_items=result.total)
