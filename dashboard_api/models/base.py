"""
Base class, AuditMixin and ScopedMixin for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, and_, false, true
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.elements import ColumnElement

from shared.utils.context import DataScope

# BIGINT in production, INTEGER on SQLite so primary keys autoincrement
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class AuditMixin:
    """
    Soft delete flag and audit timestamps.

    Fields added:
    - is_active: Soft delete flag (False = deleted, True = active)
    - created_at, updated_at, deleted_at: Audit timestamps
    - created_by, updated_by: Username that created / last modified the row
    """

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=utc_now, nullable=True
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(120))
    updated_by: Mapped[Optional[str]] = mapped_column(String(120))

    def soft_delete(self) -> None:
        """Mark the row as deleted without removing it."""
        self.is_active = False
        self.deleted_at = utc_now()

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        id_val = getattr(self, "id", None)
        active = "active" if self.is_active else "deleted"
        return f"<{class_name}(id={id_val}, {active})>"


class ScopedMixin:
    """
    Declares which columns hold the tenant boundary of a model.

    __scope_fields__ maps a scope dimension ("organization", "department")
    to the column carrying it. A model without a department column simply
    omits that key and is never filtered by department.
    """

    __scope_fields__ = {"organization": "organization_id"}

    @classmethod
    def scope_field(cls, dimension: str) -> str | None:
        return cls.__scope_fields__.get(dimension)

    @classmethod
    def scope_values(cls, scope: DataScope) -> dict[str, Any]:
        """Column name -> allowed value(s) for every restricted dimension."""
        restrictions: dict[str, Any] = {}
        organization_field = cls.scope_field("organization")
        if organization_field and scope.organization_id is not None:
            restrictions[organization_field] = scope.organization_id
        department_field = cls.scope_field("department")
        if department_field and scope.department_ids is not None:
            restrictions[department_field] = scope.department_ids
        return restrictions

    @classmethod
    def scope_criteria(cls, scope: DataScope) -> ColumnElement[bool]:
        """SQL predicate restricting this model to the given scope."""
        predicates = []
        for field_name, allowed in cls.scope_values(scope).items():
            column = getattr(cls, field_name)
            if isinstance(allowed, frozenset):
                predicates.append(column.in_(sorted(allowed)) if allowed else false())
            else:
                predicates.append(column == allowed)
        if not predicates:
            return true()
        return and_(*predicates)
