"""
Multi-tenancy models: Organization and Department.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, BigIntPK, ScopedMixin

if TYPE_CHECKING:
    from .visitor import Visitor


class Organization(AuditMixin, ScopedMixin, Base):
    """
    Top-level tenant. Every other entity belongs to exactly one organization.
    The organization's own id is its scope column.
    """

    __tablename__ = "organization"
    __scope_fields__ = {"organization": "id"}

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(80), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    departments: Mapped[list["Department"]] = relationship(back_populates="organization")

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, slug='{self.slug}')>"


class Department(AuditMixin, ScopedMixin, Base):
    """A department inside an organization. Visitors are received by a department."""

    __tablename__ = "department"
    __scope_fields__ = {"organization": "organization_id", "department": "id"}

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        ForeignKey("organization.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    organization: Mapped["Organization"] = relationship(back_populates="departments")
    visitors: Mapped[list["Visitor"]] = relationship(back_populates="department")
