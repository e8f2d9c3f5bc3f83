"""
Visitor model: a person registered to visit a department.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, BigIntPK, ScopedMixin

if TYPE_CHECKING:
    from .organization import Department


class Visitor(AuditMixin, ScopedMixin, Base):
    """
    Visitor registered by an organization.
    Scoped by organization and by receiving department.
    """

    __tablename__ = "visitor"
    __scope_fields__ = {"organization": "organization_id", "department": "department_id"}

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        ForeignKey("organization.id"), nullable=False, index=True
    )
    department_id: Mapped[int] = mapped_column(
        ForeignKey("department.id"), nullable=False, index=True
    )
    first_name: Mapped[str] = mapped_column(String(80), nullable=False)
    last_name: Mapped[str] = mapped_column(String(80), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(40))
    company: Mapped[Optional[str]] = mapped_column(String(120))
    purpose: Mapped[Optional[str]] = mapped_column(Text)

    department: Mapped["Department"] = relationship(back_populates="visitors")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
