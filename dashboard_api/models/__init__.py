"""
SQLAlchemy ORM Models Package.

- base: Base class, AuditMixin, ScopedMixin
- organization: Organization, Department
- visitor: Visitor
"""

from .base import Base, AuditMixin, ScopedMixin
from .organization import Organization, Department
from .visitor import Visitor

__all__ = [
    "Base",
    "AuditMixin",
    "ScopedMixin",
    "Organization",
    "Department",
    "Visitor",
]
