"""
Domain Services - per-entity configuration of the generic CRUD service.

Each module supplies the transforms, filters, scope and hooks for one
entity and a composition function wiring repository, validator and
logger into a CRUDService.

Structure:
    Router (generic controller)
        ↓
    CRUDService + entity CRUDConfig  ← YOU ARE HERE
        ↓
    Repository (scoped data access)
        ↓
    Model (entity)
"""

from .organization_service import build_organization_service, get_organization_service
from .visitor_service import build_visitor_service, get_visitor_service

__all__ = [
    "build_organization_service",
    "get_organization_service",
    "build_visitor_service",
    "get_visitor_service",
]
