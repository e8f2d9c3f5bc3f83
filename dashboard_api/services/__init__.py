"""
Services module for business logic.

- crud/: Generic scoped CRUD engine (repository, service, validation, transformer)
- domain/: Per-entity configuration of the CRUD engine

Usage:
    from dashboard_api.services.domain import build_visitor_service

    service = build_visitor_service(db)
    visitor = service.find_one(visitor_id, user)
"""
