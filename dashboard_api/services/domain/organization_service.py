"""
Organization Service.

Organizations are the tenants themselves. Their scope column is the
primary key, so an ADMIN only ever sees (and may edit) their own row.

Business rules:
- Only SUPER_ADMIN creates or deletes organizations
- Only management roles update them
- Slugs are unique across all organizations, deleted ones included
"""

from __future__ import annotations

from typing import Any, Mapping

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from dashboard_api.models import Organization
from dashboard_api.services.crud.repository import SQLAlchemyRepository
from dashboard_api.services.crud.service import CRUDConfig, CRUDService, Operation
from dashboard_api.services.crud.validation import PydanticValidator
from shared.config.constants import MANAGEMENT_ROLES, Roles
from shared.config.logging import get_logger
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import OrganizationCreate, OrganizationUpdate
from shared.utils.context import DataScope, UserContext
from shared.utils.exceptions import DuplicateEntityError, ForbiddenError
from shared.utils.pagination import PaginationRequest

ENTITY_NAME = "Organization"


def get_data_scope(user: UserContext) -> DataScope:
    return DataScope.from_user(user, include_departments=False)


def build_filters(query: PaginationRequest, user: UserContext) -> dict[str, Any]:
    params = query.filters
    filters: dict[str, Any] = {}
    if params.get("search"):
        filters["name"] = {"contains": params["search"]}
    if params.get("slug"):
        filters["slug"] = params["slug"]
    return filters


def transform_create_dto(data: dict[str, Any], user: UserContext) -> dict[str, Any]:
    return {**data, "created_by": user.username}


def transform_update_dto(data: dict[str, Any], user: UserContext) -> dict[str, Any]:
    return {**data, "updated_by": user.username}


def get_include_options(user: UserContext) -> None:
    return None


def organization_rules(db: Session):
    """Business rules bound to a session."""

    def validate_business_rules(
        data: Mapping[str, Any] | None,
        user: UserContext,
        operation: Operation,
        existing: Organization | None,
    ) -> None:
        if operation in ("create", "delete") and user.role != Roles.SUPER_ADMIN:
            raise ForbiddenError(f"{operation} organizations", role=user.role)
        if operation == "update" and user.role not in MANAGEMENT_ROLES:
            raise ForbiddenError("update organizations", role=user.role)

        slug = (data or {}).get("slug")
        if slug is None:
            return

        query = select(Organization.id).where(Organization.slug == slug)
        if existing is not None:
            query = query.where(Organization.id != existing.id)
        if db.scalar(query) is not None:
            raise DuplicateEntityError(ENTITY_NAME, slug)

    return validate_business_rules


def build_organization_service(db: Session) -> CRUDService:
    return CRUDService(
        repository=SQLAlchemyRepository(Organization, db, entity_name=ENTITY_NAME),
        config=CRUDConfig(
            entity_name=ENTITY_NAME,
            transform_create_dto=transform_create_dto,
            transform_update_dto=transform_update_dto,
            build_filters=build_filters,
            get_data_scope=get_data_scope,
            get_include_options=get_include_options,
            validate_business_rules=organization_rules(db),
        ),
        validator=PydanticValidator(OrganizationCreate, OrganizationUpdate),
        logger=get_logger("dashboard_api.organizations"),
    )


def get_organization_service(db: Session = Depends(get_db)) -> CRUDService:
    """FastAPI dependency."""
    return build_organization_service(db)
