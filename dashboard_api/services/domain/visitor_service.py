"""
Visitor Service.

Visitors belong to an organization and are received by one of its
departments. Department leads and employees only see visitors of their
own departments; every other role sees the whole organization.

Business rules:
- The receiving department must be an active department of the
  visitor's organization
- A visitor email is unique per organization
- Callers bound to an organization cannot register visitors elsewhere
"""

from __future__ import annotations

from typing import Any, Mapping

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from dashboard_api.models import Department, Visitor
from dashboard_api.services.crud.repository import SQLAlchemyRepository
from dashboard_api.services.crud.service import CRUDConfig, CRUDService, Operation
from dashboard_api.services.crud.validation import PydanticValidator
from shared.config.logging import StructuredLogger, get_logger, mask_email
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import VisitorCreate, VisitorUpdate
from shared.utils.context import DataScope, UserContext
from shared.utils.exceptions import (
    BusinessRuleViolation,
    DuplicateEntityError,
    ForbiddenError,
    ValidationError,
)
from shared.utils.pagination import PaginationRequest

ENTITY_NAME = "Visitor"
INCLUDE = ("department",)


def get_data_scope(user: UserContext) -> DataScope:
    # Department restriction follows the role
    return DataScope.from_user(user)


def build_filters(query: PaginationRequest, user: UserContext) -> dict[str, Any]:
    params = query.filters
    filters: dict[str, Any] = {}

    if params.get("department_id"):
        try:
            filters["department_id"] = int(params["department_id"])
        except (TypeError, ValueError) as e:
            raise ValidationError("department_id must be an integer", fields=["department_id"]) from e

    if params.get("company"):
        filters["company"] = {"contains": params["company"]}

    search = params.get("search")
    if search:
        filters["or"] = [
            {"first_name": {"contains": search}},
            {"last_name": {"contains": search}},
            {"email": {"contains": search}},
        ]
    return filters


def transform_create_dto(data: dict[str, Any], user: UserContext) -> dict[str, Any]:
    return {
        **data,
        "organization_id": data.get("organization_id") or user.organization_id,
        "email": data["email"].lower(),
        "created_by": user.username,
    }


def transform_update_dto(data: dict[str, Any], user: UserContext) -> dict[str, Any]:
    result = {**data, "updated_by": user.username}
    if data.get("email"):
        result["email"] = data["email"].lower()
    return result


def get_include_options(user: UserContext) -> list[str]:
    return list(INCLUDE)


def visitor_rules(db: Session):
    """Business rules bound to a session."""

    def ensure_department(department_id: int, organization_id: int) -> None:
        department = db.scalar(
            select(Department.id).where(
                Department.id == department_id,
                Department.organization_id == organization_id,
                Department.is_active.is_(True),
            )
        )
        if department is None:
            raise BusinessRuleViolation(
                "Department does not belong to this organization",
                department_id=department_id,
                organization_id=organization_id,
            )

    def ensure_unique_email(email: str, organization_id: int, exclude_id: int | None = None) -> None:
        query = select(Visitor.id).where(
            func.lower(Visitor.email) == email.lower(),
            Visitor.organization_id == organization_id,
            Visitor.is_active.is_(True),
        )
        if exclude_id is not None:
            query = query.where(Visitor.id != exclude_id)
        if db.scalar(query) is not None:
            raise DuplicateEntityError(ENTITY_NAME, mask_email(email))

    def validate_business_rules(
        data: Mapping[str, Any] | None,
        user: UserContext,
        operation: Operation,
        existing: Visitor | None,
    ) -> None:
        if operation == "delete":
            return

        if operation == "create":
            organization_id = data.get("organization_id") or user.organization_id
            if organization_id is None:
                raise ValidationError("organization_id is required", fields=["organization_id"])
            if user.organization_id is not None and organization_id != user.organization_id:
                raise ForbiddenError("register visitors for another organization")
            ensure_department(data["department_id"], organization_id)
            ensure_unique_email(data["email"], organization_id)
            return

        if data.get("department_id") is not None:
            ensure_department(data["department_id"], existing.organization_id)
        if data.get("email") is not None:
            ensure_unique_email(data["email"], existing.organization_id, exclude_id=existing.id)

    return validate_business_rules


def visitor_events(logger: StructuredLogger):
    """Post-write hooks that record visitor lifecycle events."""

    def after_create(visitor: Visitor, user: UserContext) -> None:
        logger.info(
            "Visitor registered",
            visitor_id=visitor.id,
            department_id=visitor.department_id,
            email=mask_email(visitor.email),
            registered_by=user.username,
        )

    def after_delete(visitor: Visitor, user: UserContext) -> None:
        logger.info(
            "Visitor removed",
            visitor_id=visitor.id,
            department_id=visitor.department_id,
            removed_by=user.username,
        )

    return after_create, after_delete


def build_visitor_service(db: Session) -> CRUDService:
    logger = get_logger("dashboard_api.visitors")
    after_create, after_delete = visitor_events(logger)

    return CRUDService(
        repository=SQLAlchemyRepository(Visitor, db, entity_name=ENTITY_NAME),
        config=CRUDConfig(
            entity_name=ENTITY_NAME,
            transform_create_dto=transform_create_dto,
            transform_update_dto=transform_update_dto,
            build_filters=build_filters,
            get_data_scope=get_data_scope,
            get_include_options=get_include_options,
            validate_business_rules=visitor_rules(db),
            after_create=after_create,
            after_delete=after_delete,
        ),
        validator=PydanticValidator(VisitorCreate, VisitorUpdate),
        logger=logger,
    )


def get_visitor_service(db: Session = Depends(get_db)) -> CRUDService:
    """FastAPI dependency."""
    return build_visitor_service(db)
