"""
Generic CRUD router.

Binds the five HTTP verbs to a CRUDService and shapes every result
through the entity's ResponseTransformer. Routers stay thin: scoping,
validation and business rules all live in the service.

Usage:
    from dashboard_api.routers._common.crud import build_crud_router

    router = build_crud_router(
        prefix="/visitors",
        tag="visitors",
        get_service=get_visitor_service,
        transformer=ResponseTransformer(VisitorOutput, "/api/visitors"),
    )
"""

from typing import Any, Callable

from fastapi import APIRouter, Body, Depends, Request, status

from dashboard_api.services.crud import CRUDService, ResponseTransformer
from shared.security.auth import current_user_context
from shared.utils.context import UserContext
from shared.utils.exceptions import NotFoundError
from shared.utils.pagination import PaginationRequest
from shared.utils.schemas import StandardApiResponse


def build_crud_router(
    *,
    prefix: str,
    tag: str,
    get_service: Callable[..., CRUDService],
    transformer: ResponseTransformer,
    current_user: Callable[..., UserContext] = current_user_context,
) -> APIRouter:
    """
    Build an APIRouter exposing create/list/get/update/delete for one entity.

    `get_service` and `current_user` are FastAPI dependencies, so tests can
    replace either through `app.dependency_overrides`.
    """
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.post(
        "",
        response_model=transformer.response_model,
        status_code=status.HTTP_201_CREATED,
    )
    def create_entity(
        body: dict[str, Any] = Body(...),
        service: CRUDService = Depends(get_service),
        user: UserContext = Depends(current_user),
    ):
        return transformer.to_response(service.create(body, user))

    @router.get("", response_model=transformer.list_response_model)
    def list_entities(
        request: Request,
        service: CRUDService = Depends(get_service),
        user: UserContext = Depends(current_user),
    ):
        """Query: page, limit, sort, order plus entity-specific filters."""
        query = PaginationRequest.from_params(request.query_params)
        data, pagination = service.find_all_with_pagination(query, user)
        return transformer.to_paginated_response(data, pagination)

    @router.get("/{entity_id}", response_model=transformer.response_model)
    def get_entity(
        entity_id: int,
        service: CRUDService = Depends(get_service),
        user: UserContext = Depends(current_user),
    ):
        entity = service.find_one(entity_id, user)
        if entity is None:
            raise NotFoundError(service.entity_name, entity_id)
        return transformer.to_response(entity)

    @router.put("/{entity_id}", response_model=transformer.response_model)
    def update_entity(
        entity_id: int,
        body: dict[str, Any] = Body(...),
        service: CRUDService = Depends(get_service),
        user: UserContext = Depends(current_user),
    ):
        return transformer.to_response(service.update(entity_id, body, user))

    @router.delete(
        "/{entity_id}",
        response_model=StandardApiResponse[None],
        response_model_exclude_none=True,
    )
    def delete_entity(
        entity_id: int,
        service: CRUDService = Depends(get_service),
        user: UserContext = Depends(current_user),
    ):
        service.remove(entity_id, user)
        return transformer.to_deleted_response()

    return router
