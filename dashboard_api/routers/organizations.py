"""
Organization endpoints.
"""

from dashboard_api.routers._common.crud import build_crud_router
from dashboard_api.services.crud import ResponseTransformer
from dashboard_api.services.domain import get_organization_service
from shared.config.settings import settings
from shared.utils.admin_schemas import OrganizationOutput

PREFIX = "/organizations"

transformer = ResponseTransformer(OrganizationOutput, f"{settings.api_prefix}{PREFIX}")

router = build_crud_router(
    prefix=PREFIX,
    tag="organizations",
    get_service=get_organization_service,
    transformer=transformer,
)
