"""
Visitor endpoints.

List filters: department_id, company, search (first name, last name or email).
"""

from dashboard_api.routers._common.crud import build_crud_router
from dashboard_api.services.crud import ResponseTransformer
from dashboard_api.services.domain import get_visitor_service
from shared.config.settings import settings
from shared.utils.admin_schemas import VisitorOutput

PREFIX = "/visitors"

transformer = ResponseTransformer(VisitorOutput, f"{settings.api_prefix}{PREFIX}")

router = build_crud_router(
    prefix=PREFIX,
    tag="visitors",
    get_service=get_visitor_service,
    transformer=transformer,
)
