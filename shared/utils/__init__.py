"""
Utilities module: Exceptions, scope/context, pagination, schemas.
"""

from shared.utils.exceptions import (
    AppException,
    ValidationError,
    ForbiddenError,
    NotFoundError,
    BusinessRuleViolation,
    DuplicateEntityError,
    DatabaseError,
)
from shared.utils.context import DataScope, UserContext
from shared.utils.pagination import (
    PaginationRequest,
    PageOptions,
    PaginationResult,
    PaginationInfo,
)
from shared.utils.schemas import StandardApiResponse, ErrorResponse

__all__ = [
    # exceptions
    "AppException",
    "ValidationError",
    "ForbiddenError",
    "NotFoundError",
    "BusinessRuleViolation",
    "DuplicateEntityError",
    "DatabaseError",
    # context
    "DataScope",
    "UserContext",
    # pagination
    "PaginationRequest",
    "PageOptions",
    "PaginationResult",
    "PaginationInfo",
    # schemas
    "StandardApiResponse",
    "ErrorResponse",
]
