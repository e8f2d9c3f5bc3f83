"""
Centralized HTTP exceptions for consistent error handling.

Services raise these and let them propagate; the application's exception
handlers log them and render the error envelope.

Usage:
    from shared.utils.exceptions import NotFoundError, ValidationError

    raise NotFoundError("Visitor", visitor_id)
    raise ValidationError("Invalid request body", fields=["email"])
    raise DuplicateEntityError("Organization", "acme")
"""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """
    Base exception for every error raised by the application.

    Keeps structured context next to the HTTP status so the
    exception handler can log it without re-parsing the message.
    """

    log_level: str = "warning"

    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.log_context = log_context


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Invalid request body", fields=["email", "first_name"])
    """

    def __init__(self, detail: str, fields: list[str] | None = None, **log_context: Any):
        self.fields = list(fields or [])
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            fields=self.fields,
            **log_context,
        )


# =============================================================================
# 403 Forbidden Errors
# =============================================================================


class ForbiddenError(AppException):
    """
    Authorization/permission error (403).

    Usage:
        raise ForbiddenError("delete organizations")
    """

    def __init__(self, action: str | None = None, **log_context: Any):
        if action:
            detail = f"Not allowed to {action}"
        else:
            detail = "Access denied"

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            action=action,
            **log_context,
        )


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    The message never says whether the row exists outside the caller's scope.

    Usage:
        raise NotFoundError("Visitor", 123)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 409 Business Rule Errors
# =============================================================================


class BusinessRuleViolation(AppException):
    """
    Entity-specific constraint violated (409).

    Usage:
        raise BusinessRuleViolation("Department does not belong to this organization")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            **log_context,
        )


class DuplicateEntityError(BusinessRuleViolation):
    """Entity with the same unique identifier already exists."""

    def __init__(self, entity: str, identifier: str | None = None, **log_context: Any):
        if identifier:
            detail = f"{entity} with identifier '{identifier}' already exists"
        else:
            detail = f"{entity} already exists"

        super().__init__(detail, entity=entity, identifier=identifier, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """Internal server error (500)."""

    log_level = "error"

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            **log_context,
        )


class DatabaseError(InternalError):
    """Storage operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}. Please try again."
        super().__init__(detail, operation=operation, **log_context)
