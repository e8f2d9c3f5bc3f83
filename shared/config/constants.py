"""
Centralized constants for the backend application.

Usage:
    from shared.config.constants import Roles, DEPARTMENT_SCOPED_ROLES

    if user.role in DEPARTMENT_SCOPED_ROLES:
        ...
"""

from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """User role constants."""

    SUPER_ADMIN: Final[str] = "SUPER_ADMIN"
    ADMIN: Final[str] = "ADMIN"
    DEPARTMENT_LEAD: Final[str] = "DEPARTMENT_LEAD"
    GUARD: Final[str] = "GUARD"
    EMPLOYEE: Final[str] = "EMPLOYEE"

    ALL: Final[list[str]] = [SUPER_ADMIN, ADMIN, DEPARTMENT_LEAD, GUARD, EMPLOYEE]


# Roles whose data visibility stops at their own departments
DEPARTMENT_SCOPED_ROLES: Final[frozenset[str]] = frozenset({Roles.DEPARTMENT_LEAD, Roles.EMPLOYEE})
# Roles allowed to write organization-wide data
MANAGEMENT_ROLES: Final[frozenset[str]] = frozenset({Roles.SUPER_ADMIN, Roles.ADMIN})


# =============================================================================
# Sorting and Messages
# =============================================================================


class SortOrder:
    """Sort direction constants."""

    ASC: Final[str] = "asc"
    DESC: Final[str] = "desc"


DEFAULT_SORT_FIELD: Final[str] = "created_at"
DEFAULT_SORT_ORDER: Final[str] = SortOrder.DESC


class Messages:
    """Envelope messages shared by every entity."""

    OPERATION_COMPLETED: Final[str] = "Operation completed successfully"
    DATA_RETRIEVED: Final[str] = "Data retrieved successfully"
    ENTITY_DELETED: Final[str] = "Entity deleted successfully"
