"""
Caller identity and tenant boundary carried by every CRUD operation.

A DataScope is the set of predicates a repository ANDs into each query.
A UserContext is the DataScope plus who the caller is; the auth layer
builds it once per request from the bearer token.

Usage:
    from shared.utils.context import DataScope, UserContext

    user = UserContext(sub="7", username="ana", role="ADMIN", organization_id=1)
    scope = DataScope.from_user(user)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from shared.config.constants import DEPARTMENT_SCOPED_ROLES


class DataScope(BaseModel):
    """
    Tenant boundary applied to queries and mutations.

    None on a dimension leaves it unrestricted. An empty department set
    matches no department at all.
    """

    model_config = ConfigDict(frozen=True)

    organization_id: int | None = None
    department_ids: frozenset[int] | None = None

    @property
    def is_unrestricted(self) -> bool:
        return self.organization_id is None and self.department_ids is None

    @classmethod
    def from_user(cls, user: "UserContext", *, include_departments: bool | None = None) -> "DataScope":
        """
        Narrow a user's context down to the scope used for filtering.

        Departments are kept when `include_departments` is True, dropped when
        False, and decided by the user's role when None. The result never holds
        a value the user context did not supply.
        """
        if include_departments is None:
            include_departments = user.role in DEPARTMENT_SCOPED_ROLES

        department_ids = user.department_ids if include_departments else None
        if department_ids is None and include_departments and user.role in DEPARTMENT_SCOPED_ROLES:
            # Department-bound roles without departments see nothing
            department_ids = frozenset()
        return cls(organization_id=user.organization_id, department_ids=department_ids)


class UserContext(DataScope):
    """Authenticated caller. Read-only for the lifetime of a request."""

    sub: str
    username: str
    role: str

    @property
    def user_id(self) -> str:
        return self.sub
