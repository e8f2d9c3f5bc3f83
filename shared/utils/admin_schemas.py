"""
Pydantic schemas for the dashboard entities.
Centralized here so services and routers both import them without cycles.

Create/Update schemas reject unknown fields; the CRUD validator turns
their errors into a ValidationError listing the offending fields.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _reject_null(value):
    """Omitting a required column on update is fine, nulling it is not."""
    if value is None:
        raise ValueError("must not be null")
    return value


# =============================================================================
# Organization Schemas
# =============================================================================


class OrganizationOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None


class OrganizationCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=120)
    slug: str = Field(min_length=1, max_length=80, pattern=SLUG_PATTERN)
    description: str | None = None


class OrganizationUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=120)
    slug: str | None = Field(default=None, min_length=1, max_length=80, pattern=SLUG_PATTERN)
    description: str | None = None

    @field_validator("name", "slug")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


# =============================================================================
# Department Schemas
# =============================================================================


class DepartmentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    organization_id: int
    name: str


# =============================================================================
# Visitor Schemas
# =============================================================================


class VisitorOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    organization_id: int
    department_id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str | None = None
    company: str | None = None
    purpose: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None
    created_by: str | None = None
    department: DepartmentSummary | None = None


class VisitorCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    # Defaults to the caller's organization; required for SUPER_ADMIN
    organization_id: int | None = None
    department_id: int
    first_name: str = Field(min_length=1, max_length=80)
    last_name: str = Field(min_length=1, max_length=80)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    phone: str | None = Field(default=None, max_length=40)
    company: str | None = Field(default=None, max_length=120)
    purpose: str | None = None


class VisitorUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    department_id: int | None = None
    first_name: str | None = Field(default=None, min_length=1, max_length=80)
    last_name: str | None = Field(default=None, min_length=1, max_length=80)
    email: str | None = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    phone: str | None = Field(default=None, max_length=40)
    company: str | None = Field(default=None, max_length=120)
    purpose: str | None = None

    @field_validator("department_id", "first_name", "last_name", "email")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)
