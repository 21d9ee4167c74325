"""PropertyTenant Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, model_validator

from tavrezsi.models.enums import UserRole


class PropertyTenantCreate(BaseModel):
    """Schema for adding a tenant to a property.

    Give ``email`` to invite someone (creating an account when needed), or
    ``tenant_id`` to attach an existing tenant account directly.
    """

    property_id: int
    email: EmailStr | None = None
    tenant_id: int | None = None
    name: str | None = None

    @model_validator(mode="after")
    def check_exactly_one_target(self) -> "PropertyTenantCreate":
        """Ensure exactly one of email or tenant_id is provided."""
        if (self.email is None) == (self.tenant_id is None):
            raise ValueError("Provide exactly one of 'email' or 'tenant_id'")
        return self


class TenantSummary(BaseModel):
    """Public fields of the tenant user in a tenancy listing."""

    id: int
    username: str
    email: str
    name: str
    role: UserRole
    is_active: bool

    model_config = {"from_attributes": True}


class PropertyTenantResponse(BaseModel):
    """Schema for a tenancy row."""

    id: int
    property_id: int
    tenant_id: int
    start_date: datetime
    end_date: datetime | None
    is_active: bool

    model_config = {"from_attributes": True}


class TenantWithDetails(PropertyTenantResponse):
    """Tenancy row joined with its tenant's details."""

    tenant: TenantSummary | None
