"""Property Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field


class PropertyBase(BaseModel):
    """Base property schema."""

    name: str = Field(min_length=1, max_length=100)
    address: str = Field(min_length=1, max_length=255)


class PropertyCreate(PropertyBase):
    """Schema for creating a new property."""

    owner_id: int


class PropertyResponse(PropertyBase):
    """Schema for property response."""

    id: int
    owner_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
