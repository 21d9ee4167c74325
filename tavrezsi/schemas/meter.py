"""Meter Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from tavrezsi.models.enums import MeterType


class MeterBase(BaseModel):
    """Base meter schema."""

    identifier: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=100)
    type: MeterType
    unit: str = Field(min_length=1, max_length=20)
    property_id: int
    last_certified: datetime | None = None
    next_certification: datetime | None = None


class MeterCreate(MeterBase):
    """Schema for creating a meter."""

    @model_validator(mode="after")
    def check_certification_order(self) -> "MeterCreate":
        """Ensure the next certification does not precede the last one."""
        if (
            self.last_certified is not None
            and self.next_certification is not None
            and self.next_certification < self.last_certified
        ):
            raise ValueError("next_certification must not be earlier than last_certified")
        return self


class MeterResponse(MeterBase):
    """Schema for meter response."""

    id: int
    created_at: datetime

    model_config = {"from_attributes": True}
