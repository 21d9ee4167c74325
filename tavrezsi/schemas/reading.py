"""Reading Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field


class ReadingCreate(BaseModel):
    """Schema for submitting a meter reading.

    ``is_iot`` is only honoured for admins; tenant submissions are always
    recorded as manual.
    """

    meter_id: int
    reading: int = Field(ge=0)
    is_iot: bool = False


class ReadingResponse(BaseModel):
    """Schema for reading response."""

    id: int
    meter_id: int
    reading: int
    timestamp: datetime
    is_iot: bool
    submitted_by_id: int | None

    model_config = {"from_attributes": True}
