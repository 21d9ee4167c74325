"""CorrectionRequest Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from tavrezsi.models.enums import CorrectionStatus


class CorrectionRequestCreate(BaseModel):
    """Schema for filing a correction request."""

    meter_id: int
    requested_reading: int = Field(ge=0)
    reason: str = Field(min_length=1)


class CorrectionRequestResolve(BaseModel):
    """Schema for approving or rejecting a correction request."""

    status: CorrectionStatus

    @field_validator("status")
    @classmethod
    def validate_terminal_status(cls, v: CorrectionStatus) -> CorrectionStatus:
        """Only terminal states can be requested."""
        if v == CorrectionStatus.PENDING:
            raise ValueError("status must be 'approved' or 'rejected'")
        return v


class CorrectionRequestResponse(BaseModel):
    """Schema for correction request response."""

    id: int
    meter_id: int
    requested_reading: int
    requested_by_id: int
    reason: str
    status: CorrectionStatus
    created_at: datetime
    resolved_at: datetime | None
    resolved_by_id: int | None

    model_config = {"from_attributes": True}
