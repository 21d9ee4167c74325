"""Meter API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tavrezsi.api.dependencies import get_scope
from tavrezsi.core.database import get_db
from tavrezsi.schemas.meter import MeterCreate, MeterResponse
from tavrezsi.schemas.reading import ReadingResponse
from tavrezsi.services import meter as meter_service
from tavrezsi.services.access import AccessScope

router = APIRouter(prefix="/meters", tags=["meters"])


@router.get("", response_model=list[MeterResponse])
def list_meters(
    property_id: int | None = None,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """List meters visible to the caller, optionally for one property."""
    return meter_service.list_meters(db, scope, property_id)


@router.post("", response_model=MeterResponse, status_code=status.HTTP_201_CREATED)
def create_meter(
    meter_data: MeterCreate,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """Create a meter in a property."""
    return meter_service.create_meter(db, scope, meter_data)


@router.get("/{meter_id}", response_model=MeterResponse)
def get_meter(
    meter_id: int,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """Get a meter by ID."""
    return meter_service.get_meter(db, scope, meter_id)


@router.get("/{meter_id}/latest-reading", response_model=ReadingResponse | None)
def get_latest_reading(
    meter_id: int,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """Get the most recent reading of a meter."""
    return meter_service.get_latest_reading(db, scope, meter_id)


@router.delete("/{meter_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meter(
    meter_id: int,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
) -> None:
    """Delete a meter and its readings."""
    meter_service.delete_meter(db, scope, meter_id)
