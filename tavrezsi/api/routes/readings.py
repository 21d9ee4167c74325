"""Reading routes for ledger operations."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tavrezsi.api.dependencies import get_scope
from tavrezsi.core.database import get_db
from tavrezsi.schemas.reading import ReadingCreate, ReadingResponse
from tavrezsi.services import reading as reading_service
from tavrezsi.services.access import AccessScope

router = APIRouter(prefix="/readings", tags=["readings"])


@router.get("", response_model=list[ReadingResponse])
def list_readings(
    meter_id: int | None = None,
    limit: int | None = Query(None, ge=1, le=1000),
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """List readings visible to the caller, newest first."""
    return reading_service.list_readings(db, scope, meter_id, limit)


@router.post("", response_model=ReadingResponse, status_code=status.HTTP_201_CREATED)
def create_reading(
    reading_data: ReadingCreate,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """Record a meter reading."""
    return reading_service.create_reading(db, scope, reading_data)
