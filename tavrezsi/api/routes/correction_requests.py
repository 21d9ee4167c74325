"""Correction request routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tavrezsi.api.dependencies import get_scope
from tavrezsi.core.database import get_db
from tavrezsi.models.enums import CorrectionStatus
from tavrezsi.schemas.correction_request import (
    CorrectionRequestCreate,
    CorrectionRequestResolve,
    CorrectionRequestResponse,
)
from tavrezsi.services import correction as correction_service
from tavrezsi.services.access import AccessScope

router = APIRouter(prefix="/correction-requests", tags=["correction-requests"])


@router.get("", response_model=list[CorrectionRequestResponse])
def list_correction_requests(
    status: CorrectionStatus | None = None,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """List correction requests visible to the caller."""
    return correction_service.list_correction_requests(db, scope, status)


@router.post("", response_model=CorrectionRequestResponse, status_code=status.HTTP_201_CREATED)
def create_correction_request(
    request_data: CorrectionRequestCreate,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """File a correction request for a meter."""
    return correction_service.create_correction_request(db, scope, request_data)


@router.patch("/{request_id}", response_model=CorrectionRequestResponse)
def resolve_correction_request(
    request_id: int,
    resolution: CorrectionRequestResolve,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """Approve or reject a pending correction request.

    Approval records the requested value as a new manual reading.
    """
    return correction_service.resolve_correction_request(
        db, scope, request_id, resolution.status
    )
