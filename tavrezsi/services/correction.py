"""Correction request workflow.

A request starts ``pending`` and is resolved exactly once by an admin to
``approved`` or ``rejected``. Approval appends a manual reading carrying the
requested value in the same transaction as the status change.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from tavrezsi.core.database import transaction
from tavrezsi.core.exceptions import ConflictError, NotFoundError, ValidationError
from tavrezsi.models.correction_request import CorrectionRequest
from tavrezsi.models.enums import CorrectionStatus, UserRole
from tavrezsi.models.reading import Reading
from tavrezsi.schemas.correction_request import CorrectionRequestCreate
from tavrezsi.services.access import (
    AccessScope,
    require_admin,
    require_meter_access,
    require_roles,
    scoped_correction_requests,
)

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = (CorrectionStatus.APPROVED, CorrectionStatus.REJECTED)


def list_correction_requests(
    db: Session,
    scope: AccessScope,
    status: CorrectionStatus | None = None,
) -> list[CorrectionRequest]:
    """List correction requests visible to the caller, newest first."""
    query = scoped_correction_requests(db, scope)
    if status is not None:
        query = query.filter(CorrectionRequest.status == status)
    return query.order_by(CorrectionRequest.created_at.desc(), CorrectionRequest.id.desc()).all()


def get_correction_request(db: Session, request_id: int) -> CorrectionRequest:
    """Get a correction request by ID."""
    request = db.get(CorrectionRequest, request_id)
    if not request:
        raise NotFoundError("Correction request not found")
    return request


def create_correction_request(
    db: Session,
    scope: AccessScope,
    request_data: CorrectionRequestCreate,
) -> CorrectionRequest:
    """File a correction request for a meter the caller may access."""
    require_roles(
        scope,
        UserRole.ADMIN,
        UserRole.TENANT,
        detail="You don't have permission to submit correction requests",
    )
    meter = require_meter_access(db, scope, request_data.meter_id)

    request = CorrectionRequest(
        meter_id=meter.id,
        requested_reading=request_data.requested_reading,
        reason=request_data.reason,
        requested_by_id=scope.user_id,
        status=CorrectionStatus.PENDING,
    )
    with transaction(db):
        db.add(request)
    db.refresh(request)

    logger.info("Correction request id=%s filed for meter id=%s", request.id, meter.id)
    return request


def resolve_correction_request(
    db: Session,
    scope: AccessScope,
    request_id: int,
    status: CorrectionStatus,
) -> CorrectionRequest:
    """Approve or reject a pending correction request. Admin only.

    The status change only applies while the row is still pending, so two
    concurrent resolutions cannot both succeed; the loser gets a ConflictError
    and the winner's effects stay untouched.
    """
    require_admin(scope, "Only admins can resolve correction requests")
    if status not in TERMINAL_STATUSES:
        raise ValidationError("Invalid status")

    request = get_correction_request(db, request_id)
    if request.status != CorrectionStatus.PENDING:
        raise ConflictError(
            f"Correction request is already {CorrectionStatus(request.status).value}"
        )

    with transaction(db):
        updated = (
            db.query(CorrectionRequest)
            .filter(
                CorrectionRequest.id == request_id,
                CorrectionRequest.status == CorrectionStatus.PENDING,
            )
            .update(
                {
                    CorrectionRequest.status: status,
                    CorrectionRequest.resolved_at: datetime.now(UTC),
                    CorrectionRequest.resolved_by_id: scope.user_id,
                },
                synchronize_session=False,
            )
        )
        if updated == 0:
            raise ConflictError("Correction request was already resolved")

        if status == CorrectionStatus.APPROVED:
            db.add(
                Reading(
                    meter_id=request.meter_id,
                    reading=request.requested_reading,
                    is_iot=False,
                    submitted_by_id=scope.user_id,
                )
            )

    db.refresh(request)
    logger.info(
        "Correction request id=%s %s by user id=%s",
        request.id,
        CorrectionStatus(request.status).value,
        scope.user_id,
    )
    return request
