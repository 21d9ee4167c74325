"""Reading service - append-only ledger operations."""

import logging

from sqlalchemy.orm import Session

from tavrezsi.core.database import transaction
from tavrezsi.models.enums import UserRole
from tavrezsi.models.reading import Reading
from tavrezsi.schemas.reading import ReadingCreate
from tavrezsi.services.access import (
    AccessScope,
    require_meter_access,
    require_roles,
    scoped_readings,
)

logger = logging.getLogger(__name__)


def list_readings(
    db: Session,
    scope: AccessScope,
    meter_id: int | None = None,
    limit: int | None = None,
) -> list[Reading]:
    """List readings visible to the caller, newest first."""
    query = scoped_readings(db, scope)
    if meter_id is not None:
        require_meter_access(db, scope, meter_id)
        query = query.filter(Reading.meter_id == meter_id)

    query = query.order_by(Reading.timestamp.desc(), Reading.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def create_reading(db: Session, scope: AccessScope, reading_data: ReadingCreate) -> Reading:
    """Record a reading for a meter the caller may access.

    Admins and tenants may submit; tenant submissions are always manual.
    """
    require_roles(
        scope,
        UserRole.ADMIN,
        UserRole.TENANT,
        detail="You don't have permission to submit readings",
    )
    meter = require_meter_access(db, scope, reading_data.meter_id)

    reading = Reading(
        meter_id=meter.id,
        reading=reading_data.reading,
        is_iot=reading_data.is_iot if scope.is_admin else False,
        submitted_by_id=scope.user_id,
    )
    with transaction(db):
        db.add(reading)
    db.refresh(reading)

    logger.info("Recorded reading id=%s for meter id=%s", reading.id, meter.id)
    return reading
