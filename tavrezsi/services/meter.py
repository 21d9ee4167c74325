"""Meter service for business logic."""

import logging

from sqlalchemy.orm import Session

from tavrezsi.core.database import transaction
from tavrezsi.core.exceptions import ConflictError
from tavrezsi.models.meter import Meter
from tavrezsi.models.reading import Reading
from tavrezsi.schemas.meter import MeterCreate
from tavrezsi.services.access import (
    AccessScope,
    get_property_or_404,
    require_admin,
    require_meter_access,
    require_property_access,
    scoped_meters,
)

logger = logging.getLogger(__name__)


def list_meters(
    db: Session,
    scope: AccessScope,
    property_id: int | None = None,
) -> list[Meter]:
    """List meters visible to the caller, optionally for a single property."""
    query = scoped_meters(db, scope)
    if property_id is not None:
        # Explicit property filters must themselves be in scope
        require_property_access(db, scope, property_id)
        query = query.filter(Meter.property_id == property_id)
    return query.order_by(Meter.id).all()


def get_meter(db: Session, scope: AccessScope, meter_id: int) -> Meter:
    """Get a meter the caller may see."""
    return require_meter_access(db, scope, meter_id)


def get_meter_by_identifier(db: Session, identifier: str) -> Meter | None:
    """Get a meter by its unique identifier."""
    return db.query(Meter).filter(Meter.identifier == identifier).first()


def create_meter(db: Session, scope: AccessScope, meter_data: MeterCreate) -> Meter:
    """Create a meter in a property. Admin only."""
    require_admin(scope, "Only admins can create meters")
    get_property_or_404(db, meter_data.property_id)

    if get_meter_by_identifier(db, meter_data.identifier):
        raise ConflictError(f"Meter with identifier '{meter_data.identifier}' already exists")

    meter = Meter(**meter_data.model_dump())
    with transaction(db):
        db.add(meter)
    db.refresh(meter)

    logger.info("Created %s meter id=%s in property id=%s", meter.type, meter.id, meter.property_id)
    return meter


def delete_meter(db: Session, scope: AccessScope, meter_id: int) -> None:
    """Delete a meter and its readings. Admin only."""
    require_admin(scope, "Only admins can delete meters")
    meter = require_meter_access(db, scope, meter_id)

    with transaction(db):
        db.delete(meter)

    logger.info("Deleted meter id=%s", meter_id)


def get_latest_reading(db: Session, scope: AccessScope, meter_id: int) -> Reading | None:
    """Get the most recent reading of a meter the caller may see."""
    require_meter_access(db, scope, meter_id)
    return (
        db.query(Reading)
        .filter(Reading.meter_id == meter_id)
        .order_by(Reading.timestamp.desc(), Reading.id.desc())
        .first()
    )
