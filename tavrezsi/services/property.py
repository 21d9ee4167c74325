"""Property service for business logic."""

import logging

from sqlalchemy.orm import Session

from tavrezsi.core.database import transaction
from tavrezsi.core.exceptions import ValidationError
from tavrezsi.models.enums import UserRole
from tavrezsi.models.property import Property
from tavrezsi.schemas.property import PropertyCreate
from tavrezsi.services.access import (
    AccessScope,
    require_admin,
    require_property_access,
    scoped_properties,
)
from tavrezsi.services.user import get_user

logger = logging.getLogger(__name__)


def list_properties(db: Session, scope: AccessScope) -> list[Property]:
    """List the properties visible to the caller."""
    return scoped_properties(db, scope).order_by(Property.id).all()


def get_property(db: Session, scope: AccessScope, property_id: int) -> Property:
    """Get a property the caller may see."""
    return require_property_access(db, scope, property_id)


def create_property(db: Session, scope: AccessScope, property_data: PropertyCreate) -> Property:
    """Create a property for an owner. Admin only."""
    require_admin(scope, "Only admins can create properties")

    owner = get_user(db, property_data.owner_id)
    if owner.role != UserRole.OWNER:
        raise ValidationError("Property owner must have the owner role")

    db_property = Property(
        name=property_data.name,
        address=property_data.address,
        owner_id=owner.id,
    )
    with transaction(db):
        db.add(db_property)
    db.refresh(db_property)

    logger.info("Created property id=%s for owner id=%s", db_property.id, owner.id)
    return db_property


def delete_property(db: Session, scope: AccessScope, property_id: int) -> None:
    """Delete a property together with its meters, readings and tenancies. Admin only."""
    require_admin(scope, "Only admins can delete properties")
    db_property = require_property_access(db, scope, property_id)

    with transaction(db):
        db.delete(db_property)

    logger.info("Deleted property id=%s", property_id)
