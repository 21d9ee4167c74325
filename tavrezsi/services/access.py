"""Role-scoped visibility rules shared by every resource service.

Admins see and control everything. Owners are scoped to the properties they
own, tenants to the properties they hold an active tenancy on. The set of
accessible property ids is derived once per call and every nested query
(meters, readings, correction requests, tenancies) is filtered by membership
in it, following the ownership chain Reading -> Meter -> Property.
"""

from dataclasses import dataclass

from sqlalchemy import false
from sqlalchemy.orm import Query, Session

from tavrezsi.core.exceptions import AuthorizationError, NotFoundError
from tavrezsi.models.correction_request import CorrectionRequest
from tavrezsi.models.enums import UserRole
from tavrezsi.models.meter import Meter
from tavrezsi.models.property import Property
from tavrezsi.models.property_tenant import PropertyTenant
from tavrezsi.models.reading import Reading
from tavrezsi.models.user import User


@dataclass(frozen=True)
class AccessScope:
    """Authenticated caller identity."""

    user_id: int
    role: UserRole

    @classmethod
    def for_user(cls, user: User) -> "AccessScope":
        return cls(user_id=user.id, role=UserRole(user.role))

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def accessible_property_ids(db: Session, scope: AccessScope) -> set[int] | None:
    """Get the ids of properties visible to the caller.

    Returns None for admins, meaning no restriction.
    """
    if scope.is_admin:
        return None

    if scope.role == UserRole.OWNER:
        rows = db.query(Property.id).filter(Property.owner_id == scope.user_id).all()
    elif scope.role == UserRole.TENANT:
        rows = (
            db.query(PropertyTenant.property_id)
            .filter(
                PropertyTenant.tenant_id == scope.user_id,
                PropertyTenant.is_active.is_(True),
            )
            .distinct()
            .all()
        )
    else:
        return set()

    return {row[0] for row in rows}


def _restrict(query: Query, column, property_ids: set[int] | None) -> Query:
    if property_ids is None:
        return query
    return query.filter(column.in_(property_ids))


def scoped_properties(db: Session, scope: AccessScope) -> Query:
    """Query of properties visible to the caller."""
    return _restrict(db.query(Property), Property.id, accessible_property_ids(db, scope))


def scoped_meters(db: Session, scope: AccessScope) -> Query:
    """Query of meters in properties visible to the caller."""
    return _restrict(db.query(Meter), Meter.property_id, accessible_property_ids(db, scope))


def scoped_readings(db: Session, scope: AccessScope) -> Query:
    """Query of readings of meters visible to the caller."""
    query = db.query(Reading).join(Meter, Reading.meter_id == Meter.id)
    return _restrict(query, Meter.property_id, accessible_property_ids(db, scope))


def scoped_correction_requests(db: Session, scope: AccessScope) -> Query:
    """Query of correction requests visible to the caller.

    Owners see requests on their properties; tenants only see what they filed.
    """
    query = db.query(CorrectionRequest)
    if scope.is_admin:
        return query
    if scope.role == UserRole.TENANT:
        return query.filter(CorrectionRequest.requested_by_id == scope.user_id)
    query = query.join(Meter, CorrectionRequest.meter_id == Meter.id)
    return _restrict(query, Meter.property_id, accessible_property_ids(db, scope))


def scoped_tenancies(db: Session, scope: AccessScope) -> Query:
    """Query of tenancy rows the caller may manage. Tenants manage none."""
    query = db.query(PropertyTenant)
    if scope.role == UserRole.TENANT:
        return query.filter(false())
    return _restrict(query, PropertyTenant.property_id, accessible_property_ids(db, scope))


def require_roles(scope: AccessScope, *roles: UserRole, detail: str | None = None) -> None:
    """Fail unless the caller has one of ``roles``."""
    if scope.role not in roles:
        raise AuthorizationError(detail or "Your role does not permit this action")


def require_admin(scope: AccessScope, detail: str | None = None) -> None:
    """Fail unless the caller is an admin."""
    require_roles(scope, UserRole.ADMIN, detail=detail or "Admin access required")


def get_property_or_404(db: Session, property_id: int) -> Property:
    """Get a property by ID without any scoping."""
    db_property = db.get(Property, property_id)
    if not db_property:
        raise NotFoundError("Property not found")
    return db_property


def get_meter_or_404(db: Session, meter_id: int) -> Meter:
    """Get a meter by ID without any scoping."""
    meter = db.get(Meter, meter_id)
    if not meter:
        raise NotFoundError("Meter not found")
    return meter


def require_property_access(db: Session, scope: AccessScope, property_id: int) -> Property:
    """Get a property, failing when it is outside the caller's scope."""
    db_property = get_property_or_404(db, property_id)
    allowed = accessible_property_ids(db, scope)
    if allowed is not None and db_property.id not in allowed:
        raise AuthorizationError("You don't have permission to access this property")
    return db_property


def require_meter_access(db: Session, scope: AccessScope, meter_id: int) -> Meter:
    """Get a meter, failing when its property is outside the caller's scope."""
    meter = get_meter_or_404(db, meter_id)
    allowed = accessible_property_ids(db, scope)
    if allowed is not None and meter.property_id not in allowed:
        raise AuthorizationError("You don't have permission to access this meter")
    return meter


def require_tenant_manager(db: Session, scope: AccessScope, property_id: int) -> Property:
    """Get a property whose tenants the caller may manage (admin or its owner)."""
    require_roles(
        scope,
        UserRole.ADMIN,
        UserRole.OWNER,
        detail="You don't have permission to manage tenants",
    )
    db_property = get_property_or_404(db, property_id)
    if not scope.is_admin and db_property.owner_id != scope.user_id:
        raise AuthorizationError("You don't have permission to manage tenants for this property")
    return db_property
