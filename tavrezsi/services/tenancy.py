"""Tenancy management and the tenant invitation flow."""

import logging
import re
import secrets
from datetime import UTC, datetime

from sqlalchemy.orm import Session, joinedload

from tavrezsi.core.config import settings
from tavrezsi.core.database import transaction
from tavrezsi.core.exceptions import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from tavrezsi.models.enums import UserRole
from tavrezsi.models.property_tenant import PropertyTenant
from tavrezsi.models.user import User
from tavrezsi.services.access import (
    AccessScope,
    require_roles,
    require_tenant_manager,
    scoped_tenancies,
)
from tavrezsi.services.auth import get_password_hash, get_user_by_email, get_user_by_username
from tavrezsi.services.notifier import NotificationKind, Notifier, build_setup_link
from tavrezsi.services.password_reset import issue_reset_token
from tavrezsi.services.user import get_user

logger = logging.getLogger(__name__)

_USERNAME_UNSAFE = re.compile(r"[^a-z0-9._-]")


def list_tenancies(
    db: Session,
    scope: AccessScope,
    property_id: int | None = None,
) -> list[PropertyTenant]:
    """List tenancies with tenant details for properties the caller manages."""
    require_roles(
        scope,
        UserRole.ADMIN,
        UserRole.OWNER,
        detail="You don't have permission to view tenants",
    )
    query = scoped_tenancies(db, scope)
    if property_id is not None:
        require_tenant_manager(db, scope, property_id)
        query = query.filter(PropertyTenant.property_id == property_id)
    return query.options(joinedload(PropertyTenant.tenant)).order_by(PropertyTenant.id).all()


def get_tenancy(db: Session, tenancy_id: int) -> PropertyTenant:
    """Get a tenancy row by ID."""
    tenancy = db.get(PropertyTenant, tenancy_id)
    if not tenancy:
        raise NotFoundError("Tenant assignment not found")
    return tenancy


def get_active_tenancy(db: Session, tenant_id: int, property_id: int) -> PropertyTenant | None:
    """Get the active tenancy for a (tenant, property) pair, if any."""
    return (
        db.query(PropertyTenant)
        .filter(
            PropertyTenant.tenant_id == tenant_id,
            PropertyTenant.property_id == property_id,
            PropertyTenant.is_active.is_(True),
        )
        .first()
    )


def _latest_tenancy(db: Session, tenant_id: int, property_id: int) -> PropertyTenant | None:
    return (
        db.query(PropertyTenant)
        .filter(
            PropertyTenant.tenant_id == tenant_id,
            PropertyTenant.property_id == property_id,
        )
        .order_by(PropertyTenant.is_active.desc(), PropertyTenant.id.desc())
        .with_for_update()
        .first()
    )


def derive_username(db: Session, email: str) -> str:
    """Build a free username from the local part of an email address."""
    base = _USERNAME_UNSAFE.sub("", email.split("@", 1)[0].lower())[:40] or "tenant"
    candidate = base
    suffix = 1
    while get_user_by_username(db, candidate):
        suffix += 1
        candidate = f"{base}{suffix}"
    return candidate


def invite_tenant(
    db: Session,
    scope: AccessScope,
    property_id: int,
    email: str,
    notifier: Notifier,
    name: str | None = None,
) -> PropertyTenant:
    """Invite someone by email to become a tenant of a property.

    Creates an inactive tenant account when none exists, then a pending
    tenancy (or reopens the latest inactive one) and a credential setup token.
    The tenancy becomes active once the invitee sets a password.
    """
    db_property = require_tenant_manager(db, scope, property_id)
    email = email.lower()

    with transaction(db):
        user = get_user_by_email(db, email)
        tenancy = None

        if user is None:
            user = User(
                username=derive_username(db, email),
                email=email,
                name=name or email.split("@", 1)[0],
                role=UserRole.TENANT,
                hashed_password=get_password_hash(secrets.token_urlsafe(32)),
                is_active=False,
            )
            db.add(user)
            db.flush()
            logger.info("Created invited tenant user id=%s", user.id)
        else:
            if user.role != UserRole.TENANT:
                raise ValidationError("User must have tenant role")
            tenancy = _latest_tenancy(db, user.id, db_property.id)
            if tenancy is not None and tenancy.is_active:
                raise ConflictError("Tenant is already assigned to this property")

        if tenancy is None:
            tenancy = PropertyTenant(
                property_id=db_property.id,
                tenant_id=user.id,
                is_active=False,
            )
            db.add(tenancy)
        else:
            tenancy.is_active = False
            tenancy.end_date = None
            tenancy.start_date = datetime.now(UTC)
            logger.info("Reopening tenancy id=%s as a pending invitation", tenancy.id)

        reset_token = issue_reset_token(db, user)
        sent = notifier.send(
            NotificationKind.TENANT_INVITE,
            user.email,
            user.name,
            build_setup_link(reset_token.token),
            property_name=db_property.name,
        )
        if not sent:
            if settings.INVITE_EMAIL_REQUIRED:
                raise DependencyError("Failed to send invitation email")
            logger.warning("Invitation email for user id=%s could not be delivered", user.id)

    db.refresh(tenancy)
    logger.info(
        "Invited user id=%s to property id=%s (tenancy id=%s)",
        tenancy.tenant_id,
        tenancy.property_id,
        tenancy.id,
    )
    return tenancy


def link_tenant(
    db: Session,
    scope: AccessScope,
    property_id: int,
    tenant_id: int,
) -> PropertyTenant:
    """Attach an existing, activated tenant account to a property."""
    db_property = require_tenant_manager(db, scope, property_id)

    try:
        tenant = get_user(db, tenant_id)
    except NotFoundError:
        raise NotFoundError("Tenant not found") from None
    if tenant.role != UserRole.TENANT:
        raise ValidationError("User must have tenant role")
    if not tenant.is_active:
        raise ValidationError("Tenant account is not activated yet; send an invitation instead")
    if get_active_tenancy(db, tenant.id, db_property.id):
        raise ConflictError("Tenant is already assigned to this property")

    tenancy = PropertyTenant(property_id=db_property.id, tenant_id=tenant.id, is_active=True)
    with transaction(db):
        db.add(tenancy)
    db.refresh(tenancy)

    logger.info("Linked tenant id=%s to property id=%s", tenant.id, db_property.id)
    return tenancy


def remove_tenancy(db: Session, scope: AccessScope, tenancy_id: int) -> None:
    """End a tenancy. Access to the property disappears on the next query."""
    tenancy = get_tenancy(db, tenancy_id)
    require_tenant_manager(db, scope, tenancy.property_id)

    if tenancy.end_date is not None and not tenancy.is_active:
        return

    with transaction(db):
        tenancy.is_active = False
        tenancy.end_date = datetime.now(UTC)

    logger.info("Ended tenancy id=%s", tenancy_id)
