"""Tenancy routes, including tenant invitations."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tavrezsi.api.dependencies import get_scope
from tavrezsi.core.database import get_db
from tavrezsi.schemas.property_tenant import PropertyTenantCreate, TenantWithDetails
from tavrezsi.services import tenancy as tenancy_service
from tavrezsi.services.access import AccessScope
from tavrezsi.services.notifier import Notifier, get_notifier

router = APIRouter(prefix="/property-tenants", tags=["property-tenants"])


@router.get("", response_model=list[TenantWithDetails])
def list_property_tenants(
    property_id: int | None = None,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """List tenancies with tenant details."""
    return tenancy_service.list_tenancies(db, scope, property_id)


@router.post("", response_model=TenantWithDetails, status_code=status.HTTP_201_CREATED)
def add_property_tenant(
    tenant_data: PropertyTenantCreate,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Invite a tenant by email, or attach an existing tenant account."""
    if tenant_data.email is not None:
        return tenancy_service.invite_tenant(
            db,
            scope,
            tenant_data.property_id,
            tenant_data.email,
            notifier,
            name=tenant_data.name,
        )
    return tenancy_service.link_tenant(db, scope, tenant_data.property_id, tenant_data.tenant_id)


@router.delete("/{tenancy_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_property_tenant(
    tenancy_id: int,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
) -> None:
    """End a tenancy."""
    tenancy_service.remove_tenancy(db, scope, tenancy_id)
