"""Property API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tavrezsi.api.dependencies import get_scope
from tavrezsi.core.database import get_db
from tavrezsi.schemas.property import PropertyCreate, PropertyResponse
from tavrezsi.services import property as property_service
from tavrezsi.services.access import AccessScope

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=list[PropertyResponse])
def list_properties(
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """List the properties visible to the caller."""
    return property_service.list_properties(db, scope)


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
    property_data: PropertyCreate,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """Create a new property."""
    return property_service.create_property(db, scope, property_data)


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(
    property_id: int,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """Get a property by ID."""
    return property_service.get_property(db, scope, property_id)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_property(
    property_id: int,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
) -> None:
    """Delete a property and everything attached to it."""
    property_service.delete_property(db, scope, property_id)
