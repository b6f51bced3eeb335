"""Service catalog endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from catalog.api.deps import get_optional_user, require_admin_or_superadmin, require_service_owner
from catalog.core.database import get_db
from catalog.models import Service, User
from catalog.schemas.common import ApiResponse
from catalog.schemas.service import (
    OwnerSummary,
    ServiceCreate,
    ServiceListResponse,
    ServiceOut,
    ServiceResponse,
    ServiceUpdate,
)
from catalog.services import offerings

router = APIRouter()


def _listing(services: list[Service], viewer: User | None) -> ServiceListResponse:
    return ServiceListResponse(
        mensaje="Services retrieved successfully",
        total=len(services),
        datos=[ServiceOut.model_validate(s) for s in services],
        user=OwnerSummary.model_validate(viewer) if viewer is not None else None,
    )


@router.get("", response_model=ServiceListResponse)
def list_services(
    db: Annotated[Session, Depends(get_db)],
    viewer: Annotated[User | None, Depends(get_optional_user)],
) -> ServiceListResponse:
    """
    List services, newest first. Authentication is optional; an authenticated
    admin only sees the services they own.
    """
    return _listing(offerings.list_services(db, viewer), viewer)


@router.get("/publicos", response_model=ServiceListResponse)
def list_public_services(db: Annotated[Session, Depends(get_db)]) -> ServiceListResponse:
    """Public catalog: every service, no authentication."""
    return _listing(offerings.list_services(db), None)


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(
    body: ServiceCreate,
    current_user: Annotated[User, Depends(require_admin_or_superadmin)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceResponse:
    service = offerings.create_service(db, current_user, body)
    return ServiceResponse(
        mensaje="Service created successfully",
        service=ServiceOut.model_validate(service),
    )


@router.put("/{service_id}", response_model=ServiceResponse)
def update_service(
    body: ServiceUpdate,
    service: Annotated[Service, Depends(require_service_owner)],
    current_user: Annotated[User, Depends(require_admin_or_superadmin)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceResponse:
    """Partially update a service (owner or superadmin)."""
    updated = offerings.update_service(db, current_user, service, body)
    return ServiceResponse(
        mensaje="Service updated successfully",
        service=ServiceOut.model_validate(updated),
    )


@router.delete("/{service_id}", response_model=ApiResponse)
def delete_service(
    service: Annotated[Service, Depends(require_service_owner)],
    current_user: Annotated[User, Depends(require_admin_or_superadmin)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse:
    """Permanently delete a service (owner or superadmin)."""
    offerings.delete_service(db, current_user, service)
    return ApiResponse(mensaje="Service deleted successfully")
