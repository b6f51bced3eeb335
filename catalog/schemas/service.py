"""Request/response schemas for the service catalog endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from catalog.core.roles import Role
from catalog.schemas.common import ApiResponse

# Largest value a NUMERIC(10, 2) column holds.
PRICE_MAX = 99_999_999.99


class ServiceCreate(BaseModel):
    """Body for creating a service. Name and price are required."""

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0, le=PRICE_MAX, allow_inf_nan=False, description="Non-negative price")


class ServiceUpdate(BaseModel):
    """Partial update; only the supplied fields are changed."""

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0, le=PRICE_MAX, allow_inf_nan=False)


class OwnerSummary(BaseModel):
    """Minimal projection of a service owner (or of the requesting user)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    role: Role


class ServiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    price: float
    owner_id: int
    owner: OwnerSummary
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ServiceListResponse(ApiResponse):
    total: int
    datos: list[ServiceOut]
    user: OwnerSummary | None = Field(default=None, description="Requesting user, when authenticated")


class ServiceResponse(ApiResponse):
    service: ServiceOut
