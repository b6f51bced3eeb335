"""Pydantic request/response schemas."""

from catalog.schemas.auth import (
    AuthResponse,
    CreateUserRequest,
    LoginRequest,
    RegisterRequest,
    UserCreatedResponse,
    UserPublic,
)
from catalog.schemas.common import ApiResponse, ErrorResponse, FieldError
from catalog.schemas.health import HealthResponse
from catalog.schemas.service import (
    OwnerSummary,
    ServiceCreate,
    ServiceListResponse,
    ServiceOut,
    ServiceResponse,
    ServiceUpdate,
)

__all__ = [
    "ApiResponse",
    "AuthResponse",
    "CreateUserRequest",
    "ErrorResponse",
    "FieldError",
    "HealthResponse",
    "LoginRequest",
    "OwnerSummary",
    "RegisterRequest",
    "ServiceCreate",
    "ServiceListResponse",
    "ServiceOut",
    "ServiceResponse",
    "ServiceUpdate",
    "UserCreatedResponse",
    "UserPublic",
]
