"""Auth endpoints: self-registration, login and superadmin user creation."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from catalog.api.deps import get_app_settings, require_superadmin
from catalog.core.config import Settings
from catalog.core.database import get_db
from catalog.models import User
from catalog.schemas.auth import (
    AuthResponse,
    CreateUserRequest,
    LoginRequest,
    RegisterRequest,
    UserCreatedResponse,
    UserPublic,
)
from catalog.services.accounts import authenticate, create_user_as_admin, register_user

router = APIRouter()


@router.post("/registro", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthResponse:
    """
    Register a new account and return it with an access token.
    The account is always created as a client.
    """
    user, token = register_user(db, settings, body)
    return AuthResponse(
        mensaje="User registered successfully",
        user=UserPublic.model_validate(user),
        token=token,
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    user, token = authenticate(db, settings, body.email, body.password)
    return AuthResponse(
        mensaje="Login successful",
        user=UserPublic.model_validate(user),
        token=token,
    )


@router.post("/crear-usuario", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: CreateUserRequest,
    current_user: Annotated[User, Depends(require_superadmin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserCreatedResponse:
    """Create a user with an explicit role (superadmin only)."""
    user = create_user_as_admin(db, current_user, body)
    return UserCreatedResponse(
        mensaje=f"User {user.role.value} created successfully",
        user=UserPublic.model_validate(user),
    )
