"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from catalog.core.roles import Role
from catalog.core.security import NAME_MAX_LEN, NAME_MIN_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from catalog.schemas.common import ApiResponse


def _letters_and_spaces(v: str | None) -> str | None:
    if v is not None and not all(ch.isalpha() or ch.isspace() for ch in v):
        raise ValueError("Name may only contain letters and spaces")
    return v


class RegisterRequest(BaseModel):
    """Self-registration. Any requested role is ignored; new accounts are clients."""

    name: str | None = Field(None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: str | None = Field(None, description="Accepted for compatibility; always downgraded to client")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _letters_and_spaces(v)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not (
            any(ch.islower() for ch in v)
            and any(ch.isupper() for ch in v)
            and any(ch.isdigit() for ch in v)
        ):
            raise ValueError("Password must contain an uppercase letter, a lowercase letter and a number")
        return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=PASSWORD_MAX_LEN)


class CreateUserRequest(BaseModel):
    """User created by a superadmin; the role is taken as given."""

    name: str | None = Field(None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: Role | None = Field(None, description="superadmin, admin or client (default client)")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _letters_and_spaces(v)


class UserPublic(BaseModel):
    """User as exposed to clients (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
    active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResponse(ApiResponse):
    """Returned by registration and login."""

    user: UserPublic
    token: str


class UserCreatedResponse(ApiResponse):
    user: UserPublic
