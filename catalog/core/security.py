"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from catalog.core.config import Settings
from catalog.core.errors import InvalidToken
from catalog.core.roles import Role

if TYPE_CHECKING:
    from catalog.models.user import User

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Length limits for user input validation.
NAME_MIN_LEN = 2
NAME_MAX_LEN = 100
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


class TokenClaims(BaseModel):
    """Validated payload of an access token."""

    id: int
    email: str
    role: Role
    exp: datetime
    iat: datetime | None = Field(default=None)


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. A fresh salt is generated on every call."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str | None, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash. Never raises; empty input is a mismatch."""
    if not plain_password or not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(user: "User", settings: Settings) -> str:
    """Create a JWT access token with the user's id, email and role, plus iat and exp."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    role = user.role.value if isinstance(user.role, Role) else str(user.role)
    payload: dict[str, Any] = {
        "id": user.id,
        "email": user.email,
        "role": role,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    """
    Decode and validate a JWT; return its claims.
    Raises InvalidToken on bad signature, malformed payload or expiry.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidToken("Token has expired") from e
    except jwt.PyJWTError as e:
        raise InvalidToken() from e
    try:
        return TokenClaims.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidToken("Invalid token payload") from e
