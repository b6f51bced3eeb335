"""Account flows: registration, login, superadmin-created users, password changes and deactivation."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from catalog.core.config import Settings
from catalog.core.errors import (
    DuplicateEmail,
    Forbidden,
    InternalError,
    InvalidCredentials,
    ValidationError,
)
from catalog.core.roles import Role
from catalog.core.security import create_access_token
from catalog.models import User
from catalog.schemas.auth import CreateUserRequest, RegisterRequest

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def _require_fields(name: str | None, email: str | None, password: str | None) -> None:
    if not name or not name.strip() or not email or not password:
        raise ValidationError("Name, email and password are required")


def _create_user(db: Session, name: str, email: str, password: str, role: Role) -> User:
    """Insert a user after the duplicate check; a lost race on the unique index is also a duplicate."""
    email = normalize_email(email)
    if get_user_by_email(db, email) is not None:
        raise DuplicateEmail()
    try:
        user = User(name=name.strip(), email=email, password=password, role=role)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateEmail() from e
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError(details=str(e)) from e
    db.refresh(user)
    return user


def register_user(db: Session, settings: Settings, body: RegisterRequest) -> tuple[User, str]:
    """
    Self-registration. The new account is always a client, whatever role was requested.
    Returns the user and an access token.
    """
    _require_fields(body.name, body.email, body.password)
    if body.role and body.role != Role.CLIENT.value:
        logger.info("Registration requested role=%s; downgraded to client", body.role)
    user = _create_user(db, body.name, body.email, body.password, Role.CLIENT)
    logger.info("User registered: id=%s role=%s", user.id, user.role.value)
    return user, create_access_token(user, settings)


def authenticate(
    db: Session, settings: Settings, email: str | None, password: str | None
) -> tuple[User, str]:
    """
    Verify credentials for an active user and issue a token.

    Unknown email, inactive account and wrong password all raise the same
    InvalidCredentials so callers cannot tell them apart.
    """
    if not email or not password:
        raise ValidationError("Email and password are required")
    user = (
        db.query(User)
        .filter(User.email == normalize_email(email), User.active.is_(True))
        .first()
    )
    if user is None or not user.verify_password(password):
        logger.warning("Failed login for email=%s", normalize_email(email))
        raise InvalidCredentials()
    return user, create_access_token(user, settings)


def create_user_as_admin(db: Session, actor: User, body: CreateUserRequest) -> User:
    """Create a user with an explicit role. Only a superadmin may do this."""
    if actor.role != Role.SUPERADMIN:
        raise Forbidden("You do not have permission to create users")
    _require_fields(body.name, body.email, body.password)
    role = body.role or Role.CLIENT
    user = _create_user(db, body.name, body.email, body.password, role)
    logger.info("User created by superadmin id=%s: id=%s role=%s", actor.id, user.id, role.value)
    return user


def change_password(db: Session, user: User, new_password: str) -> User:
    """Set a new password (rehashed on assignment) and persist it."""
    try:
        user.password = new_password
    except ValueError as e:
        raise ValidationError(str(e)) from e
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError(details=str(e)) from e
    db.refresh(user)
    logger.info("Password changed for user id=%s", user.id)
    return user


def deactivate_user(db: Session, user: User) -> User:
    """
    Mark a user inactive. Outstanding tokens stay cryptographically valid, but the
    per-request user lookup rejects them from now on.
    """
    if not user.active:
        return user
    user.active = False
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError(details=str(e)) from e
    db.refresh(user)
    logger.info("User deactivated: id=%s", user.id)
    return user
