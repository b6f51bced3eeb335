"""
Authorization dependencies: bearer token resolution, role gates and the service ownership gate.

Per request: extract token (header, then cookie) -> verify signature and expiry
-> re-fetch the user and require it to be active -> attach it to request.state.
"""

from typing import Annotated, Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from catalog.core.config import Settings
from catalog.core.database import get_db
from catalog.core.errors import Forbidden, InvalidToken, Unauthorized
from catalog.core.roles import Role
from catalog.core.security import decode_access_token
from catalog.models import Service, User
from catalog.services.offerings import authorize_service_change, get_service

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Dependency: the Settings the application was created with."""
    return request.app.state.settings


def _extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    settings: Settings,
) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.AUTH_COOKIE_NAME) or None


def _resolve_user(request: Request, token: str, db: Session, settings: Settings) -> User:
    try:
        claims = decode_access_token(token, settings)
    except InvalidToken as e:
        raise Unauthorized("Invalid token") from e
    user = db.query(User).filter(User.id == claims.id).first()
    if user is None or not user.active:
        raise Unauthorized("Invalid token or inactive user")
    request.state.user = user
    return user


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> User:
    """Dependency: require a valid token for an active user. Raises Unauthorized otherwise."""
    token = _extract_token(request, credentials, settings)
    if not token:
        raise Unauthorized("Access token required")
    return _resolve_user(request, token, db, settings)


def get_optional_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> User | None:
    """Dependency: None for anonymous requests; a presented token must still be valid."""
    token = _extract_token(request, credentials, settings)
    if not token:
        return None
    return _resolve_user(request, token, db, settings)


def require_roles(*roles: Role) -> Callable[..., User]:
    """Build a dependency that lets through only users holding one of the given roles."""
    allowed = frozenset(roles)
    required = " or ".join(role.value for role in roles)

    def role_gate(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if current_user.role not in allowed:
            raise Forbidden(f"Access denied. Required role: {required}")
        return current_user

    return role_gate


require_superadmin = require_roles(Role.SUPERADMIN)
require_admin_or_superadmin = require_roles(Role.ADMIN, Role.SUPERADMIN)


def require_service_owner(
    service_id: int,
    current_user: Annotated[User, Depends(require_admin_or_superadmin)],
    db: Annotated[Session, Depends(get_db)],
) -> Service:
    """
    Dependency for mutating service routes: role gate plus ownership gate in one check.

    Raises NotFound if the service does not exist and Forbidden unless the caller
    is a superadmin or the admin who owns it.
    """
    service = get_service(db, service_id)
    authorize_service_change(current_user, service)
    return service
