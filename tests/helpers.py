"""Shared builders for tests: settings, in-memory app/session and users."""

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from catalog.core.config import Settings
from catalog.core.database import create_db_engine, create_session_factory
from catalog.core.roles import Role
from catalog.core.security import create_access_token
from catalog.main import create_app
from catalog.models import Base, Service, User

TEST_JWT_SECRET = "test-secret-for-the-catalog-suite-0123456789"
DEFAULT_PASSWORD = "Secret1"


def make_settings(**overrides: object) -> Settings:
    """Settings for an in-memory SQLite database, ignoring any local .env file."""
    values: dict[str, object] = {
        "APP_ENV": "test",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": TEST_JWT_SECRET,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_session(settings: Settings | None = None) -> Session:
    """Fresh in-memory database with all tables; returns an open session."""
    engine = create_db_engine(settings or make_settings())
    Base.metadata.create_all(engine)
    return create_session_factory(engine)()


def make_app(**overrides: object) -> FastAPI:
    app = create_app(make_settings(**overrides))
    Base.metadata.create_all(app.state.engine)
    return app


def make_client(**overrides: object) -> tuple[FastAPI, TestClient]:
    app = make_app(**overrides)
    return app, TestClient(app)


def add_user(
    db: Session,
    email: str,
    role: Role = Role.CLIENT,
    password: str = DEFAULT_PASSWORD,
    name: str = "Test User",
    active: bool = True,
) -> User:
    user = User(name=name, email=email, password=password, role=role, active=active)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_service(db: Session, owner: User, name: str = "Web", price: float = 100.0) -> Service:
    service = Service(name=name, description=f"{name} description", price=price, owner_id=owner.id)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def seed_user(app: FastAPI, email: str, role: Role = Role.CLIENT, **kwargs: object) -> tuple[int, str]:
    """Insert a user directly into the app's database; return (id, bearer token)."""
    db = app.state.session_factory()
    try:
        user = add_user(db, email, role=role, **kwargs)
        return user.id, create_access_token(user, app.state.settings)
    finally:
        db.close()


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
