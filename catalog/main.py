"""FastAPI application factory. No business logic; only wiring and middleware."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog.api import router as api_router
from catalog.api.handlers import UnhandledErrorMiddleware, register_exception_handlers
from catalog.core.config import Settings, get_settings
from catalog.core.database import create_db_engine, create_session_factory
from catalog.core.middleware import (
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
    build_rate_limit_policies,
)

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application from explicit settings. Settings, engine and session
    factory live on app.state; nothing touches the database schema here
    (run `alembic upgrade head` to migrate).
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Service Catalog API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    engine = create_db_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(UnhandledErrorMiddleware)
    if settings.rate_limit_active:
        app.add_middleware(RateLimitMiddleware, policies=build_rate_limit_policies(settings))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CORS_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.APP_ENV == "prod")

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Service Catalog API"}

    logger.info(
        "Application created: env=%s rate_limit=%s prefix=%s",
        settings.APP_ENV,
        settings.rate_limit_active,
        settings.API_PREFIX,
    )
    return app
