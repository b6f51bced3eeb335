"""Exception handlers rendering every failure as {error: true, mensaje, ...}."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from catalog.core.errors import CatalogError, InternalError
from catalog.schemas.common import ErrorResponse, FieldError

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int,
    body: ErrorResponse,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
    body = ErrorResponse(mensaje=exc.message)
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.details)
        body.detalles = exc.details
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return _error_response(exc.status_code, body, headers)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        FieldError(
            campo=".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body",
            mensaje=str(err.get("msg", "Invalid value")),
        )
        for err in exc.errors()
    ]
    return _error_response(400, ErrorResponse(mensaje="Invalid input data", errores=errors))


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(
        exc.status_code,
        ErrorResponse(mensaje=str(exc.detail)),
        getattr(exc, "headers", None),
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(
        500,
        ErrorResponse(mensaje="Internal server error", detalles=str(exc)),
    )


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Innermost middleware: renders unexpected errors before the outer middleware sees the response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return await handle_unexpected(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, handle_catalog_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
