"""Response envelope shared by every endpoint."""

from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Every body carries an error flag and a human-readable message."""

    error: bool = Field(default=False, description="True when the request failed")
    mensaje: str = Field(..., description="Human-readable outcome message")


class FieldError(BaseModel):
    campo: str
    mensaje: str


class ErrorResponse(ApiResponse):
    """Body returned for every failed request."""

    error: bool = True
    detalles: Any | None = Field(default=None, description="Underlying error for internal failures")
    errores: list[FieldError] | None = Field(default=None, description="Per-field validation errors")
