"""
Global exception handling for the application.
Every failure is rendered as a JSON envelope with a human-readable message.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(AppError):
    """Missing or malformed input."""
    def __init__(self, message: str = "Datos inválidos", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "No autenticado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details)


class ForbiddenException(AppError):
    """Authorization failure error."""
    def __init__(self, message: str = "Acceso no autorizado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class EntityNotFoundException(AppError):
    """Resource not found, or already in a terminal state."""
    def __init__(self, message: str = "Registro no encontrado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class ConflictException(AppError):
    """Duplicate of an existing record."""
    def __init__(self, message: str = "El registro ya existe", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


def _error_response(request: Request, status_code: int, code: str, message: str, details=None) -> JSONResponse:
    body = {
        "code": code,
        "message": message,
        "path": request.url.path,
    }
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content={"error": jsonable_encoder(body)})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.__class__.__name__, exc.message, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "ValidationException",
        "Faltan campos requeridos o tienen un formato inválido",
        {"errors": errors},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.exception("Unhandled error", path=request.url.path)
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "InternalServerError",
        "Error interno del servidor",
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, global_exception_handler)
