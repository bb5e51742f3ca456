"""
Custom Exception Classes and Handlers
Gives every API error the same JSON envelope
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from typing import Any, Dict
from uuid import UUID
import logging
from datetime import datetime

logger = logging.getLogger(__name__)


# ============================================================================
# CUSTOM EXCEPTION CLASSES
# ============================================================================

class BaseAPIException(HTTPException):
    """Base exception class for all API exceptions"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str = None,
        headers: Dict[str, Any] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code or self.__class__.__name__


# ============================================================================
# PROPERTY EXCEPTIONS
# ============================================================================

class PropertyNotFoundException(BaseAPIException):
    """Raised when property is not found"""

    def __init__(self, property_id: UUID = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Property {property_id} not found" if property_id else "Property not found",
            error_code="PROPERTY_NOT_FOUND"
        )
        self.property_id = property_id


class UnauthorizedPropertyAccessException(BaseAPIException):
    """Raised when user tries to touch a property they don't own"""

    def __init__(self, property_id: UUID, user_id: UUID):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to access this property",
            error_code="UNAUTHORIZED_PROPERTY_ACCESS"
        )
        self.property_id = property_id
        self.user_id = user_id


class InvalidPropertyDataException(BaseAPIException):
    """Raised when an update leaves a listing inconsistent"""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=message,
            error_code="INVALID_PROPERTY_DATA"
        )


# ============================================================================
# USER EXCEPTIONS
# ============================================================================

class UserAlreadyExistsException(BaseAPIException):
    """Raised when trying to create user with existing email"""

    def __init__(self, email: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"User with email {email} already registered",
            error_code="USER_ALREADY_EXISTS"
        )


class InvalidCredentialsException(BaseAPIException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            error_code="INVALID_CREDENTIALS",
            headers={"WWW-Authenticate": "Bearer"}
        )


class InactiveUserException(BaseAPIException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
            error_code="INACTIVE_USER"
        )


# ============================================================================
# AUTHENTICATION EXCEPTIONS
# ============================================================================

class NotAuthenticatedException(BaseAPIException):
    """Raised when neither the auth cookie nor a bearer token is present"""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            error_code="NOT_AUTHENTICATED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class InvalidTokenException(BaseAPIException):
    def __init__(self, reason: str = "Invalid or expired token"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=reason,
            error_code="INVALID_TOKEN",
            headers={"WWW-Authenticate": "Bearer"}
        )


class InsufficientPermissionsException(BaseAPIException):
    def __init__(self, required_role: str = None):
        message = "Insufficient permissions to access this resource"
        if required_role:
            message += f". Required role: {required_role}"

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=message,
            error_code="INSUFFICIENT_PERMISSIONS"
        )


# ============================================================================
# FAVORITE EXCEPTIONS
# ============================================================================

class FavoriteNotFoundException(BaseAPIException):
    def __init__(self, property_id: UUID):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Favorite not found",
            error_code="FAVORITE_NOT_FOUND"
        )
        self.property_id = property_id


# ============================================================================
# METRO EXCEPTIONS
# ============================================================================

class MetroStationNotFoundException(BaseAPIException):
    def __init__(self, station_id: UUID = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Metro station {station_id} not found" if station_id else "No operational metro stations",
            error_code="METRO_STATION_NOT_FOUND"
        )


# ============================================================================
# BATCH JOB EXCEPTIONS
# ============================================================================

class BatchJobError(Exception):
    """Raised by offline scripts when a job cannot run at all"""

    def __init__(self, job: str, message: str):
        super().__init__(f"{job}: {message}")
        self.job = job


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

def _error_body(request: Request, code: str, message: Any, **extra) -> Dict[str, Any]:
    error = {
        "code": code,
        "message": message,
        "timestamp": datetime.utcnow().isoformat(),
        "path": request.url.path,
    }
    error.update(extra)
    return {"error": error}


async def base_api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    logger.warning(
        f"API Exception: {exc.error_code} - {exc.detail}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.error_code, exc.detail),
        headers=exc.headers
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Pydantic validation errors with field-level details"""
    logger.warning(
        f"Validation Error: {request.url.path}",
        extra={"path": request.url.path, "method": request.method}
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            request,
            "VALIDATION_ERROR",
            "Request validation failed",
            details=jsonable_encoder(exc.errors())
        )
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, f"HTTP_{exc.status_code}", exc.detail),
        headers=getattr(exc, "headers", None)
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Database Exception: {str(exc)}",
        extra={
            "exception_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method
        },
        exc_info=True
    )

    # Unique constraints, foreign keys
    if isinstance(exc, IntegrityError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_error_body(request, "DATABASE_INTEGRITY_ERROR", "A database constraint was violated")
        )

    # Connection issues, timeouts
    if isinstance(exc, OperationalError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=_error_body(request, "DATABASE_UNAVAILABLE", "Database is temporarily unavailable")
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, "DATABASE_ERROR", "An unexpected database error occurred")
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.critical(
        f"Unhandled Exception: {str(exc)}",
        extra={
            "exception_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, "INTERNAL_SERVER_ERROR", "An unexpected error occurred")
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, base_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
