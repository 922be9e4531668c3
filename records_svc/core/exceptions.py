"""
Shared exception classes and error handling utilities for the Records Service.

Every error leaving the service carries a status code from a small taxonomy:

    NOT_FOUND  - no matching reference, patient name or search pattern (HTTP 404)
    INTERNAL   - connection or query failure (HTTP 500)

Error responses have the shape ``{"code": "NOT_FOUND", "detail": "..."}`` so the
BFF can relay the code without parsing messages.

Usage:
    from records_svc.core.exceptions import PrescriptionNotFoundError

    # In service layer - raise domain exceptions
    raise PrescriptionNotFoundError(reference_number="RX-1001")

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from records_svc.schemas.common import StatusCode

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASSES
# =============================================================================

class RecordsServiceError(Exception):
    """
    Base exception for all Records Service domain errors.

    Provides consistent error structure with HTTP status, status code and
    detail message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: StatusCode = StatusCode.INTERNAL
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context to include in error response.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        result: Dict[str, Any] = {"code": self.code.value, "detail": self.detail}
        if self.context:
            result["context"] = self.context
        return result


class NotFoundError(RecordsServiceError):
    """Raised when a lookup matches no rows."""

    status_code = status.HTTP_404_NOT_FOUND
    code = StatusCode.NOT_FOUND
    detail = "Not found"


# =============================================================================
# LOOKUP EXCEPTIONS
# =============================================================================

class PatientNotFoundError(NotFoundError):
    """Raised when no patient matches a name or reference number."""

    detail = "Patient not found"

    def __init__(
        self,
        patient_name: Optional[str] = None,
        reference_number: Optional[str] = None,
        **kwargs: Any
    ):
        if patient_name is not None:
            kwargs["patient_name"] = patient_name
        if reference_number is not None:
            kwargs["reference_number"] = reference_number
        super().__init__(**kwargs)


class PrescriptionNotFoundError(NotFoundError):
    """Raised when no prescription carries the requested reference number."""

    detail = "Prescription not found"

    def __init__(self, reference_number: Optional[str] = None, **kwargs: Any):
        if reference_number is not None:
            kwargs["reference_number"] = reference_number
        super().__init__(**kwargs)


class ReferenceNotFoundError(NotFoundError):
    """Raised when a reference search matches nothing."""

    detail = "No reference found"

    def __init__(self, pattern: Optional[str] = None, **kwargs: Any):
        if pattern is not None:
            kwargs["pattern"] = pattern
        super().__init__(**kwargs)


# =============================================================================
# DATABASE EXCEPTIONS
# =============================================================================

class DatabaseError(RecordsServiceError):
    """Raised when a database operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = StatusCode.INTERNAL
    detail = "Database error"

    def __init__(
        self,
        operation: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs: Any
    ):
        detail = f"Database error: {reason}" if reason else self.detail
        if operation is not None:
            kwargs["operation"] = operation
        super().__init__(detail=detail, **kwargs)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def records_service_exception_handler(
    request: Request,
    exc: RecordsServiceError
) -> JSONResponse:
    """Handle RecordsServiceError exceptions and return consistent JSON responses."""
    log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        log_level,
        f"RecordsServiceError: {exc.detail}",
        extra={
            "code": exc.code.value,
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions with a generic INTERNAL response.

    Logs the full exception for debugging but returns a safe error message.
    """
    logger.exception(
        f"Unhandled exception: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"code": StatusCode.INTERNAL.value, "detail": "An internal server error occurred"}
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(RecordsServiceError, records_service_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
