"""Domain exceptions and standardized error responses for the API."""
from datetime import datetime
from typing import Any

import sentry_sdk
import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error envelope returned by all API error handlers."""
    error: str
    message: str
    detail: Any = None
    request_id: str = "unknown"


logger = structlog.get_logger()


# ── Domain errors ─────────────────────────────────────────────────────────────


class SecuryFlexError(Exception):
    """Base class for every error raised by the decision rules."""

    code = "securyflex_error"


class InvalidRangeError(SecuryFlexError, ValueError):
    """Issue date is not strictly before expiration date.

    Signals bad upstream certificate data; callers must surface it rather than
    correct it.
    """

    code = "invalid_range"

    def __init__(self, issue_date: datetime, expiration_date: datetime):
        self.issue_date = issue_date
        self.expiration_date = expiration_date
        super().__init__(
            f"issue date {issue_date.isoformat()} must be before "
            f"expiration date {expiration_date.isoformat()}"
        )


class InvalidReadingError(SecuryFlexError, ValueError):
    code = "invalid_reading"


class LocationUnavailableError(SecuryFlexError):
    """Raised by a location provider when location services are off."""

    code = "location_unavailable"


class CertificateNotFoundError(SecuryFlexError, LookupError):
    code = "holder_not_found"


# ── Handlers ─────────────────────────────────────────────────────────────────


async def domain_exception_handler(request: Request, exc: SecuryFlexError) -> JSONResponse:
    """Map rule violations in request data to 422 (404 for unknown holders)."""
    request_id = request.headers.get("x-request-id", "unknown")
    status_code = 404 if isinstance(exc, LookupError) else 422

    logger.warning(
        "domain_error",
        error=exc.code,
        message=str(exc),
        path=request.url.path,
        request_id=request_id,
    )

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=exc.code,
            message=str(exc),
            request_id=request_id,
        ).model_dump(),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a consistent JSON envelope."""
    request_id = request.headers.get("x-request-id", "unknown")

    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        request_id=request_id,
    )

    sentry_sdk.capture_exception(exc)

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Our team has been notified.",
            "request_id": request_id,
        },
    )
