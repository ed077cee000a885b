from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from pydantic import BaseModel, Field

from .agents.exceptions import InvalidArgument, NotReady


class ErrorResponse(BaseModel):
    """
    Standard error payload returned by every endpoint:
    {
        "error": "bad_request",
        "message": "message is empty",
        "code": 400,
        "details": {...}
    }
    """

    error: str = Field(..., description="Machine-readable error type")
    message: str = Field(..., description="Human-readable error message")
    code: int = Field(..., description="HTTP status code for this error")
    details: Optional[Dict[str, Any]] = Field(
        default=None, description="Optional structured error details"
    )


def http_error(
    status_code: int,
    *,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> HTTPException:
    """
    Helper to create an HTTPException with a standardised error body.
    """
    payload = ErrorResponse(
        error=error,
        message=message,
        code=status_code,
        details=details,
    )
    return HTTPException(status_code=status_code, detail=payload.model_dump())


def bad_request(message: str, *, details: Optional[Dict[str, Any]] = None) -> HTTPException:
    return http_error(
        status.HTTP_400_BAD_REQUEST, error="bad_request", message=message, details=details
    )


def service_unavailable(
    message: str, *, details: Optional[Dict[str, Any]] = None
) -> HTTPException:
    return http_error(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        error="service_unavailable",
        message=message,
        details=details,
    )


def internal_error(
    message: str, *, details: Optional[Dict[str, Any]] = None
) -> HTTPException:
    return http_error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="internal_error",
        message=message,
        details=details,
    )


def from_exception(exc: Exception) -> HTTPException:
    """
    Map an orchestration failure onto its HTTP class: 400 for invalid
    input, 503 before bootstrap, 500 for everything else.
    """
    if isinstance(exc, InvalidArgument):
        return bad_request(str(exc))
    if isinstance(exc, NotReady):
        return service_unavailable(str(exc))
    return internal_error(str(exc) or "Internal Server Error")


__all__ = [
    "ErrorResponse",
    "bad_request",
    "from_exception",
    "http_error",
    "internal_error",
    "service_unavailable",
]
