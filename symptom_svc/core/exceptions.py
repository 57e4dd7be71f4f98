"""
Exception classes and error formatting for the Symptom Tracker service.

This module provides:
- Custom exception hierarchy for the record/persistence error taxonomy
- A single message builder, format_error(kind, context, reason)
- The dismissable ErrorCondition the gateway keeps for the UI
- Exception handlers for FastAPI integration

Usage:
    from symptom_svc.core.exceptions import RemoteUnavailableError

    raise RemoteUnavailableError(context=SAVE_FAILED, reason="HTTP 500")

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# =============================================================================
# ERROR KINDS AND CONTEXTS
# =============================================================================

VALIDATION = "validation"
REMOTE_UNAVAILABLE = "remote_unavailable"
CACHE_CORRUPT = "cache_corrupt"
CACHE_UNAVAILABLE = "cache_unavailable"

LOAD_FAILED = "load failed"
SAVE_FAILED = "save failed"
DELETE_FAILED = "delete failed"
CONNECTION_FAILED = "connection failed"
USER_SETUP_FAILED = "user setup failed"

_KIND_LABELS = {
    VALIDATION: "invalid input",
    REMOTE_UNAVAILABLE: "remote store unavailable",
    CACHE_CORRUPT: "local cache entry is corrupt",
    CACHE_UNAVAILABLE: "local cache unavailable",
}


def format_error(kind: str, context: Optional[str] = None, reason: Optional[str] = None) -> str:
    """
    Build the human-readable message for an error condition.

    Args:
        kind: One of the error kinds above (e.g. REMOTE_UNAVAILABLE).
        context: What the caller was doing (e.g. SAVE_FAILED).
        reason: Optional low-level detail appended in parentheses.

    Returns:
        str: e.g. "save failed: remote store unavailable (HTTP 500)".

    Example:
        >>> format_error(VALIDATION, SAVE_FAILED, "date and time are required")
        'save failed: invalid input (date and time are required)'
    """
    message = _KIND_LABELS.get(kind, kind.replace("_", " "))
    if context:
        message = f"{context}: {message}"
    if reason:
        message = f"{message} ({reason})"
    return message


@dataclass(frozen=True)
class ErrorCondition:
    """User-visible error the UI displays until it is dismissed."""
    kind: str
    context: Optional[str]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "context": self.context, "message": self.message}


# =============================================================================
# BASE EXCEPTION CLASS
# =============================================================================

class SymptomTrackerError(Exception):
    """
    Base exception for all Symptom Tracker domain errors.

    Carries an error kind, the operation context it happened in and the
    HTTP status code the API layer should answer with.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind: str = "internal"

    def __init__(
        self,
        context: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            context: Operation context tag (e.g. "save failed").
            reason: Low-level detail for the message.
            **kwargs: Additional context to include in error response.
        """
        self.context = context
        self.reason = reason
        self.extra = kwargs
        self.detail = format_error(self.kind, context, reason)
        super().__init__(self.detail)

    def to_condition(self) -> ErrorCondition:
        """Convert to the dismissable condition shown to the user."""
        return ErrorCondition(kind=self.kind, context=self.context, message=self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        result: Dict[str, Any] = {"detail": self.detail, "kind": self.kind}
        if self.context:
            result["context"] = self.context
        if self.extra:
            result["extra"] = self.extra
        return result


# =============================================================================
# SURFACED ERRORS
# =============================================================================

class RecordValidationError(SymptomTrackerError):
    """Raised when required fields (date, time, user name) are missing."""

    status_code = status.HTTP_400_BAD_REQUEST
    kind = VALIDATION


class RemoteUnavailableError(SymptomTrackerError):
    """Raised when the remote store cannot be reached or answers with an error."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    kind = REMOTE_UNAVAILABLE


# =============================================================================
# CACHE ERRORS (logged, never surfaced)
# =============================================================================

class CacheError(SymptomTrackerError):
    """Base exception for local cache failures."""


class CacheCorruptError(CacheError):
    """Raised when a cache entry exists but cannot be parsed."""

    kind = CACHE_CORRUPT


class CacheUnavailableError(CacheError):
    """Raised when the underlying cache storage fails."""

    kind = CACHE_UNAVAILABLE


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def symptom_tracker_exception_handler(
    request: Request,
    exc: SymptomTrackerError
) -> JSONResponse:
    """Log the error and return a consistent JSON error response."""
    logger.warning(
        f"SymptomTrackerError: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "kind": exc.kind,
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(SymptomTrackerError, symptom_tracker_exception_handler)
