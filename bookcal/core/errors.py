# bookcal/core/errors.py
"""
Error types and severity-aware error logging.

Expected conditions (missing draft fields, staff conflicts) are return values
and never pass through here. Only collaborator failures and programmer errors
are raised.
"""
from enum import Enum
from typing import Any, Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


class BookcalError(Exception):
    """Base class for errors raised by bookcal."""


class NotFoundError(BookcalError):
    """Update/delete referenced an appointment id the store does not know."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id!r} not found")


class InvalidViewError(BookcalError, ValueError):
    """A view mode outside day/week/month/agenda reached the grid engine."""

    def __init__(self, view: Any):
        self.view = view
        super().__init__(f"Unknown calendar view: {view!r}")


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"           # 404s, validation errors, expected failures
    MEDIUM = "medium"     # 500s, timeouts, recoverable errors
    HIGH = "high"         # data corruption, service degradation
    CRITICAL = "critical" # service down, data loss


SEVERITY_OVERRIDE = {
    "NotFoundError": ErrorSeverity.LOW,
    "ValidationError": ErrorSeverity.LOW,
    "RequestValidationError": ErrorSeverity.LOW,
    "InvalidViewError": ErrorSeverity.HIGH,
    "TimeoutError": ErrorSeverity.MEDIUM,
    "ConnectionError": ErrorSeverity.MEDIUM,
    "IntegrityError": ErrorSeverity.HIGH,
    "OperationalError": ErrorSeverity.HIGH,
}


def determine_severity(error: Exception) -> ErrorSeverity:
    """Determine error severity based on type."""
    error_type = type(error).__name__

    if error_type in SEVERITY_OVERRIDE:
        return SEVERITY_OVERRIDE[error_type]

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        if status_code < 500:
            return ErrorSeverity.LOW
        elif status_code < 503:
            return ErrorSeverity.MEDIUM
        else:
            return ErrorSeverity.HIGH

    if "database" in str(error).lower():
        return ErrorSeverity.HIGH
    return ErrorSeverity.MEDIUM


def log_error(error: Exception, context: Optional[Dict[str, Any]] = None,
              severity: Optional[ErrorSeverity] = None) -> ErrorSeverity:
    """Log an error with its severity and context; returns the severity used."""
    context = context or {}
    if severity is None:
        severity = determine_severity(error)

    log = logger.warning if severity == ErrorSeverity.LOW else logger.error
    log(
        "error",
        error_type=type(error).__name__,
        message=str(error)[:200],
        severity=severity.value,
        **context
    )
    return severity
