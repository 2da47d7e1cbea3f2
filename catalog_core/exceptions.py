"""
Consolidated exception system with error codes, context, and correlation support.

This module provides a unified exception hierarchy for the catalog core,
with automatic logging and correlation ID tracking. Callers discriminate
failures by ``error_code`` (a closed ``ErrorCode`` set) rather than by
comparing against sentinel instances.
"""

import threading
import traceback
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

_thread_local = threading.local()


# Context added by operation_scope (name, id, duration) is for logs only
CALLER_HIDDEN_PREFIX = "operation_"


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # System errors (1xxx)
    INTERNAL_ERROR = "1000"
    DATABASE_ERROR = "1001"
    CONFIGURATION_ERROR = "1003"
    TIMEOUT_ERROR = "1004"
    TOKEN_GENERATION_FAILED = "1005"

    # Validation errors (2xxx)
    VALIDATION_FAILED = "2000"
    INVALID_FORMAT = "2001"
    MISSING_REQUIRED = "2002"
    TYPE_MISMATCH = "2003"
    CONSTRAINT_VIOLATION = "2004"

    # Resource errors (3xxx)
    NOT_FOUND = "3000"
    DUPLICATE = "3001"
    CONFLICT = "3002"

    # Access errors (4xxx)
    AUTHENTICATION_FAILED = "4000"
    MISSING_CREDENTIALS = "4001"


class BaseError(Exception):
    """Base exception with context, error codes, logging, and error chaining."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        """
        Initialize base error with rich context.

        Args:
            message: Human-readable error message
            error_code: Standardized error code from ErrorCode enum
            status_code: HTTP status code for API responses
            cause: Original exception that caused this error
            **context: Additional context information
        """
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_id = str(uuid.uuid4())
        self.context = context

        correlation_id = get_correlation_id()
        if correlation_id:
            self.context["correlation_id"] = correlation_id

        self.context["error_id"] = self.error_id

        if cause:
            self.context["cause"] = {
                "type": type(cause).__name__,
                "message": str(cause),
                "traceback": traceback.format_exception(type(cause), cause, cause.__traceback__),
            }

        self._log_error()

        super().__init__(message)

    def _log_error(self) -> None:
        """Log error with appropriate level based on status code."""
        # Lazy import: the logger reads config, which must not import exceptions at load time
        from .utils.logger import get_logger

        logger = get_logger()

        log_data = {
            "error_id": self.error_id,
            "error_code": self.error_code.value,
            "status_code": self.status_code,
            "error_message": self.message,
            "timestamp": self.timestamp,
            "context": {k: v for k, v in self.context.items() if k not in ["cause", "traceback"]},
        }

        if "correlation_id" in self.context:
            log_data["correlation_id"] = self.context["correlation_id"]

        if self.status_code >= 500:
            logger.error(
                f"Error {self.error_code}: {self.message}", extra=log_data, exc_info=self.cause
            )
        elif self.status_code >= 400:
            logger.warning(f"Client error {self.error_code}: {self.message}", extra=log_data)
        else:
            logger.info(f"Error {self.error_code}: {self.message}", extra=log_data)

    @property
    def is_server_fault(self) -> bool:
        """True for failures that are the service's fault rather than the caller's."""
        return self.status_code >= 500

    def to_dict(
        self, include_cause: bool = False, include_traceback: bool = False
    ) -> Dict[str, Any]:
        """
        Convert to dict for API responses.

        Server faults are rendered with a generic message and no context so
        that internal details never reach the caller. Operation bookkeeping
        (``operation_*`` keys) is logged but never rendered.

        Args:
            include_cause: Include cause information (useful for debugging)
            include_traceback: Include full traceback (only in debug mode)

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        if self.is_server_fault and not include_cause:
            message = "the server encountered a problem and could not process your request"
            context: Dict[str, Any] = {}
        else:
            message = self.message
            context = {
                k: v
                for k, v in self.context.items()
                if k not in ["cause", "error_id", "correlation_id"]
                and not k.startswith(CALLER_HIDDEN_PREFIX)
            }

        result: Dict[str, Any] = {
            "error": {
                "id": self.error_id,
                "code": self.error_code.value,
                "message": message,
                "timestamp": self.timestamp,
                "context": context,
            }
        }

        if "correlation_id" in self.context:
            result["error"]["correlation_id"] = self.context["correlation_id"]

        if include_cause and "cause" in self.context:
            result["error"]["cause"] = {
                "type": self.context["cause"]["type"],
                "message": self.context["cause"]["message"],
            }
            if include_traceback:
                result["error"]["cause"]["traceback"] = self.context["cause"]["traceback"]

        return result

    def add_context(self, **kwargs: Any) -> "BaseError":
        """
        Add additional context to the error (fluent interface).

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self


# Layer-specific base exceptions
class RepositoryError(BaseError):
    """Repository layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context,
    ):
        """Initialize repository error with database context."""
        super().__init__(message, error_code, status_code, cause, **context)


class ServiceError(BaseError):
    """Service layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        operation: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        """Initialize service error with operation context."""
        if operation:
            context["operation"] = operation
        super().__init__(message, error_code, 500, cause, **context)


class ValidationError(BaseError):
    """Client input failed validation; ``field`` names the offending input."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        cause: Optional[Exception] = None,
        status_code: int = 422,
        **context,
    ):
        """Initialize validation error with field context."""
        self.field = field
        if field:
            context["field"] = field
        super().__init__(message, error_code, status_code, cause, **context)

    @property
    def errors(self) -> Dict[str, str]:
        """Field-level detail in the ``{field: message}`` shape clients expect."""
        return {self.field or "input": self.message}


class NotFoundError(RepositoryError):
    """The requested record does not exist."""

    def __init__(self, message: str = "the requested resource could not be found", **kwargs):
        super().__init__(message, error_code=ErrorCode.NOT_FOUND, status_code=404, **kwargs)


class ConflictError(RepositoryError):
    """A concurrent writer got there first, or a unique key collided. Safe to retry."""

    def __init__(
        self,
        message: str = "unable to update the record due to an edit conflict, please try again",
        **kwargs,
    ):
        super().__init__(message, error_code=ErrorCode.CONFLICT, status_code=409, **kwargs)


class StorageTimeoutError(RepositoryError):
    """A store operation exceeded its deadline and was cancelled."""

    def __init__(self, message: str = "Database operation timed out", **kwargs):
        super().__init__(message, error_code=ErrorCode.TIMEOUT_ERROR, status_code=504, **kwargs)


# ==================== AUTHENTICATION EXCEPTIONS ====================


class AuthenticationError(BaseError):
    """
    Base class for credential failures.

    Every subclass renders the same generic message so that callers cannot
    tell an unknown token from an expired or wrongly-scoped one.
    """

    def __init__(
        self,
        message: str = "invalid or missing authentication token",
        error_code: ErrorCode = ErrorCode.AUTHENTICATION_FAILED,
        **kwargs,
    ):
        super().__init__(message=message, error_code=error_code, status_code=401, **kwargs)


class MissingCredentialError(AuthenticationError):
    """No usable bearer credential was presented."""

    def __init__(self, message: str = "invalid or missing authentication token", **kwargs):
        super().__init__(message, error_code=ErrorCode.MISSING_CREDENTIALS, **kwargs)


class InvalidCredentialError(AuthenticationError):
    """A credential was presented but does not resolve to a subject."""


class TokenGenerationError(BaseError):
    """The entropy source needed to mint a token is unavailable."""

    def __init__(self, message: str = "Unable to generate token", **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.TOKEN_GENERATION_FAILED,
            status_code=500,
            **kwargs,
        )


# Factory functions for common error patterns
def not_found(
    resource_type: str, cause: Optional[Exception] = None, **identifiers
) -> NotFoundError:
    """
    Factory for not found errors.

    Args:
        resource_type: Type of resource (e.g., 'Book', 'User')
        cause: Original exception if any
        **identifiers: Resource identifiers (e.g., book_id=123)

    Returns:
        Configured NotFoundError instance with 404 status
    """
    id_parts = [f"{k}={v}" for k, v in identifiers.items()]
    message = f"{resource_type} not found"
    if id_parts:
        message += f": {', '.join(id_parts)}"

    return NotFoundError(message, cause=cause, resource_type=resource_type, **identifiers)


def duplicate(
    resource_type: str, cause: Optional[Exception] = None, **identifiers
) -> RepositoryError:
    """
    Factory for duplicate resource errors.

    Args:
        resource_type: Type of resource (e.g., 'User')
        cause: Original exception if any
        **identifiers: Resource identifiers

    Returns:
        Configured RepositoryError instance with 409 status
    """
    id_parts = [f"{k}={v}" for k, v in identifiers.items()]
    message = f"Duplicate {resource_type}"
    if id_parts:
        message += f": {', '.join(id_parts)}"

    return RepositoryError(
        message,
        error_code=ErrorCode.DUPLICATE,
        status_code=409,
        cause=cause,
        resource_type=resource_type,
        **identifiers,
    )


def edit_conflict(resource_type: str, **identifiers) -> ConflictError:
    """Factory for optimistic-version mismatches."""
    return ConflictError(resource_type=resource_type, **identifiers)


def validation_failed(
    field: str, value: Any, reason: str, cause: Optional[Exception] = None
) -> ValidationError:
    """
    Factory for validation errors.

    Args:
        field: Field that failed validation
        value: The invalid value
        reason: Why validation failed
        cause: Original exception if any

    Returns:
        Configured ValidationError instance
    """
    return ValidationError(
        reason,
        field=field,
        error_code=ErrorCode.VALIDATION_FAILED,
        cause=cause,
        value=str(value),
    )


# Correlation ID management
def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current thread."""
    _thread_local.correlation_id = correlation_id


def get_correlation_id() -> Optional[str]:
    """Get the current thread's correlation ID."""
    return getattr(_thread_local, "correlation_id", None)


def clear_correlation_id() -> None:
    """Clear the current thread's correlation ID."""
    if hasattr(_thread_local, "correlation_id"):
        delattr(_thread_local, "correlation_id")
