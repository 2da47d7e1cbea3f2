"""
Base service implementation with session and transaction handling.

A service either owns its session (created from the global
``DatabaseManager``) and commits it, or is handed one by a caller that
coordinates several services and commits itself.
"""

from contextlib import contextmanager
from typing import Any, NoReturn, Optional

from sqlalchemy.orm import Session

from ..db.db_config import get_db_manager
from ..exceptions import BaseError, ErrorCode, ServiceError
from ..utils.logger import ContextAwareLogger, get_logger


class SessionManagedService:
    """
    Service that owns and manages its own database session.

    Each service instance serves one request; sessions are never shared
    between requests.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        logger: Optional[ContextAwareLogger] = None,
    ):
        """
        Initialize service with its own session.

        Args:
            session: Optional existing session (for testing or coordination).
                An injected session is only flushed, never committed.
            logger: Optional logger instance
        """
        if session is not None:
            self.session = session
            self._owns_session = False
        else:
            self.session = self._create_session()
            self._owns_session = True

        self.logger = logger or get_logger()

    def _create_session(self) -> Session:
        """Create a new database session from the global database manager."""
        return get_db_manager().new_session()

    @contextmanager
    def transaction(self):
        """
        Context manager for transactional operations.

        Usage:
            with service.transaction():
                service.create_something()
                service.update_something()
                # Auto-commits on success, rollback on exception
        """
        try:
            yield self.session
            if self._owns_session:
                self.session.commit()
        except Exception:
            if self._owns_session:
                self.session.rollback()
            raise

    def _handle_service_exception(
        self, operation: str, exception: Exception, entity_id: Optional[Any] = None  # noqa
    ) -> NoReturn:
        """
        Re-raise typed errors unchanged; wrap anything else in ServiceError.

        Args:
            operation: Operation being performed
            exception: Exception that occurred
            entity_id: Optional ID of the entity involved

        Raises:
            BaseError: The original error, or a ServiceError wrapping it
        """
        if isinstance(exception, BaseError):
            raise exception

        error_msg = f"Error in {operation}: {str(exception)}"
        self.logger.error(
            error_msg,
            extra={
                "operation": operation,
                "entity_id": entity_id,
                "error_type": type(exception).__name__,
            },
            exc_info=exception,
        )
        raise ServiceError(
            error_msg,
            error_code=ErrorCode.INTERNAL_ERROR,
            operation=operation,
            entity_id=entity_id,
            cause=exception,
        ) from exception

    def commit(self):
        """Manually commit the current transaction."""
        if self._owns_session:
            self.session.commit()

    def rollback(self):
        """Manually rollback the current transaction."""
        if self._owns_session:
            self.session.rollback()

    def close(self):
        """Close the session if we own it."""
        if self._owns_session and self.session:
            self.session.close()

    def __enter__(self):
        """Support for 'with' statement."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Auto-close session on exit."""
        if exc_type:
            self.rollback()
        else:
            self.commit()
        self.close()
