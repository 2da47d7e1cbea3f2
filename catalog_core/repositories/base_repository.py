"""
Base repository implementation with common functionality for all repositories.

Repositories receive a session and never commit or roll back; that is the
service layer's job. Every statement runs under the configured store
deadline.
"""

from contextlib import contextmanager
from typing import Any, Generic, NoReturn, Optional, Type, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_config
from ..context.subject_context import SubjectContext
from ..db.db_base import utc_now
from ..db.statement_timeout import statement_deadline
from ..exceptions import (
    BaseError,
    ErrorCode,
    RepositoryError,
    duplicate,
    edit_conflict,
    not_found,
)
from ..utils.logger import ContextAwareLogger, get_logger

# Type variable for entity models
T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Base repository with common functionality for all repositories."""

    def __init__(
        self,
        session: Session,
        entity_class: Type[T],
        logger: Optional[ContextAwareLogger] = None,
        timeout_seconds: Optional[float] = None,
    ):
        """
        Initialize the base repository.

        Args:
            session: SQLAlchemy session for database operations
            entity_class: SQLAlchemy model class this repository handles
            logger: Optional logger instance
            timeout_seconds: Deadline per operation (default: config.query.store_timeout_seconds)
        """
        self.session = session
        self.entity_class = entity_class
        self.logger = logger or get_logger()
        self.entity_name = entity_class.__name__
        self.timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else get_config().query.store_timeout_seconds
        )

    def _handle_db_error(
        self,
        e: Exception,
        operation_name: str,
        entity_id: Optional[Any] = None,
        **context: Any,
    ) -> NoReturn:
        """
        Map database errors onto the repository error hierarchy.

        Args:
            e: The original exception
            operation_name: Name of the operation that failed
            entity_id: Optional entity ID involved in the operation
            **context: Additional context for the error

        Raises:
            RepositoryError: With appropriate error code and context
        """
        # Already typed (not found, conflict, timeout): keep its code
        if isinstance(e, BaseError):
            raise e

        error_context = {
            "operation_name": operation_name,
            "entity_type": self.entity_name,
            "subject_id": SubjectContext.get_current_subject_id(),
            **context,
        }
        if entity_id is not None:
            error_context["entity_id"] = entity_id

        if isinstance(e, IntegrityError):
            error_message = str(e.orig).lower() if hasattr(e, "orig") else str(e).lower()

            if "foreign key constraint" in error_message:
                self.logger.warning(
                    f"Foreign key constraint violation in {operation_name}",
                    extra=error_context,
                )
                raise RepositoryError(
                    f"Invalid reference in {self.entity_name}",
                    error_code=ErrorCode.CONSTRAINT_VIOLATION,
                    status_code=422,
                    cause=e,
                    **error_context,
                ) from e

            elif "unique constraint" in error_message or "duplicate" in error_message:
                self.logger.warning(
                    f"Duplicate {self.entity_name} in {operation_name}",
                    extra=error_context,
                )
                raise duplicate(
                    resource_type=self.entity_name,
                    cause=e,
                    **error_context,
                ) from e

            else:
                self.logger.error(
                    f"Integrity constraint violation in {operation_name}: {str(e)}",
                    extra=error_context,
                )
                raise RepositoryError(
                    f"Database constraint violation for {self.entity_name}",
                    error_code=ErrorCode.CONSTRAINT_VIOLATION,
                    cause=e,
                    **error_context,
                ) from e

        elif isinstance(e, SQLAlchemyError):
            self.logger.error(
                f"Database error in {operation_name}: {str(e)}",
                extra=error_context,
            )
            raise RepositoryError(
                f"Database error for {self.entity_name}",
                error_code=ErrorCode.DATABASE_ERROR,
                cause=e,
                **error_context,
            ) from e

        else:
            self.logger.error(
                f"Unexpected error in {operation_name}: {str(e)}",
                extra=error_context,
            )
            raise RepositoryError(
                f"Unexpected error for {self.entity_name}",
                error_code=ErrorCode.INTERNAL_ERROR,
                cause=e,
                **error_context,
            ) from e

    @contextmanager
    def _session_operation(
        self, operation_name: str, entity_id: Optional[Any] = None, is_read_only: bool = False
    ):
        """
        Run statements on the existing session under the store deadline.

        Args:
            operation_name: Name of the operation for error reporting
            entity_id: Optional ID of the entity being operated on
            is_read_only: If True, skip the flush

        Yields:
            The existing session

        Raises:
            RepositoryError: If there's a database error (``StorageTimeoutError``
                when the deadline elapsed)
        """
        try:
            with statement_deadline(self.session, self.timeout_seconds):
                yield self.session
                # No commit here; flush so constraint violations surface inside the operation
                if not is_read_only:
                    self.session.flush()
        except Exception as e:
            # No rollback here either; the owning service decides
            self._handle_db_error(e, operation_name, entity_id)

    # ==================== BASE CRUD METHODS ====================

    def _get_by_id(self, entity_id: Any) -> Optional[T]:
        with self._session_operation(f"get_{self.entity_name.lower()}", entity_id, is_read_only=True):
            return self.session.get(self.entity_class, entity_id)

    def _exists(self, entity_id: Any) -> bool:
        """Ask the database, not the identity map, whether the row is still there."""
        query = select(self.entity_class.id).where(self.entity_class.id == entity_id)
        return self.session.execute(query).first() is not None

    def _update_versioned(
        self, entity_id: Any, expected_version: int, operation_name: str, **values: Any
    ) -> T:
        """
        Apply ``values`` only if the stored row still carries ``expected_version``.

        The version is bumped in the same statement, so of two writers holding
        the same version exactly one succeeds.

        Raises:
            NotFoundError: If the row does not exist
            ConflictError: If the row exists with a different version
        """
        entity_class: Any = self.entity_class
        with self._session_operation(operation_name, entity_id):
            query = (
                update(entity_class)
                .where(entity_class.id == entity_id, entity_class.version == expected_version)
                .values(**values, version=entity_class.version + 1, updated_at=utc_now())
                .execution_options(synchronize_session=False)
            )
            result = self.session.execute(query)

            if result.rowcount == 0:
                if not self._exists(entity_id):
                    raise not_found(self.entity_name, id=entity_id)
                raise edit_conflict(
                    self.entity_name, entity_id=entity_id, expected_version=expected_version
                )

            entity = self.session.get(entity_class, entity_id, populate_existing=True)

        self.logger.info(
            f"Updated {self.entity_name}",
            extra={
                "entity_type": self.entity_name,
                "entity_id": entity_id,
                "version": expected_version + 1,
            },
        )
        return entity
