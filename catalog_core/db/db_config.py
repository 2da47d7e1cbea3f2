"""
Engine and session management.

Connection settings come from ``catalog_core.config.DatabaseConfig``; the
URL decides the dialect. PostgreSQL engines get a sized pool, SQLite
engines get foreign keys switched on for every connection so that token
rows cascade with their user.
"""

from typing import Any, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, configure_mappers, declarative_base, scoped_session, sessionmaker

from ..config import DatabaseConfig, get_config
from ..exceptions import ErrorCode, ServiceError, ValidationError
from ..utils import get_logger

# Base class for all SQLAlchemy models
Base: Any = declarative_base()

SUPPORTED_BACKENDS = ("postgresql", "sqlite")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # ON DELETE CASCADE is ignored unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """
    Owns the engine plus two ways of getting a session: the thread's
    scoped session, and fresh sessions for services that manage their own
    transaction.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.engine = self._create_engine()
        self.session_factory = sessionmaker(bind=self.engine)
        self.scoped_session = scoped_session(self.session_factory)

    def __repr__(self) -> str:
        return f"DatabaseManager(url={self.engine.url.render_as_string(hide_password=True)!r})"

    @property
    def backend(self) -> str:
        return self.engine.dialect.name

    def _create_engine(self) -> Engine:
        try:
            url = make_url(self.config.connection_string)
        except ArgumentError as e:
            raise ValidationError(
                "Malformed database connection string",
                field="connection_string",
                error_code=ErrorCode.INVALID_FORMAT,
                cause=e,
            ) from e

        backend = url.get_backend_name()
        if backend not in SUPPORTED_BACKENDS:
            raise ValidationError(
                f"Unsupported database backend: {backend}",
                field="connection_string",
                error_code=ErrorCode.INVALID_FORMAT,
                value=backend,
            )

        if backend == "sqlite":
            engine = create_engine(
                url, echo=self.config.echo, connect_args={"check_same_thread": False}
            )
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
            return engine

        return create_engine(
            url,
            echo=self.config.echo,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
            pool_pre_ping=True,
        )

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """
        Raises:
            ServiceError: Unless the configuration is in development mode
        """
        if not self.config.development_mode:
            raise ServiceError(
                "Cannot drop tables: not in development mode",
                error_code=ErrorCode.CONFIGURATION_ERROR,
                operation="drop_tables",
            )
        Base.metadata.drop_all(self.engine)

    def get_session(self) -> Session:
        return self.scoped_session()

    def new_session(self) -> Session:
        """A session that is not shared with the thread's scoped session."""
        return self.session_factory()

    def close_session(self, session: Optional[Session] = None) -> None:
        if session is not None:
            session.close()
        else:
            self.scoped_session.remove()

    def close(self) -> None:
        self.scoped_session.remove()
        self.engine.dispose()


def import_all_models() -> None:
    """Register every model with ``Base.metadata`` and resolve relationships."""
    from .db_book_models import Book  # noqa
    from .db_token_models import Token  # noqa
    from .db_user_models import User  # noqa

    configure_mappers()


_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """
    Raises:
        ServiceError: If ``initialize_db`` has not been called
    """
    if _db_manager is None:
        raise ServiceError(
            "Database manager not initialized. Call initialize_db() first.",
            error_code=ErrorCode.CONFIGURATION_ERROR,
            operation="get_db_manager",
        )
    return _db_manager


def set_db_manager(manager: Optional[DatabaseManager]) -> None:
    """Swap the process-wide manager, e.g. for a test database."""
    global _db_manager
    _db_manager = manager


def initialize_db(config: Optional[DatabaseConfig] = None) -> DatabaseManager:
    """
    Create the process-wide manager and the tables.

    Args:
        config: Connection settings (default: ``get_config().database``)
    """
    global _db_manager

    config = config or get_config().database
    _db_manager = DatabaseManager(config)
    get_logger().info("Initializing DB", extra={"backend": _db_manager.backend})

    import_all_models()
    _db_manager.create_tables()
    return _db_manager


def close_db() -> None:
    """Dispose of the process-wide engine, if any."""
    global _db_manager
    if _db_manager is not None:
        _db_manager.close()
        _db_manager = None
