"""
Test fixtures for the catalog core.

This module provides shared test fixtures including database setup and
per-test cleanup of thread-local context.
"""

import pytest
from sqlalchemy.orm import Session

from catalog_core.config import DatabaseConfig, reset_config
from catalog_core.context.subject_context import SubjectContext
from catalog_core.db import DatabaseManager, import_all_models
from catalog_core.db.db_config import Base, initialize_db
from catalog_core.exceptions import clear_correlation_id
from tests.fixtures.factories import configure_factories


@pytest.fixture(scope="session")
def db_config() -> DatabaseConfig:
    """Create SQLite in-memory database configuration for testing."""
    return DatabaseConfig(connection_string="sqlite:///:memory:", development_mode=True)


@pytest.fixture(scope="session")
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Create and initialize database manager with all models."""
    import_all_models()
    return initialize_db(db_config)


@pytest.fixture(scope="function")
def db_session(db_manager: DatabaseManager) -> Session:
    """
    Create a database session for each test.

    Tables are created before and dropped after every test so that tests
    never see each other's rows.
    """
    session = db_manager.get_session()
    Base.metadata.create_all(db_manager.engine)
    configure_factories(session)

    yield session

    session.rollback()
    db_manager.close_session()
    Base.metadata.drop_all(db_manager.engine)


@pytest.fixture(autouse=True)
def clean_thread_context():
    """Subject, correlation id and config are per-thread/process globals; reset them."""
    yield
    SubjectContext.clear_current_subject()
    clear_correlation_id()
    reset_config()
