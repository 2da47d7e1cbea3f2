"""
Unit test conftest.py - Component-specific fixtures.

Services get the test session injected, so they flush but never commit.
"""

import pytest

from catalog_core.context.subject_context import subject_context
from catalog_core.schemas.user_schema import UserRead
from catalog_core.services.book_service import BookService
from catalog_core.services.token_service import TokenService
from catalog_core.services.user_service import UserService
from tests.fixtures.factories import UserFactory


@pytest.fixture(scope="function")
def token_service(db_session):
    """Token service with test session."""
    return TokenService(session=db_session)


@pytest.fixture(scope="function")
def user_service(db_session):
    """User service with test session."""
    return UserService(session=db_session)


@pytest.fixture(scope="function")
def book_service(db_session):
    """Book service with test session."""
    return BookService(session=db_session)


@pytest.fixture(scope="function")
def user(db_session):
    """A persisted user."""
    return UserFactory.create()


@pytest.fixture(scope="function")
def authenticated_subject(user):
    """Run the test with ``user`` as the current subject."""
    with subject_context(UserRead.model_validate(user)) as subject:
        yield subject
