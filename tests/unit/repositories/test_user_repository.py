"""
Tests for UserRepository using a real database session.
"""

import pytest

from catalog_core.db import User
from catalog_core.exceptions import ConflictError, ErrorCode, NotFoundError, RepositoryError
from catalog_core.repositories.user_repository import UserRepository
from tests.fixtures.factories import UserFactory


@pytest.fixture
def user_repository(db_session):
    return UserRepository(db_session)


class TestUserRepository:
    def test_insert_normalizes_email(self, user_repository):
        user = user_repository.insert(
            User(name="Reader", email="Reader@Example.com", password_hash="x")
        )

        assert user.id is not None
        assert user.email == "reader@example.com"
        assert user.activated is False
        assert user.version == 1

    def test_duplicate_email(self, user_repository):
        UserFactory.create(email="taken@example.com")

        with pytest.raises(RepositoryError) as exc_info:
            user_repository.insert(User(name="Other", email="TAKEN@example.com", password_hash="x"))

        assert exc_info.value.error_code == ErrorCode.DUPLICATE

    def test_get_by_email_case_insensitive(self, user_repository, user):
        assert user_repository.get_by_email(user.email.upper()).id == user.id

    def test_get_by_email_missing(self, user_repository):
        with pytest.raises(NotFoundError):
            user_repository.get_by_email("nobody@example.com")

    def test_get_by_id(self, user_repository, user):
        assert user_repository.get_by_id(user.id) is user
        with pytest.raises(NotFoundError):
            user_repository.get_by_id(user.id + 100)

    def test_update_versioned(self, user_repository, user):
        updated = user_repository.update(user.id, user.version, activated=True)

        assert updated.activated is True
        assert updated.version == 2

        with pytest.raises(ConflictError):
            user_repository.update(user.id, 1, name="Stale")
