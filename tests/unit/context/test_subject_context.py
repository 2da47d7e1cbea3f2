"""
Tests for the authenticated-subject context.
"""

from datetime import datetime, timezone

import pytest

from catalog_core.context.subject_context import (
    SubjectContext,
    requires_subject,
    subject_context,
)
from catalog_core.exceptions import MissingCredentialError
from catalog_core.schemas.user_schema import UserRead


def make_subject(user_id: int) -> UserRead:
    return UserRead(
        id=user_id,
        name=f"Reader {user_id}",
        email=f"reader{user_id}@example.com",
        activated=True,
        version=1,
        created_at=datetime.now(timezone.utc),
    )


@requires_subject
def protected_action():
    return SubjectContext.get_current_subject_id()


class TestSubjectContext:
    def test_anonymous_by_default(self):
        assert SubjectContext.get_current_subject() is None
        assert SubjectContext.get_current_subject_id() is None

    def test_nested_contexts_restore_previous(self):
        with subject_context(make_subject(1)):
            with subject_context(make_subject(2)):
                assert SubjectContext.get_current_subject_id() == 2
            assert SubjectContext.get_current_subject_id() == 1

        assert SubjectContext.get_current_subject() is None

    def test_cleared_after_error(self):
        with pytest.raises(RuntimeError):
            with subject_context(make_subject(1)):
                raise RuntimeError("boom")

        assert SubjectContext.get_current_subject() is None


class TestRequiresSubject:
    def test_rejects_anonymous(self):
        with pytest.raises(MissingCredentialError) as exc_info:
            protected_action()

        assert exc_info.value.status_code == 401

    def test_runs_for_subject(self):
        with subject_context(make_subject(7)):
            assert protected_action() == 7
