"""
Tests for bearer-token authentication against real token storage.
"""

from datetime import timedelta

import pytest

from catalog_core.auth.auth_context import AuthContext
from catalog_core.context.subject_context import SubjectContext
from catalog_core.enums import TokenScope
from catalog_core.exceptions import InvalidCredentialError, MissingCredentialError


@pytest.fixture
def auth_context(token_service):
    return AuthContext(token_service)


@pytest.fixture
def login_token(token_service, user):
    return token_service.issue_authentication_token(user.id).token


class TestExtractBearerToken:
    """Header parsing."""

    def test_extracts_token(self):
        assert AuthContext.extract_bearer_token({"Authorization": "Bearer abc"}) == "abc"

    def test_header_name_case_insensitive(self):
        assert AuthContext.extract_bearer_token({"authorization": "Bearer abc"}) == "abc"

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"Authorization": ""},
            {"Authorization": "abc"},
            {"Authorization": "Basic abc"},
            {"Authorization": "Bearer"},
            {"Authorization": "Bearer "},
            {"Authorization": "Bearer a b"},
        ],
    )
    def test_missing_or_malformed(self, headers):
        with pytest.raises(MissingCredentialError):
            AuthContext.extract_bearer_token(headers)


class TestAuthenticate:
    """Resolution of the presented token."""

    def test_valid_token(self, auth_context, login_token, user):
        subject = auth_context.authenticate({"Authorization": f"Bearer {login_token}"})

        assert subject.id == user.id
        assert subject.email == user.email

    def test_missing_header(self, auth_context):
        with pytest.raises(MissingCredentialError):
            auth_context.authenticate({})

    def test_malformed_token(self, auth_context):
        with pytest.raises(InvalidCredentialError):
            auth_context.authenticate({"Authorization": "Bearer short"})

    def test_failures_are_indistinguishable(self, auth_context, token_service, user, login_token):
        """Unknown, expired and wrong-scope tokens raise the same error and message."""
        mutated = ("B" if login_token[0] != "B" else "C") + login_token[1:]
        expired = token_service.issue_token(
            user.id, timedelta(seconds=-1), TokenScope.AUTHENTICATION
        ).token
        activation = token_service.issue_activation_token(user.id).token

        errors = []
        for token in (mutated, expired, activation):
            with pytest.raises(InvalidCredentialError) as exc_info:
                auth_context.authenticate({"Authorization": f"Bearer {token}"})
            errors.append(exc_info.value)

        assert len({(e.error_code, e.status_code, e.message) for e in errors}) == 1
        assert len({e.cause.message for e in errors}) == 1


class TestAuthenticated:
    """Subject context for the duration of a request."""

    def test_sets_and_clears_subject(self, auth_context, login_token, user):
        with auth_context.authenticated({"Authorization": f"Bearer {login_token}"}) as subject:
            assert SubjectContext.get_current_subject_id() == user.id
            assert subject.id == user.id

        assert SubjectContext.get_current_subject() is None

    def test_failure_sets_no_subject(self, auth_context):
        with pytest.raises(MissingCredentialError):
            with auth_context.authenticated({}):
                pass

        assert SubjectContext.get_current_subject() is None
