"""
Unit tests for the exception system.

Tests exception classes, factory functions and the caller-facing rendering.
"""

import pytest

from catalog_core.exceptions import (
    AuthenticationError,
    BaseError,
    ConflictError,
    ErrorCode,
    InvalidCredentialError,
    MissingCredentialError,
    NotFoundError,
    RepositoryError,
    ServiceError,
    StorageTimeoutError,
    TokenGenerationError,
    ValidationError,
    clear_correlation_id,
    duplicate,
    edit_conflict,
    get_correlation_id,
    not_found,
    set_correlation_id,
    validation_failed,
)


class TestBaseError:
    """Test BaseError class."""

    def test_basic_error_creation(self):
        """Test creating a basic error."""
        error = BaseError("Test error message")

        assert error.message == "Test error message"
        assert error.error_code == ErrorCode.INTERNAL_ERROR
        assert error.status_code == 500
        assert error.cause is None
        assert error.context["error_id"] == error.error_id
        assert error.is_server_fault

    def test_error_with_cause(self):
        """Test error with underlying cause."""
        original_error = ValueError("Original error")
        error = BaseError("Wrapped error", cause=original_error)

        assert error.cause is original_error
        assert error.context["cause"]["type"] == "ValueError"
        assert error.context["cause"]["message"] == "Original error"

    def test_error_with_correlation_id(self):
        """Test error includes correlation ID when available."""
        set_correlation_id("test-correlation-123")

        try:
            error = BaseError("Test error")
            assert error.context["correlation_id"] == "test-correlation-123"
            assert error.to_dict()["error"]["correlation_id"] == "test-correlation-123"
        finally:
            clear_correlation_id()

        assert get_correlation_id() is None

    def test_add_context_fluent_interface(self):
        """Test adding context using fluent interface."""
        error = BaseError("Test error").add_context(operation_name="list_books")

        assert error.context["operation_name"] == "list_books"

    def test_server_fault_hides_details(self):
        """5xx bodies carry a generic message and no context."""
        error = RepositoryError("connection to db-7 refused", table="books")

        body = error.to_dict()["error"]

        assert body["message"] == (
            "the server encountered a problem and could not process your request"
        )
        assert body["context"] == {}
        assert body["code"] == ErrorCode.DATABASE_ERROR.value

    def test_server_fault_details_on_request(self):
        """include_cause exposes message and cause for debugging."""
        cause = RuntimeError("boom")
        error = ServiceError("wrapped", operation="op", cause=cause)

        body = error.to_dict(include_cause=True)["error"]

        assert body["message"] == "wrapped"
        assert body["cause"] == {"type": "RuntimeError", "message": "boom"}
        assert "traceback" not in body["cause"]

    def test_client_error_keeps_message_and_context(self):
        """4xx bodies carry their message and context."""
        error = ValidationError("must be greater than zero", field="page", value=0)

        body = error.to_dict()["error"]

        assert body["message"] == "must be greater than zero"
        assert body["context"]["field"] == "page"
        assert "error_id" not in body["context"]

    def test_operation_bookkeeping_not_rendered(self):
        error = NotFoundError().add_context(
            operation_name="get_book", operation_id="op-1", operation_duration_ms=1.5
        )

        assert error.to_dict()["error"]["context"] == {}
        assert error.context["operation_name"] == "get_book"


class TestErrorClasses:
    """Status codes and error codes of the typed errors."""

    @pytest.mark.parametrize(
        "error, code, status",
        [
            (NotFoundError(), ErrorCode.NOT_FOUND, 404),
            (ConflictError(), ErrorCode.CONFLICT, 409),
            (StorageTimeoutError(), ErrorCode.TIMEOUT_ERROR, 504),
            (AuthenticationError(), ErrorCode.AUTHENTICATION_FAILED, 401),
            (MissingCredentialError(), ErrorCode.MISSING_CREDENTIALS, 401),
            (InvalidCredentialError(), ErrorCode.AUTHENTICATION_FAILED, 401),
            (TokenGenerationError(), ErrorCode.TOKEN_GENERATION_FAILED, 500),
            (ServiceError("x"), ErrorCode.INTERNAL_ERROR, 500),
        ],
    )
    def test_codes(self, error, code, status):
        assert error.error_code == code
        assert error.status_code == status

    def test_credential_errors_share_message(self):
        """Callers cannot tell a missing credential from a bad one by the message."""
        assert MissingCredentialError().message == InvalidCredentialError().message

    def test_repository_errors_are_repository_errors(self):
        for error in (NotFoundError(), ConflictError(), StorageTimeoutError()):
            assert isinstance(error, RepositoryError)

    def test_validation_error_field_detail(self):
        error = ValidationError("invalid sort value", field="sort")

        assert error.field == "sort"
        assert error.errors == {"sort": "invalid sort value"}
        assert error.status_code == 422

    def test_validation_error_without_field(self):
        assert ValidationError("bad input").errors == {"input": "bad input"}


class TestFactories:
    """Test error factory functions."""

    def test_not_found(self):
        error = not_found("Book", book_id=7)

        assert isinstance(error, NotFoundError)
        assert error.message == "Book not found: book_id=7"
        assert error.context["resource_type"] == "Book"
        assert error.context["book_id"] == 7

    def test_duplicate(self):
        cause = Exception("UNIQUE constraint failed: users.email")
        error = duplicate("User", cause=cause, email="a@example.com")

        assert error.error_code == ErrorCode.DUPLICATE
        assert error.status_code == 409
        assert error.cause is cause

    def test_edit_conflict(self):
        error = edit_conflict("Book", entity_id=3, expected_version=2)

        assert isinstance(error, ConflictError)
        assert error.message == (
            "unable to update the record due to an edit conflict, please try again"
        )
        assert error.context["expected_version"] == 2

    def test_validation_failed(self):
        error = validation_failed("title", "", "must be provided")

        assert error.field == "title"
        assert error.message == "must be provided"
        assert error.context["value"] == ""
