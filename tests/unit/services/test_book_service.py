"""
Tests for BookService.
"""

from unittest.mock import patch

import pytest

from catalog_core.config import QueryConfig
from catalog_core.exceptions import (
    ConflictError,
    ErrorCode,
    MissingCredentialError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from catalog_core.schemas.book_schema import BookCreate, BookUpdate
from catalog_core.schemas.pagination_schema import Metadata
from catalog_core.services.book_service import BookService
from tests.fixtures.factories import BookFactory


class TestReads:
    def test_get_book(self, book_service):
        book = BookFactory.create(title="Dune")

        assert book_service.get_book(book.id).title == "Dune"

    @pytest.mark.parametrize("book_id", [0, 99])
    def test_get_missing(self, book_service, book_id):
        with pytest.raises(NotFoundError):
            book_service.get_book(book_id)

    def test_reads_need_no_subject(self, book_service):
        BookFactory.create()

        assert book_service.list_books().metadata.total_records == 1


class TestWrites:
    @pytest.mark.usefixtures("authenticated_subject")
    def test_create(self, book_service):
        created = book_service.create_book(
            BookCreate(title="Dune", author="Frank Herbert", published_year=1965)
        )

        assert created.id is not None
        assert created.version == 1
        assert book_service.get_book(created.id).author == "Frank Herbert"

    def test_create_requires_subject(self, book_service):
        with pytest.raises(MissingCredentialError):
            book_service.create_book(BookCreate(title="Dune"))

    @pytest.mark.usefixtures("authenticated_subject")
    def test_partial_update(self, book_service):
        book = BookFactory.create(title="Dune", author="Frank Herbert")

        updated = book_service.update_book(book.id, BookUpdate(version=1, title="Dune Messiah"))

        assert updated.title == "Dune Messiah"
        assert updated.author == "Frank Herbert"
        assert updated.version == 2

    @pytest.mark.usefixtures("authenticated_subject")
    def test_null_title_means_unchanged(self, book_service):
        book = BookFactory.create(title="Dune", author="Frank Herbert", published_year=1965)

        updated = book_service.update_book(
            book.id, BookUpdate(version=1, title=None, author=None, published_year=None)
        )

        assert updated.title == "Dune"
        assert updated.author == "Frank Herbert"
        assert updated.published_year is None
        assert updated.version == 2

    @pytest.mark.usefixtures("authenticated_subject")
    def test_update_stale_version(self, book_service):
        book = BookFactory.create()
        book_service.update_book(book.id, BookUpdate(version=1, title="First"))

        with pytest.raises(ConflictError) as exc_info:
            book_service.update_book(book.id, BookUpdate(version=1, title="Second"))

        assert exc_info.value.status_code == 409

    @pytest.mark.usefixtures("authenticated_subject")
    def test_delete(self, book_service):
        book = BookFactory.create()
        book_id = book.id

        book_service.delete_book(book_id)

        with pytest.raises(NotFoundError):
            book_service.get_book(book_id)

    def test_delete_requires_subject(self, book_service):
        book = BookFactory.create()

        with pytest.raises(MissingCredentialError):
            book_service.delete_book(book.id)

    @pytest.mark.usefixtures("authenticated_subject")
    def test_unexpected_failure_wrapped(self, book_service):
        with patch.object(book_service.repository, "create", side_effect=RuntimeError("disk on fire")):
            with pytest.raises(ServiceError) as exc_info:
                book_service.create_book(BookCreate(title="Dune"))

        assert exc_info.value.error_code == ErrorCode.INTERNAL_ERROR
        assert isinstance(exc_info.value.cause, RuntimeError)


class TestListBooks:
    def test_defaults(self, book_service):
        BookFactory.create_batch(25)

        page = book_service.list_books()

        assert len(page.books) == 20
        assert page.metadata == Metadata(
            current_page=1, page_size=20, first_page=1, last_page=2, total_records=25
        )

    def test_empty(self, book_service):
        page = book_service.list_books(title="nothing matches")

        assert page.books == []
        assert page.metadata == Metadata()

    def test_from_query(self, book_service):
        for title in ("Cosmos", "Anathem", "Blindsight"):
            BookFactory.create(title=title)

        page = book_service.list_books_from_query({"sort": "-title", "page_size": "2"})

        assert [book.title for book in page.books] == ["Cosmos", "Blindsight"]
        assert page.metadata.last_page == 2

    def test_from_query_rejects_unsafe_sort(self, book_service):
        with pytest.raises(ValidationError) as exc_info:
            book_service.list_books_from_query({"sort": "title; DROP TABLE books"})

        assert exc_info.value.field == "sort"

    def test_configured_ceiling(self, db_session):
        service = BookService(session=db_session, config=QueryConfig(max_page_size=10))

        with pytest.raises(ValidationError) as exc_info:
            service.list_books_from_query({"page_size": "11"})

        assert exc_info.value.errors == {"page_size": "must be a maximum of 10"}
