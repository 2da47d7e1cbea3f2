"""
Book catalog operations.
"""

from typing import Mapping, Optional

from sqlalchemy.orm import Session

from ..config import QueryConfig, get_config
from ..context.operation_context import operation
from ..context.subject_context import requires_subject
from ..db.db_book_models import Book
from ..query.sorting import BOOK_SORT_SAFELIST
from ..repositories.book_repository import BookRepository
from ..schemas.book_schema import BookCreate, BookPage, BookRead, BookUpdate
from ..schemas.pagination_schema import Filters, ListingParams
from .base_service import SessionManagedService


class BookService(SessionManagedService):
    """Reads are open to anyone; writes need an authenticated subject."""

    def __init__(
        self,
        session: Optional[Session] = None,
        config: Optional[QueryConfig] = None,
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__(session=session)
        self.config = config or get_config().query
        self.repository = BookRepository(self.session, timeout_seconds=timeout_seconds)

    def default_filters(self) -> Filters:
        return Filters(
            page_size=self.config.default_page_size,
            sort_safelist=BOOK_SORT_SAFELIST,
            max_page_size=self.config.max_page_size,
        )

    @operation()
    def get_book(self, book_id: int) -> BookRead:
        """
        Raises:
            NotFoundError: If ``book_id`` is not positive or no such book exists
        """
        try:
            with self.transaction():
                return BookRead.model_validate(self.repository.get_by_id(book_id))
        except Exception as e:
            self._handle_service_exception("get_book", e, book_id)

    @operation()
    @requires_subject
    def create_book(self, data: BookCreate) -> BookRead:
        try:
            with self.transaction():
                book = self.repository.create(Book(**data.model_dump()))
                return BookRead.model_validate(book)
        except Exception as e:
            self._handle_service_exception("create_book", e)

    @operation()
    @requires_subject
    def update_book(self, book_id: int, data: BookUpdate) -> BookRead:
        """
        Apply the supplied fields if the book is still at ``data.version``.

        Raises:
            NotFoundError: If the book does not exist
            ConflictError: If someone else updated it first
        """
        try:
            with self.transaction():
                book = self.repository.update(book_id, data.version, **data.changes())
                return BookRead.model_validate(book)
        except Exception as e:
            self._handle_service_exception("update_book", e, book_id)

    @operation()
    @requires_subject
    def delete_book(self, book_id: int) -> None:
        try:
            with self.transaction():
                self.repository.delete(book_id)
        except Exception as e:
            self._handle_service_exception("delete_book", e, book_id)

    @operation()
    def list_books(
        self, title: str = "", author: str = "", filters: Optional[Filters] = None
    ) -> BookPage:
        """
        Search the catalog one page at a time.

        Raises:
            ValidationError: If the filters are out of bounds or the sort is not allow-listed
        """
        filters = filters or self.default_filters()
        try:
            with self.transaction():
                books, metadata = self.repository.search(title, author, filters)
                return BookPage(
                    books=[BookRead.model_validate(book) for book in books], metadata=metadata
                )
        except Exception as e:
            self._handle_service_exception("list_books", e)

    def list_books_from_query(self, query: Mapping[str, str]) -> BookPage:
        """Parse query-string parameters, then ``list_books``."""
        params = ListingParams.from_query(
            query, BOOK_SORT_SAFELIST, max_page_size=self.config.max_page_size
        )
        return self.list_books(params.title, params.author, params.filters)
