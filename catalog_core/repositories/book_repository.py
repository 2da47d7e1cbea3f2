"""
Book storage and listing search.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from ..db.db_book_models import Book
from ..enums import SortDirection
from ..exceptions import ErrorCode, RepositoryError, not_found
from ..query.filters import validate_filters
from ..query.pagination import calculate_metadata, plan_page
from ..query.text_search import text_match
from ..schemas.pagination_schema import Filters, Metadata
from .base_repository import BaseRepository


class BookRepository(BaseRepository[Book]):
    """Repository for catalog records."""

    # Allow-listed sort names -> mapped columns. Nothing else reaches ORDER BY.
    SORT_COLUMNS: Dict[str, Any] = {
        "id": Book.id,
        "title": Book.title,
        "author": Book.author,
        "published_year": Book.published_year,
    }

    def __init__(self, session: Session, timeout_seconds: Optional[float] = None):
        super().__init__(session, Book, timeout_seconds=timeout_seconds)

    def create(self, book: Book) -> Book:
        with self._session_operation("create_book"):
            self.session.add(book)

        self.logger.info("Book created", extra={"book_id": book.id})
        return book

    def get_by_id(self, book_id: int) -> Book:
        """
        Raises:
            NotFoundError: If ``book_id`` is not positive or no such book exists
        """
        if book_id < 1:
            raise not_found("Book", book_id=book_id)

        book = self._get_by_id(book_id)
        if book is None:
            raise not_found("Book", book_id=book_id)
        return book

    def update(self, book_id: int, expected_version: int, **fields: Any) -> Book:
        """Optimistic update; see ``BaseRepository._update_versioned``."""
        if book_id < 1:
            raise not_found("Book", book_id=book_id)
        return self._update_versioned(book_id, expected_version, "update_book", **fields)

    def delete(self, book_id: int) -> None:
        """
        Raises:
            NotFoundError: If there was nothing to delete
        """
        if book_id < 1:
            raise not_found("Book", book_id=book_id)

        query = delete(Book).where(Book.id == book_id).execution_options(synchronize_session="fetch")
        with self._session_operation("delete_book", book_id):
            result = self.session.execute(query)

        if result.rowcount == 0:
            raise not_found("Book", book_id=book_id)
        self.logger.info("Book deleted", extra={"book_id": book_id})

    def search(self, title: str, author: str, filters: Filters) -> Tuple[List[Book], Metadata]:
        """
        One page of books matching the search text, with page metadata.

        A single statement returns the page and, through a window count,
        the size of the whole filtered set, so both come from the same
        snapshot. Rows are ordered by the requested column with ``id`` as a
        tiebreak, which keeps pages stable when sort values repeat.

        Args:
            title: Text to match in the title; empty matches every book
            author: Text to match in the author; empty matches every book
            filters: Page, page size and sort, checked against the allow-list

        Returns:
            The page of books and its metadata; ``([], Metadata())`` when nothing matches

        Raises:
            ValidationError: If the filters are out of bounds or the sort is not allow-listed
        """
        sort = validate_filters(filters)
        plan = plan_page(filters.page, filters.page_size, filters.max_page_size)

        sort_column = self.SORT_COLUMNS.get(sort.column)
        if sort_column is None:
            raise RepositoryError(
                f"Sort value is allow-listed but has no column: {sort.column}",
                error_code=ErrorCode.CONFIGURATION_ERROR,
                sort_column=sort.column,
            )
        order = sort_column.desc() if sort.direction == SortDirection.DESC else sort_column.asc()

        dialect_name = self.session.get_bind().dialect.name
        query = (
            select(func.count().over().label("total_records"), Book)
            .where(
                text_match(dialect_name, Book.title, title),
                text_match(dialect_name, Book.author, author),
            )
            .order_by(order, Book.id.asc())
            .limit(plan.limit)
            .offset(plan.offset)
        )

        with self._session_operation("search_books", is_read_only=True):
            rows = self.session.execute(query).all()

        if not rows:
            return [], Metadata()

        total_records = rows[0].total_records
        books = [row[1] for row in rows]
        return books, calculate_metadata(total_records, filters.page, filters.page_size)
