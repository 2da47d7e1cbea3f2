"""
Pydantic schemas for Book data transfer.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import Limits
from ..exceptions import validation_failed
from .mixins import ClientInputMixin
from .pagination_schema import Metadata

# Book columns that cannot be cleared through an update
NON_NULLABLE_FIELDS = ("title", "author")


def _check_title(v: str) -> str:
    if v == "":
        raise validation_failed("title", v, "must be provided")
    if len(v.encode("utf-8")) > Limits.MAX_TITLE_BYTES:
        raise validation_failed("title", v, "must not be more than 100 bytes long")
    return v


def _check_author(v: str) -> str:
    if len(v.encode("utf-8")) > Limits.MAX_AUTHOR_BYTES:
        raise validation_failed("author", v, "must not be more than 100 bytes long")
    return v


class BookCreate(ClientInputMixin):
    """
    Schema for adding a book to the catalog.
    """

    title: str = Field(default="", validate_default=True)
    author: str = ""
    published_year: Optional[int] = None

    @field_validator("title")
    def validate_title(cls, v: str) -> str:
        return _check_title(v)

    @field_validator("author")
    def validate_author(cls, v: str) -> str:
        return _check_author(v)


class BookUpdate(ClientInputMixin):
    """
    Partial update of a book.

    ``version`` is the version the caller last read; the update only applies
    if the stored row still carries it.
    """

    version: int
    title: Optional[str] = None
    author: Optional[str] = None
    published_year: Optional[int] = None

    @field_validator("title")
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _check_title(v) if v is not None else v

    @field_validator("author")
    def validate_author(cls, v: Optional[str]) -> Optional[str]:
        return _check_author(v) if v is not None else v

    def changes(self) -> dict:
        """
        Fields the caller actually supplied, minus the version.

        An explicit null for a required column means "not supplied";
        ``published_year`` may be cleared with one.
        """
        changes = self.model_dump(exclude_unset=True, exclude={"version"})
        for field in NON_NULLABLE_FIELDS:
            if changes.get(field, "") is None:
                del changes[field]
        return changes


class BookRead(BaseModel):
    """
    Schema for reading book data.
    """

    id: int
    title: str
    author: str
    published_year: Optional[int] = None
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, extra="ignore")


class BookPage(BaseModel):
    """One page of a book listing with its metadata."""

    books: List[BookRead] = Field(default_factory=list)
    metadata: Metadata = Field(default_factory=Metadata)
