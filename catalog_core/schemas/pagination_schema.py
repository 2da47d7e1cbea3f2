"""
Pydantic schemas for listing parameters and page metadata.
"""

from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..constants import Limits
from ..exceptions import ErrorCode, ValidationError


class Metadata(BaseModel):
    """
    Page bookkeeping returned alongside every listing.

    Derived per request and never stored. A listing with no matching
    records yields the zero-valued default.
    """

    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0

    model_config = ConfigDict(frozen=True)


class Filters(BaseModel):
    """
    Client-controlled listing parameters plus the allow-list they are checked against.

    Construction does not validate the values; ``query.filters.validate_filters``
    does, before any query is built.
    """

    page: int = Limits.DEFAULT_PAGE
    page_size: int = Limits.DEFAULT_PAGE_SIZE
    sort: str = "id"
    sort_safelist: Tuple[str, ...] = ("id",)
    max_page_size: int = Limits.MAX_PAGE_SIZE


class ListingParams(BaseModel):
    """Search text and filters for a record listing."""

    title: str = ""
    author: str = ""
    filters: Filters = Field(default_factory=Filters)

    @classmethod
    def from_query(
        cls,
        query: Mapping[str, str],
        safelist: Tuple[str, ...],
        max_page_size: Optional[int] = None,
    ) -> "ListingParams":
        """
        Build listing parameters from a query-string mapping.

        Missing keys fall back to their defaults.

        Raises:
            ValidationError: If ``page`` or ``page_size`` is not an integer
        """
        return cls(
            title=query.get("title", ""),
            author=query.get("author", ""),
            filters=Filters(
                page=_read_int(query, "page", Limits.DEFAULT_PAGE),
                page_size=_read_int(query, "page_size", Limits.DEFAULT_PAGE_SIZE),
                sort=query.get("sort", "id"),
                sort_safelist=tuple(safelist),
                max_page_size=max_page_size or Limits.MAX_PAGE_SIZE,
            ),
        )


def _read_int(query: Mapping[str, str], key: str, default: int) -> int:
    raw = query.get(key, "")
    if raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            "must be an integer value",
            field=key,
            error_code=ErrorCode.TYPE_MISMATCH,
            cause=e,
            value=raw,
        ) from e
