"""
Sort-key allow-listing.

Ordering clauses cannot be bound as parameters, so a client-chosen sort key
must be checked against an explicit allow-list before it goes anywhere near
a query. The column handed back is always the allow-list's own string.
"""

from typing import Iterable, NamedTuple

from ..enums import SortDirection
from ..exceptions import ValidationError


class SortSafelist(tuple):
    """
    Immutable set of accepted sort values for one listing.

    Entries are matched verbatim; a leading ``-`` selects descending order.
    """

    def __new__(cls, values: Iterable[str]) -> "SortSafelist":
        return super().__new__(cls, tuple(values))

    @classmethod
    def with_descending(cls, *columns: str) -> "SortSafelist":
        """Accept each column both ascending and (``-`` prefixed) descending."""
        return cls(list(columns) + [f"-{column}" for column in columns])


class SortSpec(NamedTuple):
    column: str
    direction: SortDirection


def validate_sort(sort: str, safelist: Iterable[str]) -> SortSpec:
    """
    Resolve a client sort value against the allow-list.

    Args:
        sort: Raw value from the client, e.g. ``"-title"``
        safelist: Accepted values

    Returns:
        The column name taken from the allow-list and its direction

    Raises:
        ValidationError: If ``sort`` is not an allow-listed value
    """
    for safe_value in safelist:
        if sort == safe_value:
            if safe_value.startswith("-"):
                return SortSpec(safe_value[1:], SortDirection.DESC)
            return SortSpec(safe_value, SortDirection.ASC)

    raise ValidationError("invalid sort value", field="sort", value=sort)


BOOK_SORT_SAFELIST = SortSafelist.with_descending("id", "title", "author", "published_year")
