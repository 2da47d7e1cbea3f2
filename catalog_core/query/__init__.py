"""Safe listing queries: sort allow-lists, page planning and text search."""

from .filters import validate_filters
from .pagination import PagePlan, calculate_metadata, plan_page, validate_page
from .sorting import BOOK_SORT_SAFELIST, SortSafelist, SortSpec, validate_sort
from .text_search import escape_like, text_match

__all__ = [
    "BOOK_SORT_SAFELIST",
    "PagePlan",
    "SortSafelist",
    "SortSpec",
    "calculate_metadata",
    "escape_like",
    "plan_page",
    "text_match",
    "validate_filters",
    "validate_page",
    "validate_sort",
]
