"""
Validation of a complete set of listing filters.
"""

from ..schemas.pagination_schema import Filters
from .pagination import validate_page
from .sorting import SortSpec, validate_sort


def validate_filters(filters: Filters) -> SortSpec:
    """
    Check page bounds and the sort value; return the resolved sort.

    Raises:
        ValidationError: On the first offending field
    """
    validate_page(filters.page, filters.page_size, filters.max_page_size)
    return validate_sort(filters.sort, filters.sort_safelist)
