"""
Page planning and page metadata.
"""

import math
from typing import NamedTuple

from ..constants import Limits
from ..exceptions import ValidationError
from ..schemas.pagination_schema import Metadata


class PagePlan(NamedTuple):
    limit: int
    offset: int


def validate_page(page: int, page_size: int, max_page_size: int = Limits.MAX_PAGE_SIZE) -> None:
    """
    Check page bounds before anything is planned.

    Raises:
        ValidationError: With ``field`` set to ``page`` or ``page_size``
    """
    if page <= 0:
        raise ValidationError("must be greater than zero", field="page", value=page)
    if page > Limits.MAX_PAGE:
        raise ValidationError("must be a maximum of 10 million", field="page", value=page)
    if page_size <= 0:
        raise ValidationError("must be greater than zero", field="page_size", value=page_size)
    if page_size > max_page_size:
        raise ValidationError(
            f"must be a maximum of {max_page_size}", field="page_size", value=page_size
        )


def plan_page(page: int, page_size: int, max_page_size: int = Limits.MAX_PAGE_SIZE) -> PagePlan:
    """Validate the bounds and turn them into LIMIT/OFFSET values."""
    validate_page(page, page_size, max_page_size)
    return PagePlan(limit=page_size, offset=(page - 1) * page_size)


def calculate_metadata(total_records: int, page: int, page_size: int) -> Metadata:
    """
    Page bookkeeping for a result set of ``total_records`` rows.

    No side effects. An empty result set has no pages, so every field is zero.
    """
    if total_records == 0:
        return Metadata()

    return Metadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=math.ceil(total_records / page_size),
        total_records=total_records,
    )
