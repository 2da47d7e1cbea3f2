"""
Unit tests for sort allow-listing.
"""

import pytest

from catalog_core.enums import SortDirection
from catalog_core.exceptions import ValidationError
from catalog_core.query.sorting import BOOK_SORT_SAFELIST, SortSafelist, SortSpec, validate_sort

SAFELIST = SortSafelist(["id", "title", "-title"])


class TestValidateSort:
    def test_ascending(self):
        assert validate_sort("title", SAFELIST) == SortSpec("title", SortDirection.ASC)

    def test_descending(self):
        assert validate_sort("-title", SAFELIST) == SortSpec("title", SortDirection.DESC)

    @pytest.mark.parametrize("sort", ["price", "-id", "TITLE", "title; DROP TABLE books", ""])
    def test_rejected(self, sort):
        with pytest.raises(ValidationError) as exc_info:
            validate_sort(sort, SAFELIST)

        assert exc_info.value.errors == {"sort": "invalid sort value"}

    def test_column_comes_from_safelist(self):
        spec = validate_sort("-title", SAFELIST)

        assert spec.column == "title"
        assert spec.column in {value.lstrip("-") for value in SAFELIST}


class TestSortSafelist:
    def test_is_immutable_tuple(self):
        assert isinstance(SAFELIST, tuple)
        with pytest.raises(TypeError):
            SAFELIST[0] = "price"  # type: ignore[index]

    def test_with_descending(self):
        safelist = SortSafelist.with_descending("id", "title")

        assert safelist == ("id", "title", "-id", "-title")

    def test_book_safelist(self):
        for column in ("id", "title", "author", "published_year"):
            assert validate_sort(column, BOOK_SORT_SAFELIST).direction == SortDirection.ASC
            assert validate_sort(f"-{column}", BOOK_SORT_SAFELIST).direction == SortDirection.DESC
