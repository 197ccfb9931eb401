"""Tests for the list query descriptor and pagination envelope."""
import pytest

from app.core.exceptions import ValidationError
from app.core.pagination import paginate_results
from app.schemas.filtering import (
    FilterOperator,
    FilterOption,
    ListOptions,
    QueryDefaults,
    build_filter_options,
)
from app.schemas.pagination import Pagination


class TestNormalize:
    """Test clamping of paging parameters."""

    def test_clamps_page_and_page_size(self):
        opts = ListOptions(page=0, per_page=500).normalize()

        assert opts.page == 1
        assert opts.per_page == 100

    def test_non_positive_page_size_uses_default(self):
        opts = ListOptions(page=-3, per_page=0).normalize(QueryDefaults(default_page_size=25))

        assert opts.page == 1
        assert opts.per_page == 25

    def test_empty_sort_order_defaults_to_descending(self):
        opts = ListOptions(sort_order="").normalize()

        assert opts.sort_order == "desc"
        assert opts.descending

    def test_limit_offset(self):
        assert ListOptions(page=3, per_page=20).limit_offset() == (20, 40)


class TestValidateOptions:
    """Test rejection of malformed options."""

    def test_unknown_sort_order_is_an_error(self):
        with pytest.raises(ValidationError) as exc_info:
            ListOptions(sort_order="sideways").validate_options()

        assert exc_info.value.code == "VAL_LIST_OPTIONS_001"

    def test_empty_filter_field_and_operator(self):
        opts = ListOptions(filters=[FilterOption(field="", operator="")])

        with pytest.raises(ValidationError) as exc_info:
            opts.validate_options()

        assert len(exc_info.value.details["problems"]) == 2

    def test_unknown_operator(self):
        opts = ListOptions(filters=[FilterOption(field="name", operator="regex", value="x")])

        with pytest.raises(ValidationError):
            opts.validate_options()

    def test_operator_unsupported_by_backend(self):
        """An operator the backend cannot evaluate fails instead of being ignored."""
        opts = ListOptions(filters=[FilterOption(field="created_at", operator="gt", value="2024-01-01")])

        with pytest.raises(ValidationError) as exc_info:
            opts.validate_options([FilterOperator.EQ, FilterOperator.LIKE])

        assert "not supported" in exc_info.value.message

    def test_valid_options(self):
        opts = ListOptions(
            sort_by="name",
            sort_order="asc",
            filters=build_filter_options({"name": "Explorer"}),
        )

        opts.validate_options()
        assert opts.filters[0].operator == "eq"


class TestPagination:
    """Test the pagination envelope."""

    def test_envelope_fields(self):
        pagination = Pagination.build(total=21, page=2, per_page=10)

        assert pagination.total_pages == 3
        assert pagination.has_next_page

    def test_last_page_has_no_next(self):
        pagination = Pagination.build(total=20, page=2, per_page=10)

        assert pagination.total_pages == 2
        assert not pagination.has_next_page

    def test_empty_result(self):
        pagination = Pagination.build(total=0, page=1, per_page=10)

        assert pagination.total_pages == 0
        assert not pagination.has_next_page

    def test_paginate_results_slices_window(self):
        items, pagination = paginate_results(list(range(25)), page=3, per_page=10)

        assert items == [20, 21, 22, 23, 24]
        assert pagination.total == 25
        assert not pagination.has_next_page

    def test_paginate_results_past_the_end(self):
        items, pagination = paginate_results([1, 2], page=5, per_page=10)

        assert items == []
        assert pagination.total == 2
