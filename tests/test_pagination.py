"""Tests for page window arithmetic and metadata."""

import pytest

from catalog_service.errors import ValidationError
from catalog_service.pagination import PageRequest, build_page
from catalog_service.sanitizer import SortField, SortOrder


class TestPageRequest:
    def test_window(self):
        request = PageRequest(page=3, size=20)
        assert request.offset == 60
        assert request.limit == 20

    def test_parse_applies_defaults_and_validation(self):
        request = PageRequest.parse(0, 5, None, None)
        assert request.sort_field is SortField.NAME
        assert request.sort_order is SortOrder.ASC

        request = PageRequest.parse(1, 10, "Price", "desc")
        assert request.sort_field is SortField.PRICE
        assert request.sort_order is SortOrder.DESC

    def test_parse_rejects_bad_size(self):
        with pytest.raises(ValidationError):
            PageRequest.parse(0, 101, "name", "ASC")

    def test_order_by_adds_id_tiebreak(self):
        assert len(PageRequest(0, 5, SortField.PRICE).order_by()) == 2
        assert len(PageRequest(0, 5, SortField.ID).order_by()) == 1


class TestBuildPage:
    def test_empty_collection(self):
        page = build_page([], 0, 10, 0)
        assert page.total_pages == 0
        assert page.is_first and page.is_last
        assert not page.has_next and not page.has_previous

    def test_middle_page(self):
        page = build_page([], 1, 10, 35)
        assert page.total_pages == 4
        assert not page.is_first and not page.is_last
        assert page.has_next and page.has_previous

    def test_last_page_partial(self):
        page = build_page([], 3, 10, 35)
        assert page.is_last
        assert not page.has_next

    def test_past_the_end_is_not_an_error(self):
        page = build_page([], 9, 10, 35)
        assert page.content == []
        assert page.is_last
        assert page.has_previous
