"""Tests for request input cleaning and bounds checks."""

from decimal import Decimal

import pytest

from catalog_service.errors import ValidationError
from catalog_service.sanitizer import (
    SortField,
    SortOrder,
    sanitize_category,
    sanitize_description,
    sanitize_general_string,
    sanitize_identifier,
    sanitize_price,
    sanitize_price_threshold,
    sanitize_product_name,
    sanitize_quantity,
    sanitize_search_term,
    validate_pagination,
    validate_sort_field,
    validate_sort_order,
)


class TestSearchTerm:
    def test_none_and_blank_mean_no_filter(self):
        assert sanitize_search_term(None) == ""
        assert sanitize_search_term("   ") == ""

    def test_strips_matcher_metacharacters(self):
        assert sanitize_search_term(" lap$top{}[]()*+?|^\\ ") == "laptop"

    def test_strips_edge_dots_only(self):
        assert sanitize_search_term("...v1.2...") == "v1.2"

    def test_truncates_long_input(self):
        assert len(sanitize_search_term("a" * 250)) == 100


class TestGeneralString:
    def test_trims_and_strips_control_characters(self):
        assert sanitize_general_string("  ab\x00c\x07 ") == "abc"

    def test_keeps_cr_lf_tab(self):
        assert sanitize_general_string("a\r\nb\tc") == "a\r\nb\tc"

    def test_rejects_blank(self):
        with pytest.raises(ValidationError):
            sanitize_general_string("   ")

    def test_rejects_too_long(self):
        with pytest.raises(ValidationError):
            sanitize_general_string("x" * 501)

    def test_rejects_control_only_input(self):
        with pytest.raises(ValidationError):
            sanitize_general_string("\x01")


class TestCategory:
    def test_accepts_allowed_characters(self):
        assert sanitize_category("Tools-2") == "Tools-2"
        assert sanitize_category(" Home_Garden 3 ") == "Home_Garden 3"

    def test_rejects_ampersand(self):
        with pytest.raises(ValidationError) as exc:
            sanitize_category("Tools & Co")
        assert exc.value.field == "category"

    @pytest.mark.parametrize("value", ["", "   ", "c" * 51])
    def test_rejects_empty_or_long(self, value):
        with pytest.raises(ValidationError):
            sanitize_category(value)


class TestPrice:
    def test_rounds_half_up_to_cents(self):
        assert sanitize_price(19.999) == Decimal("20.00")
        assert sanitize_price(2.675) == Decimal("2.68")
        assert sanitize_price("10") == Decimal("10.00")

    def test_none_passes_through(self):
        assert sanitize_price(None) is None

    @pytest.mark.parametrize(
        "value", [1000000.00, 0.0, 0.009, -5, float("nan"), float("inf"), "abc", True]
    )
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            sanitize_price(value)

    def test_bounds_are_inclusive(self):
        assert sanitize_price(0.01) == Decimal("0.01")
        assert sanitize_price(999999.99) == Decimal("999999.99")

    def test_threshold_allows_zero(self):
        assert sanitize_price_threshold(0) == Decimal("0")
        with pytest.raises(ValidationError):
            sanitize_price_threshold(-1)


class TestQuantity:
    def test_accepts_zero_and_none(self):
        assert sanitize_quantity(0) == 0
        assert sanitize_quantity(None) is None

    def test_rejects_negative(self):
        with pytest.raises(ValidationError):
            sanitize_quantity(-1)

    def test_upper_bound(self):
        assert sanitize_quantity(2**31 - 1) == 2**31 - 1
        with pytest.raises(ValidationError):
            sanitize_quantity(2**31)
        with pytest.raises(ValidationError):
            sanitize_quantity(2**63)


class TestNameAndDescription:
    def test_name_is_trimmed(self):
        assert sanitize_product_name("  Drill  ") == "Drill"

    @pytest.mark.parametrize("value", [None, "", "   ", "A", "n" * 101])
    def test_name_rejects(self, value):
        with pytest.raises(ValidationError):
            sanitize_product_name(value)

    @pytest.mark.parametrize("value", ["\x01\x02", "a\x00", " \x01 a \x02"])
    def test_name_length_counts_cleaned_text(self, value):
        with pytest.raises(ValidationError):
            sanitize_product_name(value)

    def test_name_control_characters_removed_before_trim(self):
        assert sanitize_product_name("\x01 Drill \x02") == "Drill"

    def test_control_only_description_is_absent(self):
        assert sanitize_description("\x01\x02") is None

    def test_blank_description_is_absent(self):
        assert sanitize_description(None) is None
        assert sanitize_description("   ") is None

    def test_description_strips_control_keeps_newline(self):
        assert sanitize_description("line1\nline2\x1b") == "line1\nline2"

    def test_description_too_long(self):
        with pytest.raises(ValidationError):
            sanitize_description("d" * 501)


class TestPaginationParams:
    def test_boundaries(self):
        validate_pagination(0, 100)
        validate_pagination(3, 1)

    @pytest.mark.parametrize("page,size", [(-1, 10), (0, 0), (0, 101)])
    def test_rejects(self, page, size):
        with pytest.raises(ValidationError):
            validate_pagination(page, size)


class TestSort:
    def test_sort_field_is_case_insensitive(self):
        assert validate_sort_field("PRICE") is SortField.PRICE

    def test_sort_field_defaults_to_name(self):
        assert validate_sort_field(None) is SortField.NAME
        assert validate_sort_field("  ") is SortField.NAME

    def test_unknown_sort_field_names_allow_list(self):
        with pytest.raises(ValidationError) as exc:
            validate_sort_field("color")
        assert "id, name, price, quantity, category, description" in exc.value.message

    def test_sort_order(self):
        assert validate_sort_order(None) is SortOrder.ASC
        assert validate_sort_order("desc") is SortOrder.DESC
        with pytest.raises(ValidationError):
            validate_sort_order("sideways")


class TestIdentifier:
    def test_accepts_24_hex(self):
        assert sanitize_identifier(" 65A1B2C3D4E5F60718293A4B ") == "65a1b2c3d4e5f60718293a4b"

    @pytest.mark.parametrize("value", [None, "", "123", "z" * 24, "a" * 25, "{$ne: null}"])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValidationError):
            sanitize_identifier(value)
