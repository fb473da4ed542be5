"""
Cleaning and bounds checks for every value that comes in from a request.

Each function returns the cleaned value or raises ValidationError naming the
offending field. Nothing reaches the store without passing through here.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum

from .config import (
    ID_LENGTH,
    MAX_CATEGORY_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PAGE_SIZE,
    MAX_PRICE,
    MAX_QUANTITY,
    MAX_SEARCH_LENGTH,
    MAX_STRING_LENGTH,
    MIN_NAME_LENGTH,
    MIN_PAGE_SIZE,
    MIN_PRICE,
    MIN_QUANTITY,
)
from .errors import ValidationError

_PRICE_MIN = Decimal(MIN_PRICE)
_PRICE_MAX = Decimal(MAX_PRICE)
_CENTS = Decimal("0.01")

# Characters meaningful to regex / substring matchers
_SEARCH_SPECIAL = re.compile(r"[$}{\[\]()*+?|^\\]")
_EDGE_DOTS = re.compile(r"^\.+|\.+$")
# Control characters except TAB, LF, CR
_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_CATEGORY = re.compile(r"[A-Za-z0-9 _-]+")
_IDENTIFIER = re.compile(rf"[0-9a-fA-F]{{{ID_LENGTH}}}")


class SortField(str, Enum):
    ID = "id"
    NAME = "name"
    PRICE = "price"
    QUANTITY = "quantity"
    CATEGORY = "category"
    DESCRIPTION = "description"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


def _strip_control(value: str) -> str:
    return _CONTROL.sub("", value)


def sanitize_search_term(term: str | None) -> str:
    """
    Clean a free-text search term.

    Never fails: over-long input is cut to MAX_SEARCH_LENGTH, matcher
    metacharacters and leading/trailing dots are removed. An empty result
    means "no filter".
    """
    if term is None:
        return ""
    term = term.strip()
    if not term:
        return ""
    term = term[:MAX_SEARCH_LENGTH]
    term = _SEARCH_SPECIAL.sub("", term)
    return _EDGE_DOTS.sub("", term)


def sanitize_general_string(value: str | None, field: str = "value") -> str | None:
    if value is None:
        return None
    value = _strip_control(value).strip()
    if not value:
        raise ValidationError(f"{field} cannot be empty or only whitespace", field)
    if len(value) > MAX_STRING_LENGTH:
        raise ValidationError(
            f"{field} exceeds maximum length of {MAX_STRING_LENGTH} characters", field
        )
    return value


def sanitize_category(category: str | None) -> str | None:
    if category is None:
        return None
    category = category.strip()
    if not category:
        raise ValidationError("Category cannot be empty", "category")
    if len(category) > MAX_CATEGORY_LENGTH:
        raise ValidationError(
            f"Category exceeds maximum length of {MAX_CATEGORY_LENGTH} characters",
            "category",
        )
    if not _CATEGORY.fullmatch(category):
        raise ValidationError(
            "Category can only contain letters, numbers, spaces, hyphens, and underscores",
            "category",
        )
    return category


def _to_decimal(value, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field} value", field)
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid {field} value", field)
    if not number.is_finite():
        raise ValidationError(f"Invalid {field} value", field)
    return number


def sanitize_price(price, field: str = "price") -> Decimal | None:
    """Bounds-check a price and round it half-up to cents. None passes through."""
    if price is None:
        return None
    number = _to_decimal(price, field)
    if number < _PRICE_MIN:
        raise ValidationError(f"Price must be at least {MIN_PRICE}", field)
    if number > _PRICE_MAX:
        raise ValidationError(f"Price cannot exceed {MAX_PRICE}", field)
    return number.quantize(_CENTS, rounding=ROUND_HALF_UP)


def sanitize_price_threshold(price, field: str = "price") -> Decimal:
    """A comparison bound: any finite, non-negative number."""
    number = _to_decimal(price, field)
    if number < 0:
        raise ValidationError(f"{field} cannot be negative", field)
    return number


def sanitize_quantity(quantity: int | None) -> int | None:
    if quantity is None:
        return None
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer", "quantity")
    if quantity < MIN_QUANTITY:
        raise ValidationError(f"Quantity cannot be less than {MIN_QUANTITY}", "quantity")
    if quantity > MAX_QUANTITY:
        raise ValidationError(f"Quantity cannot exceed {MAX_QUANTITY}", "quantity")
    return quantity


def sanitize_product_name(name: str | None) -> str:
    name = _strip_control(name).strip() if name is not None else ""
    if not name:
        raise ValidationError("Product name is required", "name")
    if len(name) < MIN_NAME_LENGTH:
        raise ValidationError(
            f"Product name must be at least {MIN_NAME_LENGTH} characters", "name"
        )
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Product name cannot exceed {MAX_NAME_LENGTH} characters", "name"
        )
    return name


def sanitize_description(description: str | None) -> str | None:
    """Returns None for a missing or blank description."""
    if description is None:
        return None
    description = _strip_control(description).strip()
    if not description:
        return None
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description exceeds maximum length of {MAX_DESCRIPTION_LENGTH} characters",
            "description",
        )
    return description


def validate_pagination(page: int, size: int) -> None:
    if page < 0:
        raise ValidationError("Page number cannot be negative", "page")
    if size < MIN_PAGE_SIZE:
        raise ValidationError(f"Page size must be at least {MIN_PAGE_SIZE}", "size")
    if size > MAX_PAGE_SIZE:
        raise ValidationError(f"Page size cannot exceed {MAX_PAGE_SIZE}", "size")


def validate_sort_field(sort_by: str | None) -> SortField:
    if sort_by is None or not sort_by.strip():
        return SortField.NAME
    wanted = sort_by.strip().lower()
    for field in SortField:
        if field.value == wanted:
            return field
    allowed = ", ".join(f.value for f in SortField)
    raise ValidationError(f"Invalid sort field. Allowed fields: {allowed}", "sortBy")


def validate_sort_order(order: str | None) -> SortOrder:
    if order is None:
        return SortOrder.ASC
    try:
        return SortOrder(order.strip().upper())
    except ValueError:
        raise ValidationError("Sort order must be either ASC or DESC", "order")


def sanitize_identifier(product_id: str | None) -> str:
    if product_id is None or not product_id.strip():
        raise ValidationError("ID is required", "id")
    product_id = product_id.strip()
    if not _IDENTIFIER.fullmatch(product_id):
        raise ValidationError("Invalid ID format", "id")
    return product_id.lower()
