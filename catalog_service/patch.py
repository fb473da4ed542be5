"""
Partial updates.

A raw JSON object is parsed into a ProductPatch first: unknown keys and
values that cannot be coerced to the field's type are rejected there, so
merging never applies half a patch.
"""
from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Any, Callable, Mapping

from .errors import ValidationError
from .sanitizer import (
    sanitize_category,
    sanitize_description,
    sanitize_price,
    sanitize_product_name,
    sanitize_quantity,
)
from .schemas import ProductOut


def _as_text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", name)
    return value


def _coerce_name(value: Any) -> str:
    if value is None:
        raise ValidationError("Product name is required", "name")
    return sanitize_product_name(_as_text("name", value))


def _coerce_description(value: Any) -> str | None:
    if value is None:
        return None
    return sanitize_description(_as_text("description", value))


def _coerce_price(value: Any) -> float:
    if value is None:
        raise ValidationError("price is required", "price")
    return float(sanitize_price(value))


def _coerce_quantity(value: Any) -> int:
    if value is None:
        raise ValidationError("quantity is required", "quantity")
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdigit()):
            raise ValidationError("Quantity must be an integer", "quantity")
        value = int(value)
    elif isinstance(value, float) and value.is_integer():
        value = int(value)
    return sanitize_quantity(value)


def _coerce_category(value: Any) -> str:
    if value is None:
        raise ValidationError("Category cannot be empty", "category")
    return sanitize_category(_as_text("category", value))


class PatchField(Enum):
    """Fields a patch may set; each carries its own coercion."""

    NAME = ("name", _coerce_name)
    DESCRIPTION = ("description", _coerce_description)
    PRICE = ("price", _coerce_price)
    QUANTITY = ("quantity", _coerce_quantity)
    CATEGORY = ("category", _coerce_category)

    def __init__(self, key: str, coerce: Callable[[Any], Any]):
        self.key = key
        self.coerce = coerce

    @classmethod
    def from_key(cls, key: str) -> "PatchField":
        for f in cls:
            if f.key == key:
                return f
        raise ValidationError(f"Invalid field: {key}", key)


@dataclass(frozen=True)
class ProductPatch:
    changes: dict[str, Any] = dc_field(default_factory=dict)

    @property
    def keys(self) -> list[str]:
        return list(self.changes)


def parse_patch(updates: Mapping[str, Any]) -> ProductPatch:
    changes = {}
    for key, value in updates.items():
        f = PatchField.from_key(key)
        changes[f.key] = f.coerce(value)
    return ProductPatch(changes)


def apply_patch(existing: ProductOut, updates: Mapping[str, Any] | ProductPatch) -> ProductOut:
    """Return a copy of `existing` with the patch applied; `existing` is left as is."""
    patch = updates if isinstance(updates, ProductPatch) else parse_patch(updates)
    return existing.model_copy(update=patch.changes)
