"""
Filter predicates over the products table.

A predicate is an AND of zero or more SQLAlchemy conditions. The empty
predicate matches nothing: a filter call without criteria must not turn
into a full table scan.
"""
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import and_
from sqlalchemy.sql import ColumnElement

from .errors import ValidationError
from .models import Product


@dataclass(frozen=True)
class FilterPredicate:
    conditions: tuple[ColumnElement[bool], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.conditions

    def clause(self) -> ColumnElement[bool]:
        if self.is_empty:
            raise ValueError("empty predicate has no clause")
        return and_(*self.conditions)


EMPTY_PREDICATE = FilterPredicate()


def check_price_range(min_price: Decimal | None, max_price: Decimal | None) -> None:
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValidationError("minPrice cannot be greater than maxPrice", "minPrice")


def build_filter_predicate(
    category: str | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
) -> FilterPredicate:
    """Arguments must already be sanitized; None means "no condition"."""
    conditions = []
    if category is not None:
        conditions.append(Product.category == category)
    if min_price is not None:
        conditions.append(Product.price >= min_price)
    if max_price is not None:
        conditions.append(Product.price <= max_price)
    if not conditions:
        return EMPTY_PREDICATE
    return FilterPredicate(tuple(conditions))
