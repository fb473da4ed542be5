"""Page window arithmetic and page metadata."""
import math
from dataclasses import dataclass

from sqlalchemy import asc, desc
from sqlalchemy.sql import ColumnElement

from .models import Product
from .sanitizer import SortField, SortOrder, validate_pagination, validate_sort_field, validate_sort_order
from .schemas import PagedResponse, ProductOut


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int
    sort_field: SortField = SortField.NAME
    sort_order: SortOrder = SortOrder.ASC

    @classmethod
    def parse(cls, page: int, size: int, sort_by: str | None, order: str | None) -> "PageRequest":
        validate_pagination(page, size)
        return cls(page, size, validate_sort_field(sort_by), validate_sort_order(order))

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def limit(self) -> int:
        return self.size

    def order_by(self) -> list[ColumnElement]:
        column = getattr(Product, self.sort_field.value)
        direction = asc if self.sort_order is SortOrder.ASC else desc
        # id breaks ties so equal sort keys page deterministically
        if self.sort_field is SortField.ID:
            return [direction(column)]
        return [direction(column), asc(Product.id)]


def build_page(content: list[ProductOut], page: int, size: int, total_elements: int) -> PagedResponse:
    total_pages = math.ceil(total_elements / size)
    return PagedResponse(
        content=content,
        page=page,
        page_size=size,
        total_elements=total_elements,
        total_pages=total_pages,
        is_first=page == 0,
        # with no pages at all, page 0 still counts as the last one
        is_last=page >= total_pages - 1,
        has_next=page < total_pages - 1,
        has_previous=page > 0,
    )
