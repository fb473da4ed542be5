"""
Store access for products.

Thin wrapper around the SQLAlchemy session. Connection-level failures are
raised as StoreUnavailableError; anything else propagates unchanged.
"""
import functools
import logging
from decimal import Decimal
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import DisconnectionError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from .errors import StoreUnavailableError
from .models import Product
from .pagination import PageRequest
from .predicates import FilterPredicate

logger = logging.getLogger(__name__)


def _store_call(fn):
    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except (OperationalError, DisconnectionError, PoolTimeoutError) as e:
            self.db.rollback()
            logger.error("store call %s failed: %r", fn.__name__, e)
            raise StoreUnavailableError(f"Database unavailable: {e.__class__.__name__}") from e
    return wrapper


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    @_store_call
    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(Product))

    def ping(self) -> int:
        return self.count()

    @_store_call
    def find_all(self) -> list[Product]:
        return list(self.db.scalars(select(Product).order_by(Product.id)))

    @_store_call
    def find_by_id(self, product_id: str) -> Product | None:
        return self.db.get(Product, product_id)

    @_store_call
    def exists_by_id(self, product_id: str) -> bool:
        stmt = select(Product.id).where(Product.id == product_id)
        return self.db.scalar(stmt) is not None

    @_store_call
    def insert(self, product: Product) -> Product:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def insert_many(self, products: Iterable[Product]) -> list[Product]:
        # One commit per record: a failure part way leaves earlier rows in place
        return [self.insert(p) for p in products]

    @_store_call
    def replace(self, product: Product) -> Product:
        self.db.commit()
        self.db.refresh(product)
        return product

    @_store_call
    def delete_by_id(self, product_id: str) -> bool:
        product = self.db.get(Product, product_id)
        if product is None:
            return False
        self.db.delete(product)
        self.db.commit()
        return True

    @_store_call
    def find_by_predicate(self, predicate: FilterPredicate) -> list[Product]:
        if predicate.is_empty:
            return []
        stmt = select(Product).where(predicate.clause()).order_by(Product.id)
        return list(self.db.scalars(stmt))

    @_store_call
    def find_by_category(self, category: str) -> list[Product]:
        stmt = select(Product).where(Product.category == category).order_by(Product.id)
        return list(self.db.scalars(stmt))

    @_store_call
    def find_by_price_greater_than(self, price: Decimal) -> list[Product]:
        stmt = select(Product).where(Product.price > price).order_by(Product.id)
        return list(self.db.scalars(stmt))

    @_store_call
    def find_by_price_less_than(self, price: Decimal) -> list[Product]:
        stmt = select(Product).where(Product.price < price).order_by(Product.id)
        return list(self.db.scalars(stmt))

    @_store_call
    def find_by_category_and_quantity_greater_than(self, category: str, quantity: int) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.category == category, Product.quantity > quantity)
            .order_by(Product.id)
        )
        return list(self.db.scalars(stmt))

    @_store_call
    def find_by_name_containing_ignore_case(self, pattern: str) -> list[Product]:
        # autoescape keeps % and _ in the pattern literal
        stmt = (
            select(Product)
            .where(Product.name.icontains(pattern, autoescape=True))
            .order_by(Product.id)
        )
        return list(self.db.scalars(stmt))

    @_store_call
    def count_and_window(
        self, request: PageRequest, predicate: FilterPredicate | None = None
    ) -> tuple[list[Product], int]:
        count_stmt = select(func.count()).select_from(Product)
        stmt = select(Product)
        if predicate is not None and not predicate.is_empty:
            count_stmt = count_stmt.where(predicate.clause())
            stmt = stmt.where(predicate.clause())
        total = self.db.scalar(count_stmt)
        # past the end: nothing to fetch, and huge offsets overflow the driver
        if request.offset >= total:
            return [], total
        stmt = stmt.order_by(*request.order_by()).offset(request.offset).limit(request.limit)
        return list(self.db.scalars(stmt)), total

    @_store_call
    def aggregate_by_category(self) -> list[tuple[str, float, int]]:
        average = func.avg(Product.price).label("average_price")
        stmt = (
            select(Product.category, average, func.sum(Product.quantity).label("total_quantity"))
            .group_by(Product.category)
            .order_by(average.desc(), Product.category.asc())
        )
        return [(row.category, float(row.average_price), int(row.total_quantity)) for row in self.db.execute(stmt)]
