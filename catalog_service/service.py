import logging
import time
from decimal import Decimal

from .errors import NotFoundError, ValidationError
from .models import Product
from .pagination import PageRequest, build_page
from .patch import apply_patch, parse_patch
from .predicates import build_filter_predicate, check_price_range
from .repository import ProductRepository
from .sanitizer import (
    sanitize_category,
    sanitize_description,
    sanitize_identifier,
    sanitize_price,
    sanitize_price_threshold,
    sanitize_product_name,
    sanitize_quantity,
    sanitize_search_term,
)
from .schemas import CategoryStats, HealthOut, PagedResponse, ProductIn, ProductOut

logger = logging.getLogger(__name__)


def to_out(p: Product) -> ProductOut:
    return ProductOut(
        id=p.id,
        name=p.name,
        description=p.description,
        price=float(p.price),
        quantity=p.quantity,
        category=p.category,
    )


def clean_fields(payload: ProductIn) -> dict:
    """Run every field of a create/replace body through its sanitizer."""
    return {
        "name": sanitize_product_name(payload.name),
        "description": sanitize_description(payload.description),
        "price": sanitize_price(payload.price),
        "quantity": sanitize_quantity(payload.quantity),
        "category": sanitize_category(payload.category),
    }


class ProductService:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def count(self) -> int:
        logger.info("Counting all products")
        return self.repository.count()

    def find_all(self) -> list[ProductOut]:
        logger.info("Finding all products")
        rows = self.repository.find_all()
        logger.info("Fetched %d products", len(rows))
        return [to_out(r) for r in rows]

    def _get(self, product_id: str) -> Product:
        product = self.repository.find_by_id(product_id)
        if product is None:
            logger.warning("Product not found: %s", product_id)
            raise NotFoundError(product_id)
        return product

    def find_by_id(self, product_id: str) -> ProductOut:
        product_id = sanitize_identifier(product_id)
        logger.info("Fetching product by ID: %s", product_id)
        return to_out(self._get(product_id))

    def exists_by_id(self, product_id: str) -> bool:
        product_id = sanitize_identifier(product_id)
        logger.info("Checking existence for product ID: %s", product_id)
        return self.repository.exists_by_id(product_id)

    def create(self, payload: ProductIn) -> ProductOut:
        fields = clean_fields(payload)
        logger.info("Saving new product: %s", fields["name"])
        saved = self.repository.insert(Product(**fields))
        logger.info("Saved product with ID: %s", saved.id)
        return to_out(saved)

    def create_many(self, payloads: list[ProductIn]) -> list[ProductOut]:
        """
        Validate every record up front, then insert them one by one.
        Inserts are not rolled back as a group if the store fails part way.
        """
        logger.info("Saving %d products in bulk", len(payloads))
        cleaned = []
        for index, payload in enumerate(payloads):
            try:
                cleaned.append(clean_fields(payload))
            except ValidationError as e:
                raise ValidationError(f"Product #{index}: {e.message}", e.field) from e
        saved = self.repository.insert_many(Product(**fields) for fields in cleaned)
        logger.info("Bulk save completed. Total saved: %d", len(saved))
        return [to_out(p) for p in saved]

    def replace(self, product_id: str, payload: ProductIn) -> ProductOut:
        product_id = sanitize_identifier(product_id)
        logger.info("Updating product with ID: %s", product_id)
        fields = clean_fields(payload)
        product = self._get(product_id)
        for key, value in fields.items():
            setattr(product, key, value)
        saved = self.repository.replace(product)
        logger.info("Updated product with ID: %s", saved.id)
        return to_out(saved)

    def patch(self, product_id: str, updates: dict) -> ProductOut:
        product_id = sanitize_identifier(product_id)
        logger.info("Patching product ID: %s with fields: %s", product_id, list(updates))
        product = self._get(product_id)
        try:
            patch = parse_patch(updates)
        except ValidationError as e:
            logger.warning("Rejected patch for %s: %s", product_id, e.message)
            raise
        merged = apply_patch(to_out(product), patch)
        for key in patch.keys:
            value = getattr(merged, key)
            if key == "price":
                value = Decimal(str(value))
            setattr(product, key, value)
        saved = self.repository.replace(product)
        logger.info("Patched product saved with ID: %s", saved.id)
        return to_out(saved)

    def delete(self, product_id: str) -> None:
        product_id = sanitize_identifier(product_id)
        logger.info("Deleting product with ID: %s", product_id)
        if not self.repository.delete_by_id(product_id):
            logger.warning("Product not found for deletion: %s", product_id)
            raise NotFoundError(product_id)
        logger.info("Deleted product with ID: %s", product_id)

    def find_by_category(self, category: str) -> list[ProductOut]:
        category = sanitize_category(category)
        logger.info("Finding products by category: %s", category)
        rows = self.repository.find_by_category(category)
        logger.info("Found %d products in category: %s", len(rows), category)
        return [to_out(r) for r in rows]

    def find_by_price_greater_than(self, price: float) -> list[ProductOut]:
        threshold = sanitize_price_threshold(price)
        logger.info("Finding products with price greater than: %s", threshold)
        rows = self.repository.find_by_price_greater_than(threshold)
        logger.info("Found %d products with price > %s", len(rows), threshold)
        return [to_out(r) for r in rows]

    def search_by_name(self, name: str | None) -> list[ProductOut]:
        term = sanitize_search_term(name)
        if not term:
            return self.find_all()
        logger.info("Searching products by name (case-insensitive): %s", term)
        rows = self.repository.find_by_name_containing_ignore_case(term)
        logger.info("Found %d products matching: %s", len(rows), term)
        return [to_out(r) for r in rows]

    def filter_products(
        self,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[ProductOut]:
        category = sanitize_category(category)
        low = sanitize_price(min_price, "minPrice")
        high = sanitize_price(max_price, "maxPrice")
        logger.info(
            "Filtering products | Category: %s | MinPrice: %s | MaxPrice: %s", category, low, high
        )
        try:
            check_price_range(low, high)
        except ValidationError:
            logger.warning("Invalid filter: minPrice > maxPrice")
            raise
        predicate = build_filter_predicate(category, low, high)
        if predicate.is_empty:
            logger.info("Filter called without criteria, returning no products")
            return []
        rows = self.repository.find_by_predicate(predicate)
        logger.info("Filtered result size: %d", len(rows))
        return [to_out(r) for r in rows]

    def average_price_per_category(self) -> list[CategoryStats]:
        logger.info("Calculating average price per category")
        stats = [
            CategoryStats(category=category, average_price=average, total_quantity=total)
            for category, average, total in self.repository.aggregate_by_category()
        ]
        logger.info("Found averages for %d categories", len(stats))
        return stats

    def paginate(
        self, page: int, size: int, sort_by: str | None = None, order: str | None = None
    ) -> PagedResponse:
        request = PageRequest.parse(page, size, sort_by, order)
        logger.info(
            "Fetching paginated products | Page: %d | Size: %d | Sort: %s %s",
            request.page, request.size, request.sort_field.value, request.sort_order.value,
        )
        rows, total = self.repository.count_and_window(request)
        return build_page([to_out(r) for r in rows], request.page, request.size, total)

    def health(self) -> HealthOut:
        start = time.monotonic()
        try:
            self.repository.ping()
        except Exception as e:
            elapsed = int((time.monotonic() - start) * 1000)
            logger.warning("Health check failed: %r", e)
            return HealthOut(status="DOWN", database="DOWN", response_time_ms=elapsed, error=str(e))
        elapsed = int((time.monotonic() - start) * 1000)
        return HealthOut(status="UP", database="UP", response_time_ms=elapsed)
