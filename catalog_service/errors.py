class CatalogError(Exception):
    """Base class for errors surfaced to the API layer."""


class ValidationError(CatalogError):
    """Input is malformed or out of bounds. Always tied to one field or parameter."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(CatalogError):
    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class StoreUnavailableError(CatalogError):
    """The database could not be reached or timed out."""
