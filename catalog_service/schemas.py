from pydantic import BaseModel, ConfigDict


class ProductOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    quantity: int
    category: str

    model_config = ConfigDict(from_attributes=True)


class ProductIn(BaseModel):
    """Create/replace body. Bounds are enforced by the sanitizer, not here."""
    name: str
    description: str | None = None
    price: float
    quantity: int
    category: str


class PagedResponse(BaseModel):
    content: list[ProductOut]
    page: int
    page_size: int
    total_elements: int
    total_pages: int
    is_first: bool
    is_last: bool
    has_next: bool
    has_previous: bool


class CategoryStats(BaseModel):
    category: str
    average_price: float
    total_quantity: int


class CountOut(BaseModel):
    count: int


class HealthOut(BaseModel):
    status: str
    database: str
    response_time_ms: int
    error: str | None = None
