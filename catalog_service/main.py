from contextlib import asynccontextmanager

from fastapi import Body, Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .config import CORS_ORIGINS, DEFAULT_PAGE_SIZE, PRODUCTS_BASE
from .db import get_db, init_schema
from .logger import logger
from .errors import NotFoundError, StoreUnavailableError, ValidationError
from .repository import ProductRepository
from .schemas import CategoryStats, CountOut, HealthOut, PagedResponse, ProductIn, ProductOut
from .service import ProductService


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_schema()
    logger.info("catalog-service started, products at %s", PRODUCTS_BASE)
    yield


app = FastAPI(title="catalog-service", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message, "field": exc.field})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def get_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService(ProductRepository(db))


# Fixed paths are registered before /{product_id} so they are not read as ids

@app.get(PRODUCTS_BASE, response_model=list[ProductOut])
def find_all(service: ProductService = Depends(get_service)):
    return service.find_all()


@app.get(f"{PRODUCTS_BASE}/count", response_model=CountOut)
def count_products(service: ProductService = Depends(get_service)):
    return CountOut(count=service.count())


@app.post(PRODUCTS_BASE, response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, response: Response, service: ProductService = Depends(get_service)):
    saved = service.create(payload)
    response.headers["Location"] = f"{PRODUCTS_BASE}/{saved.id}"
    return saved


@app.post(f"{PRODUCTS_BASE}/bulk", response_model=list[ProductOut], status_code=201)
def create_many(payloads: list[ProductIn], service: ProductService = Depends(get_service)):
    return service.create_many(payloads)


@app.get(f"{PRODUCTS_BASE}/category/{{category}}", response_model=list[ProductOut])
def by_category(category: str, service: ProductService = Depends(get_service)):
    return service.find_by_category(category)


@app.get(f"{PRODUCTS_BASE}/price/greater/{{price}}", response_model=list[ProductOut])
def by_price_greater(price: float, service: ProductService = Depends(get_service)):
    return service.find_by_price_greater_than(price)


@app.get(f"{PRODUCTS_BASE}/search", response_model=list[ProductOut])
def search_by_name(name: str = "", service: ProductService = Depends(get_service)):
    return service.search_by_name(name)


@app.get(f"{PRODUCTS_BASE}/filter", response_model=list[ProductOut])
def filter_products(
    category: str | None = None,
    min_price: float | None = Query(default=None, alias="minPrice"),
    max_price: float | None = Query(default=None, alias="maxPrice"),
    service: ProductService = Depends(get_service),
):
    return service.filter_products(category, min_price, max_price)


@app.get(f"{PRODUCTS_BASE}/analytics/average", response_model=list[CategoryStats])
def average_by_category(service: ProductService = Depends(get_service)):
    return service.average_price_per_category()


@app.get(f"{PRODUCTS_BASE}/list", response_model=PagedResponse)
def list_paged(
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    sort_by: str = Query(default="name", alias="sortBy"),
    order: str = "ASC",
    service: ProductService = Depends(get_service),
):
    return service.paginate(page, size, sort_by, order)


@app.get(f"{PRODUCTS_BASE}/health", response_model=HealthOut, response_model_exclude_none=True)
def health(response: Response, service: ProductService = Depends(get_service)):
    status = service.health()
    if status.status != "UP":
        response.status_code = 503
    return status


@app.get(f"{PRODUCTS_BASE}/{{product_id}}", response_model=ProductOut)
def get_product(product_id: str, service: ProductService = Depends(get_service)):
    return service.find_by_id(product_id)


@app.head(f"{PRODUCTS_BASE}/{{product_id}}")
def product_exists(product_id: str, service: ProductService = Depends(get_service)):
    return Response(status_code=200 if service.exists_by_id(product_id) else 404)


@app.put(f"{PRODUCTS_BASE}/{{product_id}}", response_model=ProductOut)
def replace_product(product_id: str, payload: ProductIn, service: ProductService = Depends(get_service)):
    return service.replace(product_id, payload)


@app.patch(f"{PRODUCTS_BASE}/{{product_id}}", response_model=ProductOut)
def patch_product(
    product_id: str,
    updates: dict = Body(...),
    service: ProductService = Depends(get_service),
):
    return service.patch(product_id, updates)


@app.delete(f"{PRODUCTS_BASE}/{{product_id}}", status_code=204)
def delete_product(product_id: str, service: ProductService = Depends(get_service)):
    service.delete(product_id)
    return Response(status_code=204)
