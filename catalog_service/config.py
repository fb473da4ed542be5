import os

# HTTP
API_VERSION = "/api/v1"
PRODUCTS_BASE = f"{API_VERSION}/products"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Input bounds
MAX_SEARCH_LENGTH = 100
MAX_STRING_LENGTH = 500
MAX_CATEGORY_LENGTH = 50
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

MIN_PRICE = "0.01"
MAX_PRICE = "999999.99"
MIN_QUANTITY = 0
# quantity column is a 32-bit integer
MAX_QUANTITY = 2**31 - 1

# Pagination
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "5"))
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

# Store identifiers are 24 hex characters
ID_LENGTH = 24
