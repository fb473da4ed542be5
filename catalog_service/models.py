import uuid
from decimal import Decimal
from sqlalchemy import String, Text, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from .config import ID_LENGTH, MAX_CATEGORY_LENGTH, MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH
from .db import Base


def new_product_id() -> str:
    return uuid.uuid4().hex[:ID_LENGTH]


class Product(Base):
    __tablename__ = "products"

    # Assigned on insert, never reassigned
    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_product_id)

    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), index=True, nullable=False)

    description: Mapped[str | None] = mapped_column(Text(MAX_DESCRIPTION_LENGTH), nullable=True)

    # Always stored rounded to cents
    price: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    category: Mapped[str] = mapped_column(String(MAX_CATEGORY_LENGTH), index=True, nullable=False)
