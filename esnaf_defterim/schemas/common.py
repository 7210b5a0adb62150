from decimal import Decimal
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str = ""
    data: T | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class Page(BaseModel, Generic[T]):
    items: list[T]
    pagination: Pagination


class IdOut(BaseModel):
    id: int


# Largest values the Numeric columns can hold: weights (12, 3),
# unit prices (12, 2), sale and cash amounts (14, 2).
MAX_WEIGHT = Decimal("999999999.999")
MAX_PRICE = Decimal("9999999999.99")
MAX_AMOUNT = Decimal("999999999999.99")
