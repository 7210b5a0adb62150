from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from esnaf_defterim.models.sales import (
    CashEntryKind,
    CashEntrySource,
    PaymentMethod,
    SaleStatus,
    SaleType,
)
from esnaf_defterim.schemas.common import MAX_AMOUNT, MAX_PRICE, MAX_WEIGHT


class SaleLineCreate(BaseModel):
    stock_item_id: int
    quantity: Decimal = Field(gt=0, le=MAX_WEIGHT)
    unit_price: Decimal | None = Field(
        default=None,
        ge=0,
        le=MAX_PRICE,
        description="Defaults to the item's sale price",
    )


class SaleCreate(BaseModel):
    customer_id: int | None = None
    sale_type: SaleType = SaleType.CASH
    lines: list[SaleLineCreate] = Field(min_length=1)
    discount_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    payment_method: PaymentMethod = PaymentMethod.CASH
    note: str | None = Field(default=None, max_length=255)


class SaleLineOut(BaseModel):
    id: int
    stock_item_id: int
    product_name: str
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal

    model_config = {"from_attributes": True}


class SaleOut(BaseModel):
    id: int
    user_id: int | None
    customer_id: int | None
    sale_type: SaleType
    subtotal: Decimal
    discount_rate: Decimal
    discount_amount: Decimal
    total: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal
    status: SaleStatus
    note: str | None
    sold_at: datetime
    lines: list[SaleLineOut] = []

    model_config = {"from_attributes": True}


class PaymentCreate(BaseModel):
    sale_id: int | None = None
    method: PaymentMethod = PaymentMethod.CASH
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    note: str | None = Field(default=None, max_length=255)


class PaymentOut(BaseModel):
    id: int
    sale_id: int | None
    user_id: int | None
    method: PaymentMethod
    amount: Decimal
    note: str | None
    paid_at: datetime

    model_config = {"from_attributes": True}


class CashEntryCreate(BaseModel):
    kind: CashEntryKind
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    note: str | None = Field(default=None, max_length=255)


class CashEntryOut(BaseModel):
    id: int
    user_id: int | None
    kind: CashEntryKind
    source: CashEntrySource
    reference_id: int | None
    amount: Decimal
    previous_balance: Decimal
    next_balance: Decimal
    note: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class CashBalanceOut(BaseModel):
    balance: Decimal


class DashboardStatsOut(BaseModel):
    total_stock_weight: Decimal
    total_sales: int | None = None
    total_customers: int
    cash_balance: Decimal | None = None
    daily_sales_total: Decimal | None = None
    weekly_sales_total: Decimal | None = None
    expiring_soon: int
