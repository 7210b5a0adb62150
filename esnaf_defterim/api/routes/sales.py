import logging
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from esnaf_defterim.api.deps import AuthContext, PageParams, page_params, paginate, require_permission
from esnaf_defterim.db.database import get_db
from esnaf_defterim.models.sales import (
    CashEntryKind,
    CashEntrySource,
    Customer,
    Payment,
    PaymentMethod,
    Sale,
    SaleLine,
    SaleStatus,
    SaleType,
)
from esnaf_defterim.models.stock import StockItem
from esnaf_defterim.schemas.common import MAX_AMOUNT, Envelope, Page
from esnaf_defterim.schemas.sales import PaymentCreate, PaymentOut, SaleCreate, SaleLineOut, SaleOut
from esnaf_defterim.services.cash import MONEY_STEP, append_entry
from esnaf_defterim.services.ledger import build_movement, movement_for_update, quantize_weight

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sales"])


def _money(value) -> Decimal:
    return Decimal(value).quantize(MONEY_STEP)


def _sale_status(total: Decimal, paid: Decimal) -> SaleStatus:
    if paid >= total:
        return SaleStatus.PAID
    if paid > 0:
        return SaleStatus.PARTIAL
    return SaleStatus.UNPAID


def _sales_out(db: Session, sales: list[Sale]) -> list[SaleOut]:
    if not sales:
        return []
    lines_by_sale: dict[int, list[SaleLineOut]] = {s.id: [] for s in sales}
    lines = db.scalars(
        select(SaleLine).where(SaleLine.sale_id.in_(lines_by_sale.keys())).order_by(SaleLine.id.asc())
    ).all()
    for line in lines:
        lines_by_sale[line.sale_id].append(SaleLineOut.model_validate(line))
    result = []
    for sale in sales:
        out = SaleOut.model_validate(sale)
        out.lines = lines_by_sale[sale.id]
        result.append(out)
    return result


def _record_payment(
    db: Session,
    *,
    ctx: AuthContext,
    amount: Decimal,
    method: PaymentMethod,
    sale_id: int | None,
    note: str | None,
) -> Payment:
    payment = Payment(sale_id=sale_id, user_id=ctx.user_id, method=method, amount=amount, note=note)
    db.add(payment)
    db.flush()
    if method == PaymentMethod.CASH:
        append_entry(
            db,
            kind=CashEntryKind.IN,
            source=CashEntrySource.PAYMENT,
            amount=amount,
            user_id=ctx.user_id,
            reference_id=payment.id,
            note=f"Payment for sale #{sale_id}" if sale_id else note,
        )
    return payment


@router.get("/satislar", response_model=Envelope[Page[SaleOut]])
def list_sales(
    params: PageParams = Depends(page_params),
    customer_id: int | None = None,
    sale_status: SaleStatus | None = Query(default=None, alias="status"),
    date_from: datetime | None = Query(default=None),
    date_to: datetime | None = Query(default=None),
    _: AuthContext = Depends(require_permission("sales:view")),
    db: Session = Depends(get_db),
):
    query = select(Sale).order_by(Sale.sold_at.desc(), Sale.id.desc())
    if customer_id is not None:
        query = query.where(Sale.customer_id == customer_id)
    if sale_status is not None:
        query = query.where(Sale.status == sale_status)
    if date_from is not None:
        query = query.where(Sale.sold_at >= date_from)
    if date_to is not None:
        query = query.where(Sale.sold_at <= date_to)
    sales, pagination = paginate(db, query, params)
    return Envelope(data=Page(items=_sales_out(db, sales), pagination=pagination))


@router.get("/satislar/{sale_id}", response_model=Envelope[SaleOut])
def get_sale(
    sale_id: int,
    _: AuthContext = Depends(require_permission("sales:view")),
    db: Session = Depends(get_db),
):
    sale = db.get(Sale, sale_id)
    if not sale:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")
    return Envelope(data=_sales_out(db, [sale])[0])


@router.post("/satislar", response_model=Envelope[SaleOut], status_code=status.HTTP_201_CREATED)
def create_sale(
    payload: SaleCreate,
    ctx: AuthContext = Depends(require_permission("sales:create")),
    db: Session = Depends(get_db),
):
    if payload.sale_type == SaleType.CREDIT and payload.customer_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Credit sales require a customer")
    if payload.customer_id is not None:
        customer = db.get(Customer, payload.customer_id)
        if not customer or not customer.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

    sale = Sale(
        user_id=ctx.user_id,
        customer_id=payload.customer_id,
        sale_type=payload.sale_type,
        subtotal=Decimal("0"),
        total=Decimal("0"),
        remaining_amount=Decimal("0"),
        status=SaleStatus.UNPAID,
        note=payload.note.strip() if payload.note else None,
    )
    db.add(sale)
    db.flush()

    subtotal = Decimal("0")
    for line in payload.lines:
        item = db.scalar(
            select(StockItem)
            .where(StockItem.id == line.stock_item_id, StockItem.is_active.is_(True))
            .with_for_update()
        )
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Stock item {line.stock_item_id} not found",
            )
        quantity = quantize_weight(line.quantity)
        if quantity <= 0:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Quantity is below one gram")
        remaining_before = Decimal(item.remaining_weight)
        if quantity > remaining_before:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Insufficient stock for {item.name}",
            )
        unit_price = line.unit_price if line.unit_price is not None else item.sale_price
        if unit_price is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"No sale price set for {item.name}",
            )
        unit_price = _money(unit_price)
        line_total = _money(unit_price * quantity)

        remaining_after = remaining_before - quantity
        item.remaining_weight = remaining_after
        draft = movement_for_update(remaining_before, remaining_after, note=f"Sale #{sale.id}")
        db.add(build_movement(draft, stock_item_id=item.id, user_id=ctx.user_id, sale_id=sale.id))
        db.add(
            SaleLine(
                sale_id=sale.id,
                stock_item_id=item.id,
                product_name=item.name,
                quantity=quantity,
                unit_price=unit_price,
                line_total=line_total,
            )
        )
        subtotal += line_total
        if subtotal > MAX_AMOUNT:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Sale total is too large")

    discount_rate = _money(payload.discount_rate)
    discount_amount = _money(subtotal * discount_rate / Decimal(100))
    total = subtotal - discount_amount
    paid = _money(payload.paid_amount)
    if paid > total:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Paid amount exceeds the sale total")

    sale.subtotal = subtotal
    sale.discount_rate = discount_rate
    sale.discount_amount = discount_amount
    sale.total = total
    sale.paid_amount = paid
    sale.remaining_amount = total - paid
    sale.status = _sale_status(total, paid)

    if paid > 0:
        _record_payment(db, ctx=ctx, amount=paid, method=payload.payment_method, sale_id=sale.id, note=None)

    db.commit()
    db.refresh(sale)
    logger.info("sale %s recorded by user %s: total %s, paid %s", sale.id, ctx.user_id, sale.total, sale.paid_amount)
    return Envelope(message="Sale recorded", data=_sales_out(db, [sale])[0])


@router.get("/odemeler", response_model=Envelope[Page[PaymentOut]])
def list_payments(
    params: PageParams = Depends(page_params),
    sale_id: int | None = None,
    _: AuthContext = Depends(require_permission("sales:view")),
    db: Session = Depends(get_db),
):
    query = select(Payment).order_by(Payment.paid_at.desc(), Payment.id.desc())
    if sale_id is not None:
        query = query.where(Payment.sale_id == sale_id)
    payments, pagination = paginate(db, query, params)
    return Envelope(data=Page(items=[PaymentOut.model_validate(p) for p in payments], pagination=pagination))


@router.post("/odemeler", response_model=Envelope[PaymentOut], status_code=status.HTTP_201_CREATED)
def create_payment(
    payload: PaymentCreate,
    ctx: AuthContext = Depends(require_permission("sales:create")),
    db: Session = Depends(get_db),
):
    amount = _money(payload.amount)
    if payload.sale_id is not None:
        sale = db.scalar(select(Sale).where(Sale.id == payload.sale_id).with_for_update())
        if not sale:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")
        remaining = Decimal(sale.remaining_amount)
        if amount > remaining:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Payment exceeds the remaining amount of the sale",
            )
        sale.paid_amount = Decimal(sale.paid_amount) + amount
        sale.remaining_amount = remaining - amount
        sale.status = _sale_status(Decimal(sale.total), Decimal(sale.paid_amount))

    payment = _record_payment(
        db,
        ctx=ctx,
        amount=amount,
        method=payload.method,
        sale_id=payload.sale_id,
        note=payload.note.strip() if payload.note else None,
    )
    db.commit()
    db.refresh(payment)
    return Envelope(message="Payment recorded", data=PaymentOut.model_validate(payment))
