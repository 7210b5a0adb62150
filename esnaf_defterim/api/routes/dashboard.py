from datetime import date, datetime, timedelta
from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from esnaf_defterim.api.deps import AuthContext, require_permission
from esnaf_defterim.core.config import settings
from esnaf_defterim.db.database import get_db
from esnaf_defterim.models.sales import Customer, Sale
from esnaf_defterim.models.stock import StockItem
from esnaf_defterim.schemas.common import Envelope
from esnaf_defterim.schemas.sales import DashboardStatsOut
from esnaf_defterim.services.cash import current_balance

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def _sales_total_since(db: Session, since: datetime) -> Decimal:
    total = db.scalar(select(func.coalesce(func.sum(Sale.total), 0)).where(Sale.sold_at >= since))
    return Decimal(total or 0).quantize(Decimal("0.01"))


@router.get("/stats", response_model=Envelope[DashboardStatsOut])
def dashboard_stats(
    ctx: AuthContext = Depends(require_permission("stock:view")),
    db: Session = Depends(get_db),
):
    now = datetime.utcnow()
    start_of_day = datetime(now.year, now.month, now.day)
    today = date(now.year, now.month, now.day)

    total_stock_weight = db.scalar(
        select(func.coalesce(func.sum(StockItem.remaining_weight), 0)).where(StockItem.is_active.is_(True))
    )
    expiring_soon = db.scalar(
        select(func.count(StockItem.id)).where(
            StockItem.is_active.is_(True),
            StockItem.expiry_date >= today,
            StockItem.expiry_date <= today + timedelta(days=settings.expiry_warning_days),
        )
    )
    stats = DashboardStatsOut(
        total_stock_weight=Decimal(total_stock_weight or 0).quantize(Decimal("0.001")),
        total_customers=db.scalar(select(func.count(Customer.id)).where(Customer.is_active.is_(True))) or 0,
        expiring_soon=expiring_soon or 0,
    )
    # Sales and cash figures stay null for roles that cannot open those screens.
    if ctx.can("sales:view"):
        stats.total_sales = db.scalar(select(func.count(Sale.id))) or 0
        stats.daily_sales_total = _sales_total_since(db, start_of_day)
        stats.weekly_sales_total = _sales_total_since(db, start_of_day - timedelta(days=6))
    if ctx.can("cash:view"):
        stats.cash_balance = current_balance(db)
    return Envelope(data=stats)
