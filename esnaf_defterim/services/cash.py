import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from esnaf_defterim.models.sales import CashEntry, CashEntryKind, CashEntrySource

logger = logging.getLogger(__name__)

MONEY_STEP = Decimal("0.01")


def _latest_entry(db: Session, *, lock: bool = False) -> CashEntry | None:
    query = select(CashEntry).order_by(CashEntry.id.desc()).limit(1)
    if lock:
        query = query.with_for_update()
    return db.scalar(query)


def current_balance(db: Session) -> Decimal:
    latest = _latest_entry(db)
    if not latest:
        return Decimal("0.00")
    return Decimal(latest.next_balance)


def append_entry(
    db: Session,
    *,
    kind: CashEntryKind,
    source: CashEntrySource,
    amount: Decimal,
    user_id: int | None,
    reference_id: int | None = None,
    note: str | None = None,
) -> CashEntry:
    """Append a running-balance entry. The caller owns the commit."""
    latest = _latest_entry(db, lock=True)
    previous = Decimal(latest.next_balance) if latest else Decimal("0.00")
    amount = Decimal(amount).quantize(MONEY_STEP)
    next_balance = previous + amount if kind == CashEntryKind.IN else previous - amount

    entry = CashEntry(
        user_id=user_id,
        kind=kind,
        source=source,
        reference_id=reference_id,
        amount=amount,
        previous_balance=previous.quantize(MONEY_STEP),
        next_balance=next_balance.quantize(MONEY_STEP),
        note=note,
    )
    db.add(entry)
    db.flush()
    logger.info("cash %s %s via %s, balance %s -> %s", kind.value, amount, source.value, previous, next_balance)
    return entry
