from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from esnaf_defterim.api.deps import AuthContext, PageParams, page_params, paginate, require_permission
from esnaf_defterim.db.database import get_db
from esnaf_defterim.models.sales import CashEntry, CashEntryKind, CashEntrySource
from esnaf_defterim.schemas.common import Envelope, Page
from esnaf_defterim.schemas.sales import CashBalanceOut, CashEntryCreate, CashEntryOut
from esnaf_defterim.services.cash import append_entry, current_balance

router = APIRouter(prefix="/kasa", tags=["Cash"])


@router.get("", response_model=Envelope[Page[CashEntryOut]])
def list_cash_entries(
    params: PageParams = Depends(page_params),
    kind: CashEntryKind | None = None,
    source: CashEntrySource | None = None,
    date_from: datetime | None = Query(default=None),
    date_to: datetime | None = Query(default=None),
    _: AuthContext = Depends(require_permission("cash:view")),
    db: Session = Depends(get_db),
):
    query = select(CashEntry).order_by(CashEntry.id.desc())
    if kind is not None:
        query = query.where(CashEntry.kind == kind)
    if source is not None:
        query = query.where(CashEntry.source == source)
    if date_from is not None:
        query = query.where(CashEntry.created_at >= date_from)
    if date_to is not None:
        query = query.where(CashEntry.created_at <= date_to)
    entries, pagination = paginate(db, query, params)
    return Envelope(data=Page(items=[CashEntryOut.model_validate(e) for e in entries], pagination=pagination))


@router.get("/bakiye", response_model=Envelope[CashBalanceOut])
def get_cash_balance(
    _: AuthContext = Depends(require_permission("cash:view")),
    db: Session = Depends(get_db),
):
    return Envelope(data=CashBalanceOut(balance=current_balance(db)))


@router.post("", response_model=Envelope[CashEntryOut], status_code=status.HTTP_201_CREATED)
def create_cash_entry(
    payload: CashEntryCreate,
    ctx: AuthContext = Depends(require_permission("cash:manage")),
    db: Session = Depends(get_db),
):
    entry = append_entry(
        db,
        kind=payload.kind,
        source=CashEntrySource.MANUAL,
        amount=payload.amount,
        user_id=ctx.user_id,
        note=payload.note.strip() if payload.note else None,
    )
    db.commit()
    db.refresh(entry)
    return Envelope(message="Cash entry recorded", data=CashEntryOut.model_validate(entry))
