import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from esnaf_defterim.api.deps import AuthContext, PageParams, page_params, paginate, require_permission
from esnaf_defterim.db.database import get_db
from esnaf_defterim.models.stock import Category, StockItem, StockMovement, Supplier
from esnaf_defterim.models.user import User
from esnaf_defterim.schemas.common import Envelope, Page
from esnaf_defterim.schemas.stock import StockItemCreate, StockItemOut, StockItemUpdate, StockMovementOut
from esnaf_defterim.services.ledger import (
    build_movement,
    compute_profit_ratio,
    movement_for_creation,
    movement_for_update,
    quantize_weight,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stoklar", tags=["Stock"])


def _check_references(db: Session, category_id: int | None, supplier_id: int | None) -> None:
    if category_id is not None:
        category = db.get(Category, category_id)
        if not category or not category.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    if supplier_id is not None:
        supplier = db.get(Supplier, supplier_id)
        if not supplier or not supplier.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")


def _stock_items_out(db: Session, items: list[StockItem]) -> list[StockItemOut]:
    category_ids = {i.category_id for i in items if i.category_id is not None}
    supplier_ids = {i.supplier_id for i in items if i.supplier_id is not None}
    category_names = (
        dict(db.execute(select(Category.id, Category.name).where(Category.id.in_(category_ids))).all())
        if category_ids
        else {}
    )
    supplier_names = (
        dict(db.execute(select(Supplier.id, Supplier.name).where(Supplier.id.in_(supplier_ids))).all())
        if supplier_ids
        else {}
    )
    result = []
    for item in items:
        out = StockItemOut.model_validate(item)
        out.category_name = category_names.get(item.category_id)
        out.supplier_name = supplier_names.get(item.supplier_id)
        result.append(out)
    return result


def _get_active_item(db: Session, item_id: int, *, lock: bool = False) -> StockItem:
    query = select(StockItem).where(StockItem.id == item_id, StockItem.is_active.is_(True))
    if lock:
        query = query.with_for_update()
    item = db.scalar(query)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stock item not found")
    return item


@router.get("", response_model=Envelope[Page[StockItemOut]])
def list_stock_items(
    params: PageParams = Depends(page_params),
    search: str | None = None,
    category_id: int | None = None,
    include_inactive: bool = False,
    _: AuthContext = Depends(require_permission("stock:view")),
    db: Session = Depends(get_db),
):
    query = select(StockItem).order_by(StockItem.created_at.desc(), StockItem.id.desc())
    if not include_inactive:
        query = query.where(StockItem.is_active.is_(True))
    if search and search.strip():
        query = query.where(StockItem.name.ilike(f"%{search.strip()}%"))
    if category_id is not None:
        query = query.where(StockItem.category_id == category_id)
    items, pagination = paginate(db, query, params)
    return Envelope(data=Page(items=_stock_items_out(db, items), pagination=pagination))


@router.get("/{item_id}", response_model=Envelope[StockItemOut])
def get_stock_item(
    item_id: int,
    _: AuthContext = Depends(require_permission("stock:view")),
    db: Session = Depends(get_db),
):
    item = _get_active_item(db, item_id)
    return Envelope(data=_stock_items_out(db, [item])[0])


@router.post("", response_model=Envelope[StockItemOut], status_code=status.HTTP_201_CREATED)
def create_stock_item(
    payload: StockItemCreate,
    ctx: AuthContext = Depends(require_permission("stock:manage")),
    db: Session = Depends(get_db),
):
    _check_references(db, payload.category_id, payload.supplier_id)

    total = quantize_weight(payload.total_weight)
    remaining = quantize_weight(payload.remaining_weight) if payload.remaining_weight is not None else total
    item = StockItem(
        name=payload.name.strip(),
        category_id=payload.category_id,
        supplier_id=payload.supplier_id,
        total_weight=total,
        remaining_weight=remaining,
        purchase_price=payload.purchase_price,
        sale_price=payload.sale_price,
        profit_ratio=compute_profit_ratio(payload.purchase_price, payload.sale_price),
        cut_date=payload.cut_date,
        expiry_date=payload.expiry_date,
    )
    db.add(item)
    db.flush()
    db.add(build_movement(movement_for_creation(total), stock_item_id=item.id, user_id=ctx.user_id))
    db.commit()
    db.refresh(item)
    logger.info("stock item %s created by user %s (%s kg)", item.id, ctx.user_id, total)
    return Envelope(message="Stock item created", data=_stock_items_out(db, [item])[0])


@router.put("/{item_id}", response_model=Envelope[StockItemOut])
def update_stock_item(
    item_id: int,
    payload: StockItemUpdate,
    ctx: AuthContext = Depends(require_permission("stock:manage")),
    db: Session = Depends(get_db),
):
    item = _get_active_item(db, item_id, lock=True)
    if payload.version is not None and payload.version != item.version:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Stock item was modified by another request, reload and retry",
        )
    _check_references(db, payload.category_id, payload.supplier_id)

    old_remaining = Decimal(item.remaining_weight)
    new_remaining = (
        quantize_weight(payload.remaining_weight) if payload.remaining_weight is not None else old_remaining
    )

    item.name = payload.name.strip()
    item.category_id = payload.category_id
    item.supplier_id = payload.supplier_id
    item.total_weight = quantize_weight(payload.total_weight)
    item.remaining_weight = new_remaining
    item.purchase_price = payload.purchase_price
    item.sale_price = payload.sale_price
    item.profit_ratio = compute_profit_ratio(payload.purchase_price, payload.sale_price)
    item.cut_date = payload.cut_date
    item.expiry_date = payload.expiry_date

    draft = movement_for_update(old_remaining, new_remaining)
    if draft:
        db.add(build_movement(draft, stock_item_id=item.id, user_id=ctx.user_id))

    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Stock item was modified by another request, reload and retry",
        ) from exc
    db.refresh(item)
    if draft:
        logger.info(
            "stock item %s %s %s by user %s (%s -> %s)",
            item.id,
            draft.kind.value,
            draft.quantity,
            ctx.user_id,
            draft.previous_quantity,
            draft.new_quantity,
        )
    return Envelope(message="Stock item updated", data=_stock_items_out(db, [item])[0])


@router.delete("/{item_id}", response_model=Envelope[StockItemOut])
def delete_stock_item(
    item_id: int,
    ctx: AuthContext = Depends(require_permission("stock:manage")),
    db: Session = Depends(get_db),
):
    item = _get_active_item(db, item_id, lock=True)
    item.is_active = False
    db.commit()
    db.refresh(item)
    logger.info("stock item %s deactivated by user %s", item.id, ctx.user_id)
    return Envelope(message="Stock item deleted", data=_stock_items_out(db, [item])[0])


@router.get("/{item_id}/hareketler", response_model=Envelope[Page[StockMovementOut]])
def list_stock_movements(
    item_id: int,
    params: PageParams = Depends(page_params),
    _: AuthContext = Depends(require_permission("stock:view")),
    db: Session = Depends(get_db),
):
    # History stays readable after a soft delete.
    if not db.get(StockItem, item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stock item not found")

    query = (
        select(StockMovement)
        .where(StockMovement.stock_item_id == item_id)
        .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
    )
    movements, pagination = paginate(db, query, params)
    user_ids = {m.user_id for m in movements if m.user_id is not None}
    user_names = (
        dict(db.execute(select(User.id, User.name).where(User.id.in_(user_ids))).all()) if user_ids else {}
    )
    items = []
    for movement in movements:
        out = StockMovementOut.model_validate(movement)
        out.user_name = user_names.get(movement.user_id)
        items.append(out)
    return Envelope(data=Page(items=items, pagination=pagination))
