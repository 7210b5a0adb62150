"""Stock ledger rules.

Every change to a stock item's remaining weight is recorded as an append-only
``StockMovement``. The helpers here only decide what should be recorded; the
route handlers persist it in the same transaction as the item change.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from esnaf_defterim.models.stock import MovementKind, StockMovement

WEIGHT_STEP = Decimal("0.001")
RATIO_STEP = Decimal("0.01")

INITIAL_ENTRY_NOTE = "Initial stock entry"
UPDATE_NOTE = "Stock update"


@dataclass(frozen=True)
class MovementDraft:
    kind: MovementKind
    quantity: Decimal
    previous_quantity: Decimal
    new_quantity: Decimal
    note: str | None = None


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_weight(value) -> Decimal:
    return _to_decimal(value).quantize(WEIGHT_STEP, rounding=ROUND_HALF_UP)


def compute_profit_ratio(purchase_price, sale_price) -> Decimal:
    """Percentage markup of ``sale_price`` over ``purchase_price``.

    A missing price, or a purchase price that is not positive, yields 0.
    """
    if purchase_price is None or sale_price is None:
        return Decimal("0.00")
    purchase = _to_decimal(purchase_price)
    if purchase <= 0:
        return Decimal("0.00")
    sale = _to_decimal(sale_price)
    ratio = (sale - purchase) / purchase * Decimal(100)
    return ratio.quantize(RATIO_STEP, rounding=ROUND_HALF_UP)


def movement_for_creation(total_weight, note: str | None = INITIAL_ENTRY_NOTE) -> MovementDraft:
    total = quantize_weight(total_weight)
    return MovementDraft(
        kind=MovementKind.IN,
        quantity=total,
        previous_quantity=quantize_weight(0),
        new_quantity=total,
        note=note,
    )


def movement_for_update(old_remaining, new_remaining, note: str | None = UPDATE_NOTE) -> MovementDraft | None:
    old = quantize_weight(old_remaining)
    new = quantize_weight(new_remaining)
    if new == old:
        return None
    return MovementDraft(
        kind=MovementKind.IN if new > old else MovementKind.OUT,
        quantity=abs(new - old),
        previous_quantity=old,
        new_quantity=new,
        note=note,
    )


def build_movement(
    draft: MovementDraft,
    *,
    stock_item_id: int,
    user_id: int | None,
    sale_id: int | None = None,
) -> StockMovement:
    return StockMovement(
        stock_item_id=stock_item_id,
        user_id=user_id,
        sale_id=sale_id,
        kind=draft.kind,
        quantity=draft.quantity,
        previous_quantity=draft.previous_quantity,
        new_quantity=draft.new_quantity,
        note=draft.note,
    )
