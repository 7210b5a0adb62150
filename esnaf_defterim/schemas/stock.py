from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from esnaf_defterim.models.stock import MovementKind
from esnaf_defterim.schemas.common import MAX_PRICE, MAX_WEIGHT


class StockItemBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=160, validation_alias=AliasChoices("name", "urun_adi"))
    category_id: int | None = Field(default=None, validation_alias=AliasChoices("category_id", "kategori_id"))
    supplier_id: int | None = Field(default=None, validation_alias=AliasChoices("supplier_id", "tedarikci_id"))
    total_weight: Decimal = Field(
        ge=0,
        le=MAX_WEIGHT,
        validation_alias=AliasChoices("total_weight", "toplam_agirlik"),
    )
    purchase_price: Decimal | None = Field(
        default=None,
        ge=0,
        le=MAX_PRICE,
        validation_alias=AliasChoices("purchase_price", "alis_fiyati"),
    )
    sale_price: Decimal | None = Field(
        default=None,
        ge=0,
        le=MAX_PRICE,
        validation_alias=AliasChoices("sale_price", "satis_fiyati"),
    )
    cut_date: date | None = Field(default=None, validation_alias=AliasChoices("cut_date", "kesim_tarihi"))
    expiry_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("expiry_date", "son_kullanma_tarihi"),
    )

    @field_validator("purchase_price", "sale_price")
    @classmethod
    def round_price(cls, value: Decimal | None) -> Decimal | None:
        if value is None:
            return value
        return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class StockItemCreate(StockItemBase):
    remaining_weight: Decimal | None = Field(
        default=None,
        ge=0,
        le=MAX_WEIGHT,
        validation_alias=AliasChoices("remaining_weight", "kalan_agirlik"),
        description="Defaults to total_weight",
    )


class StockItemUpdate(StockItemBase):
    remaining_weight: Decimal | None = Field(
        default=None,
        ge=0,
        le=MAX_WEIGHT,
        validation_alias=AliasChoices("remaining_weight", "kalan_agirlik"),
        description="Omit to keep the current remaining weight",
    )
    version: int | None = Field(default=None, ge=1, description="Expected version for optimistic locking")


class StockItemOut(BaseModel):
    id: int
    name: str
    category_id: int | None
    category_name: str | None = None
    supplier_id: int | None
    supplier_name: str | None = None
    total_weight: Decimal
    remaining_weight: Decimal
    purchase_price: Decimal | None
    sale_price: Decimal | None
    profit_ratio: Decimal
    cut_date: date | None
    expiry_date: date | None
    is_active: bool
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StockMovementOut(BaseModel):
    id: int
    stock_item_id: int
    user_id: int | None
    user_name: str | None = None
    sale_id: int | None
    kind: MovementKind
    quantity: Decimal
    previous_quantity: Decimal
    new_quantity: Decimal
    note: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
