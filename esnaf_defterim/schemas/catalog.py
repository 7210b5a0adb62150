from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from esnaf_defterim.models.sales import CustomerType


class CategoryCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=2, max_length=120, validation_alias=AliasChoices("name", "kategori_adi"))
    description: str | None = Field(
        default=None,
        max_length=255,
        validation_alias=AliasChoices("description", "aciklama"),
    )


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=120)
    description: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None


class CategoryOut(BaseModel):
    id: int
    name: str
    description: str | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class SupplierCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=2, max_length=160, validation_alias=AliasChoices("name", "isim"))
    phone: str | None = Field(default=None, max_length=32, validation_alias=AliasChoices("phone", "telefon"))
    email: str | None = Field(default=None, max_length=320)
    address: str | None = Field(default=None, max_length=255, validation_alias=AliasChoices("address", "adres"))
    tax_number: str | None = Field(default=None, max_length=32, validation_alias=AliasChoices("tax_number", "vergi_no"))
    notes: str | None = Field(default=None, validation_alias=AliasChoices("notes", "notlar"))


class SupplierUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=160)
    phone: str | None = Field(default=None, max_length=32)
    email: str | None = Field(default=None, max_length=320)
    address: str | None = Field(default=None, max_length=255)
    tax_number: str | None = Field(default=None, max_length=32)
    notes: str | None = None
    is_active: bool | None = None


class SupplierOut(BaseModel):
    id: int
    name: str
    phone: str | None
    email: str | None
    address: str | None
    tax_number: str | None
    notes: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CustomerCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=2, max_length=160, validation_alias=AliasChoices("name", "isim"))
    phone: str | None = Field(default=None, max_length=32, validation_alias=AliasChoices("phone", "telefon"))
    email: str | None = Field(default=None, max_length=320)
    address: str | None = Field(default=None, max_length=255, validation_alias=AliasChoices("address", "adres"))
    customer_type: CustomerType = Field(
        default=CustomerType.INDIVIDUAL,
        validation_alias=AliasChoices("customer_type", "musteri_tipi"),
    )
    tax_number: str | None = Field(default=None, max_length=32, validation_alias=AliasChoices("tax_number", "vergi_no"))


class CustomerUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=160)
    phone: str | None = Field(default=None, max_length=32)
    email: str | None = Field(default=None, max_length=320)
    address: str | None = Field(default=None, max_length=255)
    customer_type: CustomerType | None = None
    tax_number: str | None = Field(default=None, max_length=32)
    is_active: bool | None = None


class CustomerOut(BaseModel):
    id: int
    name: str
    phone: str | None
    email: str | None
    address: str | None
    customer_type: CustomerType
    tax_number: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
