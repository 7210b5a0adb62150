from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from esnaf_defterim.api.deps import AuthContext, PageParams, page_params, paginate, require_permission
from esnaf_defterim.db.database import get_db
from esnaf_defterim.models.sales import Customer
from esnaf_defterim.models.stock import Category, Supplier
from esnaf_defterim.schemas.catalog import (
    CategoryCreate,
    CategoryOut,
    CategoryUpdate,
    CustomerCreate,
    CustomerOut,
    CustomerUpdate,
    SupplierCreate,
    SupplierOut,
    SupplierUpdate,
)
from esnaf_defterim.schemas.common import Envelope, Page

router = APIRouter(tags=["Catalog"])


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _get_or_404(db: Session, model, record_id: int, label: str, *, active_only: bool = True):
    record = db.get(model, record_id)
    if not record or (active_only and not record.is_active):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return record


@router.get("/kategoriler", response_model=Envelope[list[CategoryOut]])
def list_categories(
    include_inactive: bool = False,
    _: AuthContext = Depends(require_permission("stock:view")),
    db: Session = Depends(get_db),
):
    query = select(Category).order_by(Category.name.asc())
    if not include_inactive:
        query = query.where(Category.is_active.is_(True))
    return Envelope(data=[CategoryOut.model_validate(c) for c in db.scalars(query).all()])


@router.get("/kategoriler/{category_id}", response_model=Envelope[CategoryOut])
def get_category(
    category_id: int,
    _: AuthContext = Depends(require_permission("stock:view")),
    db: Session = Depends(get_db),
):
    category = _get_or_404(db, Category, category_id, "Category")
    return Envelope(data=CategoryOut.model_validate(category))


@router.post("/kategoriler", response_model=Envelope[CategoryOut], status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    _: AuthContext = Depends(require_permission("catalog:manage")),
    db: Session = Depends(get_db),
):
    category = Category(name=payload.name.strip(), description=_clean(payload.description))
    db.add(category)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Category name already exists") from exc
    db.refresh(category)
    return Envelope(message="Category created", data=CategoryOut.model_validate(category))


@router.put("/kategoriler/{category_id}", response_model=Envelope[CategoryOut])
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    _: AuthContext = Depends(require_permission("catalog:manage")),
    db: Session = Depends(get_db),
):
    category = _get_or_404(db, Category, category_id, "Category", active_only=False)
    if payload.name is not None:
        category.name = payload.name.strip()
    if payload.description is not None:
        category.description = _clean(payload.description)
    if payload.is_active is not None:
        category.is_active = payload.is_active
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Category name already exists") from exc
    db.refresh(category)
    return Envelope(message="Category updated", data=CategoryOut.model_validate(category))


@router.delete("/kategoriler/{category_id}", response_model=Envelope[CategoryOut])
def delete_category(
    category_id: int,
    _: AuthContext = Depends(require_permission("catalog:manage")),
    db: Session = Depends(get_db),
):
    category = _get_or_404(db, Category, category_id, "Category", active_only=False)
    category.is_active = False
    db.commit()
    db.refresh(category)
    return Envelope(message="Category deleted", data=CategoryOut.model_validate(category))


@router.get("/tedarikciler", response_model=Envelope[Page[SupplierOut]])
def list_suppliers(
    params: PageParams = Depends(page_params),
    search: str | None = None,
    include_inactive: bool = False,
    _: AuthContext = Depends(require_permission("stock:view")),
    db: Session = Depends(get_db),
):
    query = select(Supplier).order_by(Supplier.name.asc())
    if not include_inactive:
        query = query.where(Supplier.is_active.is_(True))
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.where(or_(Supplier.name.ilike(pattern), Supplier.phone.ilike(pattern)))
    suppliers, pagination = paginate(db, query, params)
    return Envelope(data=Page(items=[SupplierOut.model_validate(s) for s in suppliers], pagination=pagination))


@router.get("/tedarikciler/{supplier_id}", response_model=Envelope[SupplierOut])
def get_supplier(
    supplier_id: int,
    _: AuthContext = Depends(require_permission("stock:view")),
    db: Session = Depends(get_db),
):
    supplier = _get_or_404(db, Supplier, supplier_id, "Supplier")
    return Envelope(data=SupplierOut.model_validate(supplier))


@router.post("/tedarikciler", response_model=Envelope[SupplierOut], status_code=status.HTTP_201_CREATED)
def create_supplier(
    payload: SupplierCreate,
    _: AuthContext = Depends(require_permission("catalog:manage")),
    db: Session = Depends(get_db),
):
    supplier = Supplier(
        name=payload.name.strip(),
        phone=_clean(payload.phone),
        email=_clean(payload.email),
        address=_clean(payload.address),
        tax_number=_clean(payload.tax_number),
        notes=_clean(payload.notes),
    )
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return Envelope(message="Supplier created", data=SupplierOut.model_validate(supplier))


@router.put("/tedarikciler/{supplier_id}", response_model=Envelope[SupplierOut])
def update_supplier(
    supplier_id: int,
    payload: SupplierUpdate,
    _: AuthContext = Depends(require_permission("catalog:manage")),
    db: Session = Depends(get_db),
):
    supplier = _get_or_404(db, Supplier, supplier_id, "Supplier", active_only=False)
    if payload.name is not None:
        supplier.name = payload.name.strip()
    for field in ("phone", "email", "address", "tax_number", "notes"):
        value = getattr(payload, field)
        if value is not None:
            setattr(supplier, field, _clean(value))
    if payload.is_active is not None:
        supplier.is_active = payload.is_active
    db.commit()
    db.refresh(supplier)
    return Envelope(message="Supplier updated", data=SupplierOut.model_validate(supplier))


@router.delete("/tedarikciler/{supplier_id}", response_model=Envelope[SupplierOut])
def delete_supplier(
    supplier_id: int,
    _: AuthContext = Depends(require_permission("catalog:manage")),
    db: Session = Depends(get_db),
):
    supplier = _get_or_404(db, Supplier, supplier_id, "Supplier", active_only=False)
    supplier.is_active = False
    db.commit()
    db.refresh(supplier)
    return Envelope(message="Supplier deleted", data=SupplierOut.model_validate(supplier))


@router.get("/musteriler", response_model=Envelope[Page[CustomerOut]])
def list_customers(
    params: PageParams = Depends(page_params),
    search: str | None = None,
    include_inactive: bool = False,
    _: AuthContext = Depends(require_permission("stock:view")),
    db: Session = Depends(get_db),
):
    query = select(Customer).order_by(Customer.name.asc())
    if not include_inactive:
        query = query.where(Customer.is_active.is_(True))
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.where(or_(Customer.name.ilike(pattern), Customer.phone.ilike(pattern)))
    customers, pagination = paginate(db, query, params)
    return Envelope(data=Page(items=[CustomerOut.model_validate(c) for c in customers], pagination=pagination))


@router.get("/musteriler/{customer_id}", response_model=Envelope[CustomerOut])
def get_customer(
    customer_id: int,
    _: AuthContext = Depends(require_permission("stock:view")),
    db: Session = Depends(get_db),
):
    customer = _get_or_404(db, Customer, customer_id, "Customer")
    return Envelope(data=CustomerOut.model_validate(customer))


@router.post("/musteriler", response_model=Envelope[CustomerOut], status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    _: AuthContext = Depends(require_permission("catalog:manage")),
    db: Session = Depends(get_db),
):
    customer = Customer(
        name=payload.name.strip(),
        phone=_clean(payload.phone),
        email=_clean(payload.email),
        address=_clean(payload.address),
        customer_type=payload.customer_type,
        tax_number=_clean(payload.tax_number),
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return Envelope(message="Customer created", data=CustomerOut.model_validate(customer))


@router.put("/musteriler/{customer_id}", response_model=Envelope[CustomerOut])
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    _: AuthContext = Depends(require_permission("catalog:manage")),
    db: Session = Depends(get_db),
):
    customer = _get_or_404(db, Customer, customer_id, "Customer", active_only=False)
    if payload.name is not None:
        customer.name = payload.name.strip()
    for field in ("phone", "email", "address", "tax_number"):
        value = getattr(payload, field)
        if value is not None:
            setattr(customer, field, _clean(value))
    if payload.customer_type is not None:
        customer.customer_type = payload.customer_type
    if payload.is_active is not None:
        customer.is_active = payload.is_active
    db.commit()
    db.refresh(customer)
    return Envelope(message="Customer updated", data=CustomerOut.model_validate(customer))


@router.delete("/musteriler/{customer_id}", response_model=Envelope[CustomerOut])
def delete_customer(
    customer_id: int,
    _: AuthContext = Depends(require_permission("catalog:manage")),
    db: Session = Depends(get_db),
):
    customer = _get_or_404(db, Customer, customer_id, "Customer", active_only=False)
    customer.is_active = False
    db.commit()
    db.refresh(customer)
    return Envelope(message="Customer deleted", data=CustomerOut.model_validate(customer))
