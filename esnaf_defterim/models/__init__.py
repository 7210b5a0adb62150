from esnaf_defterim.models.sales import CashEntry, Customer, Payment, Sale, SaleLine
from esnaf_defterim.models.stock import Category, StockItem, StockMovement, Supplier
from esnaf_defterim.models.user import User

__all__ = [
    "CashEntry",
    "Category",
    "Customer",
    "Payment",
    "Sale",
    "SaleLine",
    "StockItem",
    "StockMovement",
    "Supplier",
    "User",
]
