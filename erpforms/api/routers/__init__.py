"""API routers for ERP Forms."""

from . import stock_corrections
from . import sales_invoices

__all__ = [
    "stock_corrections",
    "sales_invoices",
]
