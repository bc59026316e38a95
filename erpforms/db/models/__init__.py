"""Database models for erpforms."""

from erpforms.db.models.user import User
from erpforms.db.models.role import Role, ModelHasRole
from erpforms.db.models.master import Branch, Warehouse, Item, Customer, Allocation
from erpforms.db.models.accounting import ChartOfAccountType, ChartOfAccount, SettingJournal, Journal
from erpforms.db.models.inventory import Inventory
from erpforms.db.models.form import Form, FormHistory
from erpforms.db.models.stock_correction import StockCorrection, StockCorrectionItem
from erpforms.db.models.sales_invoice import SalesInvoice, SalesInvoiceItem
from erpforms.db.models.delivery_note import DeliveryNote, DeliveryNoteItem

__all__ = [
    "User",
    "Role",
    "ModelHasRole",
    "Branch",
    "Warehouse",
    "Item",
    "Customer",
    "Allocation",
    "ChartOfAccountType",
    "ChartOfAccount",
    "SettingJournal",
    "Journal",
    "Inventory",
    "Form",
    "FormHistory",
    "StockCorrection",
    "StockCorrectionItem",
    "SalesInvoice",
    "SalesInvoiceItem",
    "DeliveryNote",
    "DeliveryNoteItem",
]
