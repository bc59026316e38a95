"""Journal, inventory and reference effects of sales invoice transitions."""

import logging
from decimal import Decimal

from sqlalchemy import and_

from erpforms.core.approval import ApprovalStatus, FormTransition
from erpforms.core.errors import ConfigurationMissingError, InvalidStateError
from erpforms.db.models import Form, SalesInvoice
from erpforms.services.formable import FormableKind, load_formable
from erpforms.services.inventory import InventoryService
from erpforms.services.journal import JournalLine, JournalService, double_entry
from erpforms.services.side_effects import dispatcher

from .base import FEATURE

logger = logging.getLogger(__name__)

ACCOUNT_RECEIVABLE = "account receivable"
SALES_INCOME = "sales income"
TAX_PAYABLE = "income tax payable"
COST_OF_SALES = "cost of sales"


def _load_reference(db, sales_invoice):
    if not sales_invoice.referenceable_type:
        return None
    return load_formable(db, sales_invoice.referenceable_type, sales_invoice.referenceable_id)


def _referenced_by_other_invoice(db, sales_invoice) -> bool:
    """Whether another approved invoice still bills the same reference."""
    other = db.query(SalesInvoice.id).join(Form, and_(
        Form.formable_type == FormableKind.SALES_INVOICE.value,
        Form.formable_id == SalesInvoice.id,
    )).filter(
        SalesInvoice.referenceable_type == sales_invoice.referenceable_type,
        SalesInvoice.referenceable_id == sales_invoice.referenceable_id,
        SalesInvoice.id != sales_invoice.id,
        Form.approval_status == ApprovalStatus.APPROVED,
    ).first()
    return other is not None


@dispatcher.register(FormableKind.SALES_INVOICE, FormTransition.APPROVE)
def post_sales_invoice(db, sales_invoice, form, actor) -> None:
    reference = _load_reference(db, sales_invoice)
    if reference is not None and reference.form.done:
        raise InvalidStateError("Delivery note is already referenced")

    journal = JournalService(db)
    receivable = journal.account_id(FEATURE, ACCOUNT_RECEIVABLE)
    income = journal.account_id(FEATURE, SALES_INCOME)
    tax_payable = journal.account_id(FEATURE, TAX_PAYABLE)
    cost_of_sales = journal.account_id(FEATURE, COST_OF_SALES)

    amount = Decimal(sales_invoice.amount)
    tax = Decimal(sales_invoice.tax)
    lines = [
        JournalLine(receivable, debit=amount, journalable_type="Customer", journalable_id=sales_invoice.customer_id),
        JournalLine(income, credit=amount - tax),
        JournalLine(tax_payable, credit=tax),
    ]

    inventory = InventoryService(db) if sales_invoice.warehouse_id else None
    for line in sales_invoice.items:
        item = line.item
        if item.chart_of_account_id is None:
            raise ConfigurationMissingError(FEATURE, f"{item.name} inventory account")
        value = Decimal(line.quantity) * Decimal(line.converter) * Decimal(item.cogs)
        lines.extend(double_entry(
            cost_of_sales,
            item.chart_of_account_id,
            value,
            journalable_type="Item",
            journalable_id=item.id,
        ))
        if inventory is not None:
            inventory.insert(
                form,
                warehouse_id=sales_invoice.warehouse_id,
                item=item,
                quantity=-Decimal(line.quantity),
                unit=line.unit,
                converter=line.converter,
            )

    journal.post(form, lines)
    if reference is not None:
        reference.form.done = True
    logger.info(f"Posted sales invoice {form.number} amount {amount}")


@dispatcher.register(FormableKind.SALES_INVOICE, FormTransition.APPROVE_CANCELLATION)
def void_sales_invoice(db, sales_invoice, form, actor) -> None:
    if form.approval_status != ApprovalStatus.APPROVED:
        return
    InventoryService(db).void(form)
    JournalService(db).void(form)

    reference = _load_reference(db, sales_invoice)
    if reference is not None and not _referenced_by_other_invoice(db, sales_invoice):
        reference.form.done = False
