"""Inventory and journal effects of stock correction transitions."""

import logging
from decimal import Decimal

from erpforms.core.approval import ApprovalStatus, FormTransition
from erpforms.core.errors import ConfigurationMissingError
from erpforms.services.formable import FormableKind
from erpforms.services.inventory import InventoryService
from erpforms.services.journal import JournalService, double_entry
from erpforms.services.side_effects import dispatcher

from .base import FEATURE

logger = logging.getLogger(__name__)

DIFFERENCE_ACCOUNT = "difference stock expenses"


@dispatcher.register(FormableKind.STOCK_CORRECTION, FormTransition.APPROVE)
def post_stock_correction(db, stock_correction, form, actor) -> None:
    """Apply each line's quantity delta and journal its value against the difference account."""
    journal = JournalService(db)
    inventory = InventoryService(db)
    difference_account = journal.account_id(FEATURE, DIFFERENCE_ACCOUNT)

    lines = []
    for line in stock_correction.items:
        item = line.item
        if item.chart_of_account_id is None:
            raise ConfigurationMissingError(FEATURE, f"{item.name} inventory account")
        inventory.insert(
            form,
            warehouse_id=stock_correction.warehouse_id,
            item=item,
            quantity=line.quantity,
            unit=line.unit,
            converter=line.converter,
        )
        value = Decimal(line.quantity) * Decimal(line.converter) * Decimal(item.cogs)
        lines.extend(double_entry(
            item.chart_of_account_id,
            difference_account,
            value,
            journalable_type="Item",
            journalable_id=item.id,
        ))
    journal.post(form, lines)
    logger.info(f"Posted {len(stock_correction.items)} stock correction lines of {form.number}")


@dispatcher.register(FormableKind.STOCK_CORRECTION, FormTransition.APPROVE_CANCELLATION)
def void_stock_correction(db, stock_correction, form, actor) -> None:
    """Reverse the postings of an approved stock correction before it is deleted."""
    if form.approval_status != ApprovalStatus.APPROVED:
        return
    InventoryService(db).void(form)
    JournalService(db).void(form)
