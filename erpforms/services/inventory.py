"""Inventory postings made on behalf of forms."""

import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from erpforms.db.models import Form, Inventory, Item

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Posts and voids stock movements for a form.

    Every movement updates ``Item.stock`` in the same session, so it commits
    or rolls back together with the form transition.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(
        self,
        form: Form,
        *,
        warehouse_id: UUID,
        item: Item,
        quantity,
        unit: Optional[str] = None,
        converter=1,
        price=None,
    ) -> Inventory:
        """
        Record a signed quantity movement (positive in, negative out).

        Returns:
            The inventory row
        """
        quantity = Decimal(quantity)
        converter = Decimal(converter)
        inventory = Inventory(
            form_id=form.id,
            warehouse_id=warehouse_id,
            item_id=item.id,
            quantity=quantity,
            unit=unit or item.unit,
            converter=converter,
            price=Decimal(item.cogs if price is None else price),
        )
        self.db.add(inventory)
        item.stock = Decimal(item.stock or 0) + quantity * converter
        return inventory

    def void(self, form: Form) -> int:
        """
        Remove every movement posted by ``form`` and restore item stock.

        Returns:
            Number of movements removed
        """
        rows: List[Inventory] = self.db.query(Inventory).filter(Inventory.form_id == form.id).all()
        for row in rows:
            row.item.stock = Decimal(row.item.stock) - Decimal(row.quantity) * Decimal(row.converter)
            self.db.delete(row)
        if rows:
            logger.info(f"Voided {len(rows)} inventory movements of form {form.number}")
        return len(rows)
