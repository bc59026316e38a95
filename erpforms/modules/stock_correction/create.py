"""Create a stock correction together with its form."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from erpforms.core.approval import Actor, ApprovalStatus, FormTransition
from erpforms.core.errors import InvalidStateError, NotFoundError
from erpforms.db.models import (
    Form,
    FormHistory,
    Item,
    StockCorrection,
    StockCorrectionItem,
    User,
    Warehouse,
)
from erpforms.db.session import unit_of_work
from erpforms.services.formable import FormableKind
from erpforms.services.handler import coerce_id
from erpforms.services.numbering import next_form_number

from .base import LABEL, NUMBER_PREFIX

logger = logging.getLogger(__name__)


class CreateFormRequest:
    """
    Create a stock correction and request its approval.

    Payload:
        maker: creating user
        warehouse_id: corrected warehouse
        request_approval_to: approver user id
        items: list of ``{"item_id", "quantity", "unit", "converter", "notes", "allocation_id"}``
        date, notes: optional form fields
    """

    def __init__(self, db: Session, **payload: Any):
        self.db = db
        self.actor = Actor.from_user(payload.pop("maker"))
        self.payload = payload

    def call(self) -> StockCorrection:
        with unit_of_work(self.db):
            warehouse = self._get(Warehouse, self.payload.get("warehouse_id"), "Warehouse is not exist")
            approver = self._get(User, self.payload.get("request_approval_to"), "Approver is not exist")
            lines = self._build_lines(self.payload.get("items") or [])

            stock_correction = StockCorrection(warehouse_id=warehouse.id, items=lines)
            self.db.add(stock_correction)
            self.db.flush()

            date = self.payload.get("date") or datetime.utcnow()
            form = Form(
                branch_id=warehouse.branch_id,
                date=date,
                number=next_form_number(self.db, NUMBER_PREFIX, date),
                notes=self.payload.get("notes"),
                formable_type=FormableKind.STOCK_CORRECTION.value,
                formable_id=stock_correction.id,
                created_by=self.actor.id,
                updated_by=self.actor.id,
                request_approval_to=approver.id,
                approval_status=ApprovalStatus.PENDING,
            )
            self.db.add(form)
            self.db.flush()
            self.db.add(FormHistory(
                form_id=form.id,
                transition=FormTransition.REQUEST_APPROVAL.value,
                from_status=None,
                to_status=int(ApprovalStatus.PENDING),
                user_id=self.actor.id,
                extra_data={"formable_type": FormableKind.STOCK_CORRECTION.value},
            ))
            self.db.flush()

        logger.info(f"Created {form.number} requesting approval to {approver.id}")
        return stock_correction

    def _get(self, model, raw_id, message: str):
        record_id = coerce_id(raw_id)
        record = self.db.get(model, record_id) if record_id else None
        if record is None:
            raise NotFoundError(message)
        return record

    def _build_lines(self, items: List[Dict[str, Any]]) -> List[StockCorrectionItem]:
        if not items:
            raise InvalidStateError(f"{LABEL} items can not be empty")

        lines = []
        for data in items:
            item = self._get(Item, data.get("item_id"), "Item is not exist")
            quantity = Decimal(str(data.get("quantity", 0)))
            if quantity == 0:
                raise InvalidStateError(f"{LABEL} quantity of {item.name} can not be zero")
            lines.append(StockCorrectionItem(
                item_id=item.id,
                allocation_id=coerce_id(data["allocation_id"]) if data.get("allocation_id") else None,
                quantity=quantity,
                unit=data.get("unit") or item.unit,
                converter=Decimal(str(data.get("converter", 1))),
                notes=data.get("notes"),
            ))
        return lines
